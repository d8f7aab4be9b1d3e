from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship
from app.database import Base


class Payroll(Base):
    __tablename__ = "payrolls"

    id = Column(Integer, primary_key=True)
    week_ending_date = Column(Date, nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default="draft", index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    jobs = relationship(
        "Job",
        back_populates="payroll",
        cascade="all, delete-orphan",
        order_by="Job.id",
    )

    DRAFT = "draft"
    FINALIZED = "finalized"
    STATUSES = [DRAFT, FINALIZED]

    @property
    def is_finalized(self):
        return self.status == self.FINALIZED

    def __repr__(self):
        return f"<Payroll week ending {self.week_ending_date} ({self.status})>"
