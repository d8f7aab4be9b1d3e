from decimal import Decimal
from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    revenue = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    parts_cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    outside_labor = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    # Cached at write time from the plumber's rate; never recomputed on read
    commission_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    plumber_id = Column(Integer, ForeignKey("plumbers.id"), nullable=False, index=True)
    payroll_id = Column(
        Integer,
        ForeignKey("payrolls.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    plumber = relationship("Plumber", back_populates="jobs")
    payroll = relationship("Payroll", back_populates="jobs")

    def __repr__(self):
        return f"<Job {self.customer_name} ({self.date})>"
