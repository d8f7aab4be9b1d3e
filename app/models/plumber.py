from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, Date, Numeric
from sqlalchemy.orm import relationship
from app.database import Base


class Plumber(Base):
    __tablename__ = "plumbers"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    commission_rate = Column(Numeric(5, 2), nullable=False, default=Decimal("30"))  # percent
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    start_date = Column(Date, nullable=False)

    # Relationships
    jobs = relationship("Job", back_populates="plumber")

    DEFAULT_COMMISSION_RATE = Decimal("30")

    def __repr__(self):
        return f"<Plumber {self.name} ({self.commission_rate}%)>"
