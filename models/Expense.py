from sqlalchemy import Column, Integer, String, Float, Date, JSON, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    payer = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String(250), nullable=False)
    date = Column(Date, nullable=True)
    category = Column(String(50), nullable=True)
    split_with = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="expenses")
