from sqlalchemy import Column, Integer, String, Text, Date, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

class Accommodation(Base):
    __tablename__ = "accommodation"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(250), nullable=True)
    check_in = Column(Date, nullable=True)
    check_out = Column(Date, nullable=True)
    booking_reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    cost = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="accommodation")
