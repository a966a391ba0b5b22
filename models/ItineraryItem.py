from sqlalchemy import Column, Integer, String, Text, Date, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

class ItineraryItem(Base):
    __tablename__ = "itinerary_items"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Date, nullable=True)
    time = Column(String(5), nullable=True)  # "HH:MM"
    activity = Column(String(200), nullable=False)
    location = Column(String(250), nullable=True)
    notes = Column(Text, nullable=True)
    cost = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="itinerary_items")
