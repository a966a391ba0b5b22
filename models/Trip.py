from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    city = Column(String(100), nullable=True)
    hero_image = Column(String(500), nullable=True)
    visa_status = Column(String(50), nullable=True)
    visa_info = Column(Text, nullable=True)
    members = Column(JSON, nullable=True)  # display names used for expense splitting
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("Profile", back_populates="trips")
    itinerary_items = relationship("ItineraryItem", back_populates="trip", cascade="all, delete-orphan")
    accommodation = relationship("Accommodation", back_populates="trip", cascade="all, delete-orphan")
    transport = relationship("Transport", back_populates="trip", cascade="all, delete-orphan")
    tickets = relationship("Ticket", back_populates="trip", cascade="all, delete-orphan")
    packing_items = relationship("PackingItem", back_populates="trip", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    collaborators = relationship("TripCollaborator", back_populates="trip", cascade="all, delete-orphan")
    invitations = relationship("TripInvitation", back_populates="trip", cascade="all, delete-orphan")
    shared_links = relationship("SharedTrip", back_populates="trip", cascade="all, delete-orphan")
