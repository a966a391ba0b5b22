from sqlalchemy import Column, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True, index=True)  # auth user id (uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    fcm_token = Column(String(500), nullable=True)  # Firebase Cloud Messaging token
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    preferences = relationship("UserPreferences", back_populates="profile", uselist=False, cascade="all, delete-orphan")
    trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan")
