from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

DEFAULT_NOTIFICATION_SETTINGS = {
    "email_trip_reminders": True,
    "email_expense_updates": True,
    "email_marketing": False,
}

class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    default_currency = Column(String(3), default="USD", nullable=False)
    notification_settings = Column(JSON, default=lambda: dict(DEFAULT_NOTIFICATION_SETTINGS), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="preferences")
