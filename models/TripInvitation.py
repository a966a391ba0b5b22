from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
from database import Base
from models.TripCollaborator import CollaboratorRole
import enum
import uuid

class InvitationStatus(enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

class TripInvitation(Base):
    __tablename__ = "trip_invitations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)  # stored lower-cased
    role = Column(SQLEnum(CollaboratorRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    invited_by = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    invited_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        SQLEnum(InvitationStatus, values_callable=lambda e: [m.value for m in e]),
        default=InvitationStatus.PENDING,
        nullable=False,
        index=True,
    )
    responded_at = Column(DateTime(timezone=True), nullable=True)

    trip = relationship("Trip", back_populates="invitations")
    inviter = relationship("Profile", foreign_keys=[invited_by])
