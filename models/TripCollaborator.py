from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
from database import Base
import enum

class CollaboratorRole(enum.Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

class CollaboratorStatus(enum.Enum):
    ACTIVE = "active"
    FORMER_MEMBER = "former_member"

class TripCollaborator(Base):
    __tablename__ = "trip_collaborators"
    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_trip_collaborator"),
    )

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SQLEnum(CollaboratorRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    status = Column(
        SQLEnum(CollaboratorStatus, values_callable=lambda e: [m.value for m in e]),
        default=CollaboratorStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    invited_by = Column(String(64), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    invited_at = Column(DateTime(timezone=True), nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    left_at = Column(DateTime(timezone=True), nullable=True)
    removed_at = Column(DateTime(timezone=True), nullable=True)
    removed_by = Column(String(64), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    trip = relationship("Trip", back_populates="collaborators")
    user = relationship("Profile", foreign_keys=[user_id])
