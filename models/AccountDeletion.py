from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, func
from database import Base
import enum
import uuid

class DeletionStatus(enum.Enum):
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

class AccountDeletion(Base):
    __tablename__ = "account_deletions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    scheduled_deletion_at = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(
        SQLEnum(DeletionStatus, values_callable=lambda e: [m.value for m in e]),
        default=DeletionStatus.PENDING,
        nullable=False,
    )
