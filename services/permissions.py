"""
Trip access checks. The owner is trips.user_id; everyone else needs an
active trip_collaborators row. Editors and owners may write.
"""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.Trip import Trip
from models.TripCollaborator import TripCollaborator, CollaboratorStatus, CollaboratorRole

EDIT_ROLES = {CollaboratorRole.OWNER.value, CollaboratorRole.EDITOR.value}


def get_trip_or_404(db: Session, trip_id: int) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


def get_active_collaborator(db: Session, trip_id: int, user_id: str) -> Optional[TripCollaborator]:
    return db.query(TripCollaborator).filter(
        TripCollaborator.trip_id == trip_id,
        TripCollaborator.user_id == user_id,
        TripCollaborator.status == CollaboratorStatus.ACTIVE,
    ).first()


def get_user_role(db: Session, trip: Trip, user_id: str) -> Optional[str]:
    if trip.user_id == user_id:
        return CollaboratorRole.OWNER.value
    collaborator = get_active_collaborator(db, trip.id, user_id)
    return collaborator.role.value if collaborator else None


def require_read(db: Session, trip_id: int, user_id: str) -> Trip:
    trip = get_trip_or_404(db, trip_id)
    if get_user_role(db, trip, user_id) is None:
        # same answer as a missing trip so trip ids can't be enumerated
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


def require_edit(db: Session, trip_id: int, user_id: str) -> Trip:
    trip = get_trip_or_404(db, trip_id)
    role = get_user_role(db, trip, user_id)
    if role is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    if role not in EDIT_ROLES:
        raise HTTPException(status_code=403, detail="You don't have permission to edit this trip")
    return trip


def require_owner(db: Session, trip_id: int, user_id: str) -> Trip:
    trip = get_trip_or_404(db, trip_id)
    if trip.user_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return trip
