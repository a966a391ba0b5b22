from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Profile import Profile
from models.Trip import Trip
from models.TripCollaborator import TripCollaborator, CollaboratorRole, CollaboratorStatus
from schemas import TripCreate, TripUpdate, TripMembersUpdate
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit, require_owner
from services.trip_loader import load_trip, load_visible_trips, trip_to_aggregate, trip_summary
from utils.formatting import utcnow
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.get("/")
def list_trips(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Trips the user owns or collaborates on, newest first, with every sub-collection."""
    return [trip_to_aggregate(trip) for trip in load_visible_trips(db, user.id)]


@router.get("/{trip_id}")
def get_trip(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    return trip_to_aggregate(load_trip(db, trip_id))


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_trip(payload: TripCreate, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    trip = Trip(
        user_id=user.id,
        title=payload.title.strip(),
        start_date=payload.start_date,
        end_date=payload.end_date,
        city=payload.city,
        hero_image=payload.hero_image,
        members=["Me"],
    )
    db.add(trip)
    db.flush()

    # the owner is also listed as a collaborator so role lookups are uniform
    db.add(TripCollaborator(
        trip_id=trip.id,
        user_id=user.id,
        role=CollaboratorRole.OWNER,
        status=CollaboratorStatus.ACTIVE,
        joined_at=utcnow(),
    ))
    db.commit()
    db.refresh(trip)
    logger.info("Trip %s created by %s", trip.id, user.id)
    return trip_to_aggregate(load_trip(db, trip.id))


@router.patch("/{trip_id}")
def update_trip(trip_id: int, payload: TripUpdate, db: Session = Depends(get_db),
                user: Profile = Depends(get_current_user)):
    trip = require_edit(db, trip_id, user.id)

    updates = payload.model_dump(exclude_unset=True)
    if "title" in updates and not (updates["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Title cannot be empty")

    for field, value in updates.items():
        setattr(trip, field, value)

    if trip.start_date and trip.end_date and trip.end_date < trip.start_date:
        db.rollback()
        raise HTTPException(status_code=400, detail="End date cannot be before start date")

    db.commit()
    db.refresh(trip)
    return trip_summary(trip)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    trip = require_owner(db, trip_id, user.id)
    db.delete(trip)
    db.commit()
    logger.info("Trip %s deleted by %s", trip_id, user.id)
    return None


@router.put("/{trip_id}/members")
def update_members(trip_id: int, payload: TripMembersUpdate, db: Session = Depends(get_db),
                   user: Profile = Depends(get_current_user)):
    """Replace the display names expenses can be split between."""
    trip = require_edit(db, trip_id, user.id)

    members = []
    for name in payload.members:
        name = name.strip()
        if name and name not in members:
            members.append(name)
    if not members:
        raise HTTPException(status_code=400, detail="At least one member is required")

    trip.members = members
    db.commit()
    db.refresh(trip)
    return trip_summary(trip)
