from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Accommodation import Accommodation
from models.Profile import Profile
from schemas import AccommodationWrite
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import accommodation_to_dict

router = APIRouter(prefix="/trips/{trip_id}/accommodation", tags=["Accommodation"])


def _compose_notes(stay_type, notes):
    # the table has no type column; the type is kept as a prefix of the notes
    if stay_type:
        return f"Type: {stay_type}. {notes or ''}".strip()
    return notes


@router.get("/")
def list_accommodation(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    stays = (
        db.query(Accommodation)
        .filter(Accommodation.trip_id == trip_id)
        .order_by(Accommodation.check_in, Accommodation.id)
        .all()
    )
    return [accommodation_to_dict(a) for a in stays]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_accommodation(trip_id: int, payload: AccommodationWrite, db: Session = Depends(get_db),
                         user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)

    if payload.check_in and payload.check_out and payload.check_out < payload.check_in:
        raise HTTPException(status_code=400, detail="Check-out cannot be before check-in")

    stay = Accommodation(
        trip_id=trip_id,
        name=payload.name.strip(),
        address=payload.address,
        check_in=payload.check_in,
        check_out=payload.check_out,
        booking_reference=payload.booking_reference,
        notes=_compose_notes(payload.type, payload.notes),
        cost=payload.cost,
    )
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return accommodation_to_dict(stay)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_accommodation(trip_id: int, item_id: int, db: Session = Depends(get_db),
                         user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    stay = db.query(Accommodation).filter_by(id=item_id, trip_id=trip_id).first()
    if not stay:
        raise HTTPException(status_code=404, detail="Accommodation not found")
    db.delete(stay)
    db.commit()
    return None
