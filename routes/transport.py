from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Profile import Profile
from models.Transport import Transport
from schemas import TransportWrite
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import transport_to_dict

router = APIRouter(prefix="/trips/{trip_id}/transport", tags=["Transport"])


@router.get("/")
def list_transport(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    legs = (
        db.query(Transport)
        .filter(Transport.trip_id == trip_id)
        .order_by(Transport.departure_time, Transport.id)
        .all()
    )
    return [transport_to_dict(t) for t in legs]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_transport(trip_id: int, payload: TransportWrite, db: Session = Depends(get_db),
                     user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)

    if payload.depart and payload.arrive and payload.arrive < payload.depart:
        raise HTTPException(status_code=400, detail="Arrival cannot be before departure")

    leg = Transport(
        trip_id=trip_id,
        type=payload.type,
        provider=payload.provider,
        departure_location=payload.from_location,
        arrival_location=payload.to_location,
        departure_time=payload.depart,
        arrival_time=payload.arrive,
        booking_reference=payload.number,
        notes=payload.notes,
        cost=payload.cost,
    )
    db.add(leg)
    db.commit()
    db.refresh(leg)
    return transport_to_dict(leg)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transport(trip_id: int, item_id: int, db: Session = Depends(get_db),
                     user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    leg = db.query(Transport).filter_by(id=item_id, trip_id=trip_id).first()
    if not leg:
        raise HTTPException(status_code=404, detail="Transport booking not found")
    db.delete(leg)
    db.commit()
    return None
