from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.ItineraryItem import ItineraryItem
from models.Profile import Profile
from schemas import ItineraryItemWrite, ItineraryItemUpdate
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import itinerary_to_dict

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["Itinerary"])

# client field -> column
_FIELD_MAP = {
    "title": "activity",
    "day": "day",
    "time": "time",
    "description": "notes",
    "location": "location",
    "cost": "cost",
}


def _get_item_or_404(db: Session, trip_id: int, item_id: int) -> ItineraryItem:
    item = db.query(ItineraryItem).filter_by(id=item_id, trip_id=trip_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Itinerary item not found")
    return item


@router.get("/")
def list_items(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    items = (
        db.query(ItineraryItem)
        .filter(ItineraryItem.trip_id == trip_id)
        .order_by(ItineraryItem.day, ItineraryItem.time, ItineraryItem.id)
        .all()
    )
    return [itinerary_to_dict(i) for i in items]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_item(trip_id: int, payload: ItineraryItemWrite, db: Session = Depends(get_db),
                user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Title cannot be empty")

    values = {_FIELD_MAP[k]: v for k, v in payload.model_dump().items()}
    values["activity"] = payload.title.strip()
    item = ItineraryItem(trip_id=trip_id, **values)
    db.add(item)
    db.commit()
    db.refresh(item)
    return itinerary_to_dict(item)


@router.patch("/{item_id}")
def update_item(trip_id: int, item_id: int, payload: ItineraryItemUpdate, db: Session = Depends(get_db),
                user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    item = _get_item_or_404(db, trip_id, item_id)

    updates = payload.model_dump(exclude_unset=True)
    if "title" in updates:
        if not (updates["title"] or "").strip():
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        updates["title"] = updates["title"].strip()

    for field, value in updates.items():
        setattr(item, _FIELD_MAP[field], value)

    db.commit()
    db.refresh(item)
    return itinerary_to_dict(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(trip_id: int, item_id: int, db: Session = Depends(get_db),
                user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    item = _get_item_or_404(db, trip_id, item_id)
    db.delete(item)
    db.commit()
    return None
