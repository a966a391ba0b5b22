from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.PackingItem import PackingItem
from models.Profile import Profile
from schemas import PackingItemWrite, PackingItemUpdate
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import packing_to_dict

router = APIRouter(prefix="/trips/{trip_id}/packing", tags=["Packing"])


@router.get("/")
def list_packing_items(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    items = db.query(PackingItem).filter(PackingItem.trip_id == trip_id).order_by(PackingItem.id).all()
    return [packing_to_dict(i) for i in items]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_packing_item(trip_id: int, payload: PackingItemWrite, db: Session = Depends(get_db),
                        user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Item cannot be empty")

    item = PackingItem(trip_id=trip_id, item=text, category=payload.category, is_packed=payload.checked)
    db.add(item)
    db.commit()
    db.refresh(item)
    return packing_to_dict(item)


@router.post("/reset")
def reset_packing_list(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Uncheck every item of the trip."""
    require_edit(db, trip_id, user.id)
    updated = (
        db.query(PackingItem)
        .filter(PackingItem.trip_id == trip_id)
        .update({PackingItem.is_packed: False}, synchronize_session=False)
    )
    db.commit()
    return {"success": True, "updated": updated}


@router.patch("/{item_id}")
def update_packing_item(trip_id: int, item_id: int, payload: PackingItemUpdate, db: Session = Depends(get_db),
                        user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    item = db.query(PackingItem).filter_by(id=item_id, trip_id=trip_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Packing item not found")

    updates = payload.model_dump(exclude_unset=True)
    if "item" in updates and not (updates["item"] or "").strip():
        raise HTTPException(status_code=400, detail="Item cannot be empty")
    for field, value in updates.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return packing_to_dict(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_packing_item(trip_id: int, item_id: int, db: Session = Depends(get_db),
                        user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    item = db.query(PackingItem).filter_by(id=item_id, trip_id=trip_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Packing item not found")
    db.delete(item)
    db.commit()
    return None
