from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Document import Document
from models.Profile import Profile
from schemas import DocumentWrite
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import document_to_dict

router = APIRouter(prefix="/trips/{trip_id}/documents", tags=["Documents"])


@router.get("/")
def list_documents(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    documents = db.query(Document).filter(Document.trip_id == trip_id).order_by(Document.id).all()
    return [document_to_dict(d) for d in documents]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_document(trip_id: int, payload: DocumentWrite, db: Session = Depends(get_db),
                    user: Profile = Depends(get_current_user)):
    """Create a note or document. Plain notes default to type "note"."""
    require_edit(db, trip_id, user.id)
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Title cannot be empty")
    document = Document(
        trip_id=trip_id,
        title=payload.title.strip(),
        content=payload.content,
        file_url=payload.file_url,
        type=payload.type or "note",
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document_to_dict(document)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(trip_id: int, item_id: int, db: Session = Depends(get_db),
                    user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    document = db.query(Document).filter_by(id=item_id, trip_id=trip_id).first()
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    db.delete(document)
    db.commit()
    return None
