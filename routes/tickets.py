from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Profile import Profile
from models.Ticket import Ticket
from schemas import TicketWrite
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.trip_loader import ticket_to_dict

router = APIRouter(prefix="/trips/{trip_id}/tickets", tags=["Tickets"])


@router.get("/")
def list_tickets(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    tickets = db.query(Ticket).filter(Ticket.trip_id == trip_id).order_by(Ticket.id).all()
    return [ticket_to_dict(t) for t in tickets]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_ticket(trip_id: int, payload: TicketWrite, db: Session = Depends(get_db),
                  user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)

    ticket = Ticket(
        trip_id=trip_id,
        type=payload.type,
        provider=payload.provider,
        reference_number=payload.ref_number,
        departure_time=payload.departs,
        arrival_time=payload.arrives,
        file_url=payload.file,
        notes=payload.notes,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket_to_dict(ticket)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(trip_id: int, item_id: int, db: Session = Depends(get_db),
                  user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    ticket = db.query(Ticket).filter_by(id=item_id, trip_id=trip_id).first()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    db.delete(ticket)
    db.commit()
    return None
