from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.Expense import Expense
from models.Profile import Profile
from schemas import ExpenseWrite
from database import get_db
from services.auth import get_current_user
from services.permissions import require_read, require_edit
from services.settlement import compute_settlement
from services.trip_loader import expense_to_dict

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["Expenses"])


@router.get("/")
def list_expenses(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)
    expenses = (
        db.query(Expense)
        .filter(Expense.trip_id == trip_id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )
    return [expense_to_dict(e) for e in expenses]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_expense(trip_id: int, payload: ExpenseWrite, db: Session = Depends(get_db),
                   user: Profile = Depends(get_current_user)):
    trip = require_edit(db, trip_id, user.id)
    members = trip.members or ["Me"]

    if not payload.description.strip():
        raise HTTPException(status_code=400, detail="Description is required")
    if not payload.category.strip():
        raise HTTPException(status_code=400, detail="Category is required")
    if payload.payer not in members and payload.payer != "Me":
        raise HTTPException(status_code=400, detail="Payer must be a trip member")

    expense = Expense(
        trip_id=trip_id,
        payer=payload.payer,
        amount=payload.amount,
        description=payload.description.strip(),
        date=payload.date,
        category=payload.category.strip(),
        split_with=payload.split_with,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense_to_dict(expense)


@router.get("/settlement")
def get_settlement(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Net balance per member and the transfers that settle them."""
    trip = require_read(db, trip_id, user.id)
    expenses = [expense_to_dict(e) for e in db.query(Expense).filter(Expense.trip_id == trip_id).all()]
    return compute_settlement(expenses, trip.members or ["Me"])


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(trip_id: int, item_id: int, db: Session = Depends(get_db),
                   user: Profile = Depends(get_current_user)):
    require_edit(db, trip_id, user.id)
    expense = db.query(Expense).filter_by(id=item_id, trip_id=trip_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    db.delete(expense)
    db.commit()
    return None
