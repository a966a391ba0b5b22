"""
Account lifecycle: scheduled deletion with a grace period, and a personal
data export the user can download at any time.
"""
import json
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config import ACCOUNT_DELETION_GRACE_DAYS
from models.AccountDeletion import AccountDeletion, DeletionStatus
from models.Expense import Expense
from models.Profile import Profile
from models.UserPreferences import UserPreferences
from schemas import AccountDeletionRequest, AccountDeletionRead, ExportDataOptions, ProfileRead, PreferencesRead
from database import get_db
from services.auth import get_current_user
from services.trip_loader import expense_to_dict, load_owned_trips, trip_to_aggregate
from utils.formatting import utcnow
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/account", tags=["Account"])


@router.post("/deletion", response_model=AccountDeletionRead, status_code=status.HTTP_201_CREATED)
def request_account_deletion(payload: AccountDeletionRequest, db: Session = Depends(get_db),
                             user: Profile = Depends(get_current_user)):
    if payload.confirm_email.lower() != user.email.lower():
        raise HTTPException(status_code=400, detail="Email does not match your account")

    pending = db.query(AccountDeletion).filter(
        AccountDeletion.user_id == user.id,
        AccountDeletion.status == DeletionStatus.PENDING,
    ).first()
    if pending:
        raise HTTPException(status_code=400, detail="Account deletion already requested")

    now = utcnow()
    deletion = AccountDeletion(
        user_id=user.id,
        requested_at=now,
        scheduled_deletion_at=now + timedelta(days=ACCOUNT_DELETION_GRACE_DAYS),
        reason=payload.reason or None,
        status=DeletionStatus.PENDING,
    )
    db.add(deletion)
    db.commit()
    db.refresh(deletion)
    logger.info("Account deletion %s scheduled for user %s", deletion.id, user.id)
    return deletion


@router.post("/deletion/{deletion_id}/cancel", response_model=AccountDeletionRead)
def cancel_account_deletion(deletion_id: str, db: Session = Depends(get_db),
                            user: Profile = Depends(get_current_user)):
    deletion = db.query(AccountDeletion).filter(
        AccountDeletion.id == deletion_id,
        AccountDeletion.user_id == user.id,
    ).first()
    if not deletion:
        raise HTTPException(status_code=404, detail="Deletion request not found")
    if deletion.status != DeletionStatus.PENDING:
        raise HTTPException(status_code=400, detail="Only pending deletion requests can be cancelled")

    deletion.status = DeletionStatus.CANCELLED
    db.commit()
    db.refresh(deletion)
    return deletion


@router.post("/export")
def export_user_data(payload: ExportDataOptions, db: Session = Depends(get_db),
                     user: Profile = Depends(get_current_user)):
    """
    Everything stored about the caller as a JSON download: profile and
    preferences, the trips they own, and the expenses of those trips.
    """
    data = {}

    if payload.include_profile:
        prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user.id).first()
        data["profile"] = ProfileRead.model_validate(user).model_dump()
        data["preferences"] = PreferencesRead.model_validate(prefs).model_dump() if prefs else None

    if payload.include_trips or payload.include_expenses:
        trips = load_owned_trips(db, user.id)

        if payload.include_trips:
            data["trips"] = []
            for trip in trips:
                aggregate = trip_to_aggregate(trip)
                aggregate.pop("expenses")
                data["trips"].append(aggregate)

        if payload.include_expenses:
            expenses = (
                db.query(Expense)
                .filter(Expense.trip_id.in_([t.id for t in trips]))
                .order_by(Expense.date.desc(), Expense.id.desc())
                .all()
            )
            data["expenses"] = [expense_to_dict(e) for e in expenses]

    filename = f"itinerary-data-export-{utcnow().isoformat()}.json"
    return Response(
        content=json.dumps(jsonable_encoder(data), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
