"""
Public read-only share links for a trip.

A link is a random URL-safe token, optionally protected by a bcrypt-hashed
password and an expiry. Only the trip owner can create, list or revoke links.
"""
import secrets
from typing import Optional

import bcrypt
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import PUBLIC_APP_URL, SHARE_TOKEN_BYTES
from models.Profile import Profile
from models.SharedTrip import SharedTrip
from schemas import ShareCreate, SharePasswordVerify
from database import get_db
from services.auth import get_current_user, get_optional_user
from services.permissions import get_trip_or_404, require_owner
from services.trip_loader import load_trip, trip_to_aggregate
from utils.formatting import as_utc, utcnow
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/share", tags=["Share"])
router2 = APIRouter(prefix="/trips/{trip_id}", tags=["Share"])


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: Optional[str], password_hash: str) -> bool:
    if not password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


def _share_url(request: Request, token: str) -> str:
    base = PUBLIC_APP_URL or str(request.base_url).rstrip("/")
    return f"{base}/shared/{token}"


def _is_expired(link: SharedTrip) -> bool:
    return link.expires_at is not None and as_utc(link.expires_at) < utcnow()


def _get_active_link(db: Session, token: str) -> SharedTrip:
    link = db.query(SharedTrip).filter(
        SharedTrip.share_token == token,
        SharedTrip.is_active.is_(True),
    ).first()
    if not link:
        raise HTTPException(status_code=404, detail="Share link not found or has been deactivated")
    return link


def _link_to_read(link: SharedTrip, request: Request) -> dict:
    return {
        "id": link.id,
        "token": link.share_token,
        "url": _share_url(request, link.share_token),
        "expiresAt": link.expires_at.isoformat() if link.expires_at else None,
        "isProtected": link.password_hash is not None,
        "isActive": link.is_active,
        "viewCount": link.view_count,
        "createdAt": link.created_at.isoformat() if link.created_at else None,
    }


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_share_link(payload: ShareCreate, request: Request, db: Session = Depends(get_db),
                      user: Profile = Depends(get_current_user)):
    if payload.trip_id is None:
        raise HTTPException(status_code=400, detail="Trip ID is required")

    trip = get_trip_or_404(db, payload.trip_id)
    if trip.user_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized")

    link = SharedTrip(
        trip_id=trip.id,
        share_token=secrets.token_urlsafe(SHARE_TOKEN_BYTES),
        password_hash=hash_password(payload.password) if payload.password else None,
        expires_at=payload.expires_at,
        is_active=True,
        created_by=user.id,
        view_count=0,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    logger.info("Share link %s created for trip %s", link.id, trip.id)

    return {"success": True, "shareLink": _link_to_read(link, request)}


@router.get("/{token}")
def get_shared_trip(token: str, db: Session = Depends(get_db),
                    x_share_password: Optional[str] = Header(default=None),
                    viewer: Optional[Profile] = Depends(get_optional_user)):
    """Public view of a shared trip. Anyone with the token may read; the creator skips the password."""
    link = _get_active_link(db, token)

    if _is_expired(link):
        raise HTTPException(status_code=410, detail="This share link has expired")

    is_protected = link.password_hash is not None
    is_creator = viewer is not None and viewer.id == link.created_by
    if is_protected and not is_creator and not check_password(x_share_password, link.password_hash):
        raise HTTPException(
            status_code=401,
            detail={"message": "This trip is password protected", "isPasswordProtected": True},
        )

    trip = load_trip(db, link.trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    aggregate = trip_to_aggregate(trip)
    aggregate["isPasswordProtected"] = is_protected

    try:
        link.view_count = (link.view_count or 0) + 1
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not increment view count for share link %s: %s", link.id, e)

    return {
        "success": True,
        "trip": aggregate,
        "shareLink": {
            "expiresAt": link.expires_at.isoformat() if link.expires_at else None,
            "isPasswordProtected": is_protected,
        },
    }


@router.post("/{token}/verify")
def verify_share_password(token: str, payload: SharePasswordVerify, db: Session = Depends(get_db)):
    if not payload.password:
        raise HTTPException(status_code=400, detail="Password is required")

    link = _get_active_link(db, token)
    if not link.password_hash or not check_password(payload.password, link.password_hash):
        raise HTTPException(status_code=401, detail="Invalid password")

    return {"success": True, "message": "Password verified"}


@router.delete("/{token}")
def revoke_share_link(token: str, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    link = _get_active_link(db, token)
    require_owner(db, link.trip_id, user.id)

    link.is_active = False
    db.commit()
    logger.info("Share link %s revoked by %s", link.id, user.id)
    return {"success": True, "message": "Share link deactivated"}


@router2.get("/shares")
def list_share_links(trip_id: int, request: Request, db: Session = Depends(get_db),
                     user: Profile = Depends(get_current_user)):
    require_owner(db, trip_id, user.id)
    links = (
        db.query(SharedTrip)
        .filter(SharedTrip.trip_id == trip_id)
        .order_by(SharedTrip.created_at.desc(), SharedTrip.id.desc())
        .all()
    )
    return {"shareLinks": [_link_to_read(link, request) for link in links]}
