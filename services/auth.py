"""
Request authentication.

Clients send the access token issued by Supabase Auth as a bearer token. We
verify it locally with the project's JWT secret; the `sub` claim is the user
id. The first time a user id is seen, its profile and default preferences
are created.
"""
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import SUPABASE_JWT_SECRET, SUPABASE_JWT_ALGORITHM, SUPABASE_JWT_AUDIENCE
from database import get_db
from models.Profile import Profile
from models.UserPreferences import UserPreferences
from utils.logger import get_logger

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[SUPABASE_JWT_ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return payload


def ensure_profile(db: Session, user_id: str, email: Optional[str]) -> Profile:
    """Return the user's profile, creating it (and default preferences) on first use."""
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile:
        return profile

    profile = Profile(id=user_id, email=(email or f"{user_id}@users.invalid").lower())
    db.add(profile)
    db.add(UserPreferences(user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request created it first
        db.rollback()
        profile = db.query(Profile).filter(Profile.id == user_id).first()
        if not profile:
            raise
        return profile

    db.refresh(profile)
    logger.info("Created profile for user %s", user_id)
    return profile


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Unauthorized")
    payload = decode_access_token(credentials.credentials)
    return ensure_profile(db, payload["sub"], payload.get("email"))


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except HTTPException:
        return None
    return ensure_profile(db, payload["sub"], payload.get("email"))


def get_access_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> str:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return credentials.credentials
