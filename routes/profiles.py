from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from models.Profile import Profile
from models.UserPreferences import UserPreferences, DEFAULT_NOTIFICATION_SETTINGS
from schemas import ProfileRead, ProfileUpdate, FCMTokenUpdate, PreferencesRead, PreferencesUpdate
from database import get_db
from services.auth import get_current_user

router = APIRouter(prefix="/profile", tags=["Profile"])


def _get_preferences(db: Session, user_id: str) -> UserPreferences:
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
    if prefs is None:
        prefs = UserPreferences(user_id=user_id, notification_settings=dict(DEFAULT_NOTIFICATION_SETTINGS))
        db.add(prefs)
        db.commit()
        db.refresh(prefs)
    return prefs


@router.get("/", response_model=ProfileRead)
def get_profile(user: Profile = Depends(get_current_user)):
    return user


@router.patch("/", response_model=ProfileRead)
def update_profile(payload: ProfileUpdate, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


@router.put("/fcm-token")
def update_fcm_token(payload: FCMTokenUpdate, db: Session = Depends(get_db),
                     user: Profile = Depends(get_current_user)):
    """
    Store the device's Firebase Cloud Messaging token for invitation pushes.
    """
    user.fcm_token = payload.fcm_token
    db.commit()
    return {"message": "FCM token updated successfully"}


@router.get("/preferences", response_model=PreferencesRead)
def get_preferences(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    return _get_preferences(db, user.id)


@router.patch("/preferences", response_model=PreferencesRead)
def update_preferences(payload: PreferencesUpdate, db: Session = Depends(get_db),
                       user: Profile = Depends(get_current_user)):
    prefs = _get_preferences(db, user.id)

    if payload.default_currency is not None:
        prefs.default_currency = payload.default_currency

    if payload.notification_settings is not None:
        # merge, a new dict so the JSON column is flagged dirty
        settings = dict(prefs.notification_settings or DEFAULT_NOTIFICATION_SETTINGS)
        settings.update(payload.notification_settings.model_dump(exclude_none=True))
        prefs.notification_settings = settings

    db.commit()
    db.refresh(prefs)
    return prefs
