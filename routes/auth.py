from typing import Optional

from fastapi import APIRouter, Depends, status

from models.Profile import Profile
from schemas import Credentials, EmailOnly, ChangePassword
from services import supabase_auth
from services.auth import get_current_user, get_access_token
from services.supabase_auth import AuthServiceError
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(payload: Credentials, redirect_to: Optional[str] = None):
    """
    Register with e-mail and password. The auth service sends the
    verification e-mail; the profile row is created on first authenticated call.
    """
    result = await supabase_auth.sign_up(payload.email, payload.password, redirect_to=redirect_to)
    return {"success": True, "user": result.get("user", result), "session": result.get("session")}


@router.post("/signin")
async def signin(payload: Credentials):
    session = await supabase_auth.sign_in_with_password(payload.email, payload.password)
    return {"success": True, "session": session}


@router.post("/signout")
async def signout(access_token: str = Depends(get_access_token)):
    await supabase_auth.sign_out(access_token)
    return {"success": True}


@router.get("/oauth/{provider}")
def oauth_url(provider: str, redirect_to: Optional[str] = None):
    return {"url": supabase_auth.oauth_authorize_url(provider, redirect_to)}


@router.post("/password")
async def change_password(
    payload: ChangePassword,
    user: Profile = Depends(get_current_user),
    access_token: str = Depends(get_access_token),
):
    # the current password is checked by signing in with it
    try:
        await supabase_auth.sign_in_with_password(user.email, payload.current_password)
    except AuthServiceError as e:
        if e.status_code in (400, 401):
            raise AuthServiceError(400, "Current password is incorrect") from e
        raise

    await supabase_auth.update_password(access_token, payload.new_password)
    logger.info("Password changed for user %s", user.id)
    return {"success": True, "message": "Password updated successfully"}


@router.post("/resend-verification")
async def resend_verification(payload: EmailOnly):
    await supabase_auth.resend_verification(payload.email)
    return {"success": True, "message": "Verification email sent"}


@router.post("/recover")
async def recover(payload: EmailOnly, redirect_to: Optional[str] = None):
    await supabase_auth.recover_password(payload.email, redirect_to=redirect_to)
    return {"success": True, "message": "Password reset email sent"}
