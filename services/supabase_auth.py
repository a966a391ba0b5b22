"""
Thin client for the Supabase Auth (GoTrue) REST API.

The API never stores passwords itself: sign-up, sign-in, password changes and
recovery e-mails are forwarded to the managed auth service, and its error
messages are surfaced to the caller unchanged.
"""
from typing import Optional
from urllib.parse import urlencode

import httpx

from config import SUPABASE_URL, SUPABASE_ANON_KEY, AUTH_TIMEOUT_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

OAUTH_PROVIDERS = {"google", "github", "apple", "facebook", "azure"}


class AuthServiceError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _auth_url(path: str) -> str:
    return f"{SUPABASE_URL}/auth/v1{path}"


def _headers(access_token: Optional[str] = None) -> dict:
    headers = {"apikey": SUPABASE_ANON_KEY, "Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Authentication service error"
    return (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or body.get("error")
        or "Authentication service error"
    )


async def _request(method: str, path: str, json: Optional[dict] = None, access_token: Optional[str] = None,
                   params: Optional[dict] = None) -> dict:
    if not SUPABASE_URL:
        raise AuthServiceError(503, "Authentication service is not configured")

    try:
        async with httpx.AsyncClient(timeout=AUTH_TIMEOUT_SECONDS) as client:
            response = await client.request(
                method,
                _auth_url(path),
                json=json,
                params=params,
                headers=_headers(access_token),
            )
    except httpx.HTTPError as e:
        logger.error("Auth service unreachable (%s %s): %s", method, path, e)
        raise AuthServiceError(503, "Authentication service unavailable") from e

    if response.status_code >= 400:
        message = _error_message(response)
        logger.warning("Auth service rejected %s %s: %s %s", method, path, response.status_code, message)
        raise AuthServiceError(response.status_code, message)

    if not response.content:
        return {}
    return response.json()


async def sign_up(email: str, password: str, redirect_to: Optional[str] = None) -> dict:
    params = {"redirect_to": redirect_to} if redirect_to else None
    return await _request("POST", "/signup", json={"email": email, "password": password}, params=params)


async def sign_in_with_password(email: str, password: str) -> dict:
    return await _request(
        "POST",
        "/token",
        json={"email": email, "password": password},
        params={"grant_type": "password"},
    )


async def sign_out(access_token: str) -> None:
    await _request("POST", "/logout", access_token=access_token)


async def update_password(access_token: str, new_password: str) -> dict:
    return await _request("PUT", "/user", json={"password": new_password}, access_token=access_token)


async def resend_verification(email: str) -> None:
    await _request("POST", "/resend", json={"type": "signup", "email": email})


async def recover_password(email: str, redirect_to: Optional[str] = None) -> None:
    params = {"redirect_to": redirect_to} if redirect_to else None
    await _request("POST", "/recover", json={"email": email}, params=params)


def oauth_authorize_url(provider: str, redirect_to: Optional[str] = None) -> str:
    """URL the client should open to start an OAuth sign-in with `provider`."""
    if provider not in OAUTH_PROVIDERS:
        raise AuthServiceError(400, f"Unsupported provider: {provider}")
    if not SUPABASE_URL:
        raise AuthServiceError(503, "Authentication service is not configured")
    query = {"provider": provider}
    if redirect_to:
        query["redirect_to"] = redirect_to
    return f"{_auth_url('/authorize')}?{urlencode(query)}"
