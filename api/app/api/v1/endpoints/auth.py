"""Admin sign-in endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import require_admin
from app.config import settings
from app.schemas.auth import LoginRequest, SessionResponse
from app.security import AuthError, issue_session_token, verify_credentials

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=SessionResponse)
def login(body: LoginRequest, response: Response):
    """Sign in and receive a session cookie (and the same token as a bearer)."""
    try:
        email = verify_credentials(body.email, body.password, settings)
    except AuthError as e:
        logger.warning(f"Rejected sign-in for {body.email!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    token = issue_session_token(email, settings)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.environment == "production",
    )
    logger.info(f"Admin {email} signed in")
    return SessionResponse(email=email, access_token=token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    """Sign out by clearing the session cookie."""
    response.delete_cookie(settings.session_cookie_name)


@router.get("/me", response_model=SessionResponse)
def me(email: str = Depends(require_admin)):
    """Currently signed-in admin."""
    return SessionResponse(email=email)
