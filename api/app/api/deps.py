"""API dependencies."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.security import AuthError, read_session_token
from app.services.record_store import RecordStore, SqlRecordStore
from app.storage.base import BaseStorageDriver
from app.storage.factory import get_storage_driver

__all__ = ["get_db", "get_record_store", "get_storage", "require_admin"]


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's database session."""
    return SqlRecordStore(db)


def get_storage() -> BaseStorageDriver:
    """Object storage driver built from settings."""
    return get_storage_driver(settings)


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> str:
    """Resolve the signed-in admin from a bearer token or session cookie."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        token = request.cookies.get(settings.session_cookie_name)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )

    try:
        session = read_session_token(token, settings)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    return session["email"]
