"""Admin session tokens and credential checks."""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from app.config import Settings, settings as default_settings


class AuthError(Exception):
    """Sign-in failed or the session is missing/expired."""

    pass


def _get_fernet(config: Settings) -> Fernet:
    """Get Fernet instance keyed from ``secret_key``.

    The secret is hashed to 32 bytes so any length of configured key works.
    """
    digest = hashlib.sha256(config.secret_key.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def verify_credentials(email: str, password: str, config: Optional[Settings] = None) -> str:
    """Check an admin sign-in.

    Args:
        email: Submitted email
        password: Submitted password

    Returns:
        Normalized admin email

    Raises:
        AuthError: If the email is not allow-listed or the password is wrong
    """
    config = config or default_settings
    normalized = (email or "").strip().lower()

    if not config.admin_password:
        raise AuthError("Admin sign-in is not configured")
    if normalized not in config.admin_email_list:
        raise AuthError("Invalid credentials")
    if not hmac.compare_digest(password.encode(), config.admin_password.encode()):
        raise AuthError("Invalid credentials")
    return normalized


def issue_session_token(email: str, config: Optional[Settings] = None) -> str:
    """Issue an encrypted session token for an admin.

    Example:
        >>> token = issue_session_token("admin@example.com")
        >>> read_session_token(token)["email"]
        'admin@example.com'
    """
    config = config or default_settings
    payload = json.dumps({"email": email, "iat": int(time.time())})
    return _get_fernet(config).encrypt(payload.encode()).decode()


def read_session_token(token: str, config: Optional[Settings] = None) -> Dict[str, Any]:
    """Decrypt and validate a session token.

    Raises:
        AuthError: If the token is invalid, expired, or for a revoked admin
    """
    config = config or default_settings
    try:
        raw = _get_fernet(config).decrypt(token.encode(), ttl=config.session_ttl_seconds)
        session = json.loads(raw.decode())
    except (InvalidToken, ValueError) as e:
        raise AuthError("Invalid or expired session") from e

    if session.get("email") not in config.admin_email_list:
        raise AuthError("Session user is no longer an admin")
    return session
