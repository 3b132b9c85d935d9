# cath/core/security.py

import hmac
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import jwt

from cath.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a JWT carrying the given claims. Used for SSO/IDAM callback tokens
    in tests and local development.
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": datetime.utcnow()})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_publisher_token(
    subject: str,
    roles: Optional[List[str]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Service-to-service token for the publication API."""
    claims = {
        "sub": subject,
        "aud": settings.PUBLISHER_API_AUDIENCE,
        "roles": [settings.PUBLISHER_API_ROLE] if roles is None else roles,
    }
    return create_access_token(claims, expires_delta)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Raises jwt.PyJWTError on a bad signature or an expired token. Tokens
    carrying an audience (publisher tokens) are rejected here.
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def decode_publisher_token(token: str) -> Dict[str, Any]:
    """Raises jwt.PyJWTError unless the token is addressed to the publication API."""
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.PUBLISHER_API_AUDIENCE,
    )


def get_csrf_token(request) -> str:
    """Per-session token for POST forms; created on first use."""
    session = request.scope.get("session")
    if session is None:
        return ""
    if "csrfToken" not in session:
        session["csrfToken"] = secrets.token_hex(32)
    return session["csrfToken"]


def csrf_token_matches(request, token: Optional[str]) -> bool:
    expected = (request.scope.get("session") or {}).get("csrfToken")
    if not expected or not token:
        return False
    return hmac.compare_digest(str(token), expected)
