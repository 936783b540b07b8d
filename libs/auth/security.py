"""JWT issuing/decoding and password hashing."""

from datetime import timedelta
from typing import Any, Iterable

import bcrypt
from jose import jwt

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(subject: str, email: str, roles: Iterable[str]) -> str:
    """Create a signed access token for ``subject`` (the user ID)."""
    settings = get_settings()
    issued_at = utc_now()
    claims = {
        "sub": subject,
        "email": email,
        "roles": sorted(roles),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; raises ``jose.JWTError`` when invalid."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
