# socialgraph/core/security.py

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import jwt, JWTError

from socialgraph.core.config import settings


def create_access_token(data: dict, expires_delta: Union[timedelta, None] = None) -> str:
    """
    Sign a session token. The real auth provider issues these in production;
    this exists for local development and tests.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_subject(token: str) -> Optional[str]:
    """Return the `sub` claim of a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
