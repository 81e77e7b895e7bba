"""Access-token verification. Tokens are issued by the auth service."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt

from team_planner.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def create_access_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token for a user. Used by the seed script and tests."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=7))
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[UUID]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Token rejected: {e}")
        return None

    # The legacy frontend signs "userId", newer clients use "sub"
    subject = payload.get("sub") or payload.get("userId")
    if not subject:
        return None
    try:
        return UUID(str(subject))
    except ValueError:
        logger.warning(f"Token subject is not a valid user id: {subject!r}")
        return None
