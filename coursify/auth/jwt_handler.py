from datetime import datetime, timedelta, timezone

import jwt

from coursify.core import config


def create_access_token(user_id: str, role: str, expires_hours: int | None = None) -> str:
    expire_hours = expires_hours or config.JWT_EXPIRES_HOURS
    issued_at = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=expire_hours),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; raises ``jwt.InvalidTokenError`` on any failure."""
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["exp"]},
    )
