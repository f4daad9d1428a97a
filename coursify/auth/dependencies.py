import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from coursify.auth import jwt_handler
from coursify.models.user import ROLE_ADMIN, ROLE_INSTRUCTOR, ROLE_STUDENT

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

TOO_MANY_REQUESTS_DETAIL = "You have made too many requests. Please try again later."


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, built once from verified token claims."""

    user_id: str
    role: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    if credentials is None:
        if not request.headers.get("Authorization"):
            raise _unauthorized("Authorization header required")
        raise _unauthorized("Authorization header must be in format 'Bearer {token}'")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected bearer token: %s", exc.__class__.__name__)
        raise _unauthorized("Invalid token") from exc

    user_id = payload.get("user_id")
    role = payload.get("role")
    if not isinstance(user_id, str) or not user_id or not isinstance(role, str) or not role:
        raise _unauthorized("Invalid token claims")

    return Identity(user_id=user_id, role=role)


def require_role(role: str):
    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            logger.warning("User %s with role %s denied %s-only route", identity.user_id, identity.role, role)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: {role} access required",
            )
        return identity

    return dependency


require_admin = require_role(ROLE_ADMIN)
require_instructor = require_role(ROLE_INSTRUCTOR)
require_student = require_role(ROLE_STUDENT)


def enforce_rate_limit(request: Request) -> None:
    limiter = request.app.state.rate_limiter
    client_key = request.client.host if request.client else "unknown"
    if not limiter.allow(client_key):
        logger.warning("Rate limit exceeded for %s on %s", client_key, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=TOO_MANY_REQUESTS_DETAIL,
        )
