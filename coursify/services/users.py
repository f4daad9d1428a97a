"""User lifecycle: registration, login and admin approval.

Every account starts ``pending``. Only the admin transitions below move it to
``active`` or ``rejected``; login refuses anything that is not ``active``.
"""

import logging

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursify.auth import jwt_handler
from coursify.auth.passwords import dummy_verify, hash_password, verify_password
from coursify.core.errors import (
    AuthenticationFailed,
    PermissionDenied,
    NotFoundError,
    ValidationFailed,
    classify_integrity_error,
)
from coursify.models.user import (
    ROLES,
    STATUS_ACTIVE,
    STATUS_PENDING,
    STATUS_REJECTED,
    STATUSES,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_NOT_ACTIVE = "Account is not active, please wait for admin approval"
USER_NOT_FOUND = "User not found"
EMAIL_TAKEN = "Email is already registered"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(db: Session, *, full_name: str, email: str, password: str, role: str) -> User:
    if role not in ROLES:
        raise ValidationFailed("Invalid role.")

    user = User(
        full_name=full_name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
        status=STATUS_PENDING,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise classify_integrity_error(exc, conflict_detail=EMAIL_TAKEN) from exc
    db.refresh(user)

    logger.info("Registered %s %s, awaiting approval", user.role, user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> tuple[User, str]:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        dummy_verify()
        raise AuthenticationFailed(INVALID_CREDENTIALS)

    if not verify_password(password, user.password_hash):
        logger.warning("Failed login for user %s", user.id)
        raise AuthenticationFailed(INVALID_CREDENTIALS)

    if user.status != STATUS_ACTIVE:
        raise PermissionDenied(ACCOUNT_NOT_ACTIVE)

    token = jwt_handler.create_access_token(user_id=user.id, role=user.role)
    return user, token


def _set_status(db: Session, user_id: str, new_status: str) -> None:
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(status=new_status, updated_at=utcnow())
    )
    db.commit()
    if result.rowcount == 0:
        raise NotFoundError(USER_NOT_FOUND)
    logger.info("User %s is now %s", user_id, new_status)


def approve_user(db: Session, user_id: str) -> None:
    _set_status(db, user_id, STATUS_ACTIVE)


def reject_user(db: Session, user_id: str) -> None:
    _set_status(db, user_id, STATUS_REJECTED)


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def list_users_by_status(db: Session, user_status: str) -> list[User]:
    if user_status not in STATUSES:
        raise ValidationFailed("Invalid status.")
    return db.query(User).filter(User.status == user_status).order_by(User.created_at.asc()).all()


def count_users_by_status(db: Session, user_status: str) -> int:
    return db.query(func.count(User.id)).filter(User.status == user_status).scalar() or 0


def get_user_stats(db: Session) -> dict[str, int]:
    counts = dict(db.query(User.status, func.count(User.id)).group_by(User.status).all())
    return {
        "total_users": sum(counts.values()),
        "active_users": counts.get(STATUS_ACTIVE, 0),
        "pending_users": counts.get(STATUS_PENDING, 0),
        "rejected_users": counts.get(STATUS_REJECTED, 0),
    }


def update_user(
    db: Session,
    user_id: str,
    *,
    full_name: str | None = None,
    email: str | None = None,
    role: str | None = None,
) -> User:
    values = {}
    if full_name is not None:
        values["full_name"] = full_name.strip()
    if email is not None:
        values["email"] = normalize_email(email)
    if role is not None:
        if role not in ROLES:
            raise ValidationFailed("Invalid role.")
        values["role"] = role

    if not values:
        return get_user(db, user_id)

    values["updated_at"] = utcnow()
    try:
        result = db.execute(update(User).where(User.id == user_id).values(**values))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise classify_integrity_error(exc, conflict_detail=EMAIL_TAKEN) from exc

    if result.rowcount == 0:
        raise NotFoundError(USER_NOT_FOUND)

    logger.info("Updated user %s fields %s", user_id, sorted(values))
    return get_user(db, user_id)


def delete_user(db: Session, user_id: str) -> None:
    deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()
    if deleted == 0:
        raise NotFoundError(USER_NOT_FOUND)
    logger.info("Deleted user %s", user_id)
