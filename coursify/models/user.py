"""User model definitions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from coursify.database import Base

ROLE_STUDENT = "student"
ROLE_INSTRUCTOR = "instructor"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STUDENT, ROLE_INSTRUCTOR, ROLE_ADMIN)

STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"
STATUS_REJECTED = "rejected"
STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_REJECTED)


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents a registered account and its approval status."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(16), nullable=False)  # student/instructor/admin
    status = Column(String(16), nullable=False, default=STATUS_PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
