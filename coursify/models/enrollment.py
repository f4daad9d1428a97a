"""Enrollment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from coursify.database import Base
from coursify.models.user import utcnow


class Enrollment(Base):
    """Links a student to a course; the composite key allows one row per pair."""
    __tablename__ = "enrollments"

    student_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
