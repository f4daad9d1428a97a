"""Course model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from coursify.database import Base
from coursify.models.user import new_id, utcnow


class Course(Base):
    """Represents a course owned by a single instructor."""
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=new_id)
    instructor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    cover_image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
