"""Learning material model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from coursify.database import Base
from coursify.models.user import new_id, utcnow

CONTENT_TEXT = "text"
CONTENT_VIDEO = "video"
CONTENT_PDF = "pdf"

# Each content type carries exactly one payload column.
PAYLOAD_FIELDS = {
    CONTENT_TEXT: "text_content",
    CONTENT_VIDEO: "video_url",
    CONTENT_PDF: "file_url",
}


class LearningMaterial(Base):
    """Represents an ordered piece of content inside a course."""
    __tablename__ = "learning_materials"
    __table_args__ = (UniqueConstraint("course_id", "position", name="uq_learning_materials_course_position"),)

    id = Column(String(36), primary_key=True, default=new_id)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content_type = Column(String(16), nullable=False)
    text_content = Column(Text, nullable=True)
    video_url = Column(String, nullable=True)
    file_url = Column(String, nullable=True)
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
