"""Courses, learning materials and enrollments.

Instructor operations always resolve the course through ``get_owned_course``
first, so a foreign or missing course is rejected before anything is written.
"""

import logging

from sqlalchemy import func, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursify.core.errors import (
    NotFoundError,
    PermissionDenied,
    ValidationFailed,
    classify_integrity_error,
)
from coursify.models.course import Course
from coursify.models.enrollment import Enrollment
from coursify.models.material import PAYLOAD_FIELDS, LearningMaterial
from coursify.models.user import utcnow

logger = logging.getLogger(__name__)

COURSE_NOT_FOUND = "Course not found"
NOT_COURSE_OWNER = "Forbidden: You are not the owner of this course"
NOT_ENROLLED = "Forbidden: You are not enrolled in this course"
MATERIAL_NOT_FOUND = "Material not found in this course"
ALREADY_ENROLLED = "You are already enrolled in this course"
POSITION_TAKEN = "Another material was added at the same time, please retry"


def _require_text(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationFailed(message)
    return value.strip()


def material_payload(content_type: str, payload: str) -> dict[str, str | None]:
    """Column values for a material: the payload in its kind's column, the rest cleared."""
    if content_type not in PAYLOAD_FIELDS:
        raise ValidationFailed("content_type must be one of: text, video, pdf")
    payload = _require_text(payload, f"{PAYLOAD_FIELDS[content_type]} is required for {content_type} materials")
    values: dict[str, str | None] = {column: None for column in PAYLOAD_FIELDS.values()}
    values[PAYLOAD_FIELDS[content_type]] = payload
    return values


def list_public_catalog(db: Session) -> list[Course]:
    return db.query(Course).order_by(Course.created_at.desc()).all()


def create_course(
    db: Session,
    *,
    instructor_id: str,
    title: str,
    description: str,
    cover_image_url: str | None = None,
) -> Course:
    course = Course(
        instructor_id=instructor_id,
        title=_require_text(title, "Title and description cannot be empty"),
        description=_require_text(description, "Title and description cannot be empty"),
        cover_image_url=cover_image_url,
    )
    db.add(course)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise classify_integrity_error(exc, not_found_detail="Instructor not found") from exc
    db.refresh(course)

    logger.info("Instructor %s created course %s", instructor_id, course.id)
    return course


def list_courses_by_instructor(db: Session, instructor_id: str) -> list[Course]:
    return (
        db.query(Course)
        .filter(Course.instructor_id == instructor_id)
        .order_by(Course.created_at.desc())
        .all()
    )


def get_course(db: Session, course_id: str) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(COURSE_NOT_FOUND)
    return course


def get_owned_course(db: Session, course_id: str, instructor_id: str) -> Course:
    course = get_course(db, course_id)
    if course.instructor_id != instructor_id:
        logger.warning("Instructor %s denied access to course %s", instructor_id, course_id)
        raise PermissionDenied(NOT_COURSE_OWNER)
    return course


def update_course(
    db: Session,
    course: Course,
    *,
    title: str | None = None,
    description: str | None = None,
    cover_image_url: str | None = None,
) -> Course:
    if title is not None:
        course.title = _require_text(title, "Title cannot be empty")
    if description is not None:
        course.description = _require_text(description, "Description cannot be empty")
    if cover_image_url is not None:
        course.cover_image_url = cover_image_url.strip() or None
    course.updated_at = utcnow()

    db.commit()
    db.refresh(course)
    logger.info("Updated course %s", course.id)
    return course


def delete_course(db: Session, course: Course) -> None:
    course_id = course.id
    db.query(Course).filter(Course.id == course_id).delete(synchronize_session=False)
    db.commit()
    logger.info("Deleted course %s", course_id)


def list_materials(db: Session, course_id: str) -> list[LearningMaterial]:
    return (
        db.query(LearningMaterial)
        .filter(LearningMaterial.course_id == course_id)
        .order_by(LearningMaterial.position.asc())
        .all()
    )


def get_material(db: Session, course_id: str, material_id: str) -> LearningMaterial:
    material = (
        db.query(LearningMaterial)
        .filter(LearningMaterial.id == material_id, LearningMaterial.course_id == course_id)
        .first()
    )
    if material is None:
        raise NotFoundError(MATERIAL_NOT_FOUND)
    return material


def next_material_position(db: Session, course_id: str) -> int:
    current = (
        db.query(func.max(LearningMaterial.position))
        .filter(LearningMaterial.course_id == course_id)
        .scalar()
    )
    return (current or 0) + 1


def add_material(
    db: Session,
    course: Course,
    *,
    title: str,
    content_type: str,
    payload: str,
) -> LearningMaterial:
    material = LearningMaterial(
        course_id=course.id,
        title=_require_text(title, "Title and content_type are required"),
        content_type=content_type,
        position=next_material_position(db, course.id),
        **material_payload(content_type, payload),
    )
    db.add(material)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise classify_integrity_error(
            exc,
            conflict_detail=POSITION_TAKEN,
            not_found_detail=COURSE_NOT_FOUND,
        ) from exc
    db.refresh(material)

    logger.info("Added material %s at position %s to course %s", material.id, material.position, course.id)
    return material


def update_material(
    db: Session,
    course: Course,
    material_id: str,
    *,
    title: str,
    content_type: str,
    payload: str,
) -> LearningMaterial:
    values = {
        "title": _require_text(title, "Title and content_type are required"),
        "content_type": content_type,
        "updated_at": utcnow(),
        **material_payload(content_type, payload),
    }
    result = db.execute(
        update(LearningMaterial)
        .where(LearningMaterial.id == material_id, LearningMaterial.course_id == course.id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise NotFoundError(MATERIAL_NOT_FOUND)

    logger.info("Updated material %s in course %s", material_id, course.id)
    return get_material(db, course.id, material_id)


def delete_material(db: Session, course: Course, material_id: str) -> None:
    deleted = (
        db.query(LearningMaterial)
        .filter(LearningMaterial.id == material_id, LearningMaterial.course_id == course.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted == 0:
        raise NotFoundError(MATERIAL_NOT_FOUND)
    logger.info("Deleted material %s from course %s", material_id, course.id)


def enroll(db: Session, *, student_id: str, course_id: str) -> None:
    get_course(db, course_id)
    try:
        db.execute(insert(Enrollment).values(student_id=student_id, course_id=course_id, enrolled_at=utcnow()))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise classify_integrity_error(
            exc,
            conflict_detail=ALREADY_ENROLLED,
            not_found_detail=COURSE_NOT_FOUND,
        ) from exc
    logger.info("Student %s enrolled in course %s", student_id, course_id)


def is_enrolled(db: Session, *, student_id: str, course_id: str) -> bool:
    return (
        db.query(Enrollment.course_id)
        .filter(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
        .first()
        is not None
    )


def list_enrolled_courses(db: Session, student_id: str) -> list[Course]:
    return (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.student_id == student_id)
        .order_by(Enrollment.enrolled_at.desc())
        .all()
    )


def get_enrolled_course_details(
    db: Session, *, student_id: str, course_id: str
) -> tuple[Course, list[LearningMaterial]]:
    if not is_enrolled(db, student_id=student_id, course_id=course_id):
        raise PermissionDenied(NOT_ENROLLED)
    course = get_course(db, course_id)
    return course, list_materials(db, course_id)
