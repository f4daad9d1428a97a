from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursify.auth.dependencies import Identity, require_instructor
from coursify.database import get_db
from coursify.models.course import Course
from coursify.schemas import (
    CourseResponse,
    CreateCourseRequest,
    MaterialRequest,
    MaterialResponse,
    MessageResponse,
    UpdateCourseRequest,
)
from coursify.services import courses

router = APIRouter(tags=['instructor'])


def get_owned_course(
    course_id: str,
    identity: Identity = Depends(require_instructor),
    db: Session = Depends(get_db),
) -> Course:
    # Resolved as a dependency so ownership is settled before the body is validated.
    return courses.get_owned_course(db, course_id, identity.user_id)


@router.post('/courses', response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    data: CreateCourseRequest,
    identity: Identity = Depends(require_instructor),
    db: Session = Depends(get_db),
):
    return courses.create_course(
        db,
        instructor_id=identity.user_id,
        title=data.title,
        description=data.description,
        cover_image_url=data.cover_image_url,
    )


@router.get('/courses', response_model=list[CourseResponse])
def list_my_courses(identity: Identity = Depends(require_instructor), db: Session = Depends(get_db)):
    return courses.list_courses_by_instructor(db, identity.user_id)


@router.get('/courses/{course_id}', response_model=CourseResponse)
def get_my_course(course: Course = Depends(get_owned_course)):
    return course


@router.put('/courses/{course_id}', response_model=CourseResponse)
def update_my_course(
    data: UpdateCourseRequest,
    course: Course = Depends(get_owned_course),
    db: Session = Depends(get_db),
):
    return courses.update_course(
        db,
        course,
        title=data.title,
        description=data.description,
        cover_image_url=data.cover_image_url,
    )


@router.delete('/courses/{course_id}', response_model=MessageResponse)
def delete_my_course(course: Course = Depends(get_owned_course), db: Session = Depends(get_db)):
    courses.delete_course(db, course)
    return MessageResponse(message='Course deleted successfully')


@router.post(
    '/courses/{course_id}/materials',
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_material(
    data: MaterialRequest,
    course: Course = Depends(get_owned_course),
    db: Session = Depends(get_db),
):
    return courses.add_material(
        db,
        course,
        title=data.title,
        content_type=data.content_type,
        payload=data.payload,
    )


@router.get('/courses/{course_id}/materials', response_model=list[MaterialResponse])
def list_materials(course: Course = Depends(get_owned_course), db: Session = Depends(get_db)):
    return courses.list_materials(db, course.id)


@router.get('/courses/{course_id}/materials/{material_id}', response_model=MaterialResponse)
def get_material(
    material_id: str,
    course: Course = Depends(get_owned_course),
    db: Session = Depends(get_db),
):
    return courses.get_material(db, course.id, material_id)


@router.put('/courses/{course_id}/materials/{material_id}', response_model=MaterialResponse)
def update_material(
    material_id: str,
    data: MaterialRequest,
    course: Course = Depends(get_owned_course),
    db: Session = Depends(get_db),
):
    return courses.update_material(
        db,
        course,
        material_id,
        title=data.title,
        content_type=data.content_type,
        payload=data.payload,
    )


@router.delete('/courses/{course_id}/materials/{material_id}', response_model=MessageResponse)
def delete_material(
    material_id: str,
    course: Course = Depends(get_owned_course),
    db: Session = Depends(get_db),
):
    courses.delete_material(db, course, material_id)
    return MessageResponse(message='Material deleted successfully')
