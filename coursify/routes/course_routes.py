from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursify.auth.dependencies import Identity, require_student
from coursify.database import get_db
from coursify.schemas import CourseResponse, CourseWithMaterialsResponse, MaterialResponse, MessageResponse
from coursify.services import courses

router = APIRouter(tags=['courses'])


@router.get('/courses', response_model=list[CourseResponse])
def list_catalog(db: Session = Depends(get_db)):
    return courses.list_public_catalog(db)


@router.post('/courses/{course_id}/enroll', response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def enroll_in_course(
    course_id: str,
    identity: Identity = Depends(require_student),
    db: Session = Depends(get_db),
):
    courses.enroll(db, student_id=identity.user_id, course_id=course_id)
    return MessageResponse(message='Successfully enrolled in the course')


@router.get('/student/my-courses', response_model=list[CourseResponse])
def list_my_enrolled_courses(identity: Identity = Depends(require_student), db: Session = Depends(get_db)):
    return courses.list_enrolled_courses(db, identity.user_id)


@router.get('/student/courses/{course_id}', response_model=CourseWithMaterialsResponse)
def get_enrolled_course(
    course_id: str,
    identity: Identity = Depends(require_student),
    db: Session = Depends(get_db),
):
    course, materials = courses.get_enrolled_course_details(db, student_id=identity.user_id, course_id=course_id)
    return CourseWithMaterialsResponse(
        **CourseResponse.model_validate(course).model_dump(),
        materials=[MaterialResponse.model_validate(material) for material in materials],
    )
