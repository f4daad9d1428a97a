from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursify.auth.dependencies import require_admin
from coursify.database import get_db
from coursify.models.user import STATUS_PENDING
from coursify.schemas import (
    CountResponse,
    MessageResponse,
    UpdateUserRequest,
    UserResponse,
    UserStatsResponse,
)
from coursify.services import users

router = APIRouter(tags=['admin'], dependencies=[Depends(require_admin)])


@router.get('/users/pending', response_model=list[UserResponse])
def list_pending_users(
    db: Session = Depends(get_db),
):
    return users.list_users_by_status(db, STATUS_PENDING)


@router.get('/users/pending/count', response_model=CountResponse)
def count_pending_users(
    db: Session = Depends(get_db),
):
    return CountResponse(count=users.count_users_by_status(db, STATUS_PENDING))


@router.get('/users/all', response_model=list[UserResponse])
def list_all_users(
    db: Session = Depends(get_db),
):
    return users.list_users(db)


@router.get('/users/stats', response_model=UserStatsResponse)
def user_stats(
    db: Session = Depends(get_db),
):
    return UserStatsResponse(**users.get_user_stats(db))


@router.get('/users/{user_id}', response_model=UserResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    return users.get_user(db, user_id)


@router.put('/users/{user_id}', response_model=UserResponse)
def update_user(
    user_id: str,
    data: UpdateUserRequest,
    db: Session = Depends(get_db),
):
    return users.update_user(
        db,
        user_id,
        full_name=data.full_name,
        email=data.email,
        role=data.role,
    )


@router.delete('/users/{user_id}', response_model=MessageResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    users.delete_user(db, user_id)
    return MessageResponse(message='User deleted successfully')


@router.put('/users/{user_id}/approve', response_model=MessageResponse)
def approve_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    users.approve_user(db, user_id)
    return MessageResponse(message='User approved successfully')


@router.put('/users/{user_id}/reject', response_model=MessageResponse)
def reject_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    users.reject_user(db, user_id)
    return MessageResponse(message='User rejected successfully')
