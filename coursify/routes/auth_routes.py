from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursify.auth.dependencies import Identity, enforce_rate_limit, get_current_identity
from coursify.database import get_db
from coursify.schemas import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from coursify.services import users

router = APIRouter(tags=['auth'])


@router.post(
    '/register',
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_rate_limit)],
)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    users.register_user(
        db,
        full_name=data.full_name,
        email=data.email,
        password=data.password,
        role=data.role,
    )
    return MessageResponse(message='User registered successfully, waiting for admin approval')


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    _, token = users.authenticate(db, email=data.email, password=data.password)
    return TokenResponse(token=token)


@router.get('/profile', response_model=UserResponse)
def profile(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return users.get_user(db, identity.user_id)
