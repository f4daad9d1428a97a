import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'coursify-test-signing-secret-0123456789')
os.environ.setdefault('PASSWORD_HASH_ROUNDS', '1000')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from coursify.auth import jwt_handler  # noqa: E402
from coursify.auth.passwords import hash_password  # noqa: E402
from coursify.core.rate_limit import TokenBucketRateLimiter  # noqa: E402
from coursify.database import Base, get_db  # noqa: E402
from coursify.main import app  # noqa: E402
from coursify.models.user import STATUS_ACTIVE, User  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter = TokenBucketRateLimiter(capacity=5, refill_seconds=60)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: str, status: str = STATUS_ACTIVE, password: str = 'pw') -> User:
        user = User(
            full_name=email.split('@')[0].title(),
            email=email,
            password_hash=hash_password(password),
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def auth_header(user: User) -> dict[str, str]:
    return {'Authorization': f'Bearer {jwt_handler.create_access_token(user.id, user.role)}'}


@pytest.fixture
def headers_for():
    return auth_header
