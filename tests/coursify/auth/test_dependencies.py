from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from coursify.auth import jwt_handler
from coursify.auth.dependencies import (
    Identity,
    enforce_rate_limit,
    get_current_identity,
    require_admin,
    require_instructor,
    require_student,
)
from coursify.core import config
from coursify.core.rate_limit import TokenBucketRateLimiter


class _FakeRequest:
    def __init__(self, *, headers=None, host: str = '203.0.113.7', limiter=None):
        self.headers = headers or {}
        self.client = SimpleNamespace(host=host)
        self.url = SimpleNamespace(path='/api/register')
        self.app = SimpleNamespace(state=SimpleNamespace(rate_limiter=limiter))


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_get_current_identity_requires_authorization_header() -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_identity(_FakeRequest(), credentials=None)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Authorization header required'


def test_get_current_identity_rejects_non_bearer_header() -> None:
    request = _FakeRequest(headers={'Authorization': 'Basic dXNlcjpwYXNz'})

    with pytest.raises(HTTPException) as exception_info:
        get_current_identity(request, credentials=None)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == "Authorization header must be in format 'Bearer {token}'"


def test_get_current_identity_hides_why_a_token_failed() -> None:
    expired = jwt.encode(
        {'user_id': 'u1', 'role': 'admin', 'exp': datetime.now(timezone.utc) - timedelta(seconds=1)},
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
    )
    details = []
    for token in (expired, 'forged.token.value'):
        with pytest.raises(HTTPException) as exception_info:
            get_current_identity(_FakeRequest(headers={'Authorization': f'Bearer {token}'}), credentials=_bearer(token))
        assert exception_info.value.status_code == 401
        details.append(exception_info.value.detail)

    assert details == ['Invalid token', 'Invalid token']


def test_get_current_identity_rejects_token_without_role_claim() -> None:
    token = jwt.encode(
        {'user_id': 'u1', 'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
    )

    with pytest.raises(HTTPException) as exception_info:
        get_current_identity(_FakeRequest(headers={'Authorization': f'Bearer {token}'}), credentials=_bearer(token))

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token claims'


def test_get_current_identity_returns_claims() -> None:
    token = jwt_handler.create_access_token('u1', 'instructor')

    identity = get_current_identity(_FakeRequest(headers={'Authorization': f'Bearer {token}'}), credentials=_bearer(token))

    assert identity == Identity(user_id='u1', role='instructor')


@pytest.mark.parametrize('guard', [require_admin, require_instructor])
def test_student_identity_is_forbidden_from_privileged_roles(guard) -> None:
    with pytest.raises(HTTPException) as exception_info:
        guard(identity=Identity(user_id='u1', role='student'))

    assert exception_info.value.status_code == 403


def test_role_guard_passes_matching_identity_through() -> None:
    identity = Identity(user_id='u1', role='student')

    assert require_student(identity=identity) is identity


def test_enforce_rate_limit_rejects_sixth_request_from_same_address() -> None:
    limiter = TokenBucketRateLimiter(capacity=5, refill_seconds=60, clock=lambda: 100.0)
    request = _FakeRequest(limiter=limiter)

    for _ in range(5):
        enforce_rate_limit(request)

    with pytest.raises(HTTPException) as exception_info:
        enforce_rate_limit(request)

    assert exception_info.value.status_code == 429
    enforce_rate_limit(_FakeRequest(host='198.51.100.1', limiter=limiter))
