"""Domain errors raised by the service layer.

Routes never build HTTP responses for these by hand; ``coursify.main``
registers one exception handler that turns any ``CoursifyError`` into a JSON
body carrying its ``status_code`` and ``detail``.
"""

from fastapi import status
from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class CoursifyError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailed(CoursifyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request body"


class AuthenticationFailed(CoursifyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"


class PermissionDenied(CoursifyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(CoursifyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(CoursifyError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate.
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def classify_integrity_error(
    exc: IntegrityError,
    *,
    conflict_detail: str | None = None,
    not_found_detail: str | None = None,
) -> CoursifyError:
    """Translate a driver-specific integrity failure into a domain error.

    Unique violations become ``ConflictError`` and foreign key violations
    become ``NotFoundError``. Anything else is not attributable to the caller
    and is returned as a bare ``CoursifyError`` (500).
    """
    code = _sqlstate(exc)
    message = str(exc.orig)

    if code == UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
        return ConflictError(conflict_detail)
    if code == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in message:
        return NotFoundError(not_found_detail)
    return CoursifyError()
