from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator

from coursify.models.material import PAYLOAD_FIELDS
from coursify.models.user import ROLES

MAX_NAME_LENGTH = 200
MAX_TITLE_LENGTH = 200


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    local, _, domain = normalized.partition('@')
    if not local or '.' not in domain or ' ' in normalized:
        raise ValueError('A valid email address is required.')
    return normalized


def _normalize_full_name(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Full name is required.')
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f'Full name must be {MAX_NAME_LENGTH} characters or fewer.')
    return normalized


def _check_title_length(value: str) -> str:
    if len(value) > MAX_TITLE_LENGTH:
        raise ValueError(f'Title must be {MAX_TITLE_LENGTH} characters or fewer.')
    return value


def _normalize_role(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in ROLES:
        raise ValueError('Role must be one of: student, instructor, admin.')
    return normalized


class RegisterRequest(BaseModel):
    full_name: str
    email: str
    password: str
    role: str

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _normalize_full_name(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        return _normalize_role(value)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = 'bearer'


class MessageResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int


class UserStatsResponse(BaseModel):
    total_users: int
    active_users: int
    pending_users: int
    rejected_users: int


class UserResponse(BaseModel):
    id: str
    full_name: str
    email: str
    role: str
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UpdateUserRequest(BaseModel):
    full_name: str | None = None
    email: str | None = None
    role: str | None = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_full_name(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_email(value)

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_role(value)


class CreateCourseRequest(BaseModel):
    title: str
    description: str
    cover_image_url: str | None = None

    @field_validator('title', 'description')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Title and description cannot be empty.')
        return normalized

    @field_validator('title')
    @classmethod
    def validate_title_length(cls, value: str) -> str:
        return _check_title_length(value)


class UpdateCourseRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    cover_image_url: str | None = None

    @field_validator('title', 'description')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError('Title and description cannot be empty.')
        return normalized

    @field_validator('title')
    @classmethod
    def validate_title_length(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_title_length(value)


class CourseResponse(BaseModel):
    id: str
    instructor_id: str
    title: str
    description: str
    cover_image_url: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MaterialRequest(BaseModel):
    title: str
    content_type: str
    text_content: str | None = None
    video_url: str | None = None
    file_url: str | None = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Title and content_type are required.')
        return normalized

    @field_validator('content_type')
    @classmethod
    def validate_content_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in PAYLOAD_FIELDS:
            raise ValueError('content_type must be one of: text, video, pdf.')
        return normalized

    @model_validator(mode='after')
    def validate_single_payload(self) -> 'MaterialRequest':
        expected = PAYLOAD_FIELDS[self.content_type]
        populated = [field for field in PAYLOAD_FIELDS.values() if (getattr(self, field) or '').strip()]
        if expected not in populated:
            raise ValueError(f'{expected} is required for {self.content_type} materials.')
        if populated != [expected]:
            raise ValueError(f'Only {expected} may be set for {self.content_type} materials.')
        return self

    @property
    def payload(self) -> str:
        return getattr(self, PAYLOAD_FIELDS[self.content_type]).strip()


class MaterialResponse(BaseModel):
    id: str
    course_id: str
    title: str
    content_type: str
    text_content: str | None = None
    video_url: str | None = None
    file_url: str | None = None
    position: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CourseWithMaterialsResponse(CourseResponse):
    materials: list[MaterialResponse]
