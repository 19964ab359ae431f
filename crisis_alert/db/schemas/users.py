from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crisis_alert.utils.roles import normalize_role

from .common import PartialUpdate, Role, UtcDatetime


def _normalize_role(value):
    if isinstance(value, str):
        return normalize_role(value)
    return value


class UserBase(BaseModel):
    username: str
    email: str
    name: str
    role: Role = 'citizen'
    organization: Optional[str] = None
    phone: Optional[str] = None

    @field_validator('role', mode='before')
    @classmethod
    def _role_alias(cls, value):
        return _normalize_role(value)


class UserCreate(UserBase):
    password: str


class UserUpdate(PartialUpdate):
    required_fields = frozenset({'email', 'name', 'role', 'password'})

    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    organization: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None

    @field_validator('role', mode='before')
    @classmethod
    def _role_alias(cls, value):
        return _normalize_role(value)


class ProfileUpdate(PartialUpdate):
    """Self-service profile fields; role and email are not user-editable."""
    required_fields = frozenset({'name'})

    name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    phone: Optional[str] = None


class User(UserBase):
    id: str
    created_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)


class UserRecord(User):
    """Stored user including the password hash; never returned by the API."""
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str
    role: Role = 'citizen'

    @field_validator('role', mode='before')
    @classmethod
    def _role_alias(cls, value):
        return _normalize_role(value)


class LoginResponse(BaseModel):
    user: User
    dashboard: str
    created: bool = False
