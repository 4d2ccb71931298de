"""
Pydantic schemas for authentication and profile requests and responses.
"""
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from app.features.permissions.schemas import RoleWithPermissions


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Schema for self-service registration."""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=4, max_length=128)


class PersonResponse(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    birth_date: date | None = None
    telephone: str | None = None
    biography: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: int
    email: EmailStr
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    role: RoleWithPermissions | None = None
    person: PersonResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdate(BaseModel):
    """Schema for updating the current user and their person record."""
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    birth_date: date | None = None
    telephone: str | None = Field(None, max_length=30)
    biography: str | None = Field(None, max_length=2000)


class ProfileMessage(BaseModel):
    message: str
    data: UserResponse
