"""
Pydantic schemas for Contact API requests/responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict


class ContactUpdate(BaseModel):
    """Schema for replacing a contact's details; every field is required."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    linkedin: str = Field(..., min_length=1, max_length=500)
    company: str = Field(..., min_length=1, max_length=255)


class ContactResponse(BaseModel):
    """Schema for contact response."""
    id: int
    name: str | None = None
    email: str | None = None
    linkedin: str | None = None
    company: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactListResponse(BaseModel):
    data: list[ContactResponse]
    count: int


class ContactMessage(BaseModel):
    message: str
    data: ContactResponse
