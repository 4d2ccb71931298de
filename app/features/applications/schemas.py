"""
Pydantic schemas for Application API requests/responses.
"""
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from app.features.applications.models import ApplicationStatus
from app.features.contacts.schemas import ContactResponse


class ApplicationBase(BaseModel):
    """Fields shared by create requests and responses."""
    position: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    company_website: str | None = Field(None, max_length=500)
    link_application: str | None = None
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: str | None = None
    applied_date: date


class ApplicationCreate(ApplicationBase):
    """
    Schema for creating an application together with its contact.

    `name`, `email` and `linkedin` describe the contact; the contact's company
    is taken from `company`.
    """
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    linkedin: str | None = Field(None, max_length=500)


class ContactPatch(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    linkedin: str | None = Field(None, max_length=500)
    company: str | None = Field(None, max_length=255)


class ApplicationUpdate(BaseModel):
    """Schema for updating an application and, optionally, its contact."""
    position: str | None = Field(None, min_length=1, max_length=255)
    company: str | None = Field(None, min_length=1, max_length=255)
    company_website: str | None = Field(None, max_length=500)
    link_application: str | None = None
    status: ApplicationStatus | None = None
    notes: str | None = None
    applied_date: date | None = None
    contact: ContactPatch | None = None


class ApplicationResponse(ApplicationBase):
    id: int
    contact_id: int | None = None
    contact: ContactResponse | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationListResponse(BaseModel):
    data: list[ApplicationResponse]
    count: int


class ApplicationMessage(BaseModel):
    message: str
    data: ApplicationResponse
