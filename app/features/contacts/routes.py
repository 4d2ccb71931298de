"""
Contact management API routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.export import ExportColumn, build_workbook, xlsx_response
from app.features.users.dependencies import get_current_user, rate_limited
from app.features.users.models import User
from app.features.permissions.dependencies import require_permission
from app.features.contacts import service as contact_service
from app.features.contacts.schemas import (
    ContactUpdate,
    ContactResponse,
    ContactListResponse,
    ContactMessage,
)
from app.utils import get_logger

log = get_logger(__name__)
router = APIRouter()

CONTACT_EXPORT_COLUMNS = [
    ExportColumn("ID", "id", 10),
    ExportColumn("Name", "name", 30),
    ExportColumn("Email", "email", 30),
    ExportColumn("LinkedIn", "linkedin", 30),
    ExportColumn("Company", "company", 30),
]


@router.get("", response_model=ContactListResponse)
@rate_limited
async def list_contacts(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500, alias="pageSize"),
    name: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("List"))
):
    """
    Retrieve a page of contacts.

    Parameters:
        name (str | None): Matched as a substring against name, company and email.
    """
    rows, count = await contact_service.find_all(db, page, page_size, contact_service.search_filter(name))
    return {"data": rows, "count": count}


@router.get("/export")
@rate_limited
async def export_contacts(
    request: Request,
    name: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Download every matching contact as an .xlsx sheet."""
    rows, _ = await contact_service.find_all(db, filters=contact_service.search_filter(name))
    content = build_workbook(
        "Contacts",
        CONTACT_EXPORT_COLUMNS,
        (
            {"id": c.id, "name": c.name, "email": c.email, "linkedin": c.linkedin, "company": c.company}
            for c in rows
        ),
    )
    return xlsx_response("contacts.xlsx", content)


@router.get("/{contact_id}", response_model=ContactResponse)
@rate_limited
async def get_contact(
    request: Request,
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Read"))
):
    """
    Retrieve a contact by its identifier.

    Raises:
        HTTPException: 404 if no live contact with `contact_id` exists.
    """
    contact = await contact_service.get_by_id(db, contact_id)
    if not contact:
        log.warning(f"Contact with ID [{contact_id}] not found.")
        raise HTTPException(status_code=404, detail=f"Contact with ID [{contact_id}] does not exist.")
    log.info(f"Successfully retrieved contact with ID [{contact_id}].")
    return contact


@router.put("/{contact_id}", response_model=ContactMessage)
@rate_limited
async def update_contact(
    request: Request,
    contact_id: int,
    contact_data: ContactUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Update"))
):
    """Replace a contact's details."""
    contact = await contact_service.get_by_id(db, contact_id)
    if not contact:
        log.warning(f"Contact with ID [{contact_id}] not found.")
        raise HTTPException(status_code=404, detail=f"Contact with ID [{contact_id}] does not exist.")

    updated = await contact_service.update_contact(db, contact_id, contact_data.model_dump())
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Contact with ID [{contact_id}] does not exist.")

    log.info(f"Contact with ID [{updated.id}] has been successfully updated.")
    return {"message": f"Contact with company [{updated.company}] has been successfully updated.", "data": updated}


@router.delete("/{contact_id}", response_model=ContactMessage)
@rate_limited
async def delete_contact(
    request: Request,
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Delete"))
):
    """Soft-delete a contact."""
    contact = await contact_service.get_by_id(db, contact_id)
    if not contact:
        log.warning(f"Contact with ID [{contact_id}] not found.")
        raise HTTPException(status_code=404, detail=f"Contact with ID [{contact_id}] does not exist.")

    deleted = await contact_service.destroy(db, contact_id, contact)
    log.info(f"Contact with ID [{contact_id}] has been deleted.")
    return {"message": f"Contact with company [{deleted.company}] has been deleted.", "data": deleted}
