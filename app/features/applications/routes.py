"""
Job application API routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.export import ExportColumn, build_workbook, xlsx_response
from app.features.users.dependencies import get_current_user, rate_limited
from app.features.users.models import User
from app.features.permissions.dependencies import require_permission
from app.features.applications import service as application_service
from app.features.applications.schemas import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationResponse,
    ApplicationListResponse,
    ApplicationMessage,
)
from app.utils import get_logger

log = get_logger(__name__)
router = APIRouter()

APPLICATION_EXPORT_COLUMNS = [
    ExportColumn("ID", "id", 10),
    ExportColumn("Position", "position", 30),
    ExportColumn("Company", "company", 30),
    ExportColumn("Company Website", "company_website", 30),
    ExportColumn("Link Application", "link_application", 30),
    ExportColumn("Status", "status", 20),
    ExportColumn("Notes", "notes", 50),
    ExportColumn("Applied Date", "applied_date", 20),
    ExportColumn("Contact Name", "contact_name", 30),
    ExportColumn("Contact Linkedin", "contact_linkedin", 30),
]


def _not_found(application_id: int) -> HTTPException:
    log.warning(f"Application with ID [{application_id}] not found.")
    return HTTPException(status_code=404, detail=f"Application with ID [{application_id}] does not exist.")


@router.post("", response_model=ApplicationMessage, status_code=status.HTTP_201_CREATED)
@rate_limited
async def create_application(
    request: Request,
    application_data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Create"))
):
    """
    Create an application and its contact.

    Raises:
        HTTPException: 409 if an application with the same position, company,
            company website and application link already exists.
    """
    exists = await application_service.application_exists_by_data(
        db,
        application_data.position,
        application_data.company,
        application_data.company_website,
        application_data.link_application,
    )
    if exists:
        log.warning(f"Application with company [{application_data.company}] already exists.")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="There is a application with the same information.")

    application = await application_service.create(db, application_data)
    log.info(f"Application with ID [{application.id}] has been successfully created.")
    return {
        "message": f"Application with company [{application.company}] created successfully.",
        "data": application,
    }


@router.get("", response_model=ApplicationListResponse)
@rate_limited
async def list_applications(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500, alias="pageSize"),
    company: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("List"))
):
    """Retrieve a page of applications, optionally filtered by a company substring."""
    rows, count = await application_service.find_all(
        db, page, page_size, application_service.company_filter(company)
    )
    return {"data": rows, "count": count}


@router.get("/export")
@rate_limited
async def export_applications(
    request: Request,
    company: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Download every matching application as an .xlsx sheet."""
    rows, _ = await application_service.find_all(db, filters=application_service.company_filter(company))
    content = build_workbook(
        "Applications",
        APPLICATION_EXPORT_COLUMNS,
        (
            {
                "id": a.id,
                "position": a.position,
                "company": a.company,
                "company_website": a.company_website,
                "link_application": a.link_application,
                "status": a.status.value,
                "notes": a.notes,
                "applied_date": a.applied_date,
                "contact_name": a.contact.name if a.contact else None,
                "contact_linkedin": a.contact.linkedin if a.contact else None,
            }
            for a in rows
        ),
    )
    return xlsx_response("applications.xlsx", content)


@router.get("/{application_id}", response_model=ApplicationResponse)
@rate_limited
async def get_application(
    request: Request,
    application_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Read"))
):
    """Retrieve an application with its contact."""
    application = await application_service.find(db, application_id=application_id)
    if not application:
        raise _not_found(application_id)
    log.info(f"Successfully retrieved application with ID [{application_id}].")
    return application


@router.put("/{application_id}", response_model=ApplicationMessage)
@rate_limited
async def update_application(
    request: Request,
    application_id: int,
    update_data: ApplicationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Update"))
):
    """Update an application and its contact."""
    application = await application_service.find(db, application_id=application_id)
    if not application:
        raise _not_found(application_id)
    if application.contact is None:
        log.warning(f"Contact of application with ID [{application_id}] not found.")
        raise HTTPException(
            status_code=404, detail=f"Contact of application with ID [{application_id}] does not exist."
        )

    application_fields = update_data.model_dump(exclude_unset=True, exclude={"contact"})
    contact_fields = update_data.contact.model_dump(exclude_unset=True) if update_data.contact else {}

    updated = await application_service.edit(
        db, application_id, application_fields, application.contact_id, contact_fields
    )
    if updated is None:
        raise _not_found(application_id)

    log.info(f"Application with ID [{updated.id}] has been successfully updated.")
    return {
        "message": f"Application with company [{updated.company}] has been successfully updated.",
        "data": updated,
    }


@router.delete("/{application_id}", response_model=ApplicationMessage)
@rate_limited
async def delete_application(
    request: Request,
    application_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Delete"))
):
    """Soft-delete an application."""
    application = await application_service.find(db, application_id=application_id)
    if not application:
        raise _not_found(application_id)

    deleted = await application_service.destroy(db, application_id, application)
    log.info(f"Application with ID [{application_id}] has been deleted.")
    return {"message": f"Application with company [{deleted.company}] has been deleted.", "data": deleted}
