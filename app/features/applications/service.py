"""
Application data access.

An application is always created together with its contact, and edits touch
both records.
"""
from typing import Any, Sequence
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.core.pagination import paginate
from app.features.applications.models import Application
from app.features.applications.schemas import ApplicationCreate
from app.features.contacts.models import Contact
from app.utils import get_logger

log = get_logger(__name__)

# Columns that may not be cleared through an edit
_REQUIRED_FIELDS = ("position", "company", "status", "applied_date")


def company_filter(company: str | None) -> list[Any]:
    if not company:
        return []
    return [Application.company.like(f"%{company}%")]


async def create(db: AsyncSession, data: ApplicationCreate) -> Application:
    """Create the contact first, then the application pointing at it."""
    contact = Contact(
        name=data.name,
        email=data.email,
        linkedin=data.linkedin,
        company=data.company,
    )
    application = Application(
        position=data.position,
        company=data.company,
        company_website=data.company_website,
        link_application=data.link_application,
        status=data.status,
        notes=data.notes,
        applied_date=data.applied_date,
        contact=contact,
    )
    db.add(application)
    await db.commit()
    return await find(db, application_id=application.id)


async def find_all(
    db: AsyncSession,
    page: int | None = None,
    page_size: int | None = None,
    filters: list[Any] | None = None,
) -> tuple[Sequence[Application], int]:
    stmt = select(Application).where(Application.not_deleted(), *(filters or []))
    return await paginate(db, stmt, Application.id, page, page_size)


async def find(
    db: AsyncSession,
    application_id: int | None = None,
    company: str | None = None,
    contact_name: str | None = None,
) -> Application | None:
    """
    Find one live application by id, by company, or by its contact's name.

    The first argument given wins. Raises ValueError if none is given.
    """
    stmt = select(Application).where(Application.not_deleted())
    if application_id:
        stmt = stmt.where(Application.id == application_id)
    elif company:
        stmt = stmt.where(Application.company == company)
    elif contact_name:
        stmt = stmt.join(Application.contact).where(Contact.name == contact_name)
    else:
        raise ValueError("No parameter given to look up the application")

    result = await db.execute(stmt.order_by(Application.id).limit(1).execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def application_exists_by_data(
    db: AsyncSession,
    position: str,
    company: str,
    company_website: str | None,
    link_application: str | None,
) -> bool:
    """Check for a live application with the same natural key."""
    stmt = select(Application.id).where(
        Application.not_deleted(),
        Application.position == position,
        Application.company == company,
        Application.company_website.is_(None) if company_website is None
        else Application.company_website == company_website,
        Application.link_application.is_(None) if link_application is None
        else Application.link_application == link_application,
    )
    return await db.scalar(stmt.limit(1)) is not None


async def edit(
    db: AsyncSession,
    application_id: int,
    application_data: dict[str, Any],
    contact_id: int | None,
    contact_data: dict[str, Any],
) -> Application | None:
    """
    Update an application and its contact.

    Returns the reloaded application only when both updates matched a row;
    otherwise returns None. A matched first update is kept even when the
    second one misses.
    """
    application_data = {
        key: value for key, value in application_data.items()
        if value is not None or key not in _REQUIRED_FIELDS
    }
    app_result = await db.execute(
        update(Application)
        .where(Application.id == application_id, Application.not_deleted())
        .values(**application_data, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    contact_rows = 0
    if contact_id is not None:
        contact_result = await db.execute(
            update(Contact)
            .where(Contact.id == contact_id, Contact.not_deleted())
            .values(**contact_data, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        contact_rows = contact_result.rowcount
    await db.commit()

    if app_result.rowcount > 0 and contact_rows > 0:
        application = await find(db, application_id=application_id)
        if application is not None and application.contact is not None:
            await db.refresh(application.contact)
        return application

    log.warning(
        "Application [%s] edit matched %s application row(s) and %s contact row(s)",
        application_id, app_result.rowcount, contact_rows,
    )
    return None


async def destroy(db: AsyncSession, application_id: int, application: Application) -> Application:
    """Soft-delete by id and hand back the record the caller loaded."""
    await db.execute(
        update(Application)
        .where(Application.id == application_id)
        .values(deleted_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return application
