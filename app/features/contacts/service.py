"""
Contact data access.
"""
from typing import Any, Sequence
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.core.pagination import paginate
from app.features.contacts.models import Contact


def search_filter(term: str | None) -> list[Any]:
    """Match `term` against name, company or email."""
    if not term:
        return []
    pattern = f"%{term}%"
    return [or_(Contact.name.like(pattern), Contact.company.like(pattern), Contact.email.like(pattern))]


async def get_by_id(db: AsyncSession, contact_id: int) -> Contact | None:
    result = await db.execute(
        select(Contact)
        .where(Contact.id == contact_id, Contact.not_deleted())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_all(
    db: AsyncSession,
    page: int | None = None,
    page_size: int | None = None,
    filters: list[Any] | None = None,
) -> tuple[Sequence[Contact], int]:
    stmt = select(Contact).where(Contact.not_deleted(), *(filters or []))
    return await paginate(db, stmt, Contact.id, page, page_size)


async def update_contact(db: AsyncSession, contact_id: int, data: dict[str, Any]) -> Contact | None:
    """
    Update a live contact. Returns the updated contact, or None when no row matched.
    """
    result = await db.execute(
        update(Contact)
        .where(Contact.id == contact_id, Contact.not_deleted())
        .values(**data, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None
    await db.commit()
    return await get_by_id(db, contact_id)


async def destroy(db: AsyncSession, contact_id: int, contact: Contact) -> Contact:
    """Soft-delete by id and hand back the record the caller loaded."""
    await db.execute(
        update(Contact)
        .where(Contact.id == contact_id)
        .values(deleted_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return contact
