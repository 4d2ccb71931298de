"""
Offset pagination shared by the list endpoints.
"""
from typing import Any, Sequence
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate(
    db: AsyncSession,
    stmt: Select,
    order_by: Any,
    page: int | None = None,
    page_size: int | None = None,
) -> tuple[Sequence[Any], int]:
    """
    Run `stmt` and return `(rows, count)`.

    Rows are ordered by `order_by`. When both `page` and `page_size` are
    truthy the rows are limited to that page, otherwise every matching row
    is returned. `count` is always the total number of matching rows.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    count = await db.scalar(count_stmt)

    stmt = stmt.order_by(order_by)
    if page and page_size:
        stmt = stmt.offset((page - 1) * page_size).limit(page_size)

    result = await db.execute(stmt)
    return result.scalars().unique().all(), count or 0
