from __future__ import annotations

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.contacts import service as contact_service
from app.features.contacts.models import Contact


async def _add_contacts(db: AsyncSession, count: int) -> None:
    db.add_all(
        Contact(name=f"Contact {i}", email=f"contact{i}@example.com", company=f"Company {i}")
        for i in range(1, count + 1)
    )
    await db.commit()


async def test_second_page_of_25(db_session: AsyncSession) -> None:
    await _add_contacts(db_session, 25)

    rows, count = await contact_service.find_all(db_session, page=2, page_size=10)

    assert count == 25
    assert [row.id for row in rows] == list(range(11, 21))


async def test_last_page_is_partial(db_session: AsyncSession) -> None:
    await _add_contacts(db_session, 25)

    rows, count = await contact_service.find_all(db_session, page=3, page_size=10)

    assert count == 25
    assert [row.id for row in rows] == list(range(21, 26))


async def test_without_page_returns_everything(db_session: AsyncSession) -> None:
    await _add_contacts(db_session, 25)

    rows, count = await contact_service.find_all(db_session)

    assert count == 25
    assert len(rows) == 25


async def test_count_respects_filters(db_session: AsyncSession) -> None:
    await _add_contacts(db_session, 25)

    rows, count = await contact_service.find_all(
        db_session, page=1, page_size=10, filters=contact_service.search_filter("Company 2")
    )

    # Company 2 and Company 20..25
    assert count == 7
    assert len(rows) == 7


async def test_list_endpoint_pages(
    async_client: AsyncClient, admin_headers: dict[str, str], db_session: AsyncSession
) -> None:
    await _add_contacts(db_session, 25)

    response = await async_client.get("/contacts", params={"page": 2, "pageSize": 10}, headers=admin_headers)
    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 25
    assert [row["id"] for row in payload["data"]] == list(range(11, 21))

    response = await async_client.get("/contacts", headers=admin_headers)
    assert [row["id"] for row in response.json()["data"]] == list(range(1, 11))

    response = await async_client.get("/contacts", params={"page": 0}, headers=admin_headers)
    assert response.status_code == 400
