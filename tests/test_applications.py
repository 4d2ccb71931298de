from __future__ import annotations

from datetime import date
from io import BytesIO
from typing import Any

import openpyxl
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.applications import service as application_service
from app.features.applications.schemas import ApplicationCreate


def _application(**overrides: Any) -> dict[str, Any]:
    body = {
        "position": "Backend Engineer",
        "company": "Acme",
        "company_website": "https://acme.example.com",
        "link_application": "https://acme.example.com/jobs/1",
        "status": "Applied",
        "notes": "Referred by a friend",
        "applied_date": "2024-01-15",
        "name": "Jane Recruiter",
        "email": "jane@acme.example.com",
        "linkedin": "https://linkedin.com/in/jane",
    }
    body.update(overrides)
    return body


async def _create(client: AsyncClient, headers: dict[str, str], **overrides: Any) -> dict[str, Any]:
    response = await client.post("/applications", json=_application(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_application_with_contact(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    payload = await _create(async_client, admin_headers)

    assert payload["message"] == "Application with company [Acme] created successfully."
    data = payload["data"]
    assert data["position"] == "Backend Engineer"
    assert data["status"] == "Applied"
    assert data["applied_date"] == "2024-01-15"
    assert data["contact"]["name"] == "Jane Recruiter"
    assert data["contact"]["company"] == "Acme"
    assert data["contact_id"] == data["contact"]["id"]


async def test_duplicate_application_conflicts(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await _create(async_client, admin_headers)

    response = await async_client.post("/applications", json=_application(), headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "There is a application with the same information."

    # a different posting at the same company is fine
    await _create(async_client, admin_headers, link_application="https://acme.example.com/jobs/2")


async def test_create_validation(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await async_client.post(
        "/applications", json=_application(status="Ghosted", applied_date="yesterday"), headers=admin_headers
    )

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert any(error.startswith("status: ") for error in errors)
    assert any(error.startswith("applied_date: ") for error in errors)


async def test_list_filters_by_company(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await _create(async_client, admin_headers)
    await _create(async_client, admin_headers, company="Globex")

    response = await async_client.get("/applications", params={"company": "Glob"}, headers=admin_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 1
    assert payload["data"][0]["company"] == "Globex"


async def test_update_application_and_contact(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await _create(async_client, admin_headers)
    application_id = created["data"]["id"]

    response = await async_client.put(
        f"/applications/{application_id}",
        json={"status": "Interview", "position": None, "contact": {"name": "John Hiring"}},
        headers=admin_headers,
    )

    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["message"] == "Application with company [Acme] has been successfully updated."
    assert payload["data"]["status"] == "Interview"
    assert payload["data"]["position"] == "Backend Engineer"
    assert payload["data"]["contact"]["name"] == "John Hiring"
    assert payload["data"]["contact"]["email"] == "jane@acme.example.com"


async def test_delete_application(
    async_client: AsyncClient, admin_headers: dict[str, str], reader_headers: dict[str, str]
) -> None:
    created = await _create(async_client, admin_headers)
    application_id = created["data"]["id"]

    response = await async_client.delete(f"/applications/{application_id}", headers=reader_headers)
    assert response.status_code == 403

    response = await async_client.delete(f"/applications/{application_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == application_id

    response = await async_client.get(f"/applications/{application_id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == f"Application with ID [{application_id}] does not exist."

    response = await async_client.put(
        f"/applications/{application_id}", json={"notes": "too late"}, headers=admin_headers
    )
    assert response.status_code == 404


async def test_export_applications(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await _create(async_client, admin_headers)

    response = await async_client.get("/applications/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert 'filename="applications.xlsx"' in response.headers["content-disposition"]

    sheet = openpyxl.load_workbook(BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][:3] == ("ID", "Position", "Company")
    assert rows[1][1:3] == ("Backend Engineer", "Acme")
    assert len(rows) == 2


async def test_find_by_company_or_contact(db_session: AsyncSession) -> None:
    created = await application_service.create(
        db_session,
        ApplicationCreate(
            position="Data Engineer",
            company="Initech",
            applied_date=date(2024, 3, 1),
            name="Peter Gibbons",
            email="peter@initech.example.com",
        ),
    )

    by_company = await application_service.find(db_session, company="Initech")
    by_contact = await application_service.find(db_session, contact_name="Peter Gibbons")

    assert by_company.id == created.id
    assert by_contact.id == created.id
    assert await application_service.find(db_session, company="Nobody") is None
    with pytest.raises(ValueError):
        await application_service.find(db_session)


async def test_edit_without_contact_returns_none(db_session: AsyncSession) -> None:
    created = await application_service.create(
        db_session,
        ApplicationCreate(
            position="QA", company="Hooli", applied_date=date(2024, 3, 1),
            name="Gavin", email="gavin@hooli.example.com",
        ),
    )

    assert await application_service.edit(db_session, created.id, {"notes": "x"}, None, {}) is None


async def test_deleted_contact_is_hidden_from_application(
    async_client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await _create(async_client, admin_headers)
    application_id = created["data"]["id"]
    contact_id = created["data"]["contact"]["id"]

    response = await async_client.delete(f"/contacts/{contact_id}", headers=admin_headers)
    assert response.status_code == 200

    response = await async_client.get(f"/applications/{application_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["contact"] is None

    response = await async_client.put(
        f"/applications/{application_id}", json={"notes": "Follow up"}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == f"Contact of application with ID [{application_id}] does not exist."

    # nothing was written
    response = await async_client.get(f"/applications/{application_id}", headers=admin_headers)
    assert response.json()["notes"] == "Referred by a friend"
