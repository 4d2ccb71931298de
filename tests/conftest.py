"""Shared pytest fixtures for API tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.features.permissions.models import Role
from app.features.users.auth import hash_password
from app.features.users.dependencies import limiter
from app.features.users.models import User, Person
from app.main import create_app
from scripts.seed_permissions import seed

READER_EMAIL = "reader@example.com"
READER_PASSWORD = "reader-password"


@pytest.fixture()
def database_url(tmp_path) -> str:
    """Provide a file-backed SQLite database URL for one test."""

    return f"sqlite+aiosqlite:///{tmp_path / 'tracker.sqlite'}"


@pytest_asyncio.fixture()
async def app(database_url: str) -> AsyncIterator[FastAPI]:
    """Return an application with tables created and default rows seeded."""

    application = create_app(database_url)
    limiter.reset()
    await application.state.db.init()
    await seed(application.state.db)
    yield application
    await application.state.db.dispose()


@pytest_asyncio.fixture()
async def db_session(app: FastAPI) -> AsyncIterator[AsyncSession]:
    async with app.state.db.session() as session:
        yield session


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an HTTPX async client bound to the FastAPI app."""

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture()
async def seed_identity(app: FastAPI) -> dict[str, Any]:
    """Seeded admin plus a reader holding the default role (Read and List only)."""

    async with app.state.db.session() as session:
        role_id = await session.scalar(select(Role.id).where(Role.name == config.DEFAULT_ROLE_NAME))
        session.add(
            User(
                email=READER_EMAIL,
                name="Reader",
                password_hash=hash_password(READER_PASSWORD),
                role_id=role_id,
                person=Person(),
            )
        )
        await session.commit()

    return {
        "admin": {"email": config.ADMIN_EMAIL, "password": config.ADMIN_PASSWORD},
        "reader": {"email": READER_EMAIL, "password": READER_PASSWORD},
    }


async def _login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture()
async def admin_headers(async_client: AsyncClient, seed_identity: dict[str, Any]) -> dict[str, str]:
    admin = seed_identity["admin"]
    return await _login(async_client, admin["email"], admin["password"])


@pytest_asyncio.fixture()
async def reader_headers(async_client: AsyncClient, seed_identity: dict[str, Any]) -> dict[str, str]:
    reader = seed_identity["reader"]
    return await _login(async_client, reader["email"], reader["password"])
