"""
Pytest configuration and shared fixtures.

Settings are read at import time, so the environment is prepared before any
``app`` module is imported.
"""

import os
import tempfile
from datetime import datetime
from pathlib import Path

_DB_PATH = Path(tempfile.mkdtemp()) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENV"] = "test"
os.environ["TIMEZONE"] = "UTC"
os.environ["SMTP_HOST"] = ""
os.environ["FROM_EMAIL"] = ""

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.api.deps import get_now  # noqa: E402
from app.core.db import async_session_maker, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import UserCreate, UserRole  # noqa: E402
from app.services.auth_service import create_user  # noqa: E402

# Tuesday afternoon
NOW = datetime(2026, 3, 10, 14, 32)
TODAY = "2026-03-10"
TOMORROW = "2026-03-11"
API = "/api/v1"


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def client():
    app.dependency_overrides[get_now] = lambda: NOW
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def signup(client: AsyncClient, username: str, document: str | None = None, **extra) -> dict:
    payload = {"username": username, "password": "secret123", "document": document, **extra}
    resp = await client.post(f"{API}/auth/signup", json=payload)
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def client_headers(client):
    return await signup(client, "juanp", document="30111222", first_name="Juan", last_name="Pérez")


@pytest.fixture
async def admin_headers(client):
    async with async_session_maker() as session:
        await create_user(
            session,
            UserCreate(
                username="Admin",
                password="adminpass",
                first_name="Santiago",
                role=UserRole.admin,
                provider_id="santi",
            ),
        )
        await session.commit()
    resp = await client.post(f"{API}/auth/login", json={"identifier": "Admin", "password": "adminpass"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
