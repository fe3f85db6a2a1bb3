"""Integration-test fixtures.

Needs a migrated PostgreSQL and a Redis (``alembic upgrade head``); the tests
are skipped unless RUN_INTEGRATION=1.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool remain valid across the session.
"""

import os
import uuid
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app

_HERE = Path(__file__).parent


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 with PostgreSQL + Redis running")
    for item in items:
        if _HERE in item.path.parents:
            item.add_marker(pytest.mark.integration)
            if os.environ.get("RUN_INTEGRATION") != "1":
                item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _register_and_login(client: AsyncClient) -> tuple[str, dict[str, str]]:
    """Register a fresh user; return (user_id, auth headers)."""
    uid = uuid.uuid4().hex[:8]
    user = {"username": f"u_{uid}", "email": f"u_{uid}@example.com", "password": "TestPass1"}
    reg = await client.post("/api/v1/auth/register", json=user)
    assert reg.status_code == 201
    resp = await client.post(
        "/api/v1/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    token = resp.json()["data"]["access_token"]
    return reg.json()["data"]["user_id"], {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup():  # type: ignore[no-untyped-def]
    return _register_and_login
