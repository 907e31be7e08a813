from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from task_tracker.database import Base, get_db, make_session_factory
from task_tracker.dependencies import get_token_service
from task_tracker.main import app
from task_tracker.utils.security import TokenService

TEST_SECRET = "test-secret-not-for-production"


def future(days: int = 1) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def past(days: int = 1) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


@pytest.fixture()
async def engine(tmp_path):
    """A fresh SQLite database per test; the API code only sees AsyncSession."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, expire_minutes=5)


@pytest.fixture()
async def client(session_factory, token_service):
    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_service] = lambda: token_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def signup(client: AsyncClient, email: str, name: str = "Test User", password: str = "s3cret-pass") -> dict:
    """Register and log in, returning request headers carrying the bearer token."""
    response = await client.post(
        "/auth/register", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
async def alice(client) -> dict:
    return await signup(client, "alice@example.com", name="Alice")


@pytest.fixture()
async def bob(client) -> dict:
    return await signup(client, "bob@example.com", name="Bob")


async def make_task(client: AsyncClient, headers: dict, subject: str = "Write report", status: str = "pending") -> dict:
    response = await client.post(
        "/tasks", json={"subject": subject, "deadline": future(), "status": status}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()
