"""Pytest configuration and fixtures."""
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from worklog.config import settings
from worklog.database import database, ensure_indexes
from worklog.main import app
from worklog.utils.datetime_format import get_clock

# 20-01-2026 12:00 PM at +05:30
FIXED_NOW = datetime(2026, 1, 20, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client with a clean test database.

    This fixture:
    - Creates a test database connection, skipping if MongoDB is unreachable
    - Pins the request clock to FIXED_NOW
    - Yields an async HTTP client for testing
    - Drops the test database after each test
    """
    test_client = AsyncIOMotorClient(
        settings.mongodb_url,
        tz_aware=True,
        serverSelectionTimeoutMS=2000,
    )
    try:
        await test_client.admin.command("ping")
    except PyMongoError:
        test_client.close()
        pytest.skip("MongoDB is not available")

    test_db_name = f"{settings.mongodb_db_name}_test"
    test_db = test_client[test_db_name]
    await test_client.drop_database(test_db_name)
    await ensure_indexes(test_db)

    original_db = database.db
    database.db = test_db
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    await test_client.drop_database(test_db_name)
    database.db = original_db
    test_client.close()


@pytest.fixture
def login_as(app_client):
    """Return a coroutine that registers a user and returns auth headers."""

    async def _login_as(email: str, password: str = "password123", name: str = "Test User") -> dict:
        await app_client.post(
            "/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        response = await app_client.post("/auth/login", json={"email": email, "password": password})
        token = response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login_as
