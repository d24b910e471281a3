# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from farmreg.core.config import Settings
from farmreg.core.registry import InMemoryRegistry
from farmreg.core.session_store import SessionStore
from farmreg.core.stage_engine import StageEngine
from farmreg.main import create_app

TEST_PHONE = "+254712345678"


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", sentry_dsn=None)


@pytest.fixture
def registry() -> InMemoryRegistry:
    return InMemoryRegistry()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def engine(registry) -> StageEngine:
    return StageEngine(registry, timezone="Africa/Nairobi")


@pytest.fixture
def app(settings, registry):
    return create_app(settings=settings, registry=registry)


@pytest_asyncio.fixture
async def client(app):
    """Async test client against a fresh app (lifespan not run, so no sweeper)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def dial(client):
    """Send one gateway callback and return the plain-text body."""

    async def _dial(text: str = "", session_id: str = "ATUid_test_1", phone: str = TEST_PHONE) -> str:
        response = await client.post(
            "/ussd",
            data={
                "sessionId": session_id,
                "phoneNumber": phone,
                "serviceCode": "*384*123#",
                "text": text,
            },
        )
        assert response.status_code == 200
        return response.text

    return _dial
