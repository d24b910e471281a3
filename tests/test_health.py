"""Tests for the health check and operator endpoints."""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

from farmreg.api.health import get_uptime_seconds, set_app_start_time
from tests.conftest import TEST_PHONE
from tests.factories import RegistrationFactory, SessionFactory
from farmreg.models.enums import Stage


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_reports_counts(self, client: AsyncClient, app, registry) -> None:
        await registry.put(RegistrationFactory.build(end_user_id="+254700000001"))
        await registry.put(RegistrationFactory.build(end_user_id="+254700000002"))
        app.state.session_store.save(SessionFactory.build())

        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["registered_farmers"] == 2
        assert data["active_sessions"] == 1
        assert data["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_health_endpoint_content_type(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert "application/json" in response.headers["content-type"]

    def test_health_endpoint_uptime_tracking(self) -> None:
        """Test that uptime increases over time."""
        one_hour_ago = datetime.now() - timedelta(hours=1)
        set_app_start_time(one_hour_ago)

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610, f"Expected ~3600 seconds, got {uptime}"


class TestSessionsEndpoint:
    @pytest.mark.asyncio
    async def test_lists_live_sessions(self, client: AsyncClient, dial) -> None:
        await dial("1")
        await dial("1*Jane Wanjiru")

        response = await client.get("/sessions")

        assert response.status_code == 200
        data = response.json()
        assert data["active_sessions"] == 1
        session = data["sessions"][0]
        assert session["session_id"] == "ATUid_test_1"
        assert session["end_user_id"] == TEST_PHONE
        assert session["stage"] == Stage.SELECT_COUNTY.value
        assert session["pending_data"]["name"] == "Jane Wanjiru"
        assert session["pending_data"]["county"] is None
        assert session["age_ms"] >= 0
        assert "last_activity_at" in session

    @pytest.mark.asyncio
    async def test_empty_when_no_sessions(self, client: AsyncClient) -> None:
        response = await client.get("/sessions")

        assert response.json() == {"active_sessions": 0, "sessions": []}


class TestFarmersEndpoint:
    @pytest.mark.asyncio
    async def test_lists_registered_farmers_by_phone(self, client: AsyncClient, registry) -> None:
        await registry.put(RegistrationFactory.build(end_user_id=TEST_PHONE, crop="Coffee"))

        response = await client.get("/farmers")

        data = response.json()
        assert data["count"] == 1
        assert data["farmers"][TEST_PHONE]["crop"] == "Coffee"
        assert data["farmers"][TEST_PHONE]["farm_size"] == 3.5


class TestRootEndpoint:
    @pytest.mark.asyncio
    async def test_describes_service_and_callback_url(self, client: AsyncClient) -> None:
        response = await client.get("/")

        data = response.json()
        assert data["status"] == "running"
        assert data["ussd_callback_url"] == "http://test/ussd"
        assert "POST /ussd" in data["endpoints"]
