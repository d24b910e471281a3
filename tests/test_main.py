"""Tests for application wiring and lifespan."""

import pytest

from farmreg.core.dispatcher import UssdDispatcher
from farmreg.core.session_store import SessionStore
from farmreg.core.sweeper import ExpirySweeper
from farmreg.main import create_app
from farmreg.core.config import Settings


class TestCreateApp:
    def test_state_is_wired_from_settings(self):
        settings = Settings(
            environment="test",
            session_timeout_seconds=120,
            sweep_interval_seconds=10,
            response_deadline_seconds=5,
        )

        app = create_app(settings=settings)

        assert isinstance(app.state.session_store, SessionStore)
        assert isinstance(app.state.dispatcher, UssdDispatcher)
        assert app.state.dispatcher.deadline_seconds == 5
        assert isinstance(app.state.sweeper, ExpirySweeper)
        assert app.state.sweeper.timeout.total_seconds() == 120
        assert app.state.sweeper.interval_seconds == 10
        assert app.state.sweeper.store is app.state.session_store

    def test_each_app_gets_its_own_store(self, settings):
        assert create_app(settings=settings).state.session_store is not create_app(
            settings=settings
        ).state.session_store


class TestLifespan:
    @pytest.mark.asyncio
    async def test_sweeper_runs_only_while_app_is_up(self, app):
        async with app.router.lifespan_context(app):
            assert app.state.sweeper.running is True

        assert app.state.sweeper.running is False
