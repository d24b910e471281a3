# File: src/farmreg/main.py
"""FastAPI application factory for the farmer USSD service."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from farmreg.core.config import Settings, get_settings
from farmreg.core.dispatcher import UssdDispatcher
from farmreg.core.logging import configure_logging, get_logger
from farmreg.core.registry import InMemoryRegistry, RegistrationRegistry
from farmreg.core.session_store import SessionStore
from farmreg.core.stage_engine import StageEngine
from farmreg.core.sweeper import ExpirySweeper

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="Farmer USSD service starting up", timestamp=start_time.isoformat())

    from farmreg.api.health import set_app_start_time

    set_app_start_time(start_time)
    app.state.sweeper.start()

    yield

    await app.state.sweeper.stop()
    logger.info(
        "app.shutdown",
        message="Shutting down gracefully",
        registered_farmers=await app.state.registry.count(),
        active_sessions=app.state.session_store.count(),
    )


def _setup_state(app: FastAPI, settings: Settings, registry: RegistrationRegistry | None) -> None:
    """Wire the store, registry, engine, dispatcher and sweeper onto app.state."""
    store = SessionStore()
    registry = registry if registry is not None else InMemoryRegistry()
    engine = StageEngine(registry, timezone=settings.app_timezone)

    app.state.settings = settings
    app.state.session_store = store
    app.state.registry = registry
    app.state.engine = engine
    app.state.dispatcher = UssdDispatcher(
        store, engine, deadline_seconds=settings.response_deadline_seconds
    )
    app.state.sweeper = ExpirySweeper(
        store,
        timeout_seconds=settings.session_timeout_seconds,
        interval_seconds=settings.sweep_interval_seconds,
    )


def _setup_middleware(app: FastAPI) -> None:
    from farmreg.middleware.logging import RequestIDMiddleware

    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from farmreg.api.admin import router as admin_router
    from farmreg.api.health import router as health_router
    from farmreg.api.root import router as root_router
    from farmreg.api.ussd import router as ussd_router

    app.include_router(root_router)
    app.include_router(health_router)
    app.include_router(ussd_router)
    app.include_router(admin_router)


def create_app(
    settings: Settings | None = None,
    registry: RegistrationRegistry | None = None,
) -> FastAPI:
    """Application factory for the farmer USSD service."""
    settings = settings or get_settings()

    from farmreg.core.sentry import init_sentry

    init_sentry(settings)

    app = FastAPI(
        title="Farmer USSD Registration API",
        description="USSD farmer registration dialogue",
        version="0.1.0",
        lifespan=lifespan,
    )

    from farmreg.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)

    _setup_state(app, settings, registry)
    _setup_middleware(app)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Server entrypoint."""
    settings = get_settings()
    logger.info("app.listening", port=settings.port, ussd_endpoint=f"http://localhost:{settings.port}/ussd")
    uvicorn.run(
        "farmreg.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
    )


if __name__ == "__main__":
    run()
