"""FastAPI dependencies exposing the per-app dialogue components."""

from fastapi import Request

from farmreg.core.dispatcher import UssdDispatcher
from farmreg.core.registry import RegistrationRegistry
from farmreg.core.session_store import SessionStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_registry(request: Request) -> RegistrationRegistry:
    return request.app.state.registry


def get_dispatcher(request: Request) -> UssdDispatcher:
    return request.app.state.dispatcher
