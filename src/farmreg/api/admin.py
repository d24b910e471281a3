"""Operator debug views of live sessions and registered farmers."""

from fastapi import APIRouter, Depends

from farmreg.api.deps import get_registry, get_session_store
from farmreg.core.registry import RegistrationRegistry
from farmreg.core.session_store import SessionStore
from farmreg.models.schemas import FarmerListResponse, SessionListResponse, SessionSummary
from farmreg.utils.datetime import elapsed_ms, now_utc

router = APIRouter(tags=["admin"])


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """Live dialogue sessions, least recently active first."""
    now = now_utc()
    sessions = [
        SessionSummary(
            session_id=session.session_id,
            end_user_id=session.end_user_id,
            stage=session.stage,
            last_activity_at=session.last_activity_at,
            age_ms=elapsed_ms(session.created_at, now),
            pending_data=session.pending_data,
        )
        for session in store.snapshot()
    ]
    return SessionListResponse(active_sessions=len(sessions), sessions=sessions)


@router.get("/farmers", response_model=FarmerListResponse)
async def list_farmers(registry: RegistrationRegistry = Depends(get_registry)):
    """All registrations keyed by phone number."""
    farmers = await registry.all()
    return FarmerListResponse(count=len(farmers), farmers=farmers)
