"""Pydantic schemas for the USSD callback and the operator endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from farmreg.models.enums import Stage
from farmreg.models.registration import RegistrationRecord
from farmreg.models.session import PendingRegistration


class UssdRequest(BaseModel):
    """Inbound gateway callback. Field names follow the gateway's wire format."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId", min_length=1)
    phone_number: str = Field("", alias="phoneNumber")
    service_code: str | None = Field(None, alias="serviceCode")
    text: str = ""


class SessionSummary(BaseModel):
    """Introspection view of one live session."""

    session_id: str
    end_user_id: str
    stage: Stage
    last_activity_at: datetime
    age_ms: int
    pending_data: PendingRegistration


class SessionListResponse(BaseModel):
    active_sessions: int
    sessions: list[SessionSummary]


class FarmerListResponse(BaseModel):
    count: int
    farmers: dict[str, RegistrationRecord]


class HealthResponse(BaseModel):
    status: str = "running"
    uptime_seconds: int
    registered_farmers: int
    active_sessions: int
