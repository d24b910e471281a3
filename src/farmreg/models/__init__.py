"""Domain models package."""

from farmreg.models.directive import Directive
from farmreg.models.enums import DirectiveKind, Stage
from farmreg.models.registration import RegistrationRecord
from farmreg.models.schemas import (
    FarmerListResponse,
    HealthResponse,
    SessionListResponse,
    SessionSummary,
    UssdRequest,
)
from farmreg.models.session import PendingRegistration, UssdSession

__all__ = [
    "Directive",
    "DirectiveKind",
    "FarmerListResponse",
    "HealthResponse",
    "PendingRegistration",
    "RegistrationRecord",
    "SessionListResponse",
    "SessionSummary",
    "Stage",
    "UssdRequest",
    "UssdSession",
]
