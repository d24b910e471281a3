# File: src/farmreg/models/session.py
"""In-memory USSD session model."""

from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from farmreg.models.enums import Stage
from farmreg.utils.datetime import now_utc


class PendingRegistration(BaseModel):
    """Registration data collected so far. Filled stage by stage."""

    name: str | None = None
    county: str | None = None
    crop: str | None = None
    farm_size: float | None = Field(None, gt=0)

    def missing_fields(self, required: Iterable[str] | None = None) -> list[str]:
        """Names among `required` (default: every field) that are still unset."""
        names = required if required is not None else type(self).model_fields
        return [name for name in names if getattr(self, name) is None]


class UssdSession(BaseModel):
    """One live dialogue, keyed by the gateway's session id."""

    model_config = ConfigDict(validate_assignment=True)

    session_id: str
    end_user_id: str = Field(..., frozen=True)
    stage: Stage = Stage.MAIN_MENU
    pending_data: PendingRegistration = Field(default_factory=PendingRegistration)
    created_at: datetime = Field(default_factory=now_utc)
    last_activity_at: datetime = Field(default_factory=now_utc)

    def touch(self, now: datetime | None = None) -> None:
        """Record activity on this session."""
        self.last_activity_at = now or now_utc()

    def reset(self) -> None:
        """Back to the main menu with nothing collected."""
        self.stage = Stage.MAIN_MENU
        self.pending_data = PendingRegistration()
