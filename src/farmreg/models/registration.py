"""Completed farmer registration record."""

from datetime import datetime

from pydantic import BaseModel, Field

from farmreg.utils.datetime import format_local_timestamp


class RegistrationRecord(BaseModel):
    """A registered farmer, keyed by phone number in the registry."""

    end_user_id: str
    name: str = Field(..., min_length=1)
    county: str = Field(..., min_length=1)
    crop: str = Field(..., min_length=1)
    farm_size: float = Field(..., gt=0)
    registered_at: datetime

    @property
    def registered_at_display(self) -> str:
        return format_local_timestamp(self.registered_at)
