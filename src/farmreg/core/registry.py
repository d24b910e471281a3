"""Registry of completed farmer registrations."""

import asyncio
from typing import Protocol

from farmreg.core.logging import get_logger
from farmreg.models.registration import RegistrationRecord

logger = get_logger(__name__)


class RegistrationRegistry(Protocol):
    """Key-value contract the dialogue needs: read by phone, overwrite on save."""

    async def get(self, end_user_id: str) -> RegistrationRecord | None: ...

    async def put(self, record: RegistrationRecord) -> None: ...

    async def count(self) -> int: ...

    async def all(self) -> dict[str, RegistrationRecord]: ...


class InMemoryRegistry:
    """Process-local registry. Contents are lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, RegistrationRecord] = {}
        self._lock = asyncio.Lock()

    async def get(self, end_user_id: str) -> RegistrationRecord | None:
        record = self._records.get(end_user_id)
        return record.model_copy() if record else None

    async def put(self, record: RegistrationRecord) -> None:
        """Store `record`, replacing any earlier registration for the same phone."""
        async with self._lock:
            replaced = record.end_user_id in self._records
            self._records[record.end_user_id] = record.model_copy()
        logger.info(
            "registry.saved",
            end_user_id=record.end_user_id,
            county=record.county,
            crop=record.crop,
            farm_size=record.farm_size,
            replaced=replaced,
        )

    async def count(self) -> int:
        return len(self._records)

    async def all(self) -> dict[str, RegistrationRecord]:
        return {key: record.model_copy() for key, record in self._records.items()}
