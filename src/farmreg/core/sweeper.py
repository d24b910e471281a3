"""Background task that expires idle USSD sessions."""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

from farmreg.core.logging import get_logger
from farmreg.core.session_store import SessionStore
from farmreg.utils.datetime import now_utc

logger = get_logger(__name__)


class ExpirySweeper:
    """Periodically deletes sessions idle for longer than the timeout."""

    def __init__(
        self,
        store: SessionStore,
        timeout_seconds: float = 5 * 60,
        interval_seconds: float = 60,
    ):
        self.store = store
        self.timeout = timedelta(seconds=timeout_seconds)
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            logger.warning("sweeper.already_running")
            return
        self._task = asyncio.create_task(self._run(), name="session-expiry-sweeper")
        logger.info(
            "sweeper.started",
            timeout_seconds=self.timeout.total_seconds(),
            interval_seconds=self.interval_seconds,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("sweeper.stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sweep_once()
            except Exception as exc:
                logger.error("sweeper.error", error=str(exc), exc_info=True)

    def sweep_once(self, now: Optional[datetime] = None) -> list[str]:
        """
        Delete every session idle longer than the timeout.

        Works from a snapshot, then re-checks each candidate against the live
        record so a session touched mid-sweep survives. Returns deleted ids.
        """
        now = now or now_utc()
        cutoff = now - self.timeout
        expired = []
        for session in self.store.snapshot():
            if session.last_activity_at >= cutoff:
                continue
            if self.store.delete_if_idle(session.session_id, cutoff):
                expired.append(session.session_id)
                logger.info(
                    "session.expired",
                    session_id=session.session_id,
                    stage=session.stage.value,
                    idle_seconds=int((now - session.last_activity_at).total_seconds()),
                )
        return expired
