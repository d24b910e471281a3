"""Request dispatch: decode, load session, run the stage engine, commit."""

import asyncio

from farmreg.core import menus
from farmreg.core.input_decoder import decode
from farmreg.core.logging import bind_ussd_context, get_logger
from farmreg.core.session_store import SessionStore
from farmreg.core.stage_engine import StageEngine
from farmreg.models.directive import Directive
from farmreg.models.schemas import UssdRequest
from farmreg.utils.datetime import elapsed_ms

logger = get_logger(__name__)


class UssdDispatcher:
    """Turns one gateway callback into exactly one Directive."""

    def __init__(self, store: SessionStore, engine: StageEngine, deadline_seconds: float = 25):
        self.store = store
        self.engine = engine
        self.deadline_seconds = deadline_seconds

    async def handle(self, request: UssdRequest) -> Directive:
        """
        Process a callback within the response deadline.

        On timeout the caller gets a terminal timeout message, but the stage
        computation is shielded and runs to completion so the session is
        never left half-updated. Its outcome is still committed: the session
        is saved at the stage it advanced to (or deleted on a terminal
        outcome) even though the gateway was told the dialogue ended, and a
        registration confirmed in that round trip is kept. A failure after
        the deadline has nobody to propagate to, so it is logged instead.
        """
        work = asyncio.ensure_future(self._process(request))
        try:
            return await asyncio.wait_for(asyncio.shield(work), timeout=self.deadline_seconds)
        except asyncio.TimeoutError:
            work.add_done_callback(_log_background_failure)
            logger.error(
                "ussd.response_timeout",
                session_id=request.session_id,
                deadline_seconds=self.deadline_seconds,
            )
            return Directive.end(menus.REQUEST_TIMEOUT)

    async def _process(self, request: UssdRequest) -> Directive:
        bind_ussd_context(request.session_id, request.phone_number)
        decoded = decode(request.text)
        logger.info(
            "ussd.request",
            session_id=request.session_id,
            phone_number=request.phone_number,
            text=request.text,
            input_level=decoded.level,
        )

        async with self.store.lock(request.session_id):
            session = self.store.get_or_create(request.session_id, request.phone_number)
            try:
                result = await self.engine.advance(session, decoded, request.text)
            except Exception as exc:
                logger.error(
                    "ussd.processing_failed",
                    session_id=request.session_id,
                    stage=session.stage.value,
                    error=str(exc),
                    exc_info=True,
                )
                self._cleanup(request.session_id)
                return Directive.end(menus.SYSTEM_ERROR)

            if result.ends_session:
                self._cleanup(request.session_id)
                logger.info(
                    "session.completed",
                    session_id=request.session_id,
                    duration_ms=elapsed_ms(session.created_at),
                )
            else:
                self.store.save(result.session)

        logger.info(
            "ussd.response",
            session_id=request.session_id,
            response=result.directive.render(),
        )
        return result.directive

    def _cleanup(self, session_id: str) -> None:
        if self.store.delete(session_id):
            logger.info("session.cleanup", session_id=session_id)


def _log_background_failure(task: asyncio.Future) -> None:
    """Retrieve and log an exception from a dispatch nobody is awaiting any more."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "ussd.background_failed",
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
