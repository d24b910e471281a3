"""
Registration dialogue state machine.

Each stage has one handler and an explicit input-level guard. A handler
returns a Directive when its rule matches, or None to fall through to the
recovery rules. Terminal directives mean the session must be deleted.

    MAIN_MENU (level 1) -> ENTER_NAME (2) -> SELECT_COUNTY (3)
        -> [ENTER_CUSTOM_COUNTY (4)] -> SELECT_CROP -> [ENTER_CUSTOM_CROP]
        -> ENTER_FARM_SIZE (loops on bad input) -> CONFIRM_REGISTRATION
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from farmreg.core import menus
from farmreg.core.errors import InvalidStateError
from farmreg.core.input_decoder import DecodedInput
from farmreg.core.logging import get_logger
from farmreg.core.registry import RegistrationRegistry
from farmreg.core.validators import parse_farm_size
from farmreg.models.directive import Directive
from farmreg.models.enums import Stage
from farmreg.models.registration import RegistrationRecord
from farmreg.models.session import UssdSession
from farmreg.utils.datetime import now_local

logger = get_logger(__name__)

# Input level a stage's rule requires; None means the rule ignores the level.
STAGE_LEVELS: dict[Stage, Optional[int]] = {
    Stage.MAIN_MENU: 1,
    Stage.ENTER_NAME: 2,
    Stage.SELECT_COUNTY: 3,
    Stage.ENTER_CUSTOM_COUNTY: 4,
    Stage.SELECT_CROP: None,
    Stage.ENTER_CUSTOM_CROP: None,
    Stage.ENTER_FARM_SIZE: None,
    Stage.CONFIRM_REGISTRATION: None,
}

# Fields that must already be collected while a session sits in a stage.
REQUIRED_FIELDS: dict[Stage, tuple[str, ...]] = {
    Stage.MAIN_MENU: (),
    Stage.ENTER_NAME: (),
    Stage.SELECT_COUNTY: ("name",),
    Stage.ENTER_CUSTOM_COUNTY: ("name",),
    Stage.SELECT_CROP: ("name", "county"),
    Stage.ENTER_CUSTOM_CROP: ("name", "county"),
    Stage.ENTER_FARM_SIZE: ("name", "county", "crop"),
    Stage.CONFIRM_REGISTRATION: ("name", "county", "crop", "farm_size"),
}

MAIN_MENU_OPTIONS = ("1", "2", "3")

Handler = Callable[[UssdSession, DecodedInput], Awaitable[Optional[Directive]]]


@dataclass
class EngineResult:
    """Directive for the gateway plus the session to persist (None = delete it)."""

    directive: Directive
    session: Optional[UssdSession]

    @property
    def ends_session(self) -> bool:
        return self.session is None


class StageEngine:
    """Advances one session by one request."""

    def __init__(self, registry: RegistrationRegistry, timezone: str | None = None):
        self.registry = registry
        self.timezone = timezone
        self._handlers: dict[Stage, Handler] = {
            Stage.MAIN_MENU: self._main_menu,
            Stage.ENTER_NAME: self._enter_name,
            Stage.SELECT_COUNTY: self._select_county,
            Stage.ENTER_CUSTOM_COUNTY: self._enter_custom_county,
            Stage.SELECT_CROP: self._select_crop,
            Stage.ENTER_CUSTOM_CROP: self._enter_custom_crop,
            Stage.ENTER_FARM_SIZE: self._enter_farm_size,
            Stage.CONFIRM_REGISTRATION: self._confirm_registration,
        }

    async def advance(self, session: UssdSession, decoded: DecodedInput, text: str) -> EngineResult:
        """Apply one request to `session` (mutated in place) and return the outcome."""
        try:
            directive = await self._dispatch(session, decoded, text)
            if not directive.is_terminal:
                self._check_invariants(session)
            if not directive.message.strip():
                raise InvalidStateError(
                    "Stage engine produced an empty message",
                    details={"stage": session.stage.value},
                )
        except InvalidStateError as exc:
            logger.error(
                "engine.invariant_violation",
                session_id=session.session_id,
                stage=session.stage.value,
                input_level=decoded.level,
                text=text,
                error=exc.message,
                details=exc.details,
            )
            return EngineResult(directive=Directive.end(menus.SYSTEM_ERROR), session=None)

        if directive.is_terminal:
            return EngineResult(directive=directive, session=None)
        return EngineResult(directive=directive, session=session)

    async def _dispatch(self, session: UssdSession, decoded: DecodedInput, text: str) -> Directive:
        if text == "":
            session.reset()
            return Directive.cont(menus.main_menu())

        directive = None
        if self._level_matches(session.stage, decoded.level):
            directive = await self._handlers[session.stage](session, decoded)
        if directive is not None:
            return directive
        return await self._recover(session, decoded, text)

    @staticmethod
    def _level_matches(stage: Stage, level: int) -> bool:
        required = STAGE_LEVELS[stage]
        return level >= 1 and (required is None or level == required)

    async def _recover(self, session: UssdSession, decoded: DecodedInput, text: str) -> Directive:
        """Rules for requests no stage rule accepted."""
        logger.warning(
            "engine.unexpected_state",
            session_id=session.session_id,
            stage=session.stage.value,
            input_level=decoded.level,
            text=text,
        )
        if decoded.level == 1 and decoded.latest in MAIN_MENU_OPTIONS:
            # Looks like a main menu selection: restart there and apply it
            session.reset()
            return await self._main_menu(session, decoded)
        if decoded.level == 0 or text == "":
            session.reset()
            return Directive.cont(menus.main_menu())
        return Directive.end(menus.GENERIC_ERROR)

    def _check_invariants(self, session: UssdSession) -> None:
        missing = session.pending_data.missing_fields(REQUIRED_FIELDS[session.stage])
        if missing:
            raise InvalidStateError(
                f"Session reached {session.stage.value} with missing fields",
                details={"stage": session.stage.value, "missing": missing},
            )

    # Stage handlers

    async def _main_menu(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        choice = decoded.latest
        if choice == "1":
            session.stage = Stage.ENTER_NAME
            return Directive.cont(menus.NAME_PROMPT)
        if choice == "2":
            record = await self.registry.get(session.end_user_id)
            if record is None:
                return Directive.end(menus.NOT_REGISTERED)
            return Directive.end(menus.registration_details(record))
        if choice == "3":
            return Directive.end(menus.GOODBYE)
        return Directive.end(menus.INVALID_OPTION)

    async def _enter_name(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        session.pending_data.name = decoded.latest
        session.stage = Stage.SELECT_COUNTY
        return Directive.cont(menus.county_menu())

    async def _select_county(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        choice = decoded.latest
        if choice == menus.OTHER_COUNTY:
            session.stage = Stage.ENTER_CUSTOM_COUNTY
            return Directive.cont(menus.CUSTOM_COUNTY_PROMPT)
        if choice in menus.COUNTIES:
            session.pending_data.county = menus.COUNTIES[choice]
            session.stage = Stage.SELECT_CROP
            return Directive.cont(menus.crop_menu())
        return Directive.end(menus.INVALID_SELECTION)

    async def _enter_custom_county(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        session.pending_data.county = decoded.latest
        session.stage = Stage.SELECT_CROP
        return Directive.cont(menus.crop_menu())

    async def _select_crop(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        choice = decoded.latest
        if choice == menus.OTHER_CROP:
            session.stage = Stage.ENTER_CUSTOM_CROP
            return Directive.cont(menus.CUSTOM_CROP_PROMPT)
        if choice in menus.CROPS:
            session.pending_data.crop = menus.CROPS[choice]
            session.stage = Stage.ENTER_FARM_SIZE
            return Directive.cont(menus.FARM_SIZE_PROMPT)
        return Directive.end(menus.INVALID_SELECTION)

    async def _enter_custom_crop(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        session.pending_data.crop = decoded.latest
        session.stage = Stage.ENTER_FARM_SIZE
        return Directive.cont(menus.FARM_SIZE_PROMPT)

    async def _enter_farm_size(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        try:
            farm_size = parse_farm_size(decoded.latest)
        except ValueError as exc:
            logger.info("engine.farm_size_rejected", session_id=session.session_id, reason=str(exc))
            return Directive.cont(menus.FARM_SIZE_RETRY)

        session.pending_data.farm_size = farm_size
        session.stage = Stage.CONFIRM_REGISTRATION
        return Directive.cont(menus.confirmation(session.pending_data))

    async def _confirm_registration(self, session: UssdSession, decoded: DecodedInput) -> Directive:
        choice = decoded.latest
        if choice == "1":
            self._check_invariants(session)
            data = session.pending_data
            record = RegistrationRecord(
                end_user_id=session.end_user_id,
                name=data.name,
                county=data.county,
                crop=data.crop,
                farm_size=data.farm_size,
                registered_at=now_local(self.timezone),
            )
            await self.registry.put(record)
            logger.info(
                "registration.completed",
                session_id=session.session_id,
                end_user_id=session.end_user_id,
                name=record.name,
            )
            return Directive.end(menus.registration_success(record.name))
        if choice == "2":
            return Directive.end(menus.REGISTRATION_CANCELLED)
        return Directive.end(menus.INVALID_CONFIRMATION)
