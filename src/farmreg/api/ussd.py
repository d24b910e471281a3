"""USSD gateway callback endpoint."""

import json

import sentry_sdk
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from farmreg.api.deps import get_dispatcher
from farmreg.core.dispatcher import UssdDispatcher
from farmreg.core.errors import ValidationError
from farmreg.core.logging import get_logger
from farmreg.models.schemas import UssdRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/ussd", tags=["ussd"])


async def parse_ussd_request(request: Request) -> UssdRequest:
    """Read the callback from a form-encoded or JSON body."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            payload = await request.json()
        else:
            payload = dict(await request.form())
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError("Malformed request body", details={"error": type(exc).__name__})

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object")

    try:
        return UssdRequest.model_validate(payload)
    except PydanticValidationError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        raise ValidationError("Invalid USSD request", details={"fields": fields})


@router.post("", response_class=PlainTextResponse)
async def ussd_callback(
    request: Request,
    dispatcher: UssdDispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """
    Main USSD endpoint called by the gateway on every screen.

    Expects sessionId, phoneNumber, serviceCode and text. Responds with
    `CON ...` when more input is expected or `END ...` when the dialogue
    is over.
    """
    ussd_request = await parse_ussd_request(request)
    sentry_sdk.set_tag("ussd_session_id", ussd_request.session_id)

    directive = await dispatcher.handle(ussd_request)
    return PlainTextResponse(directive.render())


@router.get("")
async def ussd_method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={
            "error": "Method Not Allowed",
            "message": "This endpoint only accepts POST requests from the USSD gateway",
            "hint": "Use POST method with sessionId, phoneNumber, and text parameters",
        },
        headers={"Allow": "POST"},
    )
