"""Sentry error tracking configuration and initialization."""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from farmreg.core.config import Settings
from farmreg.core.logging import get_logger

logger = get_logger(__name__)

# Keys whose values identify the farmer or echo what they typed
SENSITIVE_KEYS = ("phonenumber", "phone_number", "end_user_id", "text")
REDACTED = "[redacted]"

_sentry_initialized = False


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if a DSN is configured and looks valid, so local
    development and tests run without Sentry. Safe to call repeatedly.

    Configuration:
    - Disables performance monitoring
    - Logging integration disabled to avoid duplication with structlog
    - Phone numbers and USSD input are scrubbed before sending
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    dsn = (settings.sentry_dsn or "").strip()
    if not dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return False

    if not dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be invalid or placeholder, error tracking disabled",
            dsn_preview=dsn[:20] + "..." if len(dsn) > 20 else dsn,
        )
        return False

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=settings.environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=_filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=settings.environment)
    return True


def _scrub(value):
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _scrub(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_scrub(item) for item in value]
    return value


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Redact phone numbers and USSD input from request data, extras and breadcrumbs."""
    request = event.get("request")
    if isinstance(request, dict) and "data" in request:
        request["data"] = _scrub(request["data"])

    if isinstance(event.get("extra"), dict):
        event["extra"] = _scrub(event["extra"])

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict) and isinstance(breadcrumbs.get("values"), list):
        breadcrumbs["values"] = [_scrub(b) for b in breadcrumbs["values"]]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [_scrub(b) for b in breadcrumbs]

    return event
