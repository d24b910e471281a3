"""Structured logging configuration with JSON output and context injection."""

import contextvars
import logging
import logging.config

import structlog

# Context var for request ID (thread-safe for async)
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)

PHONE_KEYS = ("phone_number", "end_user_id")


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set request ID for current context."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def mask_phone(number: str | None) -> str | None:
    """Keep the country prefix and last three digits: +2547*****678."""
    if not number:
        return number
    if len(number) < 8:
        return "*" * len(number)
    return number[:5] + "*" * (len(number) - 8) + number[-3:]


def mask_phone_numbers(logger, method_name: str, event_dict: dict) -> dict:
    """structlog processor: farmers' phone numbers never reach the log stream in full."""
    for key in PHONE_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_phone(value)
    return event_dict


def bind_ussd_context(session_id: str, phone_number: str) -> None:
    """Tag every following log line of this dialogue step with the USSD session and caller."""
    structlog.contextvars.bind_contextvars(ussd_session_id=session_id, end_user_id=phone_number)


def configure_logging() -> None:
    """Configure structlog with JSON output for production."""
    structlog.configure(
        processors=[
            # Inject request ID and USSD session context into every log
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            mask_phone_numbers,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, asyncio) through structlog's formatter
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.dev.ConsoleRenderer(),
                },
            },
            "handlers": {
                "default": {
                    "level": "DEBUG",
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": "INFO",
                    "propagate": True,
                }
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger bound to the module name."""
    return structlog.get_logger(name).bind(logger=name)
