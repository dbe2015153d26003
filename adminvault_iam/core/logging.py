"""
Logging for the IAM client

Every module logs through ``get_logger(__name__)`` so events carry an
``adminvault_iam.*`` logger name. Applications that do not configure
structlog themselves can call ``configure_logging`` to route the client's
events to a stream; credentials bound to an event are masked before
rendering.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog

from adminvault_iam.core.config import Settings, get_settings

LOGGER_NAMESPACE = "adminvault_iam"
REDACTED = "***"
SECRET_KEYS = frozenset({
    "api_key",
    "apikey",
    "authorization",
    "token",
    "access_token",
    "password",
    "secret",
})


def redact_secrets(logger, method_name, event_dict):
    """structlog processor masking credential-bearing keys"""
    for key in event_dict:
        if key.lower() in SECRET_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(settings: Optional[Settings] = None, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Route ``adminvault_iam`` events to ``stream`` (stdout by default)

    Only the client's logger namespace gets a handler; the root logger is
    left to the embedding application. Returns the installed handler.
    """
    settings = settings or get_settings()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    namespace.addHandler(handler)
    namespace.setLevel(getattr(logging, settings.LOG_LEVEL))
    namespace.propagate = False

    if settings.ENVIRONMENT == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers are created at import, before configuration
        cache_logger_on_first_use=False,
    )
    return handler


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name or LOGGER_NAMESPACE)
