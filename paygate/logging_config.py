"""
Structured logging configuration using structlog.

Gateway traffic carries two secrets: the merchant key and the request
signature. Neither may reach a log line, so every event passes through
``redact_secrets`` before rendering.
"""
import logging
import re
import sys
from typing import Any, Dict

import structlog
from structlog.contextvars import bind_contextvars

from .config import settings

# Configure standard library logging
logging.basicConfig(
    format="%(message)s",
    stream=sys.stdout,
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
)

REDACTED = "[redacted]"
SECRET_FIELDS = frozenset({"sign", "key", "tenpay_key", "signature", "canonical_string"})
_SECRET_IN_QUERY = re.compile(r"(?i)\b(sign|key)=[^&\s]*")


def redact_secrets(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Mask secret-named fields and ``sign=``/``key=`` pairs inside string values."""
    for name, value in list(event_dict.items()):
        if name.lower() in SECRET_FIELDS:
            event_dict[name] = REDACTED
        elif isinstance(value, str) and "=" in value:
            event_dict[name] = _SECRET_IN_QUERY.sub(lambda m: f"{m.group(1)}={REDACTED}", value)
    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    """Add application context to log entries."""
    event_dict['app'] = settings.APP_NAME
    event_dict['environment'] = settings.ENVIRONMENT
    return event_dict


def bind_notification_context(provider: str, notify_method: str, order_id: str = None):
    """Tag every log line for the rest of this request with the notification it handles."""
    bind_contextvars(provider=provider, notify_method=notify_method, order_id=order_id or None)


def _renderer():
    if settings.ENVIRONMENT == "development":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging():
    """Configure structlog with processors."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            add_app_context,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Initialize logging
configure_logging()


def get_logger(name: str = __name__):
    """Get a structured logger instance."""
    return structlog.get_logger(name)
