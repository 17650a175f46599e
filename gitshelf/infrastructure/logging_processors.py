"""Custom structlog processors"""

import socket
import sys
import traceback
from typing import Any, Dict

from structlog.contextvars import get_contextvars
from structlog.types import EventDict, WrappedLogger

SENSITIVE_KEYS = {
    "password", "token", "secret", "api_key", "authorization",
    "access_token", "bearer",
}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level context to logs"""
    event_dict["service"] = "gitshelf"

    try:
        event_dict["hostname"] = socket.gethostname()
    except OSError:
        pass

    return event_dict


def add_operation_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy the catalog entry being worked on from contextvars"""
    context = get_contextvars()

    for key in ("operation", "entry", "repo", "branch"):
        if key in context:
            event_dict.setdefault(key, context[key])

    return event_dict


def sanitize_sensitive_data(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Remove or mask sensitive data from logs"""

    def sanitize_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = {}
        for key, value in d.items():
            lower_key = key.lower()

            if any(sensitive in lower_key for sensitive in SENSITIVE_KEYS):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
            elif isinstance(value, list):
                sanitized[key] = [
                    sanitize_dict(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                sanitized[key] = value

        return sanitized

    return sanitize_dict(event_dict)


def format_exception_info(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Format exception information for better readability"""
    exc_info = event_dict.pop("exc_info", None)
    if exc_info:
        if isinstance(exc_info, tuple):
            exc_type, exc_value, exc_tb = exc_info
        elif isinstance(exc_info, BaseException):
            exc_type, exc_value, exc_tb = type(exc_info), exc_info, exc_info.__traceback__
        else:
            exc_type, exc_value, exc_tb = sys.exc_info()

        if exc_type:
            event_dict["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

    return event_dict
