"""
Logging utilities for the Graph HTTP service layer.

This module provides:
- A structured logger accessor
- Redaction of access tokens in log records
- Root logger configuration used by applications embedding the library
"""

import logging
import re
from typing import Any

import structlog

from graph_http.core.config.app_config import AppConfig

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d %(message)s"

# Fields masked by redact_dict
DEFAULT_REDACTED_FIELDS = {
    "access_token",
    "client_secret",
    "password",
    "secret",
    "authorization",
}

# access_token=<value> inside query strings and urlencoded bodies
ACCESS_TOKEN_PATTERN = re.compile(r"(access_token=)([^&\s'\"]+)")
BEARER_TOKEN_PATTERN = re.compile(r"Bearer\s+([a-zA-Z0-9._~+/-]+=*)")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Optional logger name

    Returns:
        A structured logger
    """
    return structlog.get_logger(name)  # type: ignore


def redact(value: str, mask: str = "***") -> str:
    """Redact a sensitive value, keeping two characters on each side."""
    if not value:
        return value

    if len(value) > 6:
        return f"{value[0:2]}{mask}{value[-2:]}"
    return mask


def redact_dict(
    data: dict[str, Any], redacted_fields: set[str] | None = None, mask: str = "***"
) -> dict[str, Any]:
    """Redact sensitive fields in a parameter dictionary.

    Args:
        data: The dictionary to redact
        redacted_fields: The fields to redact
        mask: The mask to use

    Returns:
        A redacted copy of ``data``
    """
    if redacted_fields is None:
        redacted_fields = DEFAULT_REDACTED_FIELDS

    result: dict[str, Any] = {}
    for key, value in (data or {}).items():
        if str(key).lower() in redacted_fields:
            result[key] = redact(value, mask) if isinstance(value, str) else mask
        elif isinstance(value, dict):
            result[key] = redact_dict(value, redacted_fields, mask)
        else:
            result[key] = value
    return result


def redact_text(text: str, mask: str = "***") -> str:
    """Mask access tokens and bearer tokens inside free text."""
    if not text:
        return text
    text = ACCESS_TOKEN_PATTERN.sub(rf"\g<1>{mask}", text)
    return BEARER_TOKEN_PATTERN.sub(f"Bearer {mask}", text)


class AccessTokenRedactionFilter(logging.Filter):
    """Logging filter that masks access tokens in log records.

    Sanitizes ``record.msg`` and ``record.args`` (strings, dicts and tuples)
    so URLs and parameter maps can be logged without leaking credentials.
    """

    def __init__(self, mask: str = "***") -> None:
        super().__init__()
        self.mask = mask

    def _sanitize(self, obj: object) -> object:
        if isinstance(obj, str):
            return redact_text(obj, self.mask)
        if isinstance(obj, dict):
            return redact_dict(obj, mask=self.mask)
        if isinstance(obj, list | tuple):
            return type(obj)(self._sanitize(v) for v in obj)
        return obj

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.args:
            if isinstance(record.args, dict):
                record.args = self._sanitize(record.args)  # type: ignore[assignment]
            elif isinstance(record.args, tuple):
                record.args = tuple(self._sanitize(a) for a in record.args)

        # Render first so a template like "access_token=%s" keeps its arguments
        record.msg = redact_text(record.getMessage(), self.mask)
        record.args = None
        return True


def install_access_token_redaction_filter(mask: str = "***") -> None:
    """Install the access token redaction filter on the root logger and its handlers."""
    root = logging.getLogger()
    filter_instance = AccessTokenRedactionFilter(mask=mask)
    root.addFilter(filter_instance)

    # Records propagated from child loggers skip root filters, so handlers need it too
    for handler in list(root.handlers):
        handler.addFilter(filter_instance)


def configure_logging(
    level: int | str = logging.INFO,
    log_format: str | None = None,
    log_file: str | None = None,
    redact_access_tokens: bool = True,
) -> None:
    """Configure root logging, masking access tokens by default.

    Args:
        level: Logging level (number or name)
        log_format: Optional log format string
        log_file: Optional log file path
        redact_access_tokens: Install the access token redaction filter
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(fmt=log_format or DEFAULT_LOG_FORMAT)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if redact_access_tokens:
        install_access_token_redaction_filter()


def configure_logging_from_config(config: AppConfig) -> None:
    """Apply the ``logging`` section of an AppConfig."""
    configure_logging(
        level=config.logging.level.value,
        log_file=config.logging.log_file,
        redact_access_tokens=config.logging.redact_access_tokens,
    )
