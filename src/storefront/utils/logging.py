"""Logging configuration for the storefront.

Standard library handlers carry the output; structlog renders it.  Email
addresses bound to a log event are masked before rendering.  Checkout code
binds ``checkout_id`` and ``customer_id`` with ``add_context`` so every
line written while a checkout runs can be traced back to it.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_MASKED_KEYS = ("email", "recipient", "customer_email")
_QUIET_LOGGERS = ("stripe", "urllib3", "asyncio", "httpx")
_MAX_LOG_BYTES = 5 * 1024 * 1024

_LEVELS = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO"))


def mask_email(email: str) -> str:
    """Keep the first and last character of the local part: ``j***n@example.com``."""
    if not isinstance(email, str) or "@" not in email:
        return email
    local, _, domain = email.partition("@")
    if len(local) <= 2:
        return f"{local[:1]}***@{domain}"
    return f"{local[0]}***{local[-1]}@{domain}"


def mask_emails(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """structlog processor masking email-like values under well known keys."""
    for key in _MASKED_KEYS:
        if key in event_dict:
            event_dict[key] = mask_email(event_dict[key])
    return event_dict


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_LOG_BYTES, backupCount=3, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _handlers(level: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating(path / "storefront.log", level))
        # Failures after a charge land here; reconciliation starts from this file
        handlers.append(_rotating(path / "storefront_error.log", logging.ERROR))
    return handlers


def _renderer(environment: str):
    if environment in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def configure_logging() -> None:
    """Route stdlib logging to stdout (and ``LOG_DIR`` when set) and configure structlog."""
    level = get_log_level()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_emails,
            _renderer(_environment()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context(*keys: str) -> None:
    """Unbind ``keys``, or everything when called without arguments."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
