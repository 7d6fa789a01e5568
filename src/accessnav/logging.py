"""Logging utilities for accessnav.

This module provides:
- Logging configuration from NavigatorConfig
- Safe, length-bounded previews of caller-supplied values
- A formatter that carries access-decision context (path, outcome, user_id)
- A logger adapter that binds that context once per principal/session
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import LogLevel, NavigatorConfig

# Extra record attributes promoted into the formatted output
CONTEXT_FIELDS = ("user_id", "path", "outcome", "node_id")

_STANDARD_RECORD_KEYS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName",
    }
)


def safe_preview(value: Any, limit: int = 120) -> str:
    """Create a safe, length-bounded, single-line preview of a value.

    Grants and node names come from remote snapshots, so anything logged
    from them goes through here first.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 120)

    Returns:
        A truncated, whitespace-normalized string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class AccessNavFormatter(logging.Formatter):
    """Formatter that includes access-decision context.

    Outputs either one JSON object per record or a plain text line with
    ``key=value`` pairs for the context fields that are present.
    """

    def __init__(self, json_format: bool = False, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context: dict[str, str] = {}
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                context[key] = safe_preview(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.json_format:
            log_data.update(context)
            for key, value in record.__dict__.items():
                if key not in _STANDARD_RECORD_KEYS and key not in log_data:
                    log_data[key] = safe_preview(value)
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        parts.extend(f"{key}={value}" for key, value in context.items())
        parts.append(f": {log_data['message']}")
        line = " ".join(parts)
        if "exception" in log_data:
            line = f"{line}\n{log_data['exception']}"
        return line


class AccessNavLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that binds context (e.g. ``user_id``) to every record.

    Per-call keyword arguments named like a context field override the
    bound values:

        logger = get_logger(__name__, user_id="jdoe")
        logger.info("Route resolved", path="/groups", outcome="allow")
    """

    def __init__(self, logger: logging.Logger, **context: Any):
        super().__init__(logger, {})
        self.context = {k: v for k, v in context.items() if v is not None}

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(self.context)
        extra.update(kwargs.get("extra") or {})
        for key in CONTEXT_FIELDS:
            if key in kwargs:
                extra[key] = kwargs.pop(key)
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config: Optional[NavigatorConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger for a console process.

    Args:
        config: NavigatorConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)
    use_json = config.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(AccessNavFormatter(json_format=use_json))
    root_logger.addHandler(console_handler)


def get_logger(name: str, **context: Any) -> AccessNavLoggerAdapter:
    """Get a logger adapter with bound access context.

    Example:
        logger = get_logger(__name__, user_id=principal.user_id)
        logger.info("Drilled into workspace", node_id=node.id)
    """
    return AccessNavLoggerAdapter(logging.getLogger(name), **context)


__all__ = [
    "AccessNavFormatter",
    "AccessNavLoggerAdapter",
    "CONTEXT_FIELDS",
    "get_logger",
    "safe_preview",
    "setup_logging",
]
