"""Configuration for the access navigation engine.

Pydantic-validated settings shared by the web console and the terminal
client: log output, the console's page size and the workspace kinds that
the hierarchy treats specially.

Direct os.environ/os.getenv usage is allowed only inside
:func:`load_config_from_env`; everything else receives a
:class:`NavigatorConfig` instance.
"""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

ENV_PREFIX = "ACCESSNAV_"

_TRUTHY = ("true", "1", "yes", "on")


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class NavigatorConfig(BaseModel):
    """Settings for route resolution and hierarchy browsing."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Hierarchy browsing
    page_size: int = Field(
        default=12,
        description="Rows per page in hierarchy listings",
    )
    root_kind: str = Field(
        default="root",
        description="Node kind that marks the hierarchy root",
    )
    default_kind: str = Field(
        default="default",
        description="Node kind listed ahead of its siblings",
    )

    # Access decisions
    org_admin_bypass: bool = Field(
        default=True,
        description="Org admins are allowed on every declared route",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("page_size must be at least 1")
        return v

    @field_validator("root_kind", "default_kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("node kind must be a non-empty string")
        return v.strip()

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> NavigatorConfig:
    """Load configuration from environment variables.

    Environment variables:
    - ACCESSNAV_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - ACCESSNAV_LOG_JSON: Use JSON log format (true/false)
    - ACCESSNAV_PAGE_SIZE: Rows per page (integer >= 1)
    - ACCESSNAV_ROOT_KIND: Kind marking the hierarchy root
    - ACCESSNAV_DEFAULT_KIND: Kind sorted ahead of siblings
    - ACCESSNAV_ORG_ADMIN_BYPASS: Org admins allowed everywhere (true/false)

    Raises:
        ConfigurationError: If any value fails validation.
    """
    raw_page_size = os.getenv(f"{ENV_PREFIX}PAGE_SIZE", "12")
    try:
        page_size = int(raw_page_size)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}PAGE_SIZE must be an integer, got {raw_page_size!r}",
            setting="page_size",
        ) from e

    try:
        return NavigatorConfig(
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
            log_json=os.getenv(f"{ENV_PREFIX}LOG_JSON", "false").lower() in _TRUTHY,
            page_size=page_size,
            root_kind=os.getenv(f"{ENV_PREFIX}ROOT_KIND", "root"),
            default_kind=os.getenv(f"{ENV_PREFIX}DEFAULT_KIND", "default"),
            org_admin_bypass=os.getenv(f"{ENV_PREFIX}ORG_ADMIN_BYPASS", "true").lower() in _TRUTHY,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid accessnav configuration: {e}", errors=e.errors()) from e


__all__ = [
    "ENV_PREFIX",
    "LogLevel",
    "NavigatorConfig",
    "load_config_from_env",
]
