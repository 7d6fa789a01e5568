"""Unified exception hierarchy for accessnav.

Evaluation code (permission matching, route resolution, tree indexing,
navigation, slicing) never raises for data conditions: unknown paths,
missing permissions, malformed grants and missing roots all degrade to
well-defined "denied" / "empty" results. Exceptions are reserved for
load-time problems:

- ``RouteDefinitionError`` — a declared route tree is malformed.
- ``ConfigurationError`` — configuration values are invalid.

Usage:
    from accessnav.exceptions import AccessNavError, RouteDefinitionError

Consumers may register their own subclasses:
    @register_error("CONSOLE_ERROR")
    class ConsoleError(AccessNavError):
        code = "CONSOLE_ERROR"
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    "AccessNavError",
    "ConfigurationError",
    "RouteDefinitionError",
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class AccessNavError(Exception):
    """Base exception for accessnav.

    Attributes:
        code: Stable error code string (e.g. "ROUTE_DEFINITION_ERROR").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessNavError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class RouteDefinitionError(AccessNavError):
    """A declared route definition is malformed."""

    code: str = "ROUTE_DEFINITION_ERROR"


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[AccessNavError])


class ErrorRegistry:
    """Registry mapping stable error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[AccessNavError]] = {}

    def register(self, code: str, error_cls: type[AccessNavError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[AccessNavError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[AccessNavError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(AccessNavError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


error_registry.register("INTERNAL_ERROR", AccessNavError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("ROUTE_DEFINITION_ERROR", RouteDefinitionError)
