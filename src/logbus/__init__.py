"""Top-level package for logbus."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import EventBusOptions, LoggerOptions, load_config
    from .events import EventBus, Signature
    from .exceptions import (
        ConfigValidationError,
        EventPayloadError,
        LogbusError,
        UnknownEventError,
    )
    from .logs import LOGGER_EVENTS, ErrorLevel, Logger, LoggerEvents

__all__ = [
    "ConfigValidationError",
    "ErrorLevel",
    "EventBus",
    "EventBusOptions",
    "EventPayloadError",
    "LOGGER_EVENTS",
    "LogbusError",
    "Logger",
    "LoggerEvents",
    "LoggerOptions",
    "Signature",
    "UnknownEventError",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the bus alone does not pull in rich."""
    if name in {"EventBus", "Signature"}:
        from .events import EventBus, Signature

        return {"EventBus": EventBus, "Signature": Signature}[name]
    if name in {"ErrorLevel", "LOGGER_EVENTS", "Logger", "LoggerEvents"}:
        from . import logs

        return getattr(logs, name)
    if name in {"EventBusOptions", "LoggerOptions", "load_config"}:
        from . import config

        return getattr(config, name)
    if name in {
        "ConfigValidationError",
        "EventPayloadError",
        "LogbusError",
        "UnknownEventError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
