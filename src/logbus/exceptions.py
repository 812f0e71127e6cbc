"""Domain exception hierarchy for the logbus package."""

from __future__ import annotations


class LogbusError(RuntimeError):
    """Base class for all logbus errors."""


class UnknownEventError(LogbusError, KeyError):
    """Raised when an event name is not declared in the bus schema."""

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class EventPayloadError(LogbusError, TypeError):
    """Raised when emitted arguments do not match the event signature."""


class ConfigValidationError(LogbusError):
    """Raised when configuration cannot be validated safely."""
