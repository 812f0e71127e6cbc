"""Fixed event schema of the ``Logger`` bus."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from ..events.schema import EventSchema, Signature

OutputKind = Literal["log", "info", "warn", "error"]

LOGGER_EVENTS: EventSchema = {
    "log": Signature((list,), rest=Any),
    "info": Signature((list,), rest=Any),
    "success": Signature((list,), rest=Any),
    "warn": Signature((list,), rest=Any),
    "error": Signature((list, Literal[0, 1, 2]), rest=Any),
    "print": Signature((str, Callable, list, OutputKind)),
}

LoggerEvents = LOGGER_EVENTS
