"""Runtime payload contracts for typed events.

An ``EventSchema`` maps each event name to a ``Signature``: the ordered
shapes of the arguments its handlers receive, plus an optional shape for any
trailing variadic arguments.

Usage:
    schema = {
        "ready": Signature(),
        "message": Signature((str, int)),
        "log": Signature((list,), rest=Any),
    }
    bus = EventBus(sink, schema=schema)
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
import types
from typing import Any, Literal, Union, get_args, get_origin

from ..exceptions import EventPayloadError


def matches(shape: Any, value: Any) -> bool:
    """Return True when ``value`` fits ``shape``."""
    if shape is Any or shape is object:
        return True
    origin = get_origin(shape)
    if origin is Literal:
        return value in get_args(shape)
    if origin is Union or origin is types.UnionType:
        return any(matches(member, value) for member in get_args(shape))
    if origin is not None:
        return isinstance(value, origin)
    if shape is None:
        return value is None
    return isinstance(value, shape)


def _describe(shape: Any) -> str:
    if isinstance(shape, type) and get_origin(shape) is None:
        return shape.__name__
    return repr(shape)


@dataclass(frozen=True)
class Signature:
    """Expected argument shapes for one event."""

    params: tuple[Any, ...] = ()
    rest: Any | None = None

    def validate(self, event: Hashable, args: Sequence[Any]) -> None:
        """Raise ``EventPayloadError`` unless ``args`` fits this signature."""
        if len(args) < len(self.params):
            raise EventPayloadError(
                f"Event {event!r} expects at least {len(self.params)} argument(s), "
                f"got {len(args)}."
            )
        if self.rest is None and len(args) > len(self.params):
            raise EventPayloadError(
                f"Event {event!r} expects {len(self.params)} argument(s), got {len(args)}."
            )

        for position, value in enumerate(args):
            shape = self.params[position] if position < len(self.params) else self.rest
            if not matches(shape, value):
                raise EventPayloadError(
                    f"Event {event!r} argument {position} expected {_describe(shape)}, "
                    f"got {type(value).__name__}."
                )


EventSchema = Mapping[Hashable, Signature]
