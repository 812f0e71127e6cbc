"""Typed event bus with synchronous and asynchronous emission.

Usage:
    bus = EventBus(logger)

    def on_message(text, count):
        print(f"{text} x{count}")

    off = bus.on("message", on_message)
    bus.emit("message", "hello", 3)
    off()

    # Async handlers are awaited by emit_async
    async def on_saved(path):
        await upload(path)

    bus.on("saved", on_saved)
    await bus.emit_async("saved", "/tmp/out.json")
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Hashable, Mapping
import inspect
import logging
from typing import Any, Protocol

from ..config import EventBusOptions
from ..exceptions import UnknownEventError
from .schema import EventSchema

LOGGER = logging.getLogger(__name__)

Handler = Callable[..., Any]
Unsubscribe = Callable[[], None]


class DiagnosticSink(Protocol):
    """Minimal logger surface the bus reports its own problems to."""

    def warn(self, *messages: Any) -> None: ...

    def error(self, level: int = 0, *messages: Any) -> None: ...


class _Once:
    """Handler wrapper that unregisters itself before its first call."""

    def __init__(self, bus: EventBus, event: Hashable, listener: Handler) -> None:
        self.bus = bus
        self.event = event
        self.listener = listener
        self.fired = False

    def __call__(self, *args: Any) -> Any:
        # Overlapping emissions may hold this wrapper in their snapshot.
        if self.fired:
            return None
        self.fired = True
        self.bus.off(self.event, self)
        return self.listener(*args)


class EventBus:
    """Publish/subscribe registry mapping event names to ordered handlers.

    Each event keeps its handlers in insertion order, with ``prepend`` placing
    a handler ahead of the others. A handler is registered at most once per
    event, and events without handlers are dropped from the registry.

    Problems the bus notices itself (soft listener cap exceeded, emission with
    no listeners, crashing handlers) are reported to ``sink``, which must be
    supplied by the owner.
    """

    def __init__(
        self,
        sink: DiagnosticSink,
        options: EventBusOptions | Mapping[str, Any] | None = None,
        *,
        schema: EventSchema | None = None,
    ) -> None:
        if options is None:
            self._options = EventBusOptions()
        elif isinstance(options, EventBusOptions):
            self._options = options.model_copy()
        else:
            self._options = EventBusOptions.model_validate(options)
        self._sink = sink
        self._schema = schema
        self._listeners: dict[Hashable, dict[Handler, None]] = {}
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def options(self) -> EventBusOptions:
        return self._options

    def _check_event(self, event: Hashable) -> None:
        if self._schema is not None and event not in self._schema:
            raise UnknownEventError(f"Unknown event {event!r}.")

    def _check_payload(self, event: Hashable, args: tuple[Any, ...]) -> None:
        self._check_event(event)
        if self._schema is not None:
            self._schema[event].validate(event, args)

    def _register(self, event: Hashable, handler: Handler, *, first: bool) -> Unsubscribe:
        self._check_event(event)
        limit = self._options.max_listeners
        if limit is not None and self.listener_count(event) >= limit:
            self._sink.warn("Max listeners exceeded for", event)

        if first:
            self._listeners[event] = {handler: None, **self._listeners.get(event, {})}
        else:
            self._listeners.setdefault(event, {}).setdefault(handler, None)

        if self._options.debug:
            LOGGER.debug(f"Subscribed to event: {event!r}")
        return lambda: self.off(event, handler)

    def on(self, event: Hashable, handler: Handler) -> Unsubscribe:
        """Register ``handler`` for ``event``.

        Args:
            event: Event name
            handler: Callable receiving the event's arguments

        Returns:
            A function removing exactly this registration.
        """
        return self._register(event, handler, first=False)

    def prepend(self, event: Hashable, handler: Handler) -> Unsubscribe:
        """Register ``handler`` ahead of every handler already on ``event``."""
        return self._register(event, handler, first=True)

    def once(self, event: Hashable, handler: Handler) -> Unsubscribe:
        """Register ``handler`` for a single emission of ``event``.

        The returned function removes the registration if it has not fired yet.
        """
        return self.on(event, _Once(self, event, handler))

    def off(self, event: Hashable, handler: Handler) -> None:
        """Remove ``handler`` from ``event``; no-op when it is not registered.

        A handler registered through ``once`` can be removed by passing the
        original callable.
        """
        handlers = self._listeners.get(event)
        if handlers is None:
            return

        if handler in handlers:
            del handlers[handler]
        else:
            wrapper = next(
                (h for h in handlers if isinstance(h, _Once) and h.listener == handler),
                None,
            )
            if wrapper is None:
                return
            del handlers[wrapper]

        if not handlers:
            del self._listeners[event]
        if self._options.debug:
            LOGGER.debug(f"Unsubscribed from event: {event!r}")

    def emit(self, event: Hashable, *args: Any) -> bool:
        """Call every handler of ``event`` in order, synchronously.

        Handlers added or removed while the emission runs do not change the
        set of handlers called by it.

        Returns:
            ``True`` if at least one handler was registered, else ``False``.
        """
        self._check_payload(event, args)
        handlers = tuple(self._listeners.get(event, ()))

        if not handlers:
            if self._options.warn_on_no_listeners:
                self._sink.warn("Event emitted with no listeners:", event)
            return False

        if self._options.debug:
            LOGGER.debug(f"Emitting {event!r} to {len(handlers)} handler(s)")

        for handler in handlers:
            if self._options.catch_errors:
                try:
                    result = handler(*args)
                except Exception as exc:
                    self._sink.error(0, "Handler crashed for", event, exc)
                    continue
            else:
                result = handler(*args)

            if inspect.isawaitable(result):
                self._schedule(event, result)

        return True

    def _schedule(self, event: Hashable, awaitable: Any) -> None:
        """Run an awaitable returned by a handler without suspending ``emit``."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._sink.warn("Async handler result discarded (no running loop) for", event)
            return

        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        future.add_done_callback(lambda done: self._report_background(event, done))

    def _report_background(self, event: Hashable, future: asyncio.Future[Any]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        if self._options.catch_errors:
            self._sink.error(0, "Handler crashed for", event, exc)
        else:
            LOGGER.warning(
                "bus.handler.exception",
                extra={
                    "event": "bus.handler.exception",
                    "bus_event": repr(event),
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

    async def emit_async(self, event: Hashable, *args: Any) -> bool:
        """Call every handler of ``event`` and wait for all of them to finish.

        Handlers are called in order before the first suspension and their
        awaitable results run concurrently. A failing handler's exception
        propagates to the caller regardless of ``catch_errors``; the
        remaining awaitables are cancelled first.
        """
        self._check_payload(event, args)
        handlers = tuple(self._listeners.get(event, ()))
        if not handlers:
            return False

        pending: list[asyncio.Future[Any]] = []
        try:
            for handler in handlers:
                result = handler(*args)
                if inspect.isawaitable(result):
                    pending.append(asyncio.ensure_future(result))
            await asyncio.gather(*pending)
        except BaseException:
            await self._cancel(pending)
            raise
        return True

    @staticmethod
    async def _cancel(pending: list[asyncio.Future[Any]]) -> None:
        """Cancel unfinished awaitables and collect every outcome."""
        for future in pending:
            if not future.done():
                future.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    def listener_count(self, event: Hashable) -> int:
        """Return the number of handlers registered for ``event``."""
        return len(self._listeners.get(event, ()))

    def has_listeners(self, event: Hashable) -> bool:
        return self.listener_count(event) > 0

    def event_names(self) -> list[Hashable]:
        """Return the events that currently have at least one handler."""
        return list(self._listeners)

    def set_max_listeners(self, n: int | None) -> None:
        """Change the soft per-event handler cap; ``None`` removes it."""
        if n is not None and n < 0:
            raise ValueError("max_listeners must be >= 0 or None.")
        self._options.max_listeners = n

    def remove_all_listeners(self, event: Hashable | None = None) -> None:
        """Clear handlers.

        Args:
            event: Specific event to clear, or None for all
        """
        if event is not None:
            self._listeners.pop(event, None)
        else:
            self._listeners.clear()
