"""Structured console logger that mirrors its output onto an event bus.

Usage:
    log = Logger("App")
    db = log.child("db")

    db.events.on("error", lambda context, level, *messages: report(context, messages))
    db.info("connected")          # [12:00:00] [App | db | INFO] connected
    db.error(1, "pool exhausted")  # goes to stderr and to the "error" event
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from enum import IntEnum
import json
import time
from typing import Any

from rich.console import Console
from rich.pretty import pretty_repr

from ..config import EventBusOptions, LoggerOptions
from ..events.bus import EventBus
from . import colors
from .colors import ColorFn
from .events import LOGGER_EVENTS, OutputKind

_PRIMITIVES = (str, int, float, bool, type(None))
_STDERR_KINDS = {"warn", "error"}


class ErrorLevel(IntEnum):
    """Severity of an ``error`` call."""

    ERROR = 0
    CRITICAL = 1
    FATAL = 2


_ERROR_STYLES: dict[ErrorLevel, tuple[str, ColorFn]] = {
    ErrorLevel.ERROR: ("ERROR", colors.red),
    ErrorLevel.CRITICAL: ("CRITICAL ERROR", colors.bright_red),
    ErrorLevel.FATAL: ("FATAL ERROR", colors.bg_red),
}


def format_message(message: Any) -> str:
    """Render primitives as text and everything else as indented JSON.

    Values JSON cannot hold (non-string keys, cycles) fall back to rich's
    pretty repr.
    """
    if isinstance(message, _PRIMITIVES):
        return str(message)
    try:
        return json.dumps(message, indent=2, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return pretty_repr(message)


class Logger:
    """Named console logger with hierarchical context.

    Every call writes one colored block to the console and emits a matching
    event on ``self.events``, an ``EventBus`` owned by this logger and typed
    by ``LOGGER_EVENTS``. Children get their own bus; subscribe to each
    logger you want to observe.
    """

    def __init__(
        self,
        name: str,
        options: LoggerOptions | Mapping[str, Any] | None = None,
        parent_context: Sequence[str] | None = None,
        *,
        stdout: Console | None = None,
        stderr: Console | None = None,
    ) -> None:
        if options is None:
            self.options = LoggerOptions()
        elif isinstance(options, LoggerOptions):
            self.options = options.model_copy()
        else:
            self.options = LoggerOptions.model_validate(options)

        self.name = name
        self.context: list[str] = [*parent_context, name] if parent_context is not None else [name]
        self.stdout = stdout or Console()
        self.stderr = stderr or Console(stderr=True)
        self.group_indent_level = 0
        self._timers: dict[str, float] = {}

        # The bus reports its own warnings through this logger, so it is
        # created once every field above exists.
        self.events = EventBus(
            self,
            EventBusOptions(warn_on_no_listeners=False, catch_errors=False),
            schema=LOGGER_EVENTS,
        )

        if self.options.clear_on_init and parent_context is None:
            self.clear()

    def __repr__(self) -> str:
        return f"Logger(context={self.context!r})"

    def _prefix(self, label: str) -> str:
        segments = " | ".join(self.context)
        if label:
            segments = f"{segments} | {label}"
        prefix = f"[{segments}]"
        if self.options.use_timestamps:
            prefix = f"[{datetime.now().strftime('%H:%M:%S')}] {prefix}"
        return "  " * self.group_indent_level + prefix

    def print(
        self,
        label: str,
        color_fn: ColorFn,
        messages: Sequence[Any],
        output_kind: OutputKind = "log",
    ) -> None:
        """Write one block to the console and emit it as a ``print`` event.

        Args:
            label: Text appended to the context prefix; empty for none
            color_fn: Function painting the assembled block
            messages: Values to render; one goes inline, several one per line
            output_kind: Console channel, ``warn``/``error`` go to stderr
        """
        messages = list(messages)
        if not messages:
            self.warn("called without messages")
            return

        prefix = self._prefix(label)
        rendered = [format_message(message) for message in messages]
        if len(rendered) == 1:
            text = f"{prefix} {rendered[0]}"
        else:
            text = "\n".join([prefix, *rendered])

        console = self.stderr if output_kind in _STDERR_KINDS else self.stdout
        console.print(color_fn(text), markup=False, highlight=False, emoji=False, soft_wrap=True)

        self.events.emit("print", label, color_fn, messages, output_kind)

    def log(self, *messages: Any) -> None:
        self.print("", colors.blue, messages)
        if messages:
            self.events.emit("log", list(self.context), *messages)

    def info(self, *messages: Any) -> None:
        self.print("INFO", colors.cyan, messages, "info")
        if messages:
            self.events.emit("info", list(self.context), *messages)

    def success(self, *messages: Any) -> None:
        self.print("SUCCESS", colors.green, messages)
        if messages:
            self.events.emit("success", list(self.context), *messages)

    def warn(self, *messages: Any) -> None:
        self.print("WARNING", colors.yellow, messages, "error")
        if messages:
            self.events.emit("warn", list(self.context), *messages)

    def error(self, level: Any = 0, *messages: Any) -> None:
        """Log an error at ``level`` 0 (ERROR), 1 (CRITICAL) or 2 (FATAL).

        The level may be omitted: a first argument that is not an int is
        taken as the first message and the level defaults to 0.
        """
        if isinstance(level, bool) or not isinstance(level, int):
            messages = (level, *messages)
            level = ErrorLevel.ERROR
        severity = ErrorLevel(level)
        label, color_fn = _ERROR_STYLES[severity]

        self.print(label, color_fn, messages, "error")
        if messages:
            self.events.emit("error", list(self.context), severity, *messages)

    def time(self, label: str = "default") -> None:
        """Start (or restart) the timer ``label``."""
        self._timers[label] = time.perf_counter()
        self.print("TIMER START", colors.magenta, [label])

    def _elapsed(self, label: str) -> float | None:
        started = self._timers.get(label)
        if started is None:
            self.warn(f'Timer "{label}" does not exist')
            return None
        return (time.perf_counter() - started) * 1000

    def time_log(self, label: str = "default") -> None:
        """Print the time elapsed on ``label`` without stopping it."""
        elapsed = self._elapsed(label)
        if elapsed is None:
            return
        self.print("TIMER", colors.magenta, [f"{label}: {elapsed:.2f}ms"])

    def time_end(self, label: str = "default") -> None:
        """Print the time elapsed on ``label`` and stop it."""
        elapsed = self._elapsed(label)
        if elapsed is None:
            return
        del self._timers[label]
        self.print("TIMER END", colors.magenta, [f"{label}: {elapsed:.2f}ms"])

    def table(self, data: Any, *property_names: str) -> None:
        """Print ``data`` as structured text under a TABLE label.

        ``property_names`` is accepted for column filtering but not applied.
        """
        if data is None:
            self.warn("No data provided")
            return
        self.print("TABLE", colors.white, [data])

    def group(self, *labels: Any) -> None:
        """Indent following output by one level, printing ``labels`` first."""
        if labels:
            self.print("GROUP", colors.white, labels)
        self.group_indent_level += 1

    def group_end(self) -> None:
        self.group_indent_level = max(0, self.group_indent_level - 1)

    def clear(self) -> None:
        self.stdout.clear()

    def child(self, name: str) -> Logger:
        """Create a logger one level below this one.

        The child shares the consoles and options (``clear_on_init`` is
        forced off) but owns a separate event bus.
        """
        return Logger(
            name,
            self.options.model_copy(update={"clear_on_init": False}),
            list(self.context),
            stdout=self.stdout,
            stderr=self.stderr,
        )

    def test(self, message: str = "This is a test log message.") -> None:
        """Print ``message`` once through every severity."""
        self.log(message)
        self.info(message)
        self.success(message)
        self.warn(message)
        for level in ErrorLevel:
            self.error(level, message)
