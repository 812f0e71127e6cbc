"""Logging bootstrap utilities and a structlog bridge for logger events."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any

import structlog

from .config import LoggingConfig
from .logs.logger import ErrorLevel, Logger


def configure_logging(logging_config: LoggingConfig | Mapping[str, Any]) -> None:
    """Configure root logging according to app config using structlog."""
    if not isinstance(logging_config, LoggingConfig):
        logging_config = LoggingConfig.model_validate(logging_config)
    level = getattr(logging, logging_config.level, logging.INFO)

    # Reset stdlib root logger handlers and level.
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    # Only show our own records on stderr.
    def package_only_filter(record: logging.LogRecord) -> bool:
        return record.name.startswith("logbus")

    # structlog always goes through stdlib logging so both
    # logging.getLogger(__name__) and structlog.get_logger() share handlers.
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if logging_config.structured:
        renderer: Any = structlog.processors.JSONRenderer(
            ensure_ascii=False, separators=(",", ":")
        )
    else:
        renderer = structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "event"]
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
    )

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(package_only_filter)
    root.addHandler(stderr_handler)


def forward_to_logging(
    logger: Logger, name: str = "logbus.forward"
) -> Callable[[], None]:
    """Re-emit a logger's severity events through structlog.

    Subscribes to the ``log``, ``info``, ``success``, ``warn`` and ``error``
    events of ``logger.events``. Returns a function removing every
    subscription made here.
    """
    target = structlog.get_logger(name)

    def emit(
        method: str,
        event: str,
        context: list[str],
        messages: tuple[Any, ...],
        **extra: Any,
    ) -> None:
        getattr(target, method)(
            f"logger.{event}",
            context=" | ".join(context),
            messages=[str(message) for message in messages],
            **extra,
        )

    def on_log(context: list[str], *messages: Any) -> None:
        emit("info", "log", context, messages)

    def on_info(context: list[str], *messages: Any) -> None:
        emit("info", "info", context, messages)

    def on_success(context: list[str], *messages: Any) -> None:
        emit("info", "success", context, messages)

    def on_warn(context: list[str], *messages: Any) -> None:
        emit("warning", "warn", context, messages)

    def on_error(context: list[str], level: int, *messages: Any) -> None:
        method = "error" if level == ErrorLevel.ERROR else "critical"
        emit(method, "error", context, messages, severity=ErrorLevel(level).name)

    unsubscribers = [
        logger.events.on("log", on_log),
        logger.events.on("info", on_info),
        logger.events.on("success", on_success),
        logger.events.on("warn", on_warn),
        logger.events.on("error", on_error),
    ]

    def detach() -> None:
        for unsubscribe in unsubscribers:
            unsubscribe()

    return detach
