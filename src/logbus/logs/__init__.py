"""Structured console logger."""

from .events import LOGGER_EVENTS, LoggerEvents, OutputKind
from .logger import ErrorLevel, Logger

__all__ = ["ErrorLevel", "LOGGER_EVENTS", "Logger", "LoggerEvents", "OutputKind"]
