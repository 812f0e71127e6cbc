"""Typed publish/subscribe event bus."""

from .bus import DiagnosticSink, EventBus, Handler
from .schema import EventSchema, Signature

__all__ = ["DiagnosticSink", "EventBus", "EventSchema", "Handler", "Signature"]
