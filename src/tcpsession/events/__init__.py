"""Listener registration for connector and session events."""

from .emitter import EventKind, EventSource, Handler, Subscription

__all__ = [
    "EventKind",
    "EventSource",
    "Handler",
    "Subscription",
]
