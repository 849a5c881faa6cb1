"""Event sources with token-based listener registration."""

import inspect
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict


Handler = Callable[..., Awaitable[Any] | Any]


class EventKind(Enum):
    """Lifecycle events produced by connectors and sessions."""
    RESOLVE = "resolve"              # ()
    CONNECT = "connect"              # (session)
    ERROR = "error"                  # (message, bytes_transferred)
    READ = "read"                    # (data)
    READ_COMPLETE = "read_complete"  # ()
    WRITE = "write"                  # (bytes_transferred)
    CLOSE = "close"                  # ()


@dataclass(frozen=True, slots=True)
class Subscription:
    """Token returned by [`EventSource.subscribe()`](src/tcpsession/events/emitter.py:1)."""
    kind: EventKind
    _id: uuid.UUID = field(default_factory=uuid.uuid4)


class EventSource:
    """
    Thread-safe listener table keyed by event kind.

    Handlers run in subscription order. A handler may be a plain callable
    or a coroutine function; coroutine results are awaited before the next
    handler runs.
    """

    #: Event kinds this source may emit. Subclasses narrow it.
    kinds: frozenset[EventKind] = frozenset(EventKind)

    def __init__(self):
        self._handlers: Dict[EventKind, Dict[uuid.UUID, Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, kind: EventKind, handler: Handler) -> Subscription:
        """
        Register a handler for an event kind.

        Returns a Subscription usable with unsubscribe().
        """
        if kind not in self.kinds:
            raise ValueError(f"{self.__class__.__name__} does not emit {kind.value!r} events")
        token = Subscription(kind)
        with self._lock:
            self._handlers.setdefault(kind, {})[token._id] = handler
        return token

    def unsubscribe(self, token: Subscription) -> bool:
        """
        Remove a handler.

        Returns True if it was registered, False otherwise.
        """
        with self._lock:
            handlers = self._handlers.get(token.kind)
            if not handlers or token._id not in handlers:
                return False
            del handlers[token._id]
            return True

    def subscribers(self, kind: EventKind) -> list[Handler]:
        """Return the handlers registered for a kind, in order."""
        with self._lock:
            return list(self._handlers.get(kind, {}).values())

    async def emit(self, kind: EventKind, *args: Any) -> None:
        # Snapshot so handlers may (un)subscribe while we iterate.
        for handler in self.subscribers(kind):
            result = handler(*args)
            if inspect.isawaitable(result):
                await result
