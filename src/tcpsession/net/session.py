"""
Session - one established TCP connection.

States:

    OPEN ──────► CLOSING ──────► CLOSED
      │             ▲
      ▼             │
    FAILED ─────────┘   (close() after an I/O error)

``read()`` and ``write()`` only arm work: the I/O runs as a task in the
task group the session was created with, and the outcome comes back as an
event. Reads are never re-armed automatically, so the owner decides when the
next chunk is wanted.

Pending tasks hold a weak reference to the session. If the owner drops the
session, late completions are discarded instead of keeping it alive.
"""

from __future__ import annotations

import logging
import weakref
from enum import Enum
from typing import Any, Callable, Optional

import anyio
from anyio.abc import SocketStream, TaskGroup

from ..events import EventKind, EventSource, Handler, Subscription
from .endpoint import Endpoint


logger = logging.getLogger(__name__)

_IO_ERRORS = (anyio.BrokenResourceError, anyio.ClosedResourceError, OSError)


class SessionState(Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"


class Session(EventSource):
    """
    Wraps an AnyIO socket stream.

    Events:
      READ(data), READ_COMPLETE(), WRITE(bytes_transferred),
      ERROR(message, bytes_transferred), CLOSE()

    At most one read and one write may be outstanding; a second one is
    rejected with an error event.

    A session cannot outlive the task group it was created in. Once that
    group has exited, every operation that would schedule work raises
    anyio.ClosedResourceError instead of emitting an event.
    """

    kinds = frozenset({
        EventKind.READ,
        EventKind.READ_COMPLETE,
        EventKind.WRITE,
        EventKind.ERROR,
        EventKind.CLOSE,
    })

    def __init__(
        self,
        stream: SocketStream,
        *,
        task_group: TaskGroup,
        endpoint: Endpoint,
        read_size: int = 8192,
    ):
        super().__init__()
        self._stream = stream
        self._task_group = task_group
        self._endpoint = endpoint
        self._read_size = read_size
        self._state = SessionState.OPEN
        self._read_scope: Optional[anyio.CancelScope] = None
        self._write_scope: Optional[anyio.CancelScope] = None
        self._closed = anyio.Event()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def stream(self) -> SocketStream:
        return self._stream

    # --- Typed subscriptions ---

    def on_read(self, handler: Callable[[bytes], Any]) -> Subscription:
        return self.subscribe(EventKind.READ, handler)

    def on_read_complete(self, handler: Callable[[], Any]) -> Subscription:
        return self.subscribe(EventKind.READ_COMPLETE, handler)

    def on_write(self, handler: Callable[[int], Any]) -> Subscription:
        return self.subscribe(EventKind.WRITE, handler)

    def on_error(self, handler: Callable[[str, int], Any]) -> Subscription:
        return self.subscribe(EventKind.ERROR, handler)

    def on_close(self, handler: Handler) -> Subscription:
        return self.subscribe(EventKind.CLOSE, handler)

    # --- Operations ---

    def write(self, data: bytes) -> None:
        """Queue ``data`` for sending; completion is reported by a WRITE event."""
        if not self._check_open("write"):
            return
        if self._write_scope is not None:
            self._reject("write already in progress")
            return
        data = bytes(data)
        self._write_scope = anyio.CancelScope()
        self._spawn(
            _write_once, weakref.ref(self), self._stream, data, self._write_scope,
            name=f"write {self._endpoint}",
        )

    def read(self) -> None:
        """Arm one receive; the result arrives as READ or READ_COMPLETE."""
        if not self._check_open("read"):
            return
        if self._read_scope is not None:
            self._reject("read already in progress")
            return
        self._read_scope = anyio.CancelScope()
        self._spawn(
            _read_once, weakref.ref(self), self._stream, self._read_size, self._read_scope,
            name=f"read {self._endpoint}",
        )

    def close(self) -> None:
        """
        Cancel pending I/O and close the stream.

        Emits CLOSE once the stream is released. Calling close() again is a
        no-op.
        """
        if self._state in (SessionState.CLOSING, SessionState.CLOSED):
            return
        self._set_state(SessionState.CLOSING)
        for scope in (self._read_scope, self._write_scope):
            if scope is not None:
                scope.cancel()
        self._read_scope = self._write_scope = None
        self._spawn(self._finish_close, name=f"close {self._endpoint}")

    async def aclose(self) -> None:
        """close() and wait until the session is CLOSED."""
        self.close()
        await self._closed.wait()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    # --- Internals ---

    def _set_state(self, state: SessionState) -> None:
        logger.debug("[%s] %s -> %s", self._endpoint, self._state.value, state.value)
        self._state = state

    def _check_open(self, operation: str) -> bool:
        if self._state is SessionState.OPEN:
            return True
        self._reject(f"cannot {operation}: session is {self._state.value}")
        return False

    def _reject(self, message: str) -> None:
        logger.warning("[%s] %s", self._endpoint, message)
        self._spawn(self.emit, EventKind.ERROR, message, 0)

    def _spawn(self, func: Callable[..., Any], *args: Any, name: str | None = None) -> None:
        try:
            self._task_group.start_soon(func, *args, name=name)
        except RuntimeError as e:
            raise anyio.ClosedResourceError(
                f"session {self._endpoint} outlived its task group"
            ) from e

    async def _finish_close(self) -> None:
        with anyio.CancelScope(shield=True):
            await self._stream.aclose()
        self._set_state(SessionState.CLOSED)
        self._closed.set()
        await self.emit(EventKind.CLOSE)

    async def _fail(self, operation: str, exc: BaseException) -> None:
        message = f"{operation} failed: {exc}" if str(exc) else f"{operation} failed: {exc.__class__.__name__}"
        logger.warning("[%s] %s", self._endpoint, message)
        self._set_state(SessionState.FAILED)
        await self.emit(EventKind.ERROR, message, 0)

    async def _complete_read(self, outcome: bytes | BaseException | None) -> None:
        self._read_scope = None
        if self._state is not SessionState.OPEN:
            logger.debug("[%s] Discarding read completion in state %s", self._endpoint, self._state.value)
            return
        match outcome:
            case None:
                logger.debug("[%s] End of stream", self._endpoint)
                await self.emit(EventKind.READ_COMPLETE)
            case BaseException() as exc:
                await self._fail("read", exc)
            case data:
                logger.debug("[%s] %d bytes read", self._endpoint, len(data))
                await self.emit(EventKind.READ, data)

    async def _complete_write(self, outcome: int | BaseException) -> None:
        self._write_scope = None
        if self._state is not SessionState.OPEN:
            logger.debug("[%s] Discarding write completion in state %s", self._endpoint, self._state.value)
            return
        match outcome:
            case BaseException() as exc:
                await self._fail("write", exc)
            case sent:
                logger.debug("[%s] %d bytes written", self._endpoint, sent)
                await self.emit(EventKind.WRITE, sent)

    def __repr__(self) -> str:
        return f"Session({self._endpoint}, state={self._state.value})"


async def _read_once(
    ref: "weakref.ref[Session]",
    stream: SocketStream,
    max_bytes: int,
    scope: anyio.CancelScope,
) -> None:
    outcome: bytes | BaseException | None = None
    with scope:
        try:
            outcome = await stream.receive(max_bytes)
        except anyio.EndOfStream:
            outcome = None
        except _IO_ERRORS as exc:
            outcome = exc
    if scope.cancel_called:
        return
    session = ref()
    if session is not None:
        await session._complete_read(outcome)


async def _write_once(
    ref: "weakref.ref[Session]",
    stream: SocketStream,
    data: bytes,
    scope: anyio.CancelScope,
) -> None:
    outcome: int | BaseException = 0
    with scope:
        try:
            await stream.send(data)
            outcome = len(data)
        except _IO_ERRORS as exc:
            outcome = exc
    if scope.cancel_called:
        return
    session = ref()
    if session is not None:
        await session._complete_write(outcome)
