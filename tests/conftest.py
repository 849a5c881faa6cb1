"""Shared fixtures: AnyIO backend selection and a loopback TCP server."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

import anyio
import pytest
from anyio.abc import SocketAttribute, SocketStream


@pytest.fixture
def anyio_backend():
    return "asyncio"


StreamHandler = Callable[[SocketStream], Awaitable[None]]


@asynccontextmanager
async def _serve(handler: StreamHandler) -> AsyncIterator[int]:
    """Run ``handler`` for each connection on 127.0.0.1; yields the port."""
    listener = await anyio.create_tcp_listener(local_host="127.0.0.1", local_port=0)
    port = listener.listeners[0].extra(SocketAttribute.local_port)

    async def _handle(stream: SocketStream) -> None:
        async with stream:
            await handler(stream)

    async with listener:
        async with anyio.create_task_group() as tg:
            tg.start_soon(listener.serve, _handle)
            try:
                yield port
            finally:
                tg.cancel_scope.cancel()


@pytest.fixture
def serve():
    return _serve


@pytest.fixture
def unused_port() -> int:
    """A loopback port with nothing listening on it."""
    import socket

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def read_until(stream: SocketStream, marker: bytes) -> bytes:
    buf = bytearray()
    while marker not in buf:
        try:
            buf.extend(await stream.receive())
        except anyio.EndOfStream:
            break
    return bytes(buf)


@pytest.fixture
def receive_until():
    return read_until
