"""
Connector - turns a host/port pair into a Session.

Each connect() runs as its own task in the connector's task group:

    resolve ──► RESOLVE() ──► connect ──► CONNECT(session)
       │                         │
       └──────── ERROR(message, 0) ◄─────┘

Failures are reported once and never retried.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Optional

import anyio
from anyio.abc import TaskGroup

from ..config import ClientConfig
from ..events import EventKind, EventSource, Handler, Subscription
from .endpoint import Endpoint
from .session import Session


logger = logging.getLogger(__name__)


class Connector(EventSource):
    """
    Connection factory bound to a task group.

    The task group is the execution context for the connect attempts and
    for every session they produce; sessions live no longer than it does.

    Events:
      RESOLVE(), CONNECT(session), ERROR(message, bytes_transferred)
    """

    kinds = frozenset({EventKind.RESOLVE, EventKind.CONNECT, EventKind.ERROR})

    def __init__(self, task_group: TaskGroup, *, config: Optional[ClientConfig] = None):
        super().__init__()
        self._task_group = task_group
        self._config = config or ClientConfig()
        self._config.validate()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def on_resolve(self, handler: Handler) -> Subscription:
        return self.subscribe(EventKind.RESOLVE, handler)

    def on_connect(self, handler: Callable[[Session], Any]) -> Subscription:
        return self.subscribe(EventKind.CONNECT, handler)

    def on_error(self, handler: Callable[[str, int], Any]) -> Subscription:
        return self.subscribe(EventKind.ERROR, handler)

    def connect(self, host: str, port: int) -> Endpoint:
        """
        Start resolving and connecting to ``host:port``.

        Raises ValueError for an invalid endpoint; everything after that is
        reported through events.
        """
        endpoint = Endpoint(host, port)
        logger.debug("Connecting to %s", endpoint)
        self._task_group.start_soon(self._connect, endpoint, name=f"connect {endpoint}")
        return endpoint

    async def _connect(self, endpoint: Endpoint) -> None:
        timeout = self._config.connect_timeout

        try:
            with anyio.fail_after(timeout):
                addresses = await _resolve(endpoint)
        except TimeoutError:
            await self._error(endpoint, f"resolve timed out after {timeout}s")
            return
        except OSError as e:
            await self._error(endpoint, f"resolve failed: {e}")
            return
        if not addresses:
            await self._error(endpoint, "resolve failed: no addresses")
            return

        logger.debug("Resolved %s to %s", endpoint, addresses)
        await self.emit(EventKind.RESOLVE)

        stream = None
        last_error: Optional[BaseException] = None
        for address in addresses:
            try:
                with anyio.fail_after(timeout):
                    stream = await anyio.connect_tcp(address, endpoint.port)
                break
            except TimeoutError:
                last_error = TimeoutError(f"timed out after {timeout}s")
            except OSError as e:
                last_error = e
            logger.debug("Connect to %s (%s) failed: %s", endpoint, address, last_error)

        if stream is None:
            await self._error(endpoint, f"connect failed: {last_error}")
            return

        session = Session(
            stream,
            task_group=self._task_group,
            endpoint=endpoint,
            read_size=self._config.read_size,
        )
        logger.info("Connected to %s", endpoint)
        await self.emit(EventKind.CONNECT, session)

    async def _error(self, endpoint: Endpoint, message: str) -> None:
        logger.warning("[%s] %s", endpoint, message)
        await self.emit(EventKind.ERROR, message, 0)


async def _resolve(endpoint: Endpoint) -> list[str]:
    infos = await anyio.getaddrinfo(endpoint.host, endpoint.port, type=socket.SOCK_STREAM)
    addresses: list[str] = []
    for *_, sockaddr in infos:
        host = str(sockaddr[0])
        if host not in addresses:
            addresses.append(host)
    return addresses
