"""
One-shot HTTP exchange over the event API.

[`fetch()`](src/tcpsession/client.py:1) follows the usual event flow:

    CONNECT  -> write the serialized request
    WRITE    -> read()
    READ     -> feed the response parser, read() again
    READ_COMPLETE -> close()
    CLOSE    -> done

The peer is expected to close the connection when the response ends, so
requests should normally carry ``Connection: close``.
"""

from __future__ import annotations

import logging
from typing import Optional

import anyio

from .config import ClientConfig
from .errors import ExchangeError, HttpParseError
from .http import HttpRequest, HttpResponse
from .net import Connector, Session


logger = logging.getLogger(__name__)


class _Exchange:
    def __init__(self, request: HttpRequest):
        self.request = request
        self.response = HttpResponse()
        self.session: Optional[Session] = None
        self.error: Optional[Exception] = None
        self.done = anyio.Event()

    def on_connect(self, session: Session) -> None:
        self.session = session
        session.on_write(self.on_write)
        session.on_read(self.on_read)
        session.on_read_complete(self.on_read_complete)
        session.on_error(self.on_error)
        session.on_close(self.on_close)
        session.write(self.request.to_bytes())

    def on_write(self, bytes_transferred: int) -> None:
        logger.debug("%d bytes written", bytes_transferred)
        assert self.session is not None
        self.session.read()

    def on_read(self, data: bytes) -> None:
        assert self.session is not None
        try:
            self.response.append(data)
        except HttpParseError as e:
            self._fail(e)
            return
        self.session.read()

    def on_read_complete(self) -> None:
        assert self.session is not None
        self.session.close()

    def on_error(self, message: str, bytes_transferred: int) -> None:
        self._fail(ExchangeError(message, bytes_transferred))

    def on_close(self) -> None:
        self.done.set()

    def _fail(self, error: Exception) -> None:
        if self.error is None:
            self.error = error
        if self.session is None:
            self.done.set()
        else:
            self.session.close()


async def fetch(
    request: HttpRequest,
    host: str,
    port: int = 80,
    *,
    config: Optional[ClientConfig] = None,
) -> HttpResponse:
    """
    Send ``request`` to ``host:port`` and collect the response until the
    peer closes the connection.

    Raises:
        ExchangeError: resolve, connect, read or write failed.
        HttpParseError: the response header was malformed.
    """
    exchange = _Exchange(request)

    async with anyio.create_task_group() as tg:
        connector = Connector(tg, config=config)
        connector.on_connect(exchange.on_connect)
        connector.on_error(exchange.on_error)
        connector.connect(host, port)
        await exchange.done.wait()

    if exchange.error is not None:
        raise exchange.error
    if not exchange.response.header_complete:
        raise ExchangeError("connection closed before the response header was received")
    return exchange.response
