"""HTTP request serialization."""

from __future__ import annotations

from typing import Iterable

from typing_extensions import override

from .message import HttpMessage, HttpVersion


class HttpRequest(HttpMessage):
    """
    An outgoing request.

    ``to_bytes()`` renders the wire form and seals the request: any later
    change raises [`MessageSealedError`](src/tcpsession/errors.py:1).

        >>> req = HttpRequest("GET", "/", HttpVersion.HTTP_1_0)
        >>> req.set_header("Host", "example.org")
        >>> req.to_bytes()
        b'GET / HTTP/1.0\\r\\nHost: example.org\\r\\n\\r\\n'
    """

    def __init__(
        self,
        method: str = "GET",
        path: str = "/",
        version: HttpVersion = HttpVersion.HTTP_1_1,
        headers: Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
    ):
        if not method:
            raise ValueError("method cannot be empty")
        if not path:
            raise ValueError("path cannot be empty")
        super().__init__(version, headers, body)
        self._method = method
        self._path = path

    @property
    def method(self) -> str:
        return self._method

    @property
    def path(self) -> str:
        return self._path

    @property
    def sealed(self) -> bool:
        return self._sealed

    @override
    def start_line(self) -> str:
        return f"{self._method} {self._path} {self._version}"

    def to_bytes(self) -> bytes:
        self._seal()
        return self.header_bytes() + self._body.to_bytes()

    def __repr__(self) -> str:
        return (
            f"HttpRequest({self._method!r}, {self._path!r}, {self._version}, "
            f"headers={len(self._headers)}, body={len(self._body)})"
        )
