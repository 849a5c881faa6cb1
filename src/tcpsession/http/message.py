"""
Header and version model shared by requests and responses.

Header names compare case-insensitively but keep the case they were set
with, so parsing and serialization agree on one representation.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, Optional

from ..errors import HttpParseError, MessageSealedError
from .body import Body


HEADER_ENCODING = "iso-8859-1"


class HttpVersion(Enum):
    """Protocol version label carried in start lines."""
    HTTP_0_9 = "0.9"
    HTTP_1_0 = "1.0"
    HTTP_1_1 = "1.1"
    HTTP_2_0 = "2.0"

    @classmethod
    def parse(cls, token: str) -> "HttpVersion":
        """Map a token such as ``HTTP/1.1`` to a version."""
        prefix, _, number = token.partition("/")
        if prefix != "HTTP":
            raise HttpParseError(f"invalid protocol token: {token!r}")
        try:
            return cls(number)
        except ValueError:
            raise HttpParseError(f"unsupported HTTP version: {token!r}") from None

    def __str__(self) -> str:
        return f"HTTP/{self.value}"


class HeaderMap:
    """
    Ordered (name, value) pairs.

    Setting a name that already exists (in any case) replaces its value in
    place; the originally stored spelling of the name is kept.
    """

    __slots__ = ("_fields", "_sealed")

    def __init__(self, fields: Iterable[tuple[str, str]] | None = None):
        self._fields: list[list[str]] = []
        self._sealed = False
        for name, value in fields or ():
            self.set(name, value)

    def _index(self, name: str) -> int:
        key = name.lower()
        for i, (existing, _) in enumerate(self._fields):
            if existing.lower() == key:
                return i
        return -1

    def seal(self) -> None:
        self._sealed = True

    def set(self, name: str, value: str) -> None:
        if self._sealed:
            raise MessageSealedError("headers have been serialized and can no longer change")
        i = self._index(name)
        if i == -1:
            self._fields.append([name, value])
        else:
            self._fields[i][1] = value

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        i = self._index(name)
        return default if i == -1 else self._fields[i][1]

    def remove(self, name: str) -> bool:
        if self._sealed:
            raise MessageSealedError("headers have been serialized and can no longer change")
        i = self._index(name)
        if i == -1:
            return False
        del self._fields[i]
        return True

    def items(self) -> list[tuple[str, str]]:
        return [(name, value) for name, value in self._fields]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index(name) != -1

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        return f"HeaderMap({self.items()!r})"


class HttpMessage:
    """Base for requests and responses: version, headers and body."""

    def __init__(
        self,
        version: HttpVersion = HttpVersion.HTTP_1_1,
        headers: Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
    ):
        self._version = version
        self._headers = HeaderMap(headers)
        self._body = Body(body)
        self._sealed = False

    def _check_mutable(self) -> None:
        if self._sealed:
            raise MessageSealedError(
                f"{self.__class__.__name__} has been serialized and can no longer change"
            )

    def _seal(self) -> None:
        self._sealed = True
        self._headers.seal()
        self._body.seal()

    @property
    def http_version(self) -> HttpVersion:
        return self._version

    @http_version.setter
    def http_version(self, version: HttpVersion) -> None:
        self._check_mutable()
        self._version = version

    @property
    def headers(self) -> HeaderMap:
        return self._headers

    @property
    def body(self) -> Body:
        return self._body

    def set_header(self, name: str, value: str) -> None:
        self._check_mutable()
        self._headers.set(name, value)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(name, default)

    def remove_header(self, name: str) -> bool:
        self._check_mutable()
        return self._headers.remove(name)

    def has_header(self, name: str) -> bool:
        """Case-insensitive check for a header field."""
        return name in self._headers

    def get_headers(self) -> list[tuple[str, str]]:
        """Header fields in insertion order."""
        return self._headers.items()

    def append(self, data: bytes) -> None:
        self._check_mutable()
        self._body.append(data)

    def set_body(self, data: bytes) -> None:
        self._check_mutable()
        self._body.set(data)

    def start_line(self) -> str:
        raise NotImplementedError(f"{self.__class__.__name__}.start_line not implemented")

    def header_bytes(self) -> bytes:
        """Start line, header fields and the terminating blank line."""
        lines = [self.start_line()]
        lines.extend(f"{name}: {value}" for name, value in self._headers.items())
        return ("\r\n".join(lines) + "\r\n\r\n").encode(HEADER_ENCODING)
