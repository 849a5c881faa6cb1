"""
Incremental HTTP response parsing.

Network reads do not respect message boundaries, so ``append()`` accepts
chunks of any size. Bytes are staged until the blank line that ends the
header block has fully arrived (even when CRLF CRLF straddles two chunks);
only then is the header parsed, once. Everything after it is body.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from typing_extensions import override

from ..errors import HttpParseError
from .message import HEADER_ENCODING, HttpMessage, HttpVersion


logger = logging.getLogger(__name__)

HEADER_BOUNDARY = b"\r\n\r\n"


class HttpResponse(HttpMessage):
    """A response assembled from raw chunks."""

    def __init__(
        self,
        status_code: int = 0,
        reason: str = "",
        version: HttpVersion = HttpVersion.HTTP_1_1,
        headers: Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
    ):
        super().__init__(version, headers, body)
        self._status_code = status_code
        self._reason = reason
        self._staging = bytearray()
        self._header_complete = False
        self._error: Optional[HttpParseError] = None

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def header_complete(self) -> bool:
        """True once the header block has been received and parsed."""
        return self._header_complete

    @property
    def content_length(self) -> Optional[int]:
        value = self.get_header("Content-Length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @override
    def append(self, data: bytes) -> None:
        """
        Feed one chunk.

        Raises HttpParseError if the status line is malformed. The chunk
        that completed the header is not partially applied in that case,
        the staged bytes are dropped, and every later call raises again.
        """
        if self._error is not None:
            raise HttpParseError(f"response already failed to parse: {self._error}")
        if self._header_complete:
            self._body.append(data)
            return

        # Resume the boundary search just before the old end so a marker
        # split across chunks is still found.
        start = max(0, len(self._staging) - (len(HEADER_BOUNDARY) - 1))
        self._staging += data
        index = self._staging.find(HEADER_BOUNDARY, start)
        if index == -1:
            return

        block = bytes(self._staging[:index])
        rest = bytes(self._staging[index + len(HEADER_BOUNDARY):])
        try:
            self._parse_header(block)
        except HttpParseError as e:
            self._staging.clear()
            self._error = e
            raise

        self._staging.clear()
        self._header_complete = True
        logger.debug("Header parsed: %s %s (%d fields)", self._status_code, self._reason, len(self._headers))
        if rest:
            self._body.append(rest)

    def _parse_header(self, block: bytes) -> None:
        lines = block.decode(HEADER_ENCODING).split("\r\n")

        parts = lines[0].split(" ", 2)
        if len(parts) < 2:
            raise HttpParseError(f"invalid status line: {lines[0]!r}")
        version = HttpVersion.parse(parts[0])
        if not (len(parts[1]) == 3 and parts[1].isascii() and parts[1].isdigit()):
            raise HttpParseError(f"invalid status code: {parts[1]!r}")
        status_code = int(parts[1])

        fields: list[tuple[str, str]] = []
        for line in lines[1:]:
            if ":" not in line:
                logger.debug("Skipping header line without a colon: %r", line)
                continue
            name, value = line.split(":", 1)
            fields.append((name.strip(), value.strip()))

        # Only commit once the whole block parsed.
        self._version = version
        self._status_code = status_code
        self._reason = parts[2].strip() if len(parts) == 3 else ""
        for name, value in fields:
            self._headers.set(name, value)

    @override
    def start_line(self) -> str:
        return f"{self._version} {self._status_code} {self._reason}"

    def to_bytes(self) -> bytes:
        return self.header_bytes() + self._body.to_bytes()

    def __repr__(self) -> str:
        return (
            f"HttpResponse({self._status_code}, {self._reason!r}, {self._version}, "
            f"header_complete={self._header_complete}, body={len(self._body)})"
        )
