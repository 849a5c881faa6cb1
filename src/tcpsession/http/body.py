"""Append-only byte store for message payloads."""

from ..errors import MessageSealedError


class Body:
    """
    Accumulates a message body.

    Grows with ``append()`` and only shrinks on ``reset()``. No size limit
    is enforced here. Once sealed by its message, every mutator raises
    MessageSealedError.
    """

    __slots__ = ("_data", "_sealed")

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)
        self._sealed = False

    def _check_mutable(self) -> None:
        if self._sealed:
            raise MessageSealedError("body has been serialized and can no longer change")

    def seal(self) -> None:
        self._sealed = True

    def append(self, data: bytes) -> None:
        self._check_mutable()
        self._data += data

    def set(self, data: bytes) -> None:
        """Replace the whole body."""
        self._check_mutable()
        self._data[:] = data

    def reset(self) -> None:
        self._check_mutable()
        self._data.clear()

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def to_text(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        return self._data.decode(encoding, errors)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Body):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray)):
            return self._data == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Body({bytes(self._data[:32])!r}{'...' if len(self._data) > 32 else ''}, size={len(self._data)})"
