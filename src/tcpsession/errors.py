"""Exception types raised by tcpsession."""


class TcpSessionError(Exception):
    """Base class for all tcpsession errors."""
    pass


class HttpParseError(TcpSessionError):
    """Raised when a response header block cannot be parsed."""
    pass


class MessageSealedError(TcpSessionError):
    """Raised when a request is modified after it has been serialized."""
    pass


class ExchangeError(TcpSessionError):
    """
    Raised by [`fetch()`](src/tcpsession/client.py:1) when the connector or
    session reported an error event.
    """

    def __init__(self, message: str, bytes_transferred: int = 0):
        super().__init__(message)
        self.message = message
        self.bytes_transferred = bytes_transferred
