"""TCP connector and session built on AnyIO sockets."""

from .connector import Connector
from .endpoint import Endpoint
from .session import Session, SessionState

__all__ = [
    "Connector",
    "Endpoint",
    "Session",
    "SessionState",
]
