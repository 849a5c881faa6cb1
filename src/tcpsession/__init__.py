"""Asynchronous TCP sessions with an incremental HTTP/1.x message model."""

from .config import ClientConfig
from .errors import ExchangeError, HttpParseError, MessageSealedError, TcpSessionError
from .events import EventKind, EventSource, Subscription
from .http import Body, HeaderMap, HttpMessage, HttpRequest, HttpResponse, HttpVersion
from .net import Connector, Endpoint, Session, SessionState
from .client import fetch

__all__ = [
    # Configuration
    "ClientConfig",
    # Errors
    "TcpSessionError",
    "HttpParseError",
    "MessageSealedError",
    "ExchangeError",
    # Events
    "EventKind",
    "EventSource",
    "Subscription",
    # HTTP messages
    "Body",
    "HeaderMap",
    "HttpMessage",
    "HttpRequest",
    "HttpResponse",
    "HttpVersion",
    # Networking
    "Connector",
    "Endpoint",
    "Session",
    "SessionState",
    "fetch",
]
