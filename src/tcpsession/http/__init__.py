"""HTTP/1.x message model: request serialization and response parsing."""

from .body import Body
from .message import HeaderMap, HttpMessage, HttpVersion
from .request import HttpRequest
from .response import HttpResponse

__all__ = [
    "Body",
    "HeaderMap",
    "HttpMessage",
    "HttpVersion",
    "HttpRequest",
    "HttpResponse",
]
