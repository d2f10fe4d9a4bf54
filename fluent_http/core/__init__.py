"""Request building and connection primitives."""

from .errors import HttpIOError, MalformedURLError, ParamEncodingError
from .http import DEFAULT_USER_AGENT, Http, Method
from .params import ParamBuilder
from .transport import (
    Connection,
    RequestsConnection,
    UrllibConnection,
    available_transports,
    open_connection,
)

__all__ = [
    "Connection",
    "DEFAULT_USER_AGENT",
    "Http",
    "HttpIOError",
    "MalformedURLError",
    "Method",
    "ParamBuilder",
    "ParamEncodingError",
    "RequestsConnection",
    "UrllibConnection",
    "available_transports",
    "open_connection",
]
