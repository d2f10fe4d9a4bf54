"""Fluent builder for one-shot GET and POST requests."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, BinaryIO

from ..utils import io_helper
from ..utils.logging import get_logger
from .params import ParamBuilder
from .transport import DEFAULT_TRANSPORT, Connection, open_connection

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from ..settings import HttpSettings

_LOGGER = get_logger(__name__)

# Some services reject the default Python user agents.
DEFAULT_USER_AGENT = "Mozilla/5.0"


class Method(str, Enum):
    """Request methods supported by :class:`Http`."""

    GET = "GET"
    POST = "POST"


class Http:
    """Request descriptor configured through chained setters.

    Setters return the same instance. ``get_connection``, ``get_input_stream``,
    ``close_input_stream`` and ``get_content`` perform network I/O, and each of
    them opens a new connection, so call only one of them per request.

    Parameters go into the body for POST. For GET they are appended as the query
    string, unless the URL already contains ``?``; in that case they are not
    sent at all.
    """

    def __init__(
        self,
        url: str,
        method: Method | str = Method.GET,
        follow_redirects: bool = True,
        *,
        transport: str = DEFAULT_TRANSPORT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._url = url
        self._method = method if isinstance(method, Method) else Method(str(method).upper())
        self._follow_redirects = follow_redirects
        self._transport = transport
        self._user_agent = user_agent
        self._params: ParamBuilder | None = None
        self._headers: dict[str, str] = {}

    @classmethod
    def create(
        cls,
        url: str,
        method: Method | str | bool = Method.GET,
        follow_redirects: bool | None = None,
        *,
        transport: str | None = None,
        settings: "HttpSettings | None" = None,
    ) -> "Http":
        """Return a new builder for ``url``.

        Explicit arguments win over ``settings``; without either the request is
        a GET that follows redirects over the ``urllib`` transport. A ``bool``
        in place of ``method`` is taken as ``follow_redirects`` for a GET, so
        ``Http.create(url, False)`` works like ``Http.create(url, follow_redirects=False)``.
        """

        if isinstance(method, bool):
            if follow_redirects is not None:
                raise TypeError("follow_redirects given twice")
            method, follow_redirects = Method.GET, method
        if follow_redirects is None:
            follow_redirects = settings.follow_redirects if settings else True
        if transport is None:
            transport = settings.transport if settings else DEFAULT_TRANSPORT
        user_agent = settings.user_agent if settings else DEFAULT_USER_AGENT
        return cls(
            url,
            method,
            follow_redirects,
            transport=transport,
            user_agent=user_agent,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def method(self) -> Method:
        return self._method

    @property
    def follow_redirects(self) -> bool:
        return self._follow_redirects

    @property
    def transport(self) -> str:
        return self._transport

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def params(self) -> ParamBuilder | None:
        return self._params

    def set_header(self, key: str, value: str) -> "Http":
        """Set or replace a header, percent-encoding both key and value."""

        self._headers[ParamBuilder.encode(key)] = ParamBuilder.encode(value)
        return self

    def set_raw_header(self, key: str, value: str) -> "Http":
        self._headers[key] = value
        return self

    def set_param(self, key: Any, value: Any) -> "Http":
        """Set or replace a parameter, percent-encoding both key and value."""

        if self._params is None:
            self._params = ParamBuilder.create(ParamBuilder.encode(key), ParamBuilder.encode(value))
        else:
            self._params.set(key, value)
        return self

    def set_raw_param(self, key: Any, value: Any) -> "Http":
        """Set or replace a parameter that is already encoded."""

        if self._params is None:
            self._params = ParamBuilder.create(key, value)
        else:
            self._params.set_raw(key, value)
        return self

    def set_user_agent(self, user_agent: str) -> "Http":
        self._user_agent = user_agent
        return self

    def get_connection(self) -> Connection:
        """Build a connection carrying the configured headers and body.

        The exchange itself happens when the caller first reads the response.
        """

        if self._method is Method.GET and self._params is not None and "?" not in self._url:
            self._url += "?" + str(self._params)

        conn = open_connection(self._url, self._method.value, transport=self._transport)
        conn.set_instance_follow_redirects(self._follow_redirects)
        conn.set_request_property("User-Agent", self._user_agent)
        for key, value in self._headers.items():
            conn.set_request_property(key, value)

        _LOGGER.debug(
            "Opening connection",
            extra={
                "event": "http.connect",
                "method": self._method.value,
                "url": self._url,
                "transport": self._transport,
                "follow_redirects": self._follow_redirects,
                "header_count": len(self._headers),
            },
        )

        if self._method is Method.POST and self._params is not None:
            data = self._params.get_bytes()
            conn.set_do_output(True)
            conn.set_request_property("Content-Length", str(len(data)))

            output = conn.get_output_stream()
            output.write(data)
            output.flush()
            output.close()
            _LOGGER.debug(
                "Request body written",
                extra={"event": "http.body", "url": self._url, "bytes": len(data)},
            )

        return conn

    def get_input_stream(self) -> BinaryIO:
        """Return the response body stream; the caller must close it."""

        return self.get_connection().get_input_stream()

    def close_input_stream(self) -> None:
        """Send the request and discard the response."""

        conn = self.get_connection()
        try:
            conn.get_input_stream().close()
        finally:
            conn.disconnect()

    def get_content(self) -> str:
        """Send the request and return the response body decoded as UTF-8."""

        conn = self.get_connection()
        try:
            return io_helper.read(conn.get_input_stream())
        finally:
            conn.disconnect()

    def __repr__(self) -> str:
        return (
            f"Http(url={self._url!r}, method={self._method.value}, "
            f"follow_redirects={self._follow_redirects}, transport={self._transport!r})"
        )


__all__ = ["DEFAULT_USER_AGENT", "Http", "Method"]
