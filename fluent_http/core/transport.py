"""One-shot HTTP connections backed by ``urllib`` or ``requests``."""

from __future__ import annotations

import http.client
import io
import logging
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO

import requests

from .errors import HttpIOError, MalformedURLError

_LOGGER = logging.getLogger(__name__)
_SUPPORTED_SCHEMES = {"http", "https"}
_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

DEFAULT_TRANSPORT = "urllib"


class _RequestBody(io.BytesIO):
    """Output buffer whose payload stays available after ``close``."""

    def __init__(self) -> None:
        super().__init__()
        self._payload: bytes | None = None

    def close(self) -> None:
        if not self.closed:
            self._payload = self.getvalue()
        super().close()

    def payload(self) -> bytes:
        if self._payload is not None:
            return self._payload
        return self.getvalue()


@dataclass(slots=True)
class ConnectionResponse:
    url: str
    status: int
    headers: dict[str, str]
    stream: BinaryIO


class Connection(ABC):
    """A single request/response exchange.

    Request properties and the body are collected first; the exchange happens
    on the first access to the response and its result is kept for the
    lifetime of the connection.
    """

    transport: str = "base"

    def __init__(self, url: str, method: str = "GET") -> None:
        self.url = url
        self.method = method.upper()
        self._follow_redirects = True
        self._properties: dict[str, str] = {}
        self._do_output = False
        self._body: _RequestBody | None = None
        self._response: ConnectionResponse | None = None

    @property
    def follow_redirects(self) -> bool:
        return self._follow_redirects

    @property
    def do_output(self) -> bool:
        return self._do_output

    @property
    def connected(self) -> bool:
        return self._response is not None

    @property
    def request_properties(self) -> dict[str, str]:
        return dict(self._properties)

    def set_instance_follow_redirects(self, follow_redirects: bool) -> None:
        self._follow_redirects = follow_redirects

    def set_request_property(self, key: str, value: str) -> None:
        """Set a request header, replacing any value under the same name."""

        self._ensure_not_connected()
        for existing in list(self._properties):
            if existing.lower() == key.lower():
                del self._properties[existing]
        self._properties[key] = value

    def get_request_property(self, key: str) -> str | None:
        for existing, value in self._properties.items():
            if existing.lower() == key.lower():
                return value
        return None

    def set_do_output(self, do_output: bool) -> None:
        self._ensure_not_connected()
        self._do_output = do_output

    def get_output_stream(self) -> BinaryIO:
        if not self._do_output:
            raise HttpIOError("Output is disabled; call set_do_output(True) first", url=self.url)
        self._ensure_not_connected()
        if self._body is None:
            self._body = _RequestBody()
        return self._body

    def body(self) -> bytes | None:
        if not self._do_output or self._body is None:
            return None
        return self._body.payload()

    def connect(self) -> ConnectionResponse:
        if self._response is None:
            self._response = self._open()
            _LOGGER.debug(
                "Response received",
                extra={
                    "event": "http.response",
                    "transport": self.transport,
                    "method": self.method,
                    "url": self.url,
                    "status": self._response.status,
                },
            )
        return self._response

    def get_input_stream(self) -> BinaryIO:
        return self.connect().stream

    @property
    def response_code(self) -> int:
        return self.connect().status

    @property
    def response_headers(self) -> dict[str, str]:
        return dict(self.connect().headers)

    def disconnect(self) -> None:
        if self._response is not None:
            self._response.stream.close()

    def _ensure_not_connected(self) -> None:
        if self._response is not None:
            raise RuntimeError("Already connected")

    @abstractmethod
    def _open(self) -> ConnectionResponse:
        """Send the request and return the response."""


class _KeepRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Hand 3xx responses back to the caller instead of following them."""

    def http_error_302(self, req, fp, code, msg, headers):  # type: ignore[override]
        return fp

    http_error_301 = http_error_303 = http_error_307 = http_error_308 = http_error_302


class UrllibConnection(Connection):
    transport = "urllib"

    def _open(self) -> ConnectionResponse:
        handlers = [] if self.follow_redirects else [_KeepRedirectHandler()]
        opener = urllib.request.build_opener(*handlers)
        opener.addheaders = []
        request = urllib.request.Request(
            url=self.url,
            data=self.body(),
            headers=self._properties,
            method=self.method,
        )
        try:
            resp = opener.open(request)
        except http.client.HTTPException as exc:
            raise HttpIOError(f"Invalid HTTP response: {exc!r}", url=self.url) from exc
        except ValueError as exc:
            # http.client rejects non-ASCII URLs and non-latin-1 header values
            raise HttpIOError(f"Cannot send request: {exc}", url=self.url) from exc
        return ConnectionResponse(
            url=resp.geturl(),
            status=resp.getcode(),
            headers=dict(resp.headers.items()),
            stream=resp,
        )


class RequestsConnection(Connection):
    transport = "requests"

    def __init__(self, url: str, method: str = "GET") -> None:
        super().__init__(url, method)
        self._raw_response: requests.Response | None = None

    def _open(self) -> ConnectionResponse:
        headers = self.request_properties
        data = self.body()
        if data is not None and self.get_request_property("Content-Type") is None:
            # urllib sends bodies as form data unless told otherwise
            headers["Content-Type"] = _FORM_CONTENT_TYPE
        try:
            response = requests.request(
                self.method,
                self.url,
                headers=headers,
                data=data,
                allow_redirects=self.follow_redirects,
                stream=True,
            )
        except ValueError as exc:
            if isinstance(exc, OSError):
                raise
            raise HttpIOError(f"Cannot send request: {exc}", url=self.url) from exc
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            raise
        self._raw_response = response
        if response.is_redirect and not self.follow_redirects:
            # requests drains unfollowed redirects to release the socket
            stream: BinaryIO = io.BytesIO(response.content)
        else:
            response.raw.decode_content = True
            stream = response.raw
        return ConnectionResponse(
            url=response.url,
            status=response.status_code,
            headers=dict(response.headers.items()),
            stream=stream,
        )

    def disconnect(self) -> None:
        if self._raw_response is not None:
            self._raw_response.close()


_TRANSPORTS: dict[str, type[Connection]] = {
    UrllibConnection.transport: UrllibConnection,
    RequestsConnection.transport: RequestsConnection,
}


def available_transports() -> list[str]:
    return sorted(_TRANSPORTS)


def open_connection(
    url: str,
    method: str = "GET",
    *,
    transport: str = DEFAULT_TRANSPORT,
) -> Connection:
    """Validate ``url`` and return an unconnected :class:`Connection` for it."""

    try:
        parsed = urllib.parse.urlsplit(url)
        hostname = parsed.hostname
        parsed.port  # raises on a non-numeric or out-of-range port
    except ValueError as exc:
        raise MalformedURLError(f"Invalid URL: {exc}", url=url) from exc
    if parsed.scheme.lower() not in _SUPPORTED_SCHEMES:
        raise MalformedURLError(f"Unsupported URL scheme '{parsed.scheme}'", url=url)
    if not hostname:
        raise MalformedURLError("URL has no host", url=url)

    try:
        connection_cls = _TRANSPORTS[transport.lower()]
    except KeyError as exc:
        available = ", ".join(available_transports())
        raise ValueError(f"Unknown transport '{transport}' (available: {available})") from exc
    return connection_cls(url, method)


__all__ = [
    "Connection",
    "ConnectionResponse",
    "DEFAULT_TRANSPORT",
    "RequestsConnection",
    "UrllibConnection",
    "available_transports",
    "open_connection",
]
