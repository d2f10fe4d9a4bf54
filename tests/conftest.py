"""Shared fixtures, including a local HTTP server that records requests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Iterator

import pytest

_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Message
    body: bytes


@dataclass
class LocalServer:
    base_url: str = ""
    requests: list[RecordedRequest] = field(default_factory=list)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


_ROUTES: dict[str, tuple[int, bytes, dict[str, str]]] = {
    "/redirect": (302, b"moved", {"Location": "/target"}),
    "/target": (200, b"arrived", {}),
    "/empty": (200, b"", {}),
    "/missing": (404, b"not found", {}),
    "/unicode": (200, "héllo wörld ✓".encode("utf-8"), {"Content-Type": "text/plain; charset=utf-8"}),
}


def _handler_for(state: LocalServer) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args: object) -> None:
            pass

        def do_GET(self) -> None:
            self._dispatch()

        def do_POST(self) -> None:
            self._dispatch()

        def _dispatch(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            state.requests.append(RecordedRequest(self.command, self.path, self.headers, body))

            route = self.path.split("?", 1)[0]
            status, payload, headers = _ROUTES.get(route, (200, b"ok", {}))
            if route == "/echo":
                payload = body
            self.send_response(status)
            for key, value in headers.items():
                self.send_header(key, value)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if payload:
                self.wfile.write(payload)

    return Handler


@pytest.fixture(autouse=True)
def _no_proxies(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")


@pytest.fixture
def local_server() -> Iterator[LocalServer]:
    state = LocalServer()
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _handler_for(state))
    host, port = httpd.server_address[:2]
    state.base_url = f"http://{host}:{port}"
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield state
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)
