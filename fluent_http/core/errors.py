"""Exceptions raised by the request builder and its transports."""

from __future__ import annotations


class HttpIOError(OSError):
    """Raised when a connection cannot be opened, written or read."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url

    def __str__(self) -> str:
        base = super().__str__()
        if not self.url:
            return base
        return f"{base} (url: {self.url})"


class MalformedURLError(HttpIOError):
    """Raised when a URL has no http(s) scheme or no host."""


class ParamEncodingError(RuntimeError):
    """Raised when a value cannot be percent-encoded as UTF-8.

    This points at broken input data (for example lone surrogates) rather than a
    caller mistake that can be handled, so it is not an ``OSError``.
    """


__all__ = ["HttpIOError", "MalformedURLError", "ParamEncodingError"]
