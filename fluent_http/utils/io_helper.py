"""Byte stream helpers."""

from __future__ import annotations

import io
from typing import BinaryIO

_CHUNK_SIZE = 1024


def read(stream: BinaryIO, *, encoding: str = "utf-8") -> str:
    """Drain ``stream`` until EOF and decode it."""

    buffer = io.BytesIO()
    while True:
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        buffer.write(chunk)
    return buffer.getvalue().decode(encoding)


def write(stream: BinaryIO, data: str, *, encoding: str = "utf-8") -> None:
    stream.write(data.encode(encoding))


__all__ = ["read", "write"]
