"""Form-encoded parameter payloads."""

from __future__ import annotations

import urllib.parse
from typing import Any, Iterator

from .errors import ParamEncodingError


class ParamBuilder:
    """Ordered ``key=value`` pairs rendered as ``application/x-www-form-urlencoded``.

    Overwriting a key keeps it at its original position.
    """

    def __init__(self) -> None:
        self._params: dict[str, str] = {}

    @classmethod
    def create(cls, key: Any, value: Any) -> "ParamBuilder":
        """Return a builder seeded with one entry, stored as given."""

        return cls().set_raw(key, value)

    @staticmethod
    def encode(value: Any) -> str:
        try:
            return urllib.parse.quote_plus(str(value), encoding="utf-8", errors="strict")
        except UnicodeEncodeError as exc:
            raise ParamEncodingError(f"Cannot encode {value!r} as UTF-8") from exc

    def set(self, key: Any, value: Any) -> "ParamBuilder":
        """Encode ``key`` and ``value`` then store them."""

        self._params[self.encode(key)] = self.encode(value)
        return self

    def set_raw(self, key: Any, value: Any) -> "ParamBuilder":
        """Store ``key`` and ``value`` without encoding."""

        self._params[str(key)] = str(value)
        return self

    def get_bytes(self) -> bytes:
        return str(self).encode("utf-8")

    def __str__(self) -> str:
        return "&".join(f"{key}={value}" for key, value in self._params.items())

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._params.items())

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __repr__(self) -> str:
        return f"ParamBuilder({self._params!r})"


__all__ = ["ParamBuilder"]
