"""Helpers for loading configuration."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.http import DEFAULT_USER_AGENT
from ..core.transport import DEFAULT_TRANSPORT, available_transports
from ..utils.logging import configure_logging

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "FLUENT_HTTP_CONFIG"


@dataclass(slots=True)
class HttpSettings:
    user_agent: str = DEFAULT_USER_AGENT
    transport: str = DEFAULT_TRANSPORT
    follow_redirects: bool = True


@dataclass(slots=True)
class LoggingSettings:
    level: int = logging.INFO
    structured: bool | None = None


@dataclass(slots=True)
class AppConfig:
    http: HttpSettings = field(default_factory=HttpSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    """Return the config path and whether the caller asked for it explicitly."""

    if explicit:
        candidate, required = Path(explicit), True
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        if env_value:
            candidate, required = Path(env_value), True
        else:
            candidate, required = PROJECT_ROOT / DEFAULT_CONFIG_NAME, False
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate, required


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _as_bool(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError(f"Config option '{name}' must be a boolean, got {value!r}")


def _build_http(section: dict[str, Any]) -> HttpSettings:
    transport = str(section.get("transport", DEFAULT_TRANSPORT)).lower()
    if transport not in available_transports():
        available = ", ".join(available_transports())
        raise ValueError(f"Unknown transport '{transport}' in [http] (available: {available})")
    return HttpSettings(
        user_agent=str(section.get("user_agent", DEFAULT_USER_AGENT)),
        transport=transport,
        follow_redirects=_as_bool(
            section.get("follow_redirects", True), name="http.follow_redirects"
        ),
    )


def _build_logging(section: dict[str, Any]) -> LoggingSettings:
    level_name = str(section.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{level_name}' in [logging]")
    structured_raw = section.get("structured")
    structured = (
        _as_bool(structured_raw, name="logging.structured") if structured_raw is not None else None
    )
    return LoggingSettings(level=level, structured=structured)


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return AppConfig()

    data = _load_toml(path)
    return AppConfig(
        http=_build_http(data.get("http", {})),
        logging=_build_logging(data.get("logging", {})),
    )


def apply_logging(config: AppConfig) -> None:
    """Configure root logging from the ``[logging]`` section."""

    configure_logging(level=config.logging.level, structured=config.logging.structured)
