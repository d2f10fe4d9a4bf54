"""Settings package exports."""

from .loader import (
    AppConfig,
    HttpSettings,
    LoggingSettings,
    apply_logging,
    load_config,
)

__all__ = [
    "AppConfig",
    "HttpSettings",
    "LoggingSettings",
    "apply_logging",
    "load_config",
]
