"""Utility exports."""

from .io_helper import read, write
from .logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "read",
    "write",
    "configure_logging",
    "get_logger",
    "JsonFormatter",
]
