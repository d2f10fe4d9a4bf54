"""Fluent builder for one-shot HTTP GET and POST requests."""

from .core import HttpIOError, Http, Method, ParamBuilder

__all__ = ["Http", "HttpIOError", "Method", "ParamBuilder"]
