"""Middleware components for request processing."""

from .error_handler import register_exception_handlers
from .logging import logging_middleware

__all__ = [
    "register_exception_handlers",
    "logging_middleware",
]
