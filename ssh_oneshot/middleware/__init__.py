"""ssh_oneshot MCP middleware components."""

from ssh_oneshot.middleware.base import OneshotMiddleware
from ssh_oneshot.middleware.errors import ErrorHandlingMiddleware
from ssh_oneshot.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "OneshotMiddleware",
]
