"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import defaultdict
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from ssh_oneshot.middleware.base import OneshotMiddleware


class ErrorHandlingMiddleware(OneshotMiddleware):
    """Logs and counts exceptions escaping MCP handlers, then re-raises them.

    Tools report expected SSH failures as ``Error: ...`` strings, so anything
    reaching this middleware is unexpected.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts by exception type name."""
        return dict(self._error_counts)

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Pass the request on, logging any exception before re-raising."""
        try:
            return await call_next(context)
        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            if self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error("Error in %s: %s: %s", context.method, error_type, e)
            raise
