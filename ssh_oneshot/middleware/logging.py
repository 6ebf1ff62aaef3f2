"""Logging middleware for tool call tracking."""

import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from ssh_oneshot.middleware.base import OneshotMiddleware

_MAX_ARG_LENGTH = 50


class LoggingMiddleware(OneshotMiddleware):
    """Logs tool calls with arguments and duration.

    Example:
        >>> server.add_middleware(LoggingMiddleware(slow_threshold_ms=5000))
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        slow_threshold_ms: float = 10_000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            slow_threshold_ms: Duration above which a call is logged as a warning.
        """
        super().__init__(logger=logger)
        self.slow_threshold_ms = slow_threshold_ms

    def _format_args(self, args: dict[str, Any] | None) -> str:
        if not args:
            return "()"
        parts = []
        for key, value in args.items():
            if isinstance(value, str) and len(value) > _MAX_ARG_LENGTH:
                value = value[:_MAX_ARG_LENGTH] + "..."
            parts.append(f"{key}={value!r}")
        return f"({', '.join(parts)})"

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log tool name, arguments and timing around the call."""
        start = time.perf_counter()
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))

        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! TOOL: %s -> %s: %s [%.1fms]",
                tool_name,
                type(e).__name__,
                e,
                duration_ms,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        self.logger.log(level, "<<< TOOL: %s [%.1fms]", tool_name, duration_ms)
        return result
