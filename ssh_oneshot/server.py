"""ssh_oneshot FastMCP server.

A thin wrapper exposing the one-shot command and upload operations as MCP
tools. All SSH logic lives in services/.
"""

import logging
import sys

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from ssh_oneshot.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from ssh_oneshot.services.state import get_settings
from ssh_oneshot.tools import ssh_run, ssh_upload
from ssh_oneshot.utils.console import ColorfulFormatter


def _configure_logging() -> None:
    """Configure colorful logging for the ssh_oneshot package.

    Called at module load time so logging is configured before any
    loggers are used, regardless of how the server is started.
    """
    settings = get_settings()
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("ssh_oneshot")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Only add handler if not already configured
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    # Suppress noisy third-party loggers
    for noisy_logger in [
        "asyncssh",
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastmcp",
        "starlette",
        "anyio",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


# Configure logging at module load time
_configure_logging()

logger = logging.getLogger(__name__)


def configure_middleware(server: FastMCP) -> None:
    """Add middleware in order: ErrorHandling -> Logging.

    Args:
        server: The FastMCP server to configure.
    """
    settings = get_settings()
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(LoggingMiddleware())


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware and tools.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("ssh_oneshot")

    configure_middleware(server)

    server.tool()(ssh_run)
    server.tool()(ssh_upload)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


mcp = create_server()
