"""Tests for logging middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ssh_oneshot.middleware.logging import LoggingMiddleware


@pytest.fixture
def mock_tool_context() -> MagicMock:
    """Create a mock middleware context for tool calls."""
    context = MagicMock()
    context.method = "tools/call"
    context.message = MagicMock()
    context.message.name = "ssh_run"
    context.message.arguments = {"target": "deploy@web1", "command": "uptime"}
    return context


@pytest.mark.asyncio
async def test_logs_tool_call_and_completion(mock_tool_context: MagicMock) -> None:
    """Tool name, arguments and completion are logged."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="result")

    result = await middleware.on_call_tool(mock_tool_context, call_next)

    assert result == "result"
    start_call = str(mock_logger.info.call_args_list[0])
    assert ">>> TOOL" in start_call
    assert "deploy@web1" in start_call
    assert "<<< TOOL" in str(mock_logger.log.call_args)


@pytest.mark.asyncio
async def test_slow_call_logged_as_warning(mock_tool_context: MagicMock) -> None:
    """Calls over the threshold are logged at WARNING."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, slow_threshold_ms=0)

    await middleware.on_call_tool(mock_tool_context, AsyncMock(return_value="ok"))

    level = mock_logger.log.call_args.args[0]
    assert level == 30


@pytest.mark.asyncio
async def test_failed_call_logged_and_reraised(mock_tool_context: MagicMock) -> None:
    """Exceptions are logged as errors and propagated."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await middleware.on_call_tool(mock_tool_context, call_next)

    error_call = str(mock_logger.error.call_args)
    assert "!!! TOOL" in error_call
    assert "RuntimeError" in error_call


def test_long_arguments_truncated() -> None:
    """Long string arguments are shortened in the log line."""
    middleware = LoggingMiddleware()

    formatted = middleware._format_args({"command": "x" * 200})

    assert "..." in formatted
    assert len(formatted) < 100
    assert middleware._format_args(None) == "()"
