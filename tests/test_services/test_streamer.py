"""Tests for streaming command execution."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from ssh_oneshot.errors import StreamSetupError
from ssh_oneshot.models import ConnectionParameters, RemoteSession
from ssh_oneshot.services.streamer import CommandStreamer


def make_reader(lines: list[str], error: Exception | None = None) -> MagicMock:
    """Create a reader returning ``lines`` then EOF, or ``error``."""
    reader = MagicMock()
    tail: list[object] = [error] if error is not None else [""]
    reader.readline = AsyncMock(side_effect=[*lines, *tail])
    return reader


def make_process(
    stdout: list[str],
    stderr: list[str] | None = None,
    exit_status: int = 0,
    stdout_error: Exception | None = None,
) -> MagicMock:
    process = MagicMock()
    process.stdout = make_reader(stdout, stdout_error)
    process.stderr = make_reader(stderr or [])
    process.wait_closed = AsyncMock()
    process.exit_status = exit_status
    return process


def make_session(process: MagicMock | None = None) -> RemoteSession:
    conn = MagicMock()
    conn.create_process = AsyncMock(return_value=process)
    conn.wait_closed = AsyncMock()
    return RemoteSession(conn, ConnectionParameters(user="root", host="box"))


@pytest.mark.asyncio
async def test_run_returns_lines_with_newlines() -> None:
    """Each line is terminated by exactly one newline."""
    session = make_session(make_process(["hello\r\n", "world\n"]))

    output = await CommandStreamer().run(session, "echo hello; echo world")

    assert output == "hello\nworld\n"


@pytest.mark.asyncio
async def test_run_requests_pty() -> None:
    """The command runs on a pty of the configured type."""
    session = make_session(make_process([]))

    await CommandStreamer(term_type="vt100").run(session, "ls -l")

    session.connection.create_process.assert_called_once_with(
        "ls -l",
        term_type="vt100",
        term_size=(80, 24),
        encoding="utf-8",
        errors="replace",
    )


@pytest.mark.asyncio
async def test_no_output() -> None:
    """A silent command yields an empty string."""
    session = make_session(make_process([]))

    assert await CommandStreamer().run(session, "true") == ""


@pytest.mark.asyncio
async def test_final_line_without_newline() -> None:
    """A trailing partial line is still delivered."""
    session = make_session(make_process(["first\n", "last"]))

    assert await CommandStreamer().run(session, "printf") == "first\nlast\n"


@pytest.mark.asyncio
async def test_stderr_lines_are_merged() -> None:
    """Lines from both streams arrive, each stream in its own order."""
    session = make_session(make_process(["out1\n", "out2\n"], ["err1\n", "err2\n"]))

    stream = await CommandStreamer().stream(session, "cmd")
    lines = [line async for line in stream]

    assert sorted(lines) == ["err1", "err2", "out1", "out2"]
    assert lines.index("out1") < lines.index("out2")
    assert lines.index("err1") < lines.index("err2")


@pytest.mark.asyncio
async def test_completion_carries_exit_status() -> None:
    """Exit status is reported on the completion marker."""
    session = make_session(make_process(["oops\n"], exit_status=3))

    result = await (await CommandStreamer().stream(session, "false")).collect()

    assert result.lines == ["oops"]
    assert result.completion.exit_status == 3
    assert result.completion.error is None


@pytest.mark.asyncio
async def test_session_closed_after_output_ends() -> None:
    """The session is released once the stream completes."""
    process = make_process(["a\n"])
    session = make_session(process)

    stream = await CommandStreamer().stream(session, "cmd")
    completion = await stream.wait()

    assert stream.done
    assert completion.exit_status == 0
    assert session.is_closed
    process.wait_closed.assert_awaited_once()
    session.connection.close.assert_called_once()


@pytest.mark.asyncio
async def test_iteration_after_completion_stops() -> None:
    """Iterating a finished stream yields nothing more."""
    session = make_session(make_process(["a\n"]))
    stream = await CommandStreamer().stream(session, "cmd")
    await stream.collect()

    assert [line async for line in stream] == []


@pytest.mark.asyncio
async def test_setup_failure_closes_session() -> None:
    """A failure to start the command raises and releases the session."""
    session = make_session()
    session.connection.create_process.side_effect = asyncssh.ChannelOpenError(
        2, "no session"
    )

    with pytest.raises(StreamSetupError) as exc_info:
        await CommandStreamer().stream(session, "cmd")

    assert "root@box:22" in str(exc_info.value)
    assert session.is_closed


@pytest.mark.asyncio
async def test_read_error_ends_stream_with_error() -> None:
    """Lines before a read error are kept and the error is reported."""
    process = make_process(
        ["partial\n"], stdout_error=asyncssh.ConnectionLost("reset")
    )
    session = make_session(process)

    result = await (await CommandStreamer().stream(session, "cmd")).collect()

    assert result.lines == ["partial"]
    assert result.completion.failed
    assert isinstance(result.completion.error, asyncssh.ConnectionLost)
    process.close.assert_called_once()
    process.wait_closed.assert_not_awaited()
    assert session.is_closed


@pytest.mark.asyncio
async def test_small_queue_delivers_every_line() -> None:
    """A one-slot buffer loses nothing."""
    lines = [f"line {i}\n" for i in range(50)]
    session = make_session(make_process(lines))

    output = await CommandStreamer(queue_size=1).run(session, "seq 50")

    assert output == "".join(lines)


@pytest.mark.asyncio
async def test_repeated_runs_are_independent() -> None:
    """One streamer serves many sessions."""
    streamer = CommandStreamer()

    first = await streamer.run(make_session(make_process(["1\n"])), "echo 1")
    second = await streamer.run(make_session(make_process(["2\n"])), "echo 2")

    assert (first, second) == ("1\n", "2\n")


@pytest.mark.asyncio
async def test_completion_posted_when_close_fails() -> None:
    """A failing session close still ends the stream."""
    session = make_session(make_process(["a\n"], exit_status=0))
    session.connection.wait_closed.side_effect = OSError("close failed")

    stream = await CommandStreamer().stream(session, "cmd")
    result = await asyncio.wait_for(stream.collect(), timeout=5)

    assert result.lines == ["a"]
    assert result.completion.exit_status == 0
    with pytest.raises(OSError, match="close failed"):
        await stream._task


@pytest.mark.asyncio
async def test_wait_discards_pending_lines() -> None:
    """wait() drains unread lines and returns the completion."""
    session = make_session(make_process(["a\n", "b\n"], exit_status=4))

    stream = await CommandStreamer().stream(session, "cmd")
    completion = await stream.wait()

    assert completion.exit_status == 4
    assert [line async for line in stream] == []
