"""Streaming command execution over a remote session.

The remote command's stdout and stderr are read concurrently by a single
producer task and merged into one queue of lines, closed by exactly one
``StreamCompletion`` marker. Lines keep their order within each stream, but
there is no ordering guarantee between the two streams: a stderr line may
arrive before a stdout line that was written earlier on the remote side.

Closing the session from outside while a stream is running is unsupported.
Callers that need a bound on execution time wrap ``run``/``collect`` in
``asyncio.wait_for``.
"""

import asyncio
import logging
from typing import Any

import asyncssh

from ssh_oneshot.errors import StreamSetupError
from ssh_oneshot.models import ExecutionResult, RemoteSession, StreamCompletion

logger = logging.getLogger(__name__)

TERM_SIZE = (80, 24)
DEFAULT_QUEUE_SIZE = 64

_READ_ERRORS = (asyncssh.Error, asyncssh.SignalReceived, asyncssh.BreakReceived, OSError)


def _strip_eol(line: str) -> str:
    """Drop a trailing newline and carriage return."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


class CommandStream:
    """Async iterator over the merged output lines of one remote command.

    Iteration ends when the completion marker is reached; the marker is
    then available from ``wait()``. No line queued before the marker is
    ever skipped.
    """

    def __init__(self, command: str, queue: "asyncio.Queue[Any]") -> None:
        self.command = command
        self._queue = queue
        self._completion: StreamCompletion | None = None
        self._task: asyncio.Task[None] | None = None

    def __aiter__(self) -> "CommandStream":
        return self

    async def __anext__(self) -> str:
        if self._completion is not None:
            raise StopAsyncIteration
        item = await self._queue.get()
        if isinstance(item, StreamCompletion):
            self._completion = item
            raise StopAsyncIteration
        return item

    @property
    def done(self) -> bool:
        """Check if the completion marker has been received."""
        return self._completion is not None

    async def _next_completion(self) -> StreamCompletion:
        """Read the queue up to the completion marker, dropping lines."""
        while self._completion is None:
            item = await self._queue.get()
            if isinstance(item, StreamCompletion):
                self._completion = item
        return self._completion

    async def wait(self) -> StreamCompletion:
        """Wait for the completion marker.

        Lines not yet consumed are discarded.
        """
        return await self._next_completion()

    async def collect(self) -> ExecutionResult:
        """Consume every remaining line and the completion marker."""
        result = ExecutionResult()
        async for line in self:
            result.lines.append(line)
        result.completion = await self._next_completion()
        return result


class CommandStreamer:
    """Runs commands on a session and streams their combined output."""

    def __init__(
        self,
        term_type: str = "xterm",
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        """Initialize streamer.

        Args:
            term_type: Terminal type for the requested pty
            queue_size: Lines buffered ahead of the consumer (0 = unbounded)
        """
        self.term_type = term_type
        self.queue_size = queue_size

    async def stream(self, session: RemoteSession, command: str) -> CommandStream:
        """Start ``command`` and return a stream of its output lines.

        The session is owned by the stream from here on and is closed once
        output ends, or immediately if setup fails.

        Raises:
            StreamSetupError: If the pty, output streams, or command start fail
        """
        try:
            process = await session.connection.create_process(
                command,
                term_type=self.term_type,
                term_size=TERM_SIZE,
                encoding="utf-8",
                errors="replace",
            )
        except (asyncssh.Error, OSError) as e:
            logger.error("Cannot start %r on %s: %s", command, session.params.address, e)
            await session.close()
            raise StreamSetupError(session.params.address, e) from e

        logger.debug("Streaming %r on %s", command, session.params.address)

        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.queue_size)
        result = CommandStream(command, queue)
        result._task = asyncio.create_task(self._produce(session, process, queue))
        return result

    async def run(self, session: RemoteSession, command: str) -> str:
        """Run ``command`` and return its output, one newline per line.

        Raises:
            StreamSetupError: If the command could not be started
        """
        result = await (await self.stream(session, command)).collect()
        return result.output

    async def _scan(
        self,
        reader: "asyncssh.SSHReader[str]",
        queue: "asyncio.Queue[Any]",
    ) -> Exception | None:
        """Forward lines from one output stream until EOF or a read error."""
        try:
            while True:
                line = await reader.readline()
                if not line:
                    return None
                await queue.put(_strip_eol(line))
        except _READ_ERRORS as e:
            return e

    async def _produce(
        self,
        session: RemoteSession,
        process: "asyncssh.SSHClientProcess[str]",
        queue: "asyncio.Queue[Any]",
    ) -> None:
        completion = StreamCompletion()
        try:
            errors = await asyncio.gather(
                self._scan(process.stdout, queue),
                self._scan(process.stderr, queue),
            )
            completion.error = next((e for e in errors if e is not None), None)

            if completion.error is None:
                await process.wait_closed()
            else:
                logger.warning(
                    "Output of %s ended with read error: %s",
                    session.params.address,
                    completion.error,
                )
                process.close()

            completion.exit_status = process.exit_status
            logger.debug(
                "Stream on %s finished (exit_status=%s)",
                session.params.address,
                completion.exit_status,
            )
        finally:
            try:
                await session.close()
            finally:
                await queue.put(completion)
