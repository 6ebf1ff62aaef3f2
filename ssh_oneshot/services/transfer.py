"""Single-file push over the ``scp -t`` sink protocol.

The remote side runs ``scp -t <target>``; the local side sends one
``C0644 <size> <name>`` header line, the file body, and a terminating NUL
byte, then closes stdin. Acknowledgements from the sink are not read;
the receiver's exit status decides success.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO

import asyncssh

from ssh_oneshot.errors import TransferError
from ssh_oneshot.models import RemoteSession, TransferDescriptor
from ssh_oneshot.utils.shell import scp_sink_command

logger = logging.getLogger(__name__)

CHUNK_SIZE = 32 * 1024


def _describe(output: bytes | str | None) -> str:
    """Render receiver output for an error message."""
    if not output:
        return ""
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return output.strip("\x00\x01\x02 \r\n")


class FilePusher:
    """Uploads one local file to a remote path."""

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    async def upload(
        self,
        session: RemoteSession,
        source: Path | str,
        target: str,
    ) -> TransferDescriptor:
        """Push ``source`` to ``target`` on the session's host.

        The session is closed on every exit path.

        Returns:
            TransferDescriptor describing what was sent

        Raises:
            TransferError: If the source cannot be read or the receiver fails
        """
        async with session:
            try:
                src = open(source, "rb")
            except OSError as e:
                raise TransferError(f"Cannot open source file {source}: {e}") from e

            with src:
                try:
                    size = os.fstat(src.fileno()).st_size
                except OSError as e:
                    raise TransferError(f"Cannot stat source file {source}: {e}") from e

                descriptor = TransferDescriptor(str(source), target, size)
                await self._push(session, src, descriptor)

        logger.info(
            "Uploaded %s -> %s:%s (%d bytes)",
            descriptor.source_path,
            session.params.host,
            descriptor.target_path,
            descriptor.size,
        )
        return descriptor

    async def _push(
        self,
        session: RemoteSession,
        src: BinaryIO,
        descriptor: TransferDescriptor,
    ) -> None:
        command = scp_sink_command(descriptor.target_path)
        try:
            process = await session.connection.create_process(command, encoding=None)
        except (asyncssh.Error, OSError) as e:
            raise TransferError(
                f"Cannot start receiver on {session.params.host}: {e}"
            ) from e

        writer = asyncio.create_task(self._send(process.stdin, src, descriptor))
        waiter = asyncio.create_task(process.wait())

        done, pending = await asyncio.wait(
            {writer, waiter}, return_when=asyncio.FIRST_EXCEPTION
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        # Receiver rejection takes precedence over writer errors
        if waiter in done and waiter.exception() is None:
            completed = waiter.result()
            if completed.exit_status != 0:
                detail = _describe(completed.stderr) or _describe(completed.stdout)
                raise TransferError(
                    f"Receiver on {session.params.host} exited with "
                    f"status {completed.exit_status}: {detail or 'no output'}"
                )

        if writer in done and writer.exception() is not None:
            error = writer.exception()
            raise TransferError(
                f"Transfer of {descriptor.source_path} failed: {error}"
            ) from error

        if waiter not in done:
            raise TransferError(f"Receiver on {session.params.host} did not finish")
        if waiter.exception() is not None:
            error = waiter.exception()
            raise TransferError(
                f"Receiver on {session.params.host} failed: {error}"
            ) from error

    async def _send(
        self,
        stdin: "asyncssh.SSHWriter[bytes]",
        src: BinaryIO,
        descriptor: TransferDescriptor,
    ) -> None:
        """Write header, body and trailing NUL, then close stdin."""
        stdin.write(descriptor.header())

        remaining = descriptor.size
        while remaining > 0:
            chunk = src.read(min(self.chunk_size, remaining))
            if not chunk:
                raise TransferError(
                    f"{descriptor.source_path} shrank during transfer "
                    f"({remaining} bytes missing)"
                )
            stdin.write(chunk)
            await stdin.drain()
            remaining -= len(chunk)

        stdin.write(b"\x00")
        await stdin.drain()
        stdin.write_eof()
