"""One-shot remote operations.

Each call connects, performs exactly one operation on a fresh session,
and releases the session when the operation ends.

Example:
    params = resolve_from_target("deploy@web1")
    params.host_key_policy = HostKeyPolicy.known_hosts("~/.ssh/known_hosts")
    print(await run_command(params, "uptime"))
"""

from pathlib import Path

from ssh_oneshot.models import ConnectionParameters, TransferDescriptor
from ssh_oneshot.services.connection import connect, resolve_from_target
from ssh_oneshot.services.streamer import CommandStream, CommandStreamer
from ssh_oneshot.services.transfer import FilePusher

__all__ = [
    "resolve_from_target",
    "run_command",
    "stream_command",
    "upload_file",
]


async def stream_command(
    params: ConnectionParameters,
    command: str,
    streamer: CommandStreamer | None = None,
) -> CommandStream:
    """Connect and stream the merged output lines of ``command``.

    Raises:
        ConfigError: If no host key policy was chosen
        KeyParseError: If an explicit key is invalid
        ConnectionError: If connecting fails
        StreamSetupError: If the command could not be started
    """
    session = await connect(params)
    return await (streamer or CommandStreamer()).stream(session, command)


async def run_command(
    params: ConnectionParameters,
    command: str,
    streamer: CommandStreamer | None = None,
) -> str:
    """Connect, run ``command`` and return its output, one newline per line.

    Raises:
        Same as :func:`stream_command`
    """
    session = await connect(params)
    return await (streamer or CommandStreamer()).run(session, command)


async def upload_file(
    params: ConnectionParameters,
    source: Path | str,
    target: str,
) -> TransferDescriptor:
    """Connect and push one local file to ``target``.

    Raises:
        ConfigError: If no host key policy was chosen
        KeyParseError: If an explicit key is invalid
        ConnectionError: If connecting fails
        TransferError: If the upload fails
    """
    session = await connect(params)
    return await FilePusher().upload(session, source, target)
