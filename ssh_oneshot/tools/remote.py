"""MCP tools for one-shot remote commands and uploads."""

import logging

from ssh_oneshot.config.host_keys import policy_from_settings
from ssh_oneshot.errors import SSHOneshotError
from ssh_oneshot.models import ConnectionParameters, ExecutionResult
from ssh_oneshot.services.connection import connect, resolve_from_target
from ssh_oneshot.services.state import get_settings
from ssh_oneshot.services.streamer import CommandStreamer
from ssh_oneshot.services.transfer import FilePusher

logger = logging.getLogger(__name__)


def _resolve(target: str) -> ConnectionParameters:
    """Resolve a target and attach the configured host key policy."""
    settings = get_settings()
    params = resolve_from_target(target, config_path=settings.ssh_config_path)
    params.host_key_policy = policy_from_settings(
        settings.known_hosts,
        settings.strict_host_key_checking,
    )
    return params


def format_execution(result: ExecutionResult) -> str:
    """Render command output with exit status and stream error notes."""
    parts = []
    if result.lines:
        parts.append(result.output.rstrip("\n"))
    if result.completion.error is not None:
        parts.append(f"[output ended early: {result.completion.error}]")
    if result.completion.exit_status not in (0, None):
        parts.append(f"[exit code: {result.completion.exit_status}]")
    return "\n".join(parts) if parts else "(no output)"


async def ssh_run(target: str, command: str) -> str:
    """Run a shell command on a remote host over SSH.

    stdout and stderr are merged, line by line, into one output.

    Args:
        target: Remote host as "user@host" or a ~/.ssh/config alias
        command: Shell command to run

    Returns:
        Combined command output, or an error message
    """
    settings = get_settings()
    try:
        params = _resolve(target)
        session = await connect(params, connect_timeout=settings.connect_timeout)
        streamer = CommandStreamer(
            term_type=settings.term_type,
            queue_size=settings.stream_buffer,
        )
        stream = await streamer.stream(session, command)
        result = await stream.collect()
    except SSHOneshotError as e:
        logger.warning("ssh_run on %s failed: %s", target, e)
        return f"Error: {e}"

    return format_execution(result)


async def ssh_upload(target: str, source: str, destination: str) -> str:
    """Upload one local file to a remote host over SSH (scp).

    Args:
        target: Remote host as "user@host" or a ~/.ssh/config alias
        source: Local file path
        destination: Remote file path

    Returns:
        Transfer summary, or an error message
    """
    settings = get_settings()
    try:
        params = _resolve(target)
        session = await connect(params, connect_timeout=settings.connect_timeout)
        descriptor = await FilePusher().upload(session, source, destination)
    except SSHOneshotError as e:
        logger.warning("ssh_upload to %s failed: %s", target, e)
        return f"Error: {e}"

    return (
        f"Uploaded {descriptor.source_path} -> {target}:{descriptor.target_path} "
        f"({descriptor.size} bytes)"
    )
