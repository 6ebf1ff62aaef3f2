"""Shell command construction for remote invocations."""

import shlex


def quote_path(path: str) -> str:
    """Safely quote a remote path for shell commands.

    Args:
        path: File system path to quote

    Returns:
        Shell-safe quoted path
    """
    return shlex.quote(path)


def scp_sink_command(target_path: str) -> str:
    """Build the remote receiver command for a single-file push."""
    return f"scp -t {quote_path(target_path)}"
