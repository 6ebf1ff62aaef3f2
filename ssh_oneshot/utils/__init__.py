"""Utilities for ssh_oneshot."""

from ssh_oneshot.utils.console import ColorfulFormatter
from ssh_oneshot.utils.identity import home_directory, local_username
from ssh_oneshot.utils.shell import quote_path, scp_sink_command
from ssh_oneshot.utils.target import has_explicit_user, parse_target

__all__ = [
    "ColorfulFormatter",
    "has_explicit_user",
    "home_directory",
    "local_username",
    "parse_target",
    "quote_path",
    "scp_sink_command",
]
