"""Services for ssh_oneshot."""

from ssh_oneshot.services.connection import (
    AuthMethods,
    build_auth,
    connect,
    resolve_from_target,
)
from ssh_oneshot.services.streamer import CommandStream, CommandStreamer
from ssh_oneshot.services.transfer import FilePusher

__all__ = [
    "AuthMethods",
    "CommandStream",
    "CommandStreamer",
    "FilePusher",
    "build_auth",
    "connect",
    "resolve_from_target",
]
