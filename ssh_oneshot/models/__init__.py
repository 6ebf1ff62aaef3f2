"""Data models for ssh_oneshot."""

from ssh_oneshot.models.command import ExecutionResult, StreamCompletion
from ssh_oneshot.models.host_key import HostKeyMode, HostKeyPolicy
from ssh_oneshot.models.ssh import (
    DEFAULT_PORT,
    ConfigBlock,
    ConnectionOverrides,
    ConnectionParameters,
    RemoteSession,
)
from ssh_oneshot.models.transfer import SCP_MODE, TransferDescriptor

__all__ = [
    "DEFAULT_PORT",
    "SCP_MODE",
    "ConfigBlock",
    "ConnectionOverrides",
    "ConnectionParameters",
    "ExecutionResult",
    "HostKeyMode",
    "HostKeyPolicy",
    "RemoteSession",
    "StreamCompletion",
    "TransferDescriptor",
]
