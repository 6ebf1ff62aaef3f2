"""One-shot remote command execution and file upload over SSH.

Resolve a ``[user@]host`` target against ~/.ssh/config, connect with
password, key and agent authentication, then either stream a command's
combined output line by line or push a single file with ``scp -t``.
"""

from ssh_oneshot.client import (
    resolve_from_target,
    run_command,
    stream_command,
    upload_file,
)
from ssh_oneshot.errors import (
    ConfigError,
    ConfigParseError,
    ConfigReadError,
    ConnectionError,
    IdentityLookupError,
    KeyParseError,
    SSHOneshotError,
    StreamSetupError,
    TransferError,
)
from ssh_oneshot.models import (
    ConnectionOverrides,
    ConnectionParameters,
    ExecutionResult,
    HostKeyPolicy,
    StreamCompletion,
    TransferDescriptor,
)

__all__ = [
    "ConfigError",
    "ConfigParseError",
    "ConfigReadError",
    "ConnectionError",
    "ConnectionOverrides",
    "ConnectionParameters",
    "ExecutionResult",
    "HostKeyPolicy",
    "IdentityLookupError",
    "KeyParseError",
    "SSHOneshotError",
    "StreamCompletion",
    "StreamSetupError",
    "TransferDescriptor",
    "TransferError",
    "resolve_from_target",
    "run_command",
    "stream_command",
    "upload_file",
]
