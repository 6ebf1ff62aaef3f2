"""Error types raised by ssh_oneshot.

Every failure reaches the caller synchronously at the call that triggered it.
Nothing is retried and nothing is downgraded to a warning.
"""


class SSHOneshotError(Exception):
    """Base class for all ssh_oneshot errors."""


class IdentityLookupError(SSHOneshotError):
    """Local account name or home directory could not be determined."""


class ConfigError(SSHOneshotError):
    """Connection parameters could not be resolved or are incomplete."""


class ConfigReadError(ConfigError):
    """SSH config file exists but cannot be read."""

    def __init__(self, path: str, original_error: Exception):
        """Initialize config read error.

        Args:
            path: Path of the unreadable config file
            original_error: Underlying OS error
        """
        self.path = path
        self.original_error = original_error
        super().__init__(f"Error reading SSH config file '{path}': {original_error}")


class ConfigParseError(ConfigError):
    """A config directive could not be processed."""


class KeyParseError(SSHOneshotError):
    """Supplied private key bytes or file are not a usable private key."""


class ConnectionError(SSHOneshotError):
    """Failed to dial, authenticate, or open a session."""

    def __init__(self, host: str, original_error: Exception):
        """Initialize connection error.

        Args:
            host: Address that was being connected to
            original_error: Original exception that caused the failure
        """
        self.host = host
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host}: {original_error}")


class StreamSetupError(ConnectionError):
    """Pty, output streams, or command start failed before streaming began."""


class TransferError(SSHOneshotError):
    """Upload failed locally or was rejected by the remote receiver."""
