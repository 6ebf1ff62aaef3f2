"""Host key verification policy."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import asyncssh

from ssh_oneshot.errors import ConfigError


class HostKeyMode(Enum):
    """How the server's host key is checked."""

    KNOWN_HOSTS = "known_hosts"
    PINNED = "pinned"
    INSECURE = "insecure"


@dataclass(frozen=True)
class HostKeyPolicy:
    """Explicit host key verification strategy.

    There is no implicit default. Callers pick one of the constructors:
    a known_hosts file, a single pinned public key, or the insecure
    accept-anything policy.
    """

    mode: HostKeyMode
    known_hosts_path: str | None = None
    pinned_key: str | None = None

    @classmethod
    def known_hosts(cls, path: str) -> "HostKeyPolicy":
        """Verify against an OpenSSH known_hosts file."""
        return cls(mode=HostKeyMode.KNOWN_HOSTS, known_hosts_path=path)

    @classmethod
    def pinned(cls, public_key: str) -> "HostKeyPolicy":
        """Accept only the given OpenSSH-format public key."""
        return cls(mode=HostKeyMode.PINNED, pinned_key=public_key)

    @classmethod
    def insecure(cls) -> "HostKeyPolicy":
        """Accept any host key. Vulnerable to MITM attacks."""
        return cls(mode=HostKeyMode.INSECURE)

    @property
    def is_insecure(self) -> bool:
        """Check if verification is disabled."""
        return self.mode is HostKeyMode.INSECURE

    def known_hosts_arg(self) -> Any:
        """Build the ``known_hosts`` argument for ``asyncssh.connect``.

        Returns:
            None to disable checking, a file path, or a
            (trusted host keys, trusted CA keys, revoked keys) tuple

        Raises:
            ConfigError: If the policy lacks the key or path its mode needs
            asyncssh.KeyImportError: If the pinned key cannot be parsed
        """
        if self.mode is HostKeyMode.INSECURE:
            return None
        if self.mode is HostKeyMode.PINNED:
            if not self.pinned_key:
                raise ConfigError("Pinned host key policy has no key")
            return ([asyncssh.import_public_key(self.pinned_key)], [], [])
        if not self.known_hosts_path:
            raise ConfigError("known_hosts policy has no file path")
        return self.known_hosts_path
