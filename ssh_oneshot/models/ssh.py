"""SSH-related data models."""

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING

from ssh_oneshot.models.host_key import HostKeyPolicy

if TYPE_CHECKING:
    import asyncssh

DEFAULT_PORT = "22"


@dataclass
class ConnectionParameters:
    """Resolved parameters for one connection attempt.

    ``identity_key`` (raw key bytes) is strictly preferred over
    ``identity_file``; only one of them is consulted per attempt.
    """

    user: str
    host: str
    port: str = DEFAULT_PORT
    identity_file: str | None = None
    identity_key: bytes | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    host_key_policy: HostKeyPolicy | None = None

    @property
    def address(self) -> str:
        """Return ``user@host:port`` for log and error messages."""
        return f"{self.user}@{self.host}:{self.port}"


@dataclass
class ConnectionOverrides:
    """Fields a caller sets explicitly.

    Any field left as None is filled by target and config file resolution;
    any field set here is never overwritten by it.
    """

    user: str | None = None
    port: str | None = None
    identity_file: str | None = None
    identity_key: bytes | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    host_key_policy: HostKeyPolicy | None = None

    def apply(self, params: ConnectionParameters) -> ConnectionParameters:
        """Return a copy of ``params`` with every set override applied."""
        changes = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(params, **changes)


@dataclass
class ConfigBlock:
    """Settings collected from the single matching ``Host`` stanza."""

    host: str
    port: str = DEFAULT_PORT
    user: str | None = None
    identity_file: str | None = None

    def to_parameters(self) -> ConnectionParameters:
        """Convert the stanza into connection parameters.

        Returns:
            ConnectionParameters with an empty user if the stanza set none
        """
        return ConnectionParameters(
            user=self.user or "",
            host=self.host,
            port=self.port,
            identity_file=self.identity_file,
        )


class RemoteSession:
    """Single-use, single-owner session over one SSH connection.

    Exactly one command stream or upload runs per session. ``close`` is
    idempotent so the session is released exactly once whichever side
    finishes with it.
    """

    def __init__(
        self,
        connection: "asyncssh.SSHClientConnection",
        params: ConnectionParameters,
    ) -> None:
        self.connection = connection
        self.params = params
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """Check if the session was closed."""
        return self._closed

    async def close(self) -> None:
        """Close the underlying connection once."""
        if self._closed:
            return
        self._closed = True
        self.connection.close()
        await self.connection.wait_closed()

    async def __aenter__(self) -> "RemoteSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
