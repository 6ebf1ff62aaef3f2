"""Connection parameter resolution and SSH session establishment.

Resolution precedence, highest first:

1. fields set explicitly on ``ConnectionOverrides``;
2. an explicit ``user@`` in the target string (user only);
3. the matching stanza of the per-user SSH config file;
4. the target string itself, port 22 and the local account name.

Nothing here is retried: every failure is raised to the caller.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import asyncssh

from ssh_oneshot.config.parser import SSHConfigParser
from ssh_oneshot.errors import ConfigError, ConnectionError, KeyParseError
from ssh_oneshot.models import (
    ConnectionOverrides,
    ConnectionParameters,
    RemoteSession,
)
from ssh_oneshot.utils.target import has_explicit_user, parse_target

logger = logging.getLogger(__name__)

AGENT_SOCKET_ENV = "SSH_AUTH_SOCK"


def resolve_from_target(
    target: str,
    overrides: ConnectionOverrides | None = None,
    config_path: Path | str | None = None,
) -> ConnectionParameters:
    """Resolve connection parameters for a ``[user@]host`` target.

    Args:
        target: Connection string
        overrides: Fields the caller sets explicitly
        config_path: SSH config file (default: ~/.ssh/config)

    Returns:
        Resolved ConnectionParameters. ``host_key_policy`` is None unless
        supplied through ``overrides``.

    Raises:
        IdentityLookupError: If the local account cannot be determined
        ConfigReadError: If the config file exists but is unreadable
        ConfigParseError: If a config directive cannot be processed
    """
    user, host = parse_target(target)
    params = ConnectionParameters(user=user, host=host)

    from_file = SSHConfigParser(config_path).resolve(host)
    if from_file is not None:
        if has_explicit_user(target) or not from_file.user:
            from_file.user = user
        params = from_file

    if overrides is not None:
        params = overrides.apply(params)

    logger.debug("Resolved target %s -> %s", target, params.address)
    return params


@dataclass
class AuthMethods:
    """Authentication candidates offered to the server, in priority order."""

    password: str | None = field(default=None, repr=False)
    client_keys: list[Any] = field(default_factory=list, repr=False)
    agent: asyncssh.SSHAgentClient | None = field(default=None, repr=False)
    names: list[str] = field(default_factory=list)

    @property
    def preferred_auth(self) -> tuple[str, ...]:
        """SSH auth method names in the order they were added."""
        order = []
        if self.password:
            order.append("password")
        if self.client_keys:
            order.append("publickey")
        return tuple(order)

    async def close(self) -> None:
        """Release the agent connection, if one was opened."""
        if self.agent is not None:
            self.agent.close()
            await self.agent.wait_closed()
            self.agent = None


def _load_private_key(params: ConnectionParameters) -> Any | None:
    """Load the explicit key bytes, else the identity file, else nothing.

    Raises:
        KeyParseError: If the chosen key source cannot be read or parsed
    """
    if params.identity_key:
        try:
            return asyncssh.import_private_key(params.identity_key)
        except (asyncssh.KeyImportError, ValueError) as e:
            raise KeyParseError(f"Invalid private key data: {e}") from e

    if params.identity_file:
        try:
            return asyncssh.read_private_key(params.identity_file)
        except (OSError, asyncssh.KeyImportError, ValueError) as e:
            raise KeyParseError(
                f"Cannot load private key {params.identity_file}: {e}"
            ) from e

    return None


async def _probe_agent(agent_path: str | None) -> tuple[asyncssh.SSHAgentClient | None, list[Any]]:
    """Connect to the identity agent and list its keys.

    An unreachable or empty agent yields ``(None, [])`` and is not an error.
    """
    if not agent_path:
        return None, []

    try:
        agent = await asyncssh.connect_agent(agent_path)
    except (OSError, asyncssh.ChannelOpenError) as e:
        logger.debug("SSH agent at %s not reachable: %s", agent_path, e)
        return None, []

    try:
        keys = list(await agent.get_keys())
    except (asyncssh.Error, OSError, ValueError) as e:
        logger.debug("SSH agent at %s unusable: %s", agent_path, e)
        keys = []

    if not keys:
        agent.close()
        await agent.wait_closed()
        return None, []
    return agent, keys


async def build_auth(
    params: ConnectionParameters,
    agent_path: str | None = None,
) -> AuthMethods:
    """Assemble authentication candidates.

    Priority: password, explicit key bytes or identity file, agent keys.
    All candidates are offered together and the server picks.

    Args:
        params: Resolved connection parameters
        agent_path: Agent socket (default: $SSH_AUTH_SOCK)

    Returns:
        AuthMethods; call ``close()`` once the connection is established

    Raises:
        KeyParseError: If an explicit key cannot be loaded
    """
    methods = AuthMethods()

    if params.password:
        methods.password = params.password
        methods.names.append("password")

    key = _load_private_key(params)
    if key is not None:
        methods.client_keys.append(key)
        methods.names.append("key-bytes" if params.identity_key else "identity-file")

    if agent_path is None:
        agent_path = os.environ.get(AGENT_SOCKET_ENV)
    agent, agent_keys = await _probe_agent(agent_path)
    if agent is not None:
        methods.agent = agent
        methods.client_keys.extend(agent_keys)
        methods.names.append(f"agent({len(agent_keys)} keys)")

    return methods


async def connect(
    params: ConnectionParameters,
    connect_timeout: float | None = None,
    agent_path: str | None = None,
) -> RemoteSession:
    """Authenticate and open a session to the resolved host.

    Args:
        params: Resolved connection parameters with a host key policy
        connect_timeout: Seconds allowed for dial and handshake
        agent_path: Agent socket (default: $SSH_AUTH_SOCK)

    Returns:
        RemoteSession owning the new connection

    Raises:
        ConfigError: If no host key policy was chosen
        KeyParseError: If an explicit key or pinned host key is invalid
        ConnectionError: If dial, handshake, or authentication fails
    """
    policy = params.host_key_policy
    if policy is None:
        raise ConfigError(
            f"No host key policy set for {params.host}: choose "
            "HostKeyPolicy.known_hosts(), .pinned() or .insecure()"
        )
    if policy.is_insecure:
        logger.warning(
            "Host key verification DISABLED for %s - vulnerable to MITM attacks",
            params.host,
        )

    try:
        known_hosts = policy.known_hosts_arg()
    except (asyncssh.KeyImportError, ValueError) as e:
        raise KeyParseError(f"Invalid pinned host key: {e}") from e

    try:
        port = int(params.port)
    except ValueError as e:
        raise ConnectionError(params.address, e) from e

    auth = await build_auth(params, agent_path)
    logger.info(
        "Opening SSH connection to %s (auth=%s)",
        params.address,
        ", ".join(auth.names) or "none",
    )

    options: dict[str, Any] = {
        "port": port,
        "username": params.user,
        "known_hosts": known_hosts,
        "client_keys": auth.client_keys,
        "password": auth.password,
        "agent_path": None,
        "config": None,
    }
    if auth.preferred_auth:
        options["preferred_auth"] = auth.preferred_auth
    if connect_timeout:
        options["connect_timeout"] = connect_timeout

    try:
        conn = await asyncssh.connect(params.host, **options)
    except (OSError, asyncssh.Error, asyncio.TimeoutError) as e:
        logger.error("Connection to %s failed: %s", params.address, e)
        raise ConnectionError(params.address, e) from e
    finally:
        await auth.close()

    logger.info("SSH connection established to %s", params.address)
    return RemoteSession(conn, params)
