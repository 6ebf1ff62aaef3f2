"""SSH client config parser.

Reads an OpenSSH-style config file and resolves the settings of a single
host alias.

Only a line-oriented subset of the OpenSSH grammar is understood, and the
matching rules differ from OpenSSH:

- a ``Host`` pattern matches only when it equals the alias exactly
  (no globbing, no multiple patterns per line);
- the first matching stanza wins and scanning stops at the next ``Host``
  line, so settings are never merged across stanzas.
"""

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

from ssh_oneshot.errors import ConfigParseError, ConfigReadError, IdentityLookupError
from ssh_oneshot.models import ConfigBlock, ConnectionParameters
from ssh_oneshot.utils.identity import home_directory

logger = logging.getLogger(__name__)

_DIRECTIVE = re.compile(r"^\s*(\w+)\s+(\S+)\s*")


def _expand_home(value: str) -> str:
    """Replace a leading ``~/`` with the local home directory.

    Raises:
        ConfigParseError: If the home directory cannot be resolved
    """
    if not value.startswith("~/"):
        return value
    try:
        home = home_directory()
    except IdentityLookupError as e:
        raise ConfigParseError(f"Cannot expand IdentityFile '{value}': {e}") from e
    return os.path.join(str(home), value[2:])


def parse_client_config(
    lines: Iterable[str],
    alias: str,
) -> ConnectionParameters | None:
    """Resolve the stanza for ``alias`` from config text.

    Args:
        lines: Config file lines (a text stream works)
        alias: Host alias to look up

    Returns:
        Parameters from the matching stanza, or None if no stanza matches.
        The user is empty when the stanza sets none.

    Raises:
        ConfigParseError: If an IdentityFile cannot be expanded
    """
    block: ConfigBlock | None = None

    for line in lines:
        match = _DIRECTIVE.match(line)
        if match is None:
            continue

        key = match.group(1).lower()
        value = match.group(2)

        if key == "host":
            if block is not None:
                break
            if value == alias:
                block = ConfigBlock(host=value)
            continue

        if block is None:
            continue

        if key == "hostname":
            block.host = value
        elif key == "user":
            block.user = value
        elif key == "identityfile":
            block.identity_file = _expand_home(value)
        elif key == "port":
            block.port = value

    if block is None:
        return None
    return block.to_parameters()


class SSHConfigParser:
    """Resolver for a per-user SSH client config file."""

    def __init__(self, config_path: Path | str | None = None):
        """Initialize SSH config parser.

        Args:
            config_path: Path to SSH config file (default: ~/.ssh/config)
        """
        if config_path is None:
            config_path = home_directory() / ".ssh" / "config"

        self.config_path = Path(config_path)

    def resolve(self, alias: str) -> ConnectionParameters | None:
        """Resolve ``alias`` against the config file.

        A missing file is not an error and yields no result.

        Returns:
            Parameters from the matching stanza, or None

        Raises:
            ConfigReadError: If the file exists but cannot be read
            ConfigParseError: If a directive cannot be processed
        """
        if not self.config_path.exists():
            logger.debug("SSH config not found: %s", self.config_path)
            return None

        try:
            with self.config_path.open(encoding="utf-8", errors="replace") as f:
                params = parse_client_config(f, alias)
        except OSError as e:
            raise ConfigReadError(str(self.config_path), e) from e

        if params is None:
            logger.debug("No stanza for %s in %s", alias, self.config_path)
        else:
            logger.debug(
                "Resolved %s from %s -> %s",
                alias,
                self.config_path,
                params.address,
            )
        return params
