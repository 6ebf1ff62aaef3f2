"""Host key policy selection from settings.

Manages the known_hosts lookup used for MITM prevention.
"""

import logging
import os
from pathlib import Path

from ssh_oneshot.errors import ConfigError
from ssh_oneshot.models import HostKeyPolicy

logger = logging.getLogger(__name__)


def policy_from_settings(
    known_hosts: str | None,
    strict_checking: bool = True,
) -> HostKeyPolicy:
    """Resolve a host key policy with secure defaults.

    Args:
        known_hosts: Path to known_hosts file, 'none' to disable
            verification, or None for ~/.ssh/known_hosts
        strict_checking: Fail if the known_hosts file is missing

    Returns:
        HostKeyPolicy to attach to connection parameters

    Raises:
        ConfigError: If strict mode and the known_hosts file is missing
    """
    if known_hosts and known_hosts.lower() == "none":
        logger.critical(
            "SSH HOST KEY VERIFICATION DISABLED. "
            "This is INSECURE and vulnerable to MITM attacks."
        )
        return HostKeyPolicy.insecure()

    if known_hosts:
        path = Path(os.path.expanduser(known_hosts))
    else:
        path = Path.home() / ".ssh" / "known_hosts"

    if not path.exists():
        if strict_checking:
            raise ConfigError(
                f"SSH host key verification required but known_hosts "
                f"not found at {path}.\n\n"
                f"To fix this:\n"
                f"1. Add host keys: ssh-keyscan <hostname> >> {path}\n"
                f"2. Or disable verification (NOT RECOMMENDED): "
                f"SSH_ONESHOT_KNOWN_HOSTS=none"
            )
        logger.warning(
            "known_hosts not found at %s, verification disabled. This is insecure!",
            path,
        )
        return HostKeyPolicy.insecure()

    logger.debug("Host key verification against %s", path)
    return HostKeyPolicy.known_hosts(str(path))
