"""Local account lookup."""

import getpass
from pathlib import Path

from ssh_oneshot.errors import IdentityLookupError


def local_username() -> str:
    """Return the invoking user's account name.

    Raises:
        IdentityLookupError: If the account name cannot be determined
    """
    try:
        return getpass.getuser()
    except (OSError, KeyError) as e:
        raise IdentityLookupError(f"Error determining current user: {e}") from e


def home_directory() -> Path:
    """Return the invoking user's home directory.

    Raises:
        IdentityLookupError: If the home directory cannot be determined
    """
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise IdentityLookupError(f"Error determining home directory: {e}") from e
