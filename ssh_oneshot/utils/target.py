"""Connection target parsing."""

from ssh_oneshot.utils.identity import local_username


def has_explicit_user(target: str) -> bool:
    """Check if a target string carries a non-empty ``user@`` part."""
    user, sep, _ = target.partition("@")
    return bool(sep and user)


def parse_target(target: str) -> tuple[str, str]:
    """Split a ``[user@]host`` connection string.

    Splits on the first ``@``. Without one, the user is the local account
    name and the whole string is the host. An empty user part (``@host``)
    also falls back to the local account name.

    Returns:
        Tuple of (user, host)

    Raises:
        IdentityLookupError: If the local account lookup fails
    """
    username = local_username()

    user, sep, host = target.partition("@")
    if not sep:
        return username, target
    return user or username, host
