"""Tests for connection target parsing and local identity lookup."""

from unittest.mock import patch

import pytest

from ssh_oneshot.errors import IdentityLookupError
from ssh_oneshot.utils.identity import home_directory, local_username
from ssh_oneshot.utils.shell import scp_sink_command
from ssh_oneshot.utils.target import has_explicit_user, parse_target


@pytest.fixture
def local_user():
    """Pin the local account name."""
    with patch("ssh_oneshot.utils.target.local_username", return_value="localuser") as mock:
        yield mock


@pytest.mark.parametrize(
    "target,expected",
    [
        ("blub@bla", ("blub", "bla")),
        ("deploy@10.0.0.5", ("deploy", "10.0.0.5")),
        ("blubber", ("localuser", "blubber")),
        ("a@b@c", ("a", "b@c")),
        ("@bla", ("localuser", "bla")),
    ],
)
def test_parse_target(local_user, target: str, expected: tuple[str, str]) -> None:
    """Targets split on the first @; bare hosts get the local user."""
    assert parse_target(target) == expected


def test_identity_failure_propagates(local_user) -> None:
    """A failing local identity lookup is the only failure mode."""
    local_user.side_effect = IdentityLookupError("no user")

    with pytest.raises(IdentityLookupError):
        parse_target("host")


def test_has_explicit_user() -> None:
    """Only targets with @ carry an explicit user."""
    assert has_explicit_user("root@box")
    assert not has_explicit_user("box")
    assert not has_explicit_user("@box")


def test_local_username_wraps_lookup_errors() -> None:
    """Account lookup errors become IdentityLookupError."""
    with patch("ssh_oneshot.utils.identity.getpass.getuser", side_effect=KeyError("uid")):
        with pytest.raises(IdentityLookupError):
            local_username()


def test_home_directory_wraps_lookup_errors() -> None:
    """Home lookup errors become IdentityLookupError."""
    with patch("ssh_oneshot.utils.identity.Path.home", side_effect=RuntimeError("no home")):
        with pytest.raises(IdentityLookupError, match="no home"):
            home_directory()


def test_scp_sink_command_quotes_target() -> None:
    """Remote paths are shell-quoted."""
    assert scp_sink_command("/tmp/a.txt") == "scp -t /tmp/a.txt"
    assert scp_sink_command("/tmp/my file") == "scp -t '/tmp/my file'"
