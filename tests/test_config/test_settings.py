"""Tests for environment settings."""

import os

import pytest

from ssh_oneshot.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SSH_ONESHOT_* variables from the environment."""
    for key in list(os.environ):
        if key.startswith("SSH_ONESHOT_"):
            monkeypatch.delenv(key)


def test_defaults() -> None:
    """Unset variables produce defaults."""
    settings = Settings.from_env()

    assert settings.ssh_config_path is None
    assert settings.known_hosts is None
    assert settings.strict_host_key_checking is True
    assert settings.connect_timeout == 30
    assert settings.term_type == "xterm"
    assert settings.stream_buffer == 64
    assert settings.transport == "stdio"
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Variables override defaults."""
    monkeypatch.setenv("SSH_ONESHOT_SSH_CONFIG", "/etc/ssh/custom_config")
    monkeypatch.setenv("SSH_ONESHOT_KNOWN_HOSTS", "none")
    monkeypatch.setenv("SSH_ONESHOT_STRICT_HOST_KEY_CHECKING", "false")
    monkeypatch.setenv("SSH_ONESHOT_CONNECT_TIMEOUT", "5")
    monkeypatch.setenv("SSH_ONESHOT_TRANSPORT", "HTTP")
    monkeypatch.setenv("SSH_ONESHOT_HTTP_PORT", "9000")
    monkeypatch.setenv("SSH_ONESHOT_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.ssh_config_path == "/etc/ssh/custom_config"
    assert settings.known_hosts == "none"
    assert settings.strict_host_key_checking is False
    assert settings.connect_timeout == 5
    assert settings.transport == "http"
    assert settings.http_port == 9000
    assert settings.log_level == "DEBUG"


def test_invalid_int_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Invalid integers log a warning and use the default."""
    monkeypatch.setenv("SSH_ONESHOT_STREAM_BUFFER", "lots")

    assert Settings.from_env().stream_buffer == 64


def test_invalid_transport_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unknown transports fall back to stdio."""
    monkeypatch.setenv("SSH_ONESHOT_TRANSPORT", "carrier-pigeon")

    assert Settings.from_env().transport == "stdio"
