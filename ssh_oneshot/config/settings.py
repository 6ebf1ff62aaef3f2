"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # SSH client
    ssh_config_path: str | None = field(default=None)
    known_hosts: str | None = field(default=None)
    strict_host_key_checking: bool = field(default=True)
    connect_timeout: int = field(default=30)

    # Streaming
    term_type: str = field(default="xterm")
    stream_buffer: int = field(default=64)

    # Transport
    transport: str = field(default="stdio")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SSH_ONESHOT_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            ssh_config_path=os.getenv("SSH_ONESHOT_SSH_CONFIG") or None,
            known_hosts=os.getenv("SSH_ONESHOT_KNOWN_HOSTS") or None,
            strict_host_key_checking=cls._get_bool(
                "SSH_ONESHOT_STRICT_HOST_KEY_CHECKING", True
            ),
            connect_timeout=cls._get_int("SSH_ONESHOT_CONNECT_TIMEOUT", 30),
            term_type=os.getenv("SSH_ONESHOT_TERM_TYPE", "xterm"),
            stream_buffer=cls._get_int("SSH_ONESHOT_STREAM_BUFFER", 64),
            transport=cls._get_transport(),
            http_host=os.getenv("SSH_ONESHOT_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("SSH_ONESHOT_HTTP_PORT", 8000),
            log_level=os.getenv("SSH_ONESHOT_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("SSH_ONESHOT_LOG_COLORS", True),
            include_traceback=cls._get_bool("SSH_ONESHOT_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get MCP transport ("stdio" or "http") from environment."""
        transport = os.getenv("SSH_ONESHOT_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "stdio"
