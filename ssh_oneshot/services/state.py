"""Global settings state for the MCP server."""

from ssh_oneshot.config.settings import Settings

# Global state (initialized on first access)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Allows tests to inject custom settings without touching the environment.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def reset_state() -> None:
    """Reset global state for testing."""
    global _settings
    _settings = None
