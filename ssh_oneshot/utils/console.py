"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "ssh_oneshot.server": COLORS["bright_cyan"],
    "ssh_oneshot.services.connection": COLORS["bright_magenta"],
    "ssh_oneshot.services.streamer": COLORS["bright_blue"],
    "ssh_oneshot.services.transfer": COLORS["cyan"],
    "ssh_oneshot.middleware": COLORS["yellow"],
    "ssh_oneshot.config": COLORS["green"],
    "default": COLORS["white"],
}

_ADDRESS_PATTERN = re.compile(r"([\w.\-]+@[\w.\-]+:\d+)")
_DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
_BYTES_PATTERN = re.compile(r"(\d+ bytes)")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with level colors and component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name/component."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt.strftime('%H:%M:%S')}.{int(record.msecs):03d} {dt.strftime('%m/%d')}"

    def _format_level(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix("ssh_oneshot.")
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight addresses, durations and byte counts."""
        if not self.use_colors:
            return message

        if "@" in message:
            message = _ADDRESS_PATTERN.sub(
                f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
            )
        if "ms" in message:
            message = _DURATION_PATTERN.sub(
                f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
            )
        if "bytes" in message:
            message = _BYTES_PATTERN.sub(
                f"{COLORS['cyan']}\\1{COLORS['reset']}", message
            )
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as ``time | level | component | message``."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
