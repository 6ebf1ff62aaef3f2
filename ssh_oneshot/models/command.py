"""Command execution data models."""

from dataclasses import dataclass, field


@dataclass
class StreamCompletion:
    """End-of-stream marker for a streamed command.

    ``error`` is set when the scan stopped on a read failure rather than
    end of output. Both cases end the line sequence the same way.
    """

    exit_status: int | None = None
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        """Check if the scan ended on a read error."""
        return self.error is not None


@dataclass
class ExecutionResult:
    """Ordered output lines of a remote command and its completion."""

    lines: list[str] = field(default_factory=list)
    completion: StreamCompletion = field(default_factory=StreamCompletion)

    @property
    def output(self) -> str:
        """Return every line followed by a newline."""
        return "".join(f"{line}\n" for line in self.lines)
