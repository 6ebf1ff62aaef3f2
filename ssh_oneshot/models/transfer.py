"""File transfer data models."""

import posixpath
from dataclasses import dataclass

SCP_MODE = "0644"


@dataclass(frozen=True)
class TransferDescriptor:
    """A single-file push, sized from the source's stat at transfer start."""

    source_path: str
    target_path: str
    size: int
    mode: str = SCP_MODE

    @property
    def target_name(self) -> str:
        """Base name of the remote target path."""
        return posixpath.basename(self.target_path)

    def header(self) -> bytes:
        """Build the ``C<mode> <size> <name>`` line sent to ``scp -t``."""
        return f"C{self.mode} {self.size} {self.target_name}\n".encode()
