from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConcatenatrixError(Exception):
    """Base exception for errors in the concatenatrix package."""


@dataclass(frozen=True)
class GitCommandError(ConcatenatrixError):
    """Raised when a git command fails or git cannot be run at all."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        detail = self.stderr.strip() or self.stdout.strip()
        return f"`{self.command}` exited with {self.returncode}: {detail}"


@dataclass(frozen=True)
class NotAGitRepositoryError(ConcatenatrixError):
    """Raised when the specified directory is not a Git repository."""

    folder: Path
    message: str = "The specified directory is not a Git repository."

    def __str__(self) -> str:
        return f"{self.message} ({self.folder})"


@dataclass(frozen=True)
class SinkError(ConcatenatrixError):
    """Raised when the rendered output cannot be delivered."""


@dataclass(frozen=True)
class ClipboardError(SinkError):
    """Raised when the system clipboard cannot be written."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OutputWriteError(SinkError):
    """Raised when the output file cannot be written."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class StdoutWriteError(SinkError):
    """Raised when standard output cannot be written, e.g. a closed pipe."""

    message: str

    def __str__(self) -> str:
        return f"<stdout>: {self.message}"
