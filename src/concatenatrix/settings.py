from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from dotenv import find_dotenv
from pydantic import BaseModel, ConfigDict, Field

from concatenatrix.file_manipulation import parse_extensions

ENV_FILE = find_dotenv(usecwd=True)

STDOUT_NAMES = frozenset({"", "-", "stdout"})
CLIPBOARD_NAME = "clipboard"


class Destination(StrEnum):
    """Where the rendered stream is delivered."""

    CLIPBOARD = auto()
    FILE = auto()
    STDOUT = auto()


class Settings(BaseModel):
    """Run options for concatenatrix.

    Built once by the argument parser (and possibly refined by the interactive
    prompt through `model_copy`), then handed to every stage. Frozen so no
    stage can change it mid-run.
    """

    model_config = ConfigDict(frozen=True)

    repo: Path = Field(default_factory=Path.cwd, description="Repository root.")
    copy_to_clipboard: bool = Field(default=False, description="Copy the output to the clipboard.")
    extensions: str | None = Field(
        default=None,
        description="Comma list of extensions to keep; an empty entry keeps files without extension.",
    )
    include_line_numbers: bool = Field(default=False, description="Prefix every line with its number.")
    output: str = Field(default="", description="Output destination: file path, 'clipboard' or 'stdout'.")
    interactive: bool = Field(default=False, description="Ask for options and confirm before writing.")
    log_file: str = Field(default="", description="Log file path.")

    @property
    def destination(self) -> Destination:
        """Resolve the single sink, clipboard first, then a named file, then stdout."""
        name = self.output.strip()
        if self.copy_to_clipboard or name.lower() == CLIPBOARD_NAME:
            return Destination.CLIPBOARD
        if name.lower() in STDOUT_NAMES:
            return Destination.STDOUT
        return Destination.FILE

    @property
    def output_path(self) -> Path | None:
        """Path of the output file when the destination is a file, else None."""
        if self.destination is not Destination.FILE:
            return None
        return Path(self.output.strip())

    @property
    def extension_criteria(self) -> frozenset[str] | None:
        """Accepted extensions, or None when no filtering was requested."""
        return parse_extensions(self.extensions)
