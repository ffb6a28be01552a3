from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field

FORMAT_DESCRIPTION = (
    "Format description: The following are files in the Git repository"
    " of the project. The files are separated using {{File: filename.txt}}.\n\n"
)

# Classifier sample: bytes read from the head of each file.
SAMPLE_SIZE = 512

# Binary when control bytes exceed 1 / NON_PRINTABLE_RATIO of the sample.
NON_PRINTABLE_RATIO = 10

ALLOWED_CONTROL_BYTES = frozenset(b"\n\r\t")

# Roughly one token every 3.5 bytes of source text.
TOKENS_PER_BYTE_NUM = 10
TOKENS_PER_BYTE_DEN = 35

NO_EXTENSION = ""


class Classification(StrEnum):
    """Verdict of the classifier for a candidate path.

    Hidden wins over the content test: a path with a dotted segment is never
    sampled.
    """

    HIDDEN = auto()
    BINARY = auto()
    TEXT = auto()


class SkipReason(StrEnum):
    """Why a candidate path did not make it into the output."""

    HIDDEN = "hidden"
    BINARY = "binary"
    EXTENSION_EXCLUDED = "extension-excluded"
    READ_FAILED = "read-failed"


class SkippedFile(BaseModel):
    """A candidate path that was left out, and why."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to repository root")
    reason: SkipReason = Field(..., description="Why the file was skipped")
    detail: str = Field("", description="Error text for read failures")


class Selection(BaseModel):
    """Outcome of the selector: eligible paths in listing order plus the skip log."""

    model_config = ConfigDict(frozen=True)

    eligible: list[str] = Field(default_factory=list, description="Eligible paths, in input order")
    skipped: list[SkippedFile] = Field(default_factory=list, description="Skipped paths, in input order")


class RenderedFile(BaseModel):
    """Size figures for one file that was written to the output."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to repository root")
    size: int = Field(..., ge=0, description="Bytes read from disk")
    tokens: int = Field(..., ge=0, description="Estimated token count")


class RunStats(BaseModel):
    """Statistics accumulated while rendering.

    Attributes:
        file_count: Number of files actually rendered.
        estimated_tokens: Sum of the per-file token estimates.
        files: Per-file figures, in render order.
    """

    file_count: int = Field(0, ge=0, description="Rendered file count")
    estimated_tokens: int = Field(0, ge=0, description="Cumulative token estimate")
    files: list[RenderedFile] = Field(default_factory=list, description="Per-file figures")

    def add(self, rendered: RenderedFile) -> None:
        """Account for one more rendered file."""
        self.file_count += 1
        self.estimated_tokens += rendered.tokens
        self.files.append(rendered)


class RenderResult(BaseModel):
    """The serialized stream together with its statistics and read failures."""

    model_config = ConfigDict(frozen=True)

    output: bytes = Field(..., description="Concatenated output stream")
    stats: RunStats = Field(default_factory=RunStats, description="Run statistics")
    failures: list[SkippedFile] = Field(default_factory=list, description="Files that could not be read")
