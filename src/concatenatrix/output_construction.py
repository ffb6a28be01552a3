from __future__ import annotations

import io
from typing import TYPE_CHECKING

from concatenatrix.config import FORMAT_DESCRIPTION, RenderedFile, RenderResult, RunStats, SkippedFile, SkipReason
from concatenatrix.file_manipulation import estimate_tokens, resolve

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    FailureObserver = Callable[[SkippedFile], None]


def render_header(path: str) -> bytes:
    """Return the `{{File: <path>}}` header line for one file."""
    return f"{{{{File: {path}}}}}\n".encode("utf-8", errors="surrogateescape")


def number_lines(content: bytes) -> bytes:
    """Prefix every newline-separated segment with its 1-based index.

    The split is literal: a trailing newline yields a final empty segment,
    which is numbered too.

    Args:
        content (bytes): the raw file content

    Returns:
        bytes: one `N: <segment>` line per segment, each newline-terminated
    """
    out = io.BytesIO()
    for i, segment in enumerate(content.split(b"\n"), start=1):
        out.write(f"{i}: ".encode("ascii"))
        out.write(segment)
        out.write(b"\n")
    return out.getvalue()


def render_files(
    eligible: Sequence[str],
    *,
    root: Path | None = None,
    include_line_numbers: bool = False,
    on_failure: FailureObserver | None = None,
) -> RenderResult:
    """Concatenate the eligible files into a single annotated stream.

    The stream starts with the format description, then holds one entry per
    file: the header, the content (verbatim or line numbered) and a blank
    separator line. A file that cannot be read is left out of both the
    stream and the statistics, reported to `on_failure`, and rendering moves
    on to the next file.

    Args:
        eligible (Sequence[str]): repository-relative paths, in output order
        root (Path | None): the repository root; None means the current directory
        include_line_numbers (bool): whether to number the lines of every file
        on_failure (FailureObserver | None): called for every file that could not be read

    Returns:
        RenderResult: the output bytes, run statistics and read failures
    """
    out = io.BytesIO()
    stats = RunStats()
    failures: list[SkippedFile] = []

    out.write(FORMAT_DESCRIPTION.encode("utf-8"))

    for rel in eligible:
        path = resolve(rel, root)
        try:
            content = path.read_bytes()
        except OSError as e:
            rec = SkippedFile(path=rel, reason=SkipReason.READ_FAILED, detail=str(e))
            failures.append(rec)
            if on_failure is not None:
                on_failure(rec)
            continue

        out.write(render_header(rel))
        out.write(number_lines(content) if include_line_numbers else content)
        out.write(b"\n")
        stats.add(RenderedFile(path=rel, size=len(content), tokens=estimate_tokens(path)))

    return RenderResult(output=out.getvalue(), stats=stats, failures=failures)
