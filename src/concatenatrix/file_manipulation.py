from __future__ import annotations

import codecs
import subprocess  # noqa: S404
from pathlib import Path
from typing import TYPE_CHECKING

from concatenatrix.config import (
    ALLOWED_CONTROL_BYTES,
    NO_EXTENSION,
    NON_PRINTABLE_RATIO,
    SAMPLE_SIZE,
    TOKENS_PER_BYTE_DEN,
    TOKENS_PER_BYTE_NUM,
    Classification,
    Selection,
    SkippedFile,
    SkipReason,
)
from concatenatrix.exceptions import GitCommandError, NotAGitRepositoryError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    SkipObserver = Callable[[SkippedFile], None]


def resolve(path: str | Path, root: Path | None = None) -> Path:
    """Resolve a repository-relative path against `root` (or the working directory).

    Args:
        path (str | Path): the path as reported by git
        root (Path | None): the repository root; None means the current directory

    Returns:
        Path: the path to open on disk
    """
    p = Path(path)
    if root is None or p.is_absolute():
        return p
    return root / p


def is_hidden_path(path: str) -> bool:
    """Check if any segment of a path starts with a dot.

    Args:
        path (str): a repository-relative path, `/` separated as git reports it

    Returns:
        bool: True if the file or one of its parent directories is hidden
    """
    return any(part.startswith(".") for part in path.split("/"))


def sniff_text(path: Path, nbytes: int = SAMPLE_SIZE) -> bool:
    """Check if a file is probably text by sampling its first bytes.

    The sample must decode as UTF-8 and at most one byte in ten may be an
    ASCII control code other than tab, newline and carriage return. A
    multi-byte character cut by the end of a full-length sample does not
    count as invalid. Unreadable files are reported as not text.

    Args:
        path (Path): the file to sample
        nbytes (int, optional): sample size. Defaults to 512.

    Returns:
        bool: True if the file is probably text, False otherwise
    """
    try:
        with path.open("rb") as f:
            head = f.read(nbytes + 1)
    except OSError:
        return False
    if not head:
        return True

    # The extra byte only tells whether the file goes on past the sample.
    chunk = head[:nbytes]
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=len(head) <= nbytes)
    except UnicodeDecodeError:
        return False

    control = sum(1 for b in chunk if b < 32 and b not in ALLOWED_CONTROL_BYTES)  # noqa: PLR2004
    return control * NON_PRINTABLE_RATIO <= len(chunk)


def classify_path(path: str, root: Path | None = None) -> Classification:
    """Classify a candidate path as hidden, binary or text.

    Hidden status is decided from the path alone, before any read.

    Args:
        path (str): the repository-relative path
        root (Path | None): the repository root; None means the current directory

    Returns:
        Classification: the verdict for this path
    """
    if is_hidden_path(path):
        return Classification.HIDDEN
    if sniff_text(resolve(path, root)):
        return Classification.TEXT
    return Classification.BINARY


def file_extension(path: str) -> str:
    """Return the extension of the last path segment, leading dot included.

    Args:
        path (str): a repository-relative path

    Returns:
        str: e.g. ".go" for "cmd/main.go", "" for "Makefile"
    """
    name = path.rsplit("/", 1)[-1]
    idx = name.rfind(".")
    return name[idx:] if idx >= 0 else NO_EXTENSION


def parse_extensions(raw: str | None) -> frozenset[str] | None:
    """Build the accepted-extension set from a comma separated list.

    Entries are stripped; an empty entry stands for files without an
    extension, every other entry is normalised to start with a single dot.

    Args:
        raw (str | None): e.g. "go, md," ; None means no filtering

    Returns:
        frozenset[str] | None: e.g. {".go", ".md", ""}, or None when `raw` is None
    """
    if raw is None:
        return None
    out: set[str] = set()
    for entry in raw.split(","):
        ext = entry.strip()
        out.add("." + ext.lstrip(".") if ext else NO_EXTENSION)
    return frozenset(out)


def estimate_tokens(path: Path) -> int:
    """Estimate the token count of a file from its size on disk.

    Args:
        path (Path): the file to estimate

    Returns:
        int: size * 10 / 35, truncated; 0 when the file cannot be stat'ed
    """
    try:
        size = path.stat().st_size
    except OSError:
        return 0
    return size * TOKENS_PER_BYTE_NUM // TOKENS_PER_BYTE_DEN


def select_files(
    candidates: Iterable[str],
    criteria: frozenset[str] | None = None,
    *,
    root: Path | None = None,
    on_skip: SkipObserver | None = None,
) -> Selection:
    """Filter candidate paths down to the files that belong in the output.

    Candidates are visited in order and the order is kept. Hidden paths,
    binary files and (when `criteria` is given) files whose extension is not
    accepted are skipped; each skip is recorded and passed to `on_skip`.

    Args:
        candidates (Iterable[str]): repository-relative paths, in listing order
        criteria (frozenset[str] | None): accepted extensions; None keeps every text file
        root (Path | None): the repository root; None means the current directory
        on_skip (SkipObserver | None): called with every skipped file

    Returns:
        Selection: the eligible paths and the skip log
    """
    eligible: list[str] = []
    skipped: list[SkippedFile] = []

    def skip(path: str, reason: SkipReason) -> None:
        rec = SkippedFile(path=path, reason=reason)
        skipped.append(rec)
        if on_skip is not None:
            on_skip(rec)

    for path in candidates:
        if not path:
            continue
        verdict = classify_path(path, root)
        if verdict is Classification.HIDDEN:
            skip(path, SkipReason.HIDDEN)
        elif verdict is Classification.BINARY:
            skip(path, SkipReason.BINARY)
        elif criteria is not None and file_extension(path) not in criteria:
            skip(path, SkipReason.EXTENSION_EXCLUDED)
        else:
            eligible.append(path)
    return Selection(eligible=eligible, skipped=skipped)


def git_ls_files(repo: Path) -> list[str]:
    """Get the tracked files of a git repository using `git ls-files`.

    Paths are returned as git reports them, relative to `repo` and in git's
    order. NUL separation keeps unusual file names unquoted.

    Args:
        repo (Path): a directory inside the git repository to query

    Raises:
        NotAGitRepositoryError: if git says `repo` is not inside a repository
        GitCommandError: if git is missing or fails for another reason

    Returns:
        list[str]: the tracked paths, relative to `repo`
    """
    command = ["git", "ls-files", "--cached", "-z"]
    try:
        out = subprocess.run(
            command,
            cwd=str(repo),
            capture_output=True,
            check=True,
        )
    except OSError as e:
        raise GitCommandError(command=" ".join(command), returncode=127, stdout="", stderr=str(e)) from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace")
        if "not a git repository" in stderr.lower():
            raise NotAGitRepositoryError(folder=repo) from e
        raise GitCommandError(
            command=" ".join(command),
            returncode=e.returncode,
            stdout=(e.stdout or b"").decode("utf-8", errors="replace"),
            stderr=stderr,
        ) from e
    return [p for p in out.stdout.decode("utf-8", errors="surrogateescape").split("\0") if p]
