"""
concatenatrix: concatenate the text files of a git repository for an LLM.

Overview
--------
The files tracked by git (`git ls-files --cached`) are filtered down to the
visible text files, optionally restricted to a list of extensions, and
written one after the other into a single stream::

    Format description: The following are files in the Git repository ...

    {{File: src/app.py}}
    <content>

    {{File: README}}
    ...

The stream goes to exactly one destination: the clipboard (`-c`), a file
(`-o out.txt`) or standard output. Diagnostics are logged as JSON lines on
stderr (or `--log-file`), so stdout only ever carries the stream.

Usage
-----
Run `concatenatrix --help` for full options. Common examples:
    - Everything, to stdout:
        concatenatrix
    - Go sources and extensionless files, numbered, to the clipboard:
        concatenatrix -c -n -e "go,"
    - Ask for the options and review the selection first:
        concatenatrix -i

Exit status: 0 on success, 1 when the files cannot be listed, 2 when the
output could not be delivered.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from concatenatrix import __version__
from concatenatrix.exceptions import ConcatenatrixError
from concatenatrix.file_manipulation import estimate_tokens, git_ls_files, resolve, select_files
from concatenatrix.logging import logger, setup_logging
from concatenatrix.output_construction import render_files
from concatenatrix.prompt import confirm_summary, prompt_settings
from concatenatrix.settings import ENV_FILE, Settings
from concatenatrix.sinks import dispatch_output

if TYPE_CHECKING:
    from collections.abc import Sequence

    from concatenatrix.config import SkippedFile

EXIT_OK = 0
EXIT_LISTING_FAILED = 1
EXIT_DISPATCH_FAILED = 2


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse the command line into a frozen `Settings` value.

    `CONCATENATRIX_EXTENSIONS` and `CONCATENATRIX_LOG_FILE` (environment or
    `.env`) provide defaults for `--extensions` and `--log-file`.
    """
    p = argparse.ArgumentParser(
        prog="concatenatrix",
        description="Concatenate the text files tracked by git into one annotated stream.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--repo", type=Path, default=Path.cwd(), help="Repository root.")
    p.add_argument(
        "-c",
        "--copy",
        dest="copy_to_clipboard",
        action="store_true",
        help="Copy the concatenated output to the clipboard.",
    )
    p.add_argument(
        "-e",
        "--extensions",
        type=str,
        default=os.environ.get("CONCATENATRIX_EXTENSIONS") or None,
        help="Comma list of extensions to include, e.g. 'go,md,' (a trailing comma keeps files without extension).",
    )
    p.add_argument(
        "-n",
        "--line-numbers",
        dest="include_line_numbers",
        action="store_true",
        help="Prefix every line with its number.",
    )
    p.add_argument(
        "-o",
        "--output",
        type=str,
        default="",
        help="Output file, or 'clipboard' / 'stdout' (default: stdout).",
    )
    p.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Ask for the options and confirm the selection before writing.",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=os.environ.get("CONCATENATRIX_LOG_FILE", ""),
        help="Log file path.",
    )
    args = p.parse_args(argv)
    return Settings(**vars(args))


def log_skip(rec: SkippedFile) -> None:
    logger.info("skipping_file", path=rec.path, reason=str(rec.reason))


def log_read_failure(rec: SkippedFile) -> None:
    logger.warning("read_failed", path=rec.path, error=rec.detail)


def main(argv: Sequence[str] | None = None) -> int:
    if ENV_FILE:
        load_dotenv(ENV_FILE)
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    repo = settings.repo.resolve()

    try:
        candidates = git_ls_files(repo)
    except ConcatenatrixError as e:
        logger.error("listing_failed", repo=str(repo), error=str(e))
        return EXIT_LISTING_FAILED

    try:
        if settings.interactive:
            settings = prompt_settings(settings)

        selection = select_files(
            candidates,
            settings.extension_criteria,
            root=repo,
            on_skip=log_skip,
        )

        if settings.interactive:
            estimates = {p: estimate_tokens(resolve(p, repo)) for p in selection.eligible}
            if not confirm_summary(selection, estimates):
                logger.info("cancelled")
                return EXIT_OK
    except (KeyboardInterrupt, EOFError):
        logger.info("cancelled")
        return EXIT_OK

    result = render_files(
        selection.eligible,
        root=repo,
        include_line_numbers=settings.include_line_numbers,
        on_failure=log_read_failure,
    )
    logger.info(
        "render_complete",
        files=result.stats.file_count,
        estimated_tokens=result.stats.estimated_tokens,
        skipped=len(selection.skipped) + len(result.failures),
    )

    if not dispatch_output(result.output, settings):
        return EXIT_DISPATCH_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
