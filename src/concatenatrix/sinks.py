from __future__ import annotations

import sys
from typing import TYPE_CHECKING, BinaryIO

import pyperclip

from concatenatrix.exceptions import ClipboardError, OutputWriteError, SinkError, StdoutWriteError
from concatenatrix.logging import logger
from concatenatrix.settings import Destination

if TYPE_CHECKING:
    from pathlib import Path

    from concatenatrix.settings import Settings


def copy_to_clipboard(output: bytes) -> None:
    """Put the output on the system clipboard as text.

    Raises:
        ClipboardError: if no clipboard mechanism is available or the copy fails
    """
    try:
        pyperclip.copy(output.decode("utf-8", errors="replace"))
    except pyperclip.PyperclipException as e:
        raise ClipboardError(message=str(e)) from e


def write_output_file(output: bytes, path: Path) -> None:
    """Write the output to `path`, replacing any previous content.

    Raises:
        OutputWriteError: if the file cannot be written
    """
    try:
        path.write_bytes(output)
    except OSError as e:
        raise OutputWriteError(path=path, message=e.strerror or str(e)) from e


def write_stdout(output: bytes, stream: BinaryIO | None = None) -> None:
    """Write the output to `stream`, or to the binary buffer of stdout.

    Raises:
        StdoutWriteError: if the stream is closed or the write fails
    """
    target = stream if stream is not None else sys.stdout.buffer
    try:
        target.write(output)
        target.flush()
    except (OSError, ValueError) as e:
        raise StdoutWriteError(message=str(e)) from e


def dispatch_output(output: bytes, settings: Settings, *, stream: BinaryIO | None = None) -> bool:
    """Deliver the output to exactly one destination.

    The destination is the clipboard when requested, else the named output
    file, else standard output. Failures are logged, never retried and never
    redirected to another destination.

    Args:
        output (bytes): the rendered stream
        settings (Settings): the run options
        stream (BinaryIO | None): replaces stdout when the destination is stdout

    Returns:
        bool: True if the output was delivered, False otherwise
    """
    destination = settings.destination
    try:
        if destination is Destination.CLIPBOARD:
            copy_to_clipboard(output)
        elif destination is Destination.FILE:
            write_output_file(output, settings.output_path)
        else:
            write_stdout(output, stream)
    except SinkError as e:
        logger.error("dispatch_failed", destination=str(destination), error=str(e))
        return False

    logger.info("output_dispatched", destination=str(destination), bytes=len(output))
    return True
