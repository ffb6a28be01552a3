from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import pyperclip
import pytest

from concatenatrix import sinks
from concatenatrix.exceptions import ClipboardError, OutputWriteError, StdoutWriteError
from concatenatrix.settings import Settings

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

PAYLOAD = b"{{File: a.txt}}\nhello\n"


class ClosedPipe(io.BytesIO):
    def write(self, data: bytes) -> int:  # noqa: ARG002
        raise BrokenPipeError(32, "Broken pipe")


@pytest.mark.unit
def test_dispatch_to_file_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "output_test.txt"
    target.write_text("previous content that is longer", encoding="utf-8")

    ok = sinks.dispatch_output(PAYLOAD, Settings(output=str(target)))

    assert ok is True
    assert target.read_bytes() == PAYLOAD


@pytest.mark.unit
def test_dispatch_to_file_is_not_executable(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"

    sinks.dispatch_output(PAYLOAD, Settings(output=str(target)))

    assert target.stat().st_mode & 0o111 == 0


@pytest.mark.unit
def test_dispatch_to_file_failure_is_reported(tmp_path: Path) -> None:
    target = tmp_path / "missing_dir" / "out.txt"

    ok = sinks.dispatch_output(PAYLOAD, Settings(output=str(target)))

    assert ok is False
    assert not target.exists()


@pytest.mark.unit
def test_write_output_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OutputWriteError):
        sinks.write_output_file(PAYLOAD, tmp_path / "missing_dir" / "out.txt")


@pytest.mark.unit
def test_dispatch_to_stdout_stream() -> None:
    stream = io.BytesIO()

    ok = sinks.dispatch_output(PAYLOAD, Settings(), stream=stream)

    assert ok is True
    assert stream.getvalue() == PAYLOAD


@pytest.mark.unit
def test_dispatch_to_clipboard_wins_over_file(tmp_path: Path, mocker: MockerFixture) -> None:
    copy = mocker.patch.object(sinks.pyperclip, "copy")
    target = tmp_path / "out.txt"
    stream = io.BytesIO()

    ok = sinks.dispatch_output(PAYLOAD, Settings(copy_to_clipboard=True, output=str(target)), stream=stream)

    assert ok is True
    copy.assert_called_once_with(PAYLOAD.decode())
    assert not target.exists()
    assert stream.getvalue() == b""


@pytest.mark.unit
def test_dispatch_clipboard_failure_is_not_redirected(mocker: MockerFixture) -> None:
    mocker.patch.object(sinks.pyperclip, "copy", side_effect=pyperclip.PyperclipException("no clipboard"))
    stream = io.BytesIO()

    ok = sinks.dispatch_output(PAYLOAD, Settings(copy_to_clipboard=True), stream=stream)

    assert ok is False
    assert stream.getvalue() == b""


@pytest.mark.unit
def test_copy_to_clipboard_raises(mocker: MockerFixture) -> None:
    mocker.patch.object(sinks.pyperclip, "copy", side_effect=pyperclip.PyperclipException("no clipboard"))

    with pytest.raises(ClipboardError, match="no clipboard"):
        sinks.copy_to_clipboard(PAYLOAD)


@pytest.mark.unit
def test_dispatch_stdout_broken_pipe_is_reported() -> None:
    ok = sinks.dispatch_output(PAYLOAD, Settings(), stream=ClosedPipe())

    assert ok is False


@pytest.mark.unit
def test_write_stdout_raises_on_broken_pipe() -> None:
    with pytest.raises(StdoutWriteError, match="Broken pipe"):
        sinks.write_stdout(PAYLOAD, ClosedPipe())


@pytest.mark.unit
def test_write_stdout_raises_on_closed_stream() -> None:
    stream = io.BytesIO()
    stream.close()

    with pytest.raises(StdoutWriteError):
        sinks.write_stdout(PAYLOAD, stream)
