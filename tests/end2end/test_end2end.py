import shutil
import subprocess  # noqa: S404
from pathlib import Path

import pytest

from concatenatrix import cli
from concatenatrix.config import FORMAT_DESCRIPTION
from concatenatrix.exceptions import ConcatenatrixError
from concatenatrix.file_manipulation import git_ls_files

pytestmark = [
    pytest.mark.end2end,
    pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed"),
]


def git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=str(repo), check=True, capture_output=True)  # noqa: S607


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    git(root, "init", "-q")
    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")
    (root / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (root / "data.bin").write_bytes(b"\x00\x01\x02\x03" * 8)
    (root / "untracked.txt").write_text("not added", encoding="utf-8")
    git(root, "add", "src/app.py", ".gitignore", "data.bin")
    return root


def test_git_ls_files_lists_tracked_files(repo: Path) -> None:
    assert sorted(git_ls_files(repo)) == [".gitignore", "data.bin", "src/app.py"]


def test_git_ls_files_outside_repository(tmp_path: Path) -> None:
    outside = tmp_path / "plain"
    outside.mkdir()

    with pytest.raises(ConcatenatrixError):
        git_ls_files(outside)


def test_end_to_end_export_to_file(repo: Path) -> None:
    output = repo.parent / "export.txt"

    exit_code = cli.main(["--repo", str(repo), "-o", str(output)])

    assert exit_code == cli.EXIT_OK
    content = output.read_bytes()
    assert content == FORMAT_DESCRIPTION.encode() + b"{{File: src/app.py}}\nprint('hi')\n\n"
    assert b"untracked.txt" not in content


def test_end_to_end_not_a_repository(tmp_path: Path) -> None:
    output = tmp_path / "export.txt"

    exit_code = cli.main(["--repo", str(tmp_path), "-o", str(output)])

    assert exit_code == cli.EXIT_LISTING_FAILED
    assert not output.exists()
