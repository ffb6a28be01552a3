from pathlib import Path

import pytest
from pydantic import ValidationError

from concatenatrix.settings import Destination, Settings


@pytest.mark.unit
def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.repo.resolve() == Path.cwd().resolve()
    assert settings.copy_to_clipboard is False
    assert settings.extensions is None
    assert settings.extension_criteria is None
    assert settings.include_line_numbers is False
    assert settings.destination is Destination.STDOUT
    assert settings.output_path is None


@pytest.mark.unit
def test_settings_are_frozen() -> None:
    settings = Settings()

    with pytest.raises(ValidationError):
        settings.include_line_numbers = True  # type: ignore[misc]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("copy", "output", "expected"),
    [
        (True, "out.txt", Destination.CLIPBOARD),
        (False, "clipboard", Destination.CLIPBOARD),
        (False, "out.txt", Destination.FILE),
        (False, "stdout", Destination.STDOUT),
        (False, "-", Destination.STDOUT),
        (False, "", Destination.STDOUT),
    ],
)
def test_settings_destination_priority(copy: bool, output: str, expected: Destination) -> None:
    settings = Settings(copy_to_clipboard=copy, output=output)

    assert settings.destination is expected


@pytest.mark.unit
def test_settings_output_path_for_file() -> None:
    settings = Settings(output=" context.txt ")

    assert settings.output_path == Path("context.txt")


@pytest.mark.unit
def test_settings_extension_criteria() -> None:
    settings = Settings(extensions="go,")

    assert settings.extension_criteria == frozenset({".go", ""})
