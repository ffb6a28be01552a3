from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Callable

    from concatenatrix.config import Selection
    from concatenatrix.settings import Settings

    InputFn = Callable[[str], str]

YES = frozenset({"y", "yes"})
NO = frozenset({"n", "no"})


def read_answer(question: str) -> str:
    """Read one line from stdin, printing the question on stderr so stdout stays clean."""
    print(question, end="", file=sys.stderr, flush=True)
    return input()


def ask_bool(question: str, *, default: bool, input_fn: InputFn = read_answer) -> bool:
    """Ask a yes/no question until the answer is understood.

    Args:
        question (str): the question, without the [y/n] hint
        default (bool): the answer used when the user just presses enter
        input_fn (InputFn): the function used to read an answer

    Returns:
        bool: the user's answer
    """
    hint = "[Y/n]" if default else "[y/N]"
    while True:
        answer = input_fn(f"{question} {hint} ").strip().lower()
        if not answer:
            return default
        if answer in YES:
            return True
        if answer in NO:
            return False


def ask_text(question: str, *, default: str, input_fn: InputFn = read_answer) -> str:
    """Ask a free-text question, falling back to `default` on an empty answer."""
    suffix = f" [{default}]" if default else ""
    answer = input_fn(f"{question}{suffix}: ").strip()
    return answer or default


def prompt_settings(settings: Settings, *, input_fn: InputFn = read_answer) -> Settings:
    """Ask the user for the run options, using `settings` as defaults.

    Returns a new frozen value; `settings` itself is not modified.
    """
    copy = ask_bool("Copy the output to the clipboard?", default=settings.copy_to_clipboard, input_fn=input_fn)
    extensions = ask_text(
        "Extensions to include (comma separated, empty for all)",
        default=settings.extensions or "",
        input_fn=input_fn,
    )
    line_numbers = ask_bool("Add line numbers?", default=settings.include_line_numbers, input_fn=input_fn)
    output = settings.output
    if not copy:
        output = ask_text("Output file (empty for stdout)", default=settings.output, input_fn=input_fn)
    return settings.model_copy(
        update={
            "copy_to_clipboard": copy,
            "extensions": extensions or None,
            "include_line_numbers": line_numbers,
            "output": output,
        },
    )


def format_summary(selection: Selection, token_estimates: dict[str, int], *, top: int = 10) -> str:
    """Describe a selection: file count, token estimate and the largest files.

    Args:
        selection (Selection): the outcome of the selector
        token_estimates (dict[str, int]): estimated tokens per eligible path
        top (int): how many of the largest files to list

    Returns:
        str: a small table, ready to print
    """
    total = sum(token_estimates.get(p, 0) for p in selection.eligible)
    largest = sorted(selection.eligible, key=lambda p: token_estimates.get(p, 0), reverse=True)[:top]
    lines = [
        f"Files selected: {len(selection.eligible)} (skipped: {len(selection.skipped)})",
        f"Estimated tokens: {total}",
    ]
    if largest:
        lines.append(f"{'Rank':<5} | {'Tokens':<10} | File Path")
        lines.append("-" * 60)
        lines.extend(f"{i:<5} | {token_estimates.get(p, 0):<10} | {p}" for i, p in enumerate(largest, start=1))
    return "\n".join(lines)


def confirm_summary(
    selection: Selection,
    token_estimates: dict[str, int],
    *,
    input_fn: InputFn = read_answer,
    out: TextIO | None = None,
) -> bool:
    """Show the selection summary and ask whether to go on."""
    print(format_summary(selection, token_estimates), file=out or sys.stderr)
    return ask_bool("Proceed?", default=True, input_fn=input_fn)
