"""Simple UX helpers for CLI output and prompts - no external dependencies."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import TextIO, TypeVar

T = TypeVar("T")


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"


def is_interactive(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:  # closed stream
        return False


def _supports_color(stream: TextIO | None = None) -> bool:
    """Check if terminal supports color output."""
    # Disabled by NO_COLOR, non-TTY streams, and TERM=dumb
    if os.environ.get("NO_COLOR"):
        return False
    if not is_interactive(stream):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_success(message: str, stream: TextIO | None = None, color: bool = True) -> None:
    """Print success message in green."""
    stream = stream or sys.stdout
    icon = colorize("✓", Colors.GREEN, bold=True, stream=stream) if color else "OK:"
    print(f"{icon} {message}", file=stream)


def print_error(message: str, stream: TextIO | None = None, color: bool = True) -> None:
    """Print error message in red."""
    stream = stream or sys.stderr
    icon = colorize("✗", Colors.RED, bold=True, stream=stream) if color else "ERROR:"
    print(f"{icon} {message}", file=stream)


def print_warning(message: str, stream: TextIO | None = None, color: bool = True) -> None:
    """Print warning message in yellow."""
    stream = stream or sys.stdout
    icon = colorize("⚠", Colors.YELLOW, bold=True, stream=stream) if color else "WARNING:"
    print(f"{icon} {message}", file=stream)


def print_info(message: str, stream: TextIO | None = None, color: bool = True) -> None:
    """Print info message in blue."""
    stream = stream or sys.stdout
    icon = colorize("ℹ", Colors.BLUE, bold=True, stream=stream) if color else "INFO:"
    print(f"{icon} {message}", file=stream)


def print_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    stream: TextIO | None = None,
    color: bool = True,
) -> None:
    """Print rows in left-aligned columns under a bold header."""
    stream = stream or sys.stdout
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    header = "  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()
    print(colorize(header, Colors.BOLD, stream=stream) if color else header, file=stream)
    for row in rows:
        print("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip(), file=stream)


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question on stdin.

    An empty answer or EOF returns ``default``.
    """
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        answer = input(f"{message} {suffix} ").strip().lower()
    except EOFError:
        print()
        return default
    if not answer:
        return default
    return answer in ("y", "yes")


def prompt_text(message: str) -> str | None:
    """Read a single line of free text; ``None`` on EOF."""
    try:
        return input(f"{message} ").strip()
    except EOFError:
        print()
        return None


def choose(message: str, options: Sequence[tuple[str, T]]) -> T | None:
    """Numbered single-choice prompt. Returns the chosen value or ``None``."""
    if not options:
        return None
    print(message)
    for idx, (label, _) in enumerate(options, start=1):
        print(f"  {idx}) {label}")
    while True:
        try:
            raw = input(f"Select [1-{len(options)}]: ").strip()
        except EOFError:
            print()
            return None
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1][1]
        print(f"Please enter a number between 1 and {len(options)}.")
