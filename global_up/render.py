"""
Terminal output: colors, progress lines and the final summary.
"""

import re
import sys
from typing import Optional, TextIO

from wcwidth import wcswidth

from .models import PackageWithLatest, RunResult


# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
RED = "\033[31m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

CSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color to text.

    Args:
        text: Text to colorize
        color: ANSI color code
        enabled: Whether colors are enabled

    Returns:
        Colored text or plain text if colors disabled
    """
    if not enabled or not text:
        return text
    return f"{color}{text}{RESET}"


def display_width(text: str) -> int:
    """Terminal column width of text, ignoring ANSI escapes."""
    plain = CSI_RE.sub("", text)
    width = wcswidth(plain)
    # wcswidth reports -1 for non-printable characters
    return width if width >= 0 else len(plain)


def pad(text: str, width: int) -> str:
    """Left-align text to a display width."""
    return text + " " * max(0, width - display_width(text))


def package_label(pkg: PackageWithLatest, use_color: bool = True) -> str:
    """Selection label: "name (manager)"."""
    return f"{pkg.name} {colorize(f'({pkg.manager})', DIM, use_color)}"


def package_hint(pkg: PackageWithLatest, use_color: bool = True) -> str:
    """Selection hint: "current → latest", flagged when the major changes."""
    hint = f"{colorize(pkg.version, YELLOW, use_color)} → {colorize(pkg.latest_version, GREEN, use_color)}"
    if pkg.breaking_change:
        hint += " " + colorize("(BREAKING)", RED, use_color)
    return hint


class Progress:
    """
    Step-by-step progress reporting.

    Each state change is written as its own line so that the output stays
    readable when piped or logged.
    """

    def __init__(self, stream: Optional[TextIO] = None, use_color: Optional[bool] = None):
        self.stream = stream or sys.stdout
        self.use_color = self.stream.isatty() if use_color is None else use_color

    def _write(self, symbol: str, color: str, message: str) -> None:
        print(f"{colorize(symbol, color, self.use_color)} {message}", file=self.stream, flush=True)

    def start(self, message: str) -> None:
        self._write("◇", CYAN, f"{message}...")

    def update(self, message: str) -> None:
        self._write("│", DIM, message)

    def succeed(self, message: str) -> None:
        self._write("✓", GREEN, message)

    def fail(self, message: str) -> None:
        self._write("✗", RED, message)

    def highlight(self, text: str) -> str:
        return colorize(text, CYAN, self.use_color)


def print_result(result: RunResult, stream: Optional[TextIO] = None, use_color: Optional[bool] = None) -> None:
    """Print the final outcome of a run."""
    stream = stream or sys.stdout
    if use_color is None:
        use_color = stream.isatty()

    if result.failures or result.exit_code != 0:
        color = RED
    elif result.upgraded:
        color = GREEN
    else:
        color = YELLOW

    print(colorize(result.message, color, use_color), file=stream)
    for failure in result.failures:
        print(f"  {colorize('✗', RED, use_color)} {failure}", file=stream)
