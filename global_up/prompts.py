"""
Interactive selection and confirmation prompts.

The orchestrator only depends on the Prompter protocol: multiselect() and
confirm() return None when the user cancels. TerminalPrompter is the
line-based implementation used by the CLI.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Generic, Protocol, Sequence, TextIO, TypeVar

from .render import BOLD, CYAN, colorize, display_width, pad


logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCEL_WORDS = {"q", "quit", "cancel"}
ALL_WORDS = {"a", "all", "*"}


@dataclass(frozen=True)
class SelectOption(Generic[T]):
    """
    One choice in a multi-select prompt.

    Attributes:
        value: Object returned when the option is selected
        label: Main text of the option
        hint: Secondary text shown after the label
    """
    value: T
    label: str
    hint: str = ""


class Prompter(Protocol):
    """Interactive collaborator used to select and confirm upgrades."""

    def multiselect(self, message: str, options: Sequence[SelectOption[Any]]) -> list[Any] | None:
        """Return the selected values, [] for none, or None if cancelled."""
        ...

    def confirm(self, message: str) -> bool | None:
        """Return the answer, or None if cancelled."""
        ...


def parse_selection(text: str, count: int) -> list[int] | None:
    """
    Parse a selection such as "1,3-5" into zero-based indices.

    Args:
        text: User input
        count: Number of options offered

    Returns:
        Sorted unique indices ([] for empty input), or None if the user
        asked to cancel

    Raises:
        ValueError: If the input names anything outside 1..count
    """
    text = text.strip().lower()
    if not text:
        return []
    if text in CANCEL_WORDS:
        return None
    if text in ALL_WORDS:
        return list(range(count))

    selected: set[int] = set()
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            start, end = int(start_text), int(end_text)
            if start > end:
                raise ValueError(f"Invalid range: {token}")
            numbers = range(start, end + 1)
        else:
            numbers = range(int(token), int(token) + 1)
        for number in numbers:
            if number < 1 or number > count:
                raise ValueError(f"No option {number} (choose 1-{count})")
            selected.add(number - 1)
    return sorted(selected)


class TerminalPrompter:
    """
    Numbered-list prompts on a text terminal.

    Ctrl-C, Ctrl-D or "q" cancels. When input is not a terminal every
    prompt cancels, since there is nobody to answer.
    """

    def __init__(
        self,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        interactive: bool | None = None,
        use_color: bool | None = None,
    ):
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stdout
        self.interactive = self.input_stream.isatty() if interactive is None else interactive
        self.use_color = self.output_stream.isatty() if use_color is None else use_color

    def _ask(self, prompt: str) -> str | None:
        print(prompt, end="", file=self.output_stream, flush=True)
        try:
            line = self.input_stream.readline()
        except KeyboardInterrupt:
            print(file=self.output_stream)
            return None
        if not line:
            # EOF
            print(file=self.output_stream)
            return None
        return line

    def multiselect(self, message: str, options: Sequence[SelectOption[Any]]) -> list[Any] | None:
        if not self.interactive:
            logger.warning("Input is not a terminal; pass --all to upgrade without prompting")
            return None
        if not options:
            return []

        number_width = len(str(len(options)))
        label_width = max(display_width(option.label) for option in options)

        print(colorize(f"? {message}", BOLD, self.use_color), file=self.output_stream)
        for i, option in enumerate(options, start=1):
            number = colorize(str(i).rjust(number_width), CYAN, self.use_color)
            print(f"  {number}  {pad(option.label, label_width)}  {option.hint}".rstrip(), file=self.output_stream)

        while True:
            answer = self._ask("Enter numbers (e.g. 1,3-4), 'a' for all, empty for none, 'q' to cancel: ")
            if answer is None:
                return None
            try:
                indices = parse_selection(answer, len(options))
            except ValueError as e:
                print(f"  {e}", file=self.output_stream)
                continue
            if indices is None:
                return None
            return [options[i].value for i in indices]

    def confirm(self, message: str) -> bool | None:
        if not self.interactive:
            return None

        while True:
            answer = self._ask(f"{colorize('?', BOLD, self.use_color)} {message} [Y/n] ")
            if answer is None:
                return None
            answer = answer.strip().lower()
            if answer in ("", "y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in CANCEL_WORDS:
                return None
            print("  Please answer y or n", file=self.output_stream)
