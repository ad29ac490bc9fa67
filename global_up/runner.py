"""
Process execution for package manager commands.

Commands are passed as argv tuples and never go through a shell. Output is
decoded as UTF-8 with undecodable bytes replaced.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence


logger = logging.getLogger(__name__)


class CommandError(Exception):
    """
    Raised when a command cannot be run or exits non-zero.

    Attributes:
        argv: Command that was executed
        exit_code: Process exit code (127 if not found, 124 on timeout)
        stderr: Standard error output, stripped
    """
    def __init__(self, argv: Sequence[str], exit_code: int, stderr: str = ""):
        self.argv = tuple(argv)
        self.exit_code = exit_code
        self.stderr = stderr.strip()
        super().__init__(self.detail)

    @property
    def detail(self) -> str:
        """Most useful single-line description of the failure."""
        if self.stderr:
            last_line = self.stderr.splitlines()[-1]
            return f"{last_line} (exit code {self.exit_code})"
        return f"`{' '.join(self.argv)}` failed with exit code {self.exit_code}"


def run_command(argv: Sequence[str], timeout: float | None = None) -> str:
    """
    Run a command and return its standard output.

    Args:
        argv: Command and arguments
        timeout: Optional timeout in seconds (None waits indefinitely)

    Returns:
        Captured stdout

    Raises:
        CommandError: If the executable is missing, the command times out,
            or it exits non-zero
    """
    logger.debug(f"Running: {' '.join(argv)}")
    try:
        result = subprocess.run(
            list(argv),
            capture_output=True,
            # Build tools may print bytes that are not valid UTF-8
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(argv, 127, str(e)) from e
    except PermissionError as e:
        raise CommandError(argv, 126, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(argv, 124, f"Timed out after {timeout}s") from e

    if result.returncode != 0:
        logger.debug(f"`{argv[0]}` exited with {result.returncode}")
        raise CommandError(argv, result.returncode, result.stderr or "")

    return result.stdout
