"""
Common utilities shared across global_up modules.
"""

from __future__ import annotations


def pluralize(count: int, noun: str) -> str:
    """
    Format a count with a naively pluralized noun.

    Args:
        count: Number of items
        noun: Singular noun (e.g., "package")

    Returns:
        "1 package", "3 packages"
    """
    return f"{count} {noun}{'' if count == 1 else 's'}"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a message at INFO when verbose mode is on, DEBUG otherwise.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    from .logging_config import get_logger

    logger = get_logger()
    if verbose:
        logger.info(msg)
    else:
        logger.debug(msg)
