"""
Run settings.

global-up reads no configuration files or environment variables; every
setting comes from the command line and is validated here.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from urllib.parse import urlparse

from .registry import DEFAULT_REGISTRY


@dataclass(frozen=True)
class Settings:
    """
    Settings for one upgrade run.

    Attributes:
        select_all: Upgrade every updatable package without prompting
        verbose: Enable debug logging
        timeout: Timeout in seconds for commands and registry requests
            (None means no enforced bound)
        max_workers: Maximum parallel probes and registry lookups
        registry_url: Registry base URL for latest-version lookups
        log_file: Optional path for a full debug log
    """
    select_all: bool = False
    verbose: bool = False
    timeout: float | None = None
    max_workers: int = 8
    registry_url: str = DEFAULT_REGISTRY
    log_file: str | None = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.timeout is not None and not (1 <= self.timeout <= 600):
            raise ValueError(
                f"Invalid timeout: {self.timeout}. "
                "Must be between 1 and 600 seconds"
            )

        if self.max_workers < 1 or self.max_workers > 32:
            raise ValueError(
                f"Invalid max_workers: {self.max_workers}. "
                "Must be between 1 and 32"
            )

        parsed = urlparse(self.registry_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                f"Invalid registry URL: {self.registry_url}. "
                "Must be an http(s) URL"
            )

    @staticmethod
    def from_args(args: argparse.Namespace) -> Settings:
        """Create Settings from parsed command-line arguments."""
        return Settings(
            select_all=getattr(args, "all", False),
            verbose=getattr(args, "verbose", False),
            timeout=getattr(args, "timeout", None),
            max_workers=getattr(args, "max_workers", 8),
            registry_url=getattr(args, "registry", DEFAULT_REGISTRY),
            log_file=getattr(args, "log_file", None),
        )
