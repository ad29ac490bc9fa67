"""
global-up - Check and upgrade globally installed JavaScript packages.

Core Modules:
- Package managers: detection, global listings and batched upgrades for
  npm, pnpm, yarn and bun
- Registry: latest-version lookups on the npm registry
- Versions: update and major-jump detection
- Orchestrator: detect → check → select → upgrade flow
"""

__version__ = "0.1.0"

from .models import (
    ManagerKind,
    InstalledPackage,
    PackageWithLatest,
    UpgradeBatch,
    BatchFailure,
    RunResult,
    RunStatus,
    group_by_manager,
)
from .versions import is_newer, is_major_upgrade
from .runner import CommandError, run_command
from .registry import (
    DEFAULT_REGISTRY,
    RegistryError,
    NetworkError,
    get_latest_version,
    get_latest_versions,
)
from .package_managers import (
    PackageManager,
    PACKAGE_MANAGERS,
    UpgradeError,
    get_package_manager,
    detect_package_managers,
    list_global_packages,
    upgrade_packages,
)
from .config import Settings
from .prompts import Prompter, SelectOption, TerminalPrompter
from .orchestrator import run_upgrade
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    # Models
    "ManagerKind",
    "InstalledPackage",
    "PackageWithLatest",
    "UpgradeBatch",
    "BatchFailure",
    "RunResult",
    "RunStatus",
    "group_by_manager",
    # Versions
    "is_newer",
    "is_major_upgrade",
    # Processes
    "CommandError",
    "run_command",
    # Registry
    "DEFAULT_REGISTRY",
    "RegistryError",
    "NetworkError",
    "get_latest_version",
    "get_latest_versions",
    # Package managers
    "PackageManager",
    "PACKAGE_MANAGERS",
    "UpgradeError",
    "get_package_manager",
    "detect_package_managers",
    "list_global_packages",
    "upgrade_packages",
    # Flow
    "Settings",
    "Prompter",
    "SelectOption",
    "TerminalPrompter",
    "run_upgrade",
    # Logging
    "setup_logging",
    "get_logger",
]
