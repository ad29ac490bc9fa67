"""
Package model shared by the adapters, the registry check and the orchestrator.

Every package manager's listing output is normalized into InstalledPackage;
the update check extends it into PackageWithLatest.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .versions import is_major_upgrade


class ManagerKind(str, Enum):
    """Supported package managers. Values are the executable names."""
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InstalledPackage:
    """
    A globally installed package as reported by its package manager.

    Attributes:
        name: Package name (e.g., "typescript", "@vue/cli")
        version: Version string exactly as the manager printed it
        manager: Package manager that owns the installation
    """
    name: str
    version: str
    manager: ManagerKind

    def __post_init__(self):
        if not self.name:
            raise ValueError("Package name must not be empty")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "manager": self.manager.value,
        }


@dataclass(frozen=True)
class PackageWithLatest(InstalledPackage):
    """
    Installed package paired with the registry's latest version.

    Attributes:
        latest_version: Version published under the "latest" tag
        has_update: Whether latest_version is newer than version
    """
    latest_version: str = ""
    has_update: bool = False

    @property
    def breaking_change(self) -> bool:
        """Whether the update crosses a major version."""
        return self.has_update and is_major_upgrade(self.version, self.latest_version)

    def version_jump_description(self) -> str:
        """Human-readable version jump description."""
        if self.breaking_change:
            return f"{self.version} → {self.latest_version} (BREAKING)"
        return f"{self.version} → {self.latest_version}"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "latest_version": self.latest_version,
            "has_update": self.has_update,
        })
        return data


@dataclass(frozen=True)
class UpgradeBatch:
    """
    Selected packages of one manager, upgraded with a single command.

    Attributes:
        manager: Package manager running the batch
        packages: Packages to upgrade, in selection order
    """
    manager: ManagerKind
    packages: tuple[PackageWithLatest, ...]

    @property
    def names(self) -> list[str]:
        return [pkg.name for pkg in self.packages]


def group_by_manager(packages: Iterable[PackageWithLatest]) -> list[UpgradeBatch]:
    """
    Partition packages into one batch per manager.

    Batches come out in the order their manager is first seen, and packages
    keep their relative order inside a batch.
    """
    grouped: dict[ManagerKind, list[PackageWithLatest]] = {}
    for pkg in packages:
        grouped.setdefault(pkg.manager, []).append(pkg)
    return [UpgradeBatch(manager=pm, packages=tuple(pkgs)) for pm, pkgs in grouped.items()]


class RunStatus(str, Enum):
    """Terminal outcome of an upgrade run."""
    NO_MANAGERS = "no_managers"
    NO_PACKAGES = "no_packages"
    UP_TO_DATE = "up_to_date"
    NOTHING_SELECTED = "nothing_selected"
    CANCELLED = "cancelled"
    UPGRADED = "upgraded"
    PARTIAL = "partial"


@dataclass(frozen=True)
class BatchFailure:
    """
    A manager batch whose upgrade command failed.

    Attributes:
        manager: Package manager whose command failed
        package_names: Packages the batch tried to upgrade
        error: Failure detail from the command
    """
    manager: ManagerKind
    package_names: tuple[str, ...]
    error: str

    def __str__(self) -> str:
        return f"{self.manager}: {self.error}"


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of a full detect → check → upgrade run.

    Attributes:
        status: Which terminal state the run ended in
        message: User-facing outcome message
        upgraded: Number of packages upgraded successfully
        total: Number of packages attempted
        failures: Per-manager batch failures
    """
    status: RunStatus
    message: str
    upgraded: int = 0
    total: int = 0
    failures: tuple[BatchFailure, ...] = ()

    @property
    def success(self) -> bool:
        return self.status != RunStatus.NO_MANAGERS and not self.failures

    @property
    def exit_code(self) -> int:
        # Partial upgrades still count as a completed run
        return 1 if self.status == RunStatus.NO_MANAGERS else 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "success": self.success,
            "message": self.message,
            "upgraded": self.upgraded,
            "total": self.total,
            "failed": [str(f) for f in self.failures],
        }
