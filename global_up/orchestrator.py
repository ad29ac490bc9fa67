"""
End-to-end upgrade flow.

Runs strictly in sequence: detect managers, enumerate global packages,
check the registry, select, confirm, upgrade per manager, report. Every
early exit returns a RunResult; only an unexpected defect raises.
"""

from __future__ import annotations

import logging

from .common import pluralize, vlog
from .config import Settings
from .models import (
    BatchFailure,
    InstalledPackage,
    ManagerKind,
    PackageWithLatest,
    RunResult,
    RunStatus,
    group_by_manager,
)
from .package_managers import (
    UpgradeError,
    detect_package_managers,
    list_global_packages,
    upgrade_packages,
)
from .prompts import Prompter, SelectOption
from .registry import get_latest_versions
from .render import Progress, package_hint, package_label
from .versions import is_newer


logger = logging.getLogger(__name__)

SUPPORTED_MANAGERS = ", ".join(kind.value for kind in ManagerKind)


def check_updates(
    packages: list[InstalledPackage],
    settings: Settings,
) -> list[PackageWithLatest]:
    """
    Pair installed packages with their latest registry version.

    Packages whose latest version cannot be resolved are dropped.

    Args:
        packages: Installed packages from every detected manager
        settings: Run settings (registry URL, timeout, parallelism)

    Returns:
        Resolved packages, in input order, with has_update computed
    """
    latest = get_latest_versions(
        (pkg.name for pkg in packages),
        registry_url=settings.registry_url,
        timeout=settings.timeout,
        max_workers=settings.max_workers,
    )

    resolved = []
    for pkg in packages:
        latest_version = latest.get(pkg.name)
        if not latest_version:
            vlog(f"{pkg.name} ({pkg.manager}): latest version unknown, skipping", settings.verbose)
            continue
        resolved.append(PackageWithLatest(
            name=pkg.name,
            version=pkg.version,
            manager=pkg.manager,
            latest_version=latest_version,
            has_update=is_newer(pkg.version, latest_version),
        ))
    return resolved


def select_packages(
    updatable: list[PackageWithLatest],
    prompter: Prompter,
    use_color: bool = True,
) -> list[PackageWithLatest] | None:
    """
    Ask the user which packages to upgrade and confirm the choice.

    Returns:
        Confirmed packages, [] if nothing was selected, or None if the user
        cancelled or declined
    """
    options = [
        SelectOption(
            value=pkg,
            label=package_label(pkg, use_color),
            hint=package_hint(pkg, use_color),
        )
        for pkg in updatable
    ]

    selected = prompter.multiselect("Select packages to upgrade:", options)
    if selected is None:
        return None
    if not selected:
        return []

    confirmed = prompter.confirm(f"Upgrade {pluralize(len(selected), 'package')}?")
    if not confirmed:
        return None
    return list(selected)


def upgrade_selected(
    packages: list[PackageWithLatest],
    settings: Settings,
    progress: Progress,
) -> RunResult:
    """
    Upgrade packages with one command per manager and summarize.

    A failing manager batch is recorded and the remaining batches still run.
    """
    total = len(packages)
    upgraded = 0
    processed = 0
    failures: list[BatchFailure] = []

    progress.start("Upgrading packages")
    for batch in group_by_manager(packages):
        names = batch.names
        progress.update(
            f"[{processed + 1}-{processed + len(names)}/{total}] "
            f"Upgrading {', '.join(names)} via {batch.manager}"
        )
        try:
            upgrade_packages(batch.manager, names, timeout=settings.timeout)
            upgraded += len(names)
        except UpgradeError as e:
            logger.debug(f"Upgrade batch failed: {e}")
            progress.fail(f"Failed to upgrade packages via {batch.manager}")
            failures.append(BatchFailure(
                manager=batch.manager,
                package_names=tuple(names),
                error=e.detail,
            ))
        processed += len(names)

    if not failures:
        progress.succeed("All packages upgraded")
        return RunResult(
            status=RunStatus.UPGRADED,
            message=f"Successfully upgraded {pluralize(upgraded, 'package')}!",
            upgraded=upgraded,
            total=total,
        )

    progress.fail("Upgrade completed with errors")
    return RunResult(
        status=RunStatus.PARTIAL,
        message=f"Upgraded {upgraded}/{total} packages. {len(failures)} failed.",
        upgraded=upgraded,
        total=total,
        failures=tuple(failures),
    )


def run_upgrade(
    settings: Settings,
    prompter: Prompter,
    progress: Progress | None = None,
) -> RunResult:
    """
    Run the full detect → check → select → upgrade flow.

    Args:
        settings: Run settings
        prompter: Interactive collaborator (unused when settings.select_all)
        progress: Progress reporter (defaults to stdout)

    Returns:
        Outcome of the run
    """
    progress = progress or Progress()

    # 1. Detecting
    progress.start("Detecting package managers")
    detected = detect_package_managers(timeout=settings.timeout, max_workers=settings.max_workers)
    if not detected:
        progress.fail("No package managers found")
        return RunResult(
            status=RunStatus.NO_MANAGERS,
            message=f"No package managers ({SUPPORTED_MANAGERS}) found on your system",
        )

    managers = [kind for kind in ManagerKind if kind in detected]
    progress.succeed(
        f"Found {progress.highlight(pluralize(len(managers), 'package manager'))}: "
        f"{progress.highlight(', '.join(str(m) for m in managers))}"
    )

    # 2. Enumerating
    progress.start("Fetching global packages")
    installed: list[InstalledPackage] = []
    for manager in managers:
        installed.extend(list_global_packages(manager, timeout=settings.timeout))

    if not installed:
        progress.succeed("No global packages found")
        return RunResult(status=RunStatus.NO_PACKAGES, message="No global packages found to update")

    progress.succeed(f"Found {progress.highlight(pluralize(len(installed), 'global package'))}")

    # 3. Checking
    progress.start("Checking for updates")
    updatable = [pkg for pkg in check_updates(installed, settings) if pkg.has_update]
    if not updatable:
        progress.succeed("Check complete")
        return RunResult(status=RunStatus.UP_TO_DATE, message="All packages are up to date!")

    progress.succeed(f"Found {progress.highlight(pluralize(len(updatable), 'package'))} with updates")

    # 4-5. Selecting and confirming
    if settings.select_all:
        selected = updatable
        for pkg in selected:
            vlog(f"{pkg.name} ({pkg.manager}): {pkg.version_jump_description()}", settings.verbose)
    else:
        choice = select_packages(updatable, prompter, use_color=progress.use_color)
        if choice is None:
            return RunResult(status=RunStatus.CANCELLED, message="Operation cancelled")
        if not choice:
            return RunResult(status=RunStatus.NOTHING_SELECTED, message="No packages selected")
        selected = choice

    # 6-7. Upgrading and reporting
    return upgrade_selected(selected, settings, progress)
