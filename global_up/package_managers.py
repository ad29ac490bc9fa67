"""
Package manager registry, detection, listing and upgrades.

Each supported manager is one PackageManager entry in PACKAGE_MANAGERS that
owns its probe, list and upgrade commands plus the parser for its listing
output. Supporting another manager means adding another entry.

Failure policy:
- detection and listing degrade silently (absent manager / no packages)
- upgrades raise UpgradeError so callers can report which batch failed
"""

from __future__ import annotations

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .models import InstalledPackage, ManagerKind
from .runner import CommandError, run_command


logger = logging.getLogger(__name__)

# Leading tree-drawing glyphs and indentation ("├── ", "│   └── ", "+-- ")
TREE_PREFIX_RE = re.compile(r"^[\s│├└─┬┌┐┘┴┤┼|`+\\-]+")

# "typescript@5.3.3", "@vue/cli@5.0.8"
AT_SEPARATED_RE = re.compile(r"^(?P<name>@?[^@\s]+)@(?P<version>[^@\s]+)$")

# "typescript 5.3.3"; the version must start with a digit so headers such as
# "Legend: production dependency, ..." are not mistaken for packages
SPACE_SEPARATED_RE = re.compile(r"^(?P<name>@?[^@\s]+)\s+(?P<version>v?\d[^\s]*)$")


class UpgradeError(Exception):
    """
    Raised when a manager's batched upgrade command fails.

    Attributes:
        manager: Package manager whose command failed
        detail: Failure detail from the command
    """
    def __init__(self, manager: ManagerKind, detail: str):
        self.manager = manager
        self.detail = detail
        super().__init__(f"{manager}: {detail}")


ListingParser = Callable[[str], list[tuple[str, str]]]


def parse_json_dependencies(output: str) -> list[tuple[str, str]]:
    """
    Parse `npm list --json` output.

    Entries without a version (broken or linked installs) are skipped.

    Raises:
        ValueError: If output is not a JSON document
    """
    data = json.loads(output)
    if not isinstance(data, dict):
        return []

    dependencies = data.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        return []

    entries = []
    for name, info in dependencies.items():
        version = info.get("version") if isinstance(info, dict) else None
        if name and isinstance(version, str) and version:
            entries.append((name, version))
    return entries


def line_parser(pattern: re.Pattern[str]) -> ListingParser:
    """
    Build a parser for tree/plain-text listings.

    Each line is stripped of tree glyphs and matched against pattern, which
    must define "name" and "version" groups. Lines that do not match
    (headers, blank lines, summaries) are skipped.
    """
    def parse(output: str) -> list[tuple[str, str]]:
        entries = []
        for line in output.splitlines():
            clean = TREE_PREFIX_RE.sub("", line).strip()
            if not clean:
                continue
            match = pattern.match(clean)
            if match:
                entries.append((match.group("name"), match.group("version")))
        return entries

    return parse


def parse_json_lines_list(output: str) -> list[tuple[str, str]]:
    """
    Parse `yarn global list --json` output.

    Yarn emits one JSON record per line; packages are the "name@version"
    strings in the body of records whose type is "list".
    """
    entries = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except ValueError:
            continue
        if not isinstance(record, dict) or record.get("type") != "list":
            continue
        data = record.get("data")
        body = data.get("body") if isinstance(data, dict) else None
        if not isinstance(body, list):
            continue
        for item in body:
            if not isinstance(item, str):
                continue
            match = AT_SEPARATED_RE.match(item.strip())
            if match:
                entries.append((match.group("name"), match.group("version")))
    return entries


@dataclass(frozen=True)
class PackageManager:
    """
    Package manager definition.

    Attributes:
        kind: Which manager this is
        check_command: Command whose success proves the manager is present
        list_command: Command listing global packages
        upgrade_command: Command prefix; "name@latest" arguments are appended
        parse_listing: Turns list_command output into (name, version) pairs
    """
    kind: ManagerKind
    check_command: tuple[str, ...]
    list_command: tuple[str, ...]
    upgrade_command: tuple[str, ...]
    parse_listing: ListingParser

    @property
    def name(self) -> str:
        return self.kind.value

    def is_available(self, timeout: float | None = None) -> bool:
        """
        Check if this package manager is installed and runs.

        Args:
            timeout: Optional timeout in seconds for the check command

        Returns:
            True if the check command succeeded
        """
        try:
            run_command(self.check_command, timeout=timeout)
        except CommandError as e:
            logger.debug(f"{self.name} not available: {e.detail}")
            return False
        except OSError as e:
            logger.debug(f"{self.name} probe failed: {e}")
            return False
        return True

    def parse(self, output: str) -> list[InstalledPackage]:
        """Parse listing output into packages attributed to this manager."""
        return [
            InstalledPackage(name=name, version=version, manager=self.kind)
            for name, version in self.parse_listing(output)
        ]

    def get_upgrade_command(self, package_names: Sequence[str]) -> tuple[str, ...]:
        """
        Get the batched upgrade command for packages of this manager.

        Args:
            package_names: Package names to move to their "latest" tag

        Returns:
            Command tuple
        """
        return self.upgrade_command + tuple(f"{name}@latest" for name in package_names)


# Package Manager Registry, in display order

PACKAGE_MANAGERS = (
    PackageManager(
        kind=ManagerKind.NPM,
        check_command=("npm", "--version"),
        list_command=("npm", "list", "-g", "--depth=0", "--json"),
        upgrade_command=("npm", "install", "-g"),
        parse_listing=parse_json_dependencies,
    ),
    PackageManager(
        kind=ManagerKind.PNPM,
        check_command=("pnpm", "--version"),
        list_command=("pnpm", "list", "-g", "--depth", "0"),
        upgrade_command=("pnpm", "add", "-g"),
        parse_listing=line_parser(SPACE_SEPARATED_RE),
    ),
    PackageManager(
        kind=ManagerKind.YARN,
        check_command=("yarn", "--version"),
        list_command=("yarn", "global", "list", "--json"),
        upgrade_command=("yarn", "global", "add"),
        parse_listing=parse_json_lines_list,
    ),
    PackageManager(
        kind=ManagerKind.BUN,
        check_command=("bun", "--version"),
        list_command=("bun", "pm", "ls", "-g"),
        upgrade_command=("bun", "add", "-g"),
        parse_listing=line_parser(AT_SEPARATED_RE),
    ),
)

_PM_BY_KIND = {pm.kind: pm for pm in PACKAGE_MANAGERS}


def get_package_manager(kind: ManagerKind | str) -> PackageManager:
    """
    Get package manager definition by kind or executable name.

    Raises:
        ValueError: If the name is not a supported manager
    """
    return _PM_BY_KIND[ManagerKind(kind)]


def detect_package_managers(
    timeout: float | None = None,
    max_workers: int = 4,
    managers: Iterable[PackageManager] = PACKAGE_MANAGERS,
) -> set[ManagerKind]:
    """
    Probe every supported manager independently and in parallel.

    Args:
        timeout: Optional timeout for each probe
        max_workers: Maximum parallel probes
        managers: Manager definitions to probe

    Returns:
        Kinds of the managers whose probe succeeded
    """
    available: set[ManagerKind] = set()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(pm.is_available, timeout): pm
            for pm in managers
        }
        for future in as_completed(futures):
            pm = futures[future]
            try:
                if future.result():
                    available.add(pm.kind)
            except Exception as e:
                logger.debug(f"{pm.name} probe raised: {e}")

    logger.debug(f"Detected package managers: {sorted(str(k) for k in available)}")
    return available


def list_global_packages(
    manager: ManagerKind | str,
    timeout: float | None = None,
) -> list[InstalledPackage]:
    """
    List globally installed packages of one manager.

    A failing list command is treated exactly like an empty listing.

    Args:
        manager: Package manager to query
        timeout: Optional timeout for the list command

    Returns:
        Installed packages, all attributed to manager
    """
    pm = get_package_manager(manager)
    try:
        output = run_command(pm.list_command, timeout=timeout)
        packages = pm.parse(output)
    except CommandError as e:
        logger.debug(f"{pm.name}: listing failed: {e.detail}")
        return []
    except ValueError as e:
        logger.debug(f"{pm.name}: could not parse listing: {e}")
        return []

    logger.debug(f"{pm.name}: found {len(packages)} global packages")
    return packages


def upgrade_packages(
    manager: ManagerKind | str,
    package_names: Sequence[str],
    timeout: float | None = None,
) -> None:
    """
    Upgrade packages of one manager to their latest tag with one command.

    Args:
        manager: Package manager owning the packages
        package_names: Names to upgrade; empty means nothing to do
        timeout: Optional timeout for the upgrade command

    Raises:
        UpgradeError: If the upgrade command fails
    """
    if not package_names:
        return

    pm = get_package_manager(manager)
    command = pm.get_upgrade_command(package_names)
    try:
        run_command(command, timeout=timeout)
    except CommandError as e:
        raise UpgradeError(pm.kind, e.detail) from e

    logger.debug(f"{pm.name}: upgraded {', '.join(package_names)}")
