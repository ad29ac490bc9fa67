"""
Version comparison for update detection.

is_newer() is deliberately a plain numeric, component-wise comparison:
pre-release and build metadata carry no precedence. "1.0.0-beta" compares
equal to "1.0.0".
"""

from __future__ import annotations

import re


_NON_DIGIT_PREFIX = re.compile(r"^[^0-9]+")


def _components(version: str) -> list[int]:
    cleaned = _NON_DIGIT_PREFIX.sub("", version)
    parts = []
    for part in cleaned.split("."):
        try:
            parts.append(int(part))
        except ValueError:
            # Non-numeric components ("0-beta", "") count as zero
            parts.append(0)
    return parts


def is_newer(current: str | None, latest: str | None) -> bool:
    """
    Check whether latest is a newer version than current.

    Leading non-digits ("^", "~", "v") are stripped from both sides and the
    remaining dot-separated components are compared left to right, with
    missing components treated as 0.

    Args:
        current: Installed version
        latest: Candidate version

    Returns:
        True only if latest is strictly newer; False for equal versions or
        when either side is empty
    """
    if not current or not latest:
        return False

    current_parts = _components(current)
    latest_parts = _components(latest)

    for i in range(max(len(current_parts), len(latest_parts))):
        cur = current_parts[i] if i < len(current_parts) else 0
        lat = latest_parts[i] if i < len(latest_parts) else 0
        if lat != cur:
            return lat > cur

    return False


def is_major_upgrade(v1: str, v2: str) -> bool:
    """
    Check if upgrade from v1 to v2 is a major version bump.

    Args:
        v1: Current version
        v2: Target version

    Returns:
        True if v2 is a major version ahead of v1
    """
    from packaging import version

    try:
        return version.parse(v2).major > version.parse(v1).major
    except version.InvalidVersion:
        pass

    # npm versions that PEP 440 rejects (e.g. "1.0.0-next.3+sha")
    major1 = _components(v1)[0] if v1 else 0
    major2 = _components(v2)[0] if v2 else 0
    return major2 > major1
