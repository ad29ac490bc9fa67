"""
Latest-version lookups against the npm registry.

Lookups never raise: any failure for a package is logged and reported as
None, so one bad name cannot abort a whole check.
"""

from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from . import __version__


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "https://registry.npmjs.org"
USER_AGENT = f"global-up/{__version__}"


class RegistryError(Exception):
    """Raised when a registry lookup fails."""
    pass


class NetworkError(RegistryError):
    """Raised when network requests fail."""
    pass


def http_get(url: str, timeout: float | None = None, headers: dict[str, str] | None = None) -> bytes:
    """Perform HTTP GET request.

    Args:
        url: URL to fetch
        timeout: Timeout in seconds (None uses the socket default)
        headers: Optional HTTP headers

    Returns:
        Response body as bytes

    Raises:
        NetworkError: If the request fails or returns a non-success status
    """
    request_headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)

    req = urllib.request.Request(url, headers=request_headers)
    try:
        if timeout is None:
            response = urllib.request.urlopen(req)
        else:
            response = urllib.request.urlopen(req, timeout=timeout)
        with response:
            return response.read()
    except Exception as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e


def latest_url(name: str, registry_url: str = DEFAULT_REGISTRY) -> str:
    """URL of the "latest" dist-tag document for a package."""
    # Keep "@" and "/" so scoped names ("@scope/pkg") resolve as paths
    return f"{registry_url.rstrip('/')}/{urllib.parse.quote(name, safe='@/')}/latest"


def get_latest_version(
    name: str,
    registry_url: str = DEFAULT_REGISTRY,
    timeout: float | None = None,
) -> str | None:
    """Resolve the version published under a package's "latest" tag.

    Args:
        name: Package name
        registry_url: Registry base URL
        timeout: Optional request timeout in seconds

    Returns:
        Latest version, or None if it cannot be determined
    """
    url = latest_url(name, registry_url)
    try:
        data = json.loads(http_get(url, timeout=timeout))
    except NetworkError as e:
        logger.debug(f"registry {name}: {e}")
        return None
    except ValueError as e:
        logger.debug(f"registry {name}: invalid JSON from {url}: {e}")
        return None

    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version:
        logger.debug(f"registry {name}: no version field in response")
        return None

    logger.debug(f"registry {name}: latest is {version}")
    return version


def get_latest_versions(
    names: Iterable[str],
    registry_url: str = DEFAULT_REGISTRY,
    timeout: float | None = None,
    max_workers: int = 8,
) -> dict[str, str | None]:
    """Resolve latest versions for many packages in parallel.

    Each distinct name is looked up once, even when several package
    managers have it installed.

    Args:
        names: Package names (duplicates allowed)
        registry_url: Registry base URL
        timeout: Optional per-request timeout in seconds
        max_workers: Maximum parallel lookups

    Returns:
        Mapping of name to latest version (None where unresolved)
    """
    unique = list(dict.fromkeys(names))
    if not unique:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        versions = executor.map(
            lambda name: get_latest_version(name, registry_url, timeout),
            unique,
        )
        return dict(zip(unique, versions))
