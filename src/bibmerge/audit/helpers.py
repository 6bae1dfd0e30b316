"""Helper utilities for audit logging.

Run ID generation and environment information recorded with every run.
For timestamp and hashing utilities, see bibmerge.utils.
"""

import importlib.metadata
import platform
import secrets
import sys
from datetime import UTC, datetime

__all__ = [
    "generate_run_id",
    "get_package_version",
    "get_python_version",
    "get_platform_info",
    "get_dependency_versions",
    "get_environment_info",
]

TRACKED_DEPENDENCIES = ["click", "rapidfuzz"]


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    suffix = secrets.token_hex(4)
    return f"{timestamp}__{suffix}"


def get_package_version() -> str:
    """Get bibmerge package version.

    Returns
    -------
    str
        Package version or "unknown".
    """
    try:
        return importlib.metadata.version("bibmerge")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_python_version() -> str:
    """Get Python version string (e.g., "3.12.3")."""
    return sys.version.split()[0]


def get_platform_info() -> str:
    """Get platform information (e.g., "Linux-6.8.0-x86_64")."""
    return f"{platform.system()}-{platform.release()}-{platform.machine()}"


def get_dependency_versions(packages: list[str]) -> dict[str, str]:
    """Get versions of specified packages.

    Parameters
    ----------
    packages : list[str]
        List of package names to query.

    Returns
    -------
    dict[str, str]
        Mapping of package name to version ("unknown" when not installed).
    """
    versions: dict[str, str] = {}
    for package in packages:
        try:
            versions[package] = importlib.metadata.version(package)
        except importlib.metadata.PackageNotFoundError:
            versions[package] = "unknown"
    return versions


def get_environment_info() -> dict[str, object]:
    """Collect the environment snapshot logged with ``run_started``."""
    return {
        "python_version": get_python_version(),
        "platform": get_platform_info(),
        "package_version": get_package_version(),
        "dependencies": get_dependency_versions(TRACKED_DEPENDENCIES),
    }
