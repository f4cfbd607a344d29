"""Operating system name and version lookup."""

from __future__ import annotations

import os
import platform
import sys
from typing import TYPE_CHECKING

from adb_plugin.config import DEFAULT_FALLBACK_VERSION
from adb_plugin.debug_log import log

if TYPE_CHECKING:
    from collections.abc import Callable

UNKNOWN_VERSION = DEFAULT_FALLBACK_VERSION

_OS_MAP = {"Linux": "linux", "Darwin": "macos", "Windows": "windows"}
_DISPLAY_NAMES = {"linux": "Linux", "macos": "macOS", "windows": "Windows"}


def detect_os() -> str:
    """Return the normalized OS key: linux, macos, windows, or the lower-cased system name."""
    system = platform.system()
    return _OS_MAP.get(system, system.lower() or "unknown")


def os_display_name(os_key: str | None = None) -> str:
    if os_key is None:
        os_key = detect_os()
    if os_key in _DISPLAY_NAMES:
        return _DISPLAY_NAMES[os_key]
    return platform.system() or "Unknown"


def _linux_version() -> str:
    # Kernel build string, e.g. "#1 SMP PREEMPT_DYNAMIC Mon Oct  6 10:00:00 UTC 2025"
    return os.uname().version


def _macos_version() -> str:
    release = platform.mac_ver()[0]
    if not release:
        return ""
    build = _macos_build()
    return f"Version {release} (Build {build})" if build else f"Version {release}"


def _macos_build() -> str:
    import subprocess

    try:
        result = subprocess.run(
            ["sw_vers", "-buildVersion"], capture_output=True, text=True, timeout=2, check=False
        )
    except (OSError, subprocess.TimeoutExpired):
        return ""
    return result.stdout.strip() if result.returncode == 0 else ""


def _windows_version() -> str:
    winver = sys.getwindowsversion()  # type: ignore[attr-defined]
    major, minor = winver.major, winver.minor
    if major >= 10:
        return "10+"
    if (major, minor) >= (6, 2):
        return "8"
    if (major, minor) == (6, 1):
        return "7"
    return f"{major}.{minor}"


def _generic_version() -> str:
    return platform.release()


_VERSION_QUERIES: dict[str, Callable[[], str]] = {
    "linux": _linux_version,
    "macos": _macos_version,
    "windows": _windows_version,
}


def get_platform_version(fallback: str = UNKNOWN_VERSION) -> str:
    """Describe the host OS as ``"<OS name> <version>"``.

    Never raises: when the OS query fails or yields nothing, ``fallback`` is
    used as the version part.
    """
    os_key = detect_os()
    name = os_display_name(os_key)
    query = _VERSION_QUERIES.get(os_key, _generic_version)

    try:
        version = query().strip()
    except (OSError, ValueError, AttributeError) as e:
        log.warning(f"OS version query failed on {name}: {e}")
        version = ""

    if not version:
        log.warning(f"No version reported for {name}, using fallback {fallback!r}")
        version = fallback
    return f"{name} {version}"
