"""
OS detection utilities for conda-lockfile.

Public exports:
    OSInfo: Data class containing operating system information
    detect_os: Function to detect current OS and distribution
    current_platform: The host platform as a PLATFORM value
    normalize_platform: Map a user-supplied platform name to a PLATFORM value
"""

import platform
import sys
from dataclasses import dataclass
from typing import Optional, Union

from condalockfile.config import PLATFORM, PLATFORM_ALIASES
from condalockfile.error_messages import format_error
from condalockfile.errors import ErrorCode, UnsupportedPlatformError


@dataclass
class OSInfo:
    """
    Operating system information.

    Attributes:
        system: Operating system type ('Linux', 'Darwin', 'Windows')
        release: OS kernel release version
        machine: Machine architecture ('x86_64', 'arm64', etc.)
        distro_id: Linux distribution ID ('ubuntu', 'rhel', 'debian', etc.)
        distro_name: Full distribution name ('Ubuntu', 'Red Hat Enterprise Linux')
        distro_version: Distribution version ('22.04', '8.5', etc.)
    """
    system: str
    release: str
    machine: str
    distro_id: Optional[str] = None
    distro_name: Optional[str] = None
    distro_version: Optional[str] = None


def detect_os() -> OSInfo:
    """
    Detect the current operating system and Linux distribution.

    Uses the `platform` module for basic OS info and attempts to detect
    Linux distribution details using:
    1. The `distro` package (if available)
    2. `platform.freedesktop_os_release()` (Python 3.10+)

    Returns:
        OSInfo: Detected operating system information
    """
    info = OSInfo(
        system=platform.system(),
        release=platform.release(),
        machine=platform.machine(),
    )

    if info.system == 'Linux':
        try:
            import distro
            info.distro_id = distro.id()
            info.distro_name = distro.name()
            info.distro_version = distro.version()
        except ImportError:
            if sys.version_info >= (3, 10):
                try:
                    os_release = platform.freedesktop_os_release()
                    info.distro_id = os_release.get('ID', '').lower() or None
                    info.distro_name = os_release.get('NAME', '') or None
                    info.distro_version = os_release.get('VERSION_ID', '') or None
                except OSError:
                    # /etc/os-release not available
                    pass

    return info


def normalize_platform(name: Union[str, PLATFORM]) -> PLATFORM:
    """
    Map a platform name to a PLATFORM value.

    Accepts the `platform.system()` spelling ('Linux', 'Darwin', 'Windows')
    and common aliases ('macOS', 'osx', 'linux'), case-insensitively.

    Raises:
        UnsupportedPlatformError: If the name is not a known platform.

    Examples:
        >>> normalize_platform('macOS')
        <PLATFORM.MACOS: 'Darwin'>
    """
    if isinstance(name, PLATFORM):
        return name
    key = str(name).strip().lower()
    if key in PLATFORM_ALIASES:
        return PLATFORM_ALIASES[key]
    valid = ", ".join(p.value for p in PLATFORM)
    raise UnsupportedPlatformError(
        format_error('UNKNOWN_PLATFORM', platform=name, valid=valid),
        target=str(name),
        code=ErrorCode.PLATFORM_UNSUPPORTED_HOST,
        suggestion=f"Use one of: {valid}",
    )


def current_platform() -> PLATFORM:
    """Return the host platform."""
    return normalize_platform(platform.system())
