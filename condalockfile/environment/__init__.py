"""
Host environment detection for conda-lockfile.

This module provides utilities for detecting the operating system and Linux
distribution, normalizing platform names used for lockfiles, and generating
OS-specific installation instructions for conda and docker.

Public exports:
    OSInfo: Data class containing operating system information
    detect_os: Function to detect current OS and distribution
    current_platform: The host platform as a PLATFORM value
    normalize_platform: Map a user-supplied platform name to a PLATFORM value
    get_install_instruction: Function to get OS-specific install commands
    INSTALL_INSTRUCTIONS: Dictionary of install commands by OS/dependency
"""

from condalockfile.environment.os_detect import (
    OSInfo,
    detect_os,
    current_platform,
    normalize_platform,
)
from condalockfile.environment.install_hints import (
    get_install_instruction,
    INSTALL_INSTRUCTIONS,
)

__all__ = [
    "OSInfo",
    "detect_os",
    "current_platform",
    "normalize_platform",
    "get_install_instruction",
    "INSTALL_INSTRUCTIONS",
]
