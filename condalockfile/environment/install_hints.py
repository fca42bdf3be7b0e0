"""
OS-specific installation instructions for the external tools conda-lockfile drives.

Public exports:
    INSTALL_INSTRUCTIONS: Dictionary mapping (dependency, system, distro) to install commands
    get_install_instruction: Function to get the appropriate install command
"""

from typing import Optional

from condalockfile.environment.os_detect import OSInfo


# Installation instructions keyed by (dependency, system, distro_id)
# None values act as wildcards for less-specific lookups
INSTALL_INSTRUCTIONS: dict[tuple[str, Optional[str], Optional[str]], str] = {
    # conda
    ('conda', 'Linux', None): (
        'curl -LO https://repo.anaconda.com/miniconda/Miniconda3-latest-Linux-x86_64.sh '
        '&& bash Miniconda3-latest-Linux-x86_64.sh'
    ),
    ('conda', 'Darwin', None): 'brew install --cask miniconda',
    ('conda', 'Windows', None): 'winget install Anaconda.Miniconda3',

    # docker
    ('docker', 'Linux', 'ubuntu'): 'sudo apt-get install docker.io',
    ('docker', 'Linux', 'debian'): 'sudo apt-get install docker.io',
    ('docker', 'Linux', 'fedora'): 'sudo dnf install moby-engine',
    ('docker', 'Linux', 'arch'): 'sudo pacman -S docker',
    ('docker', 'Linux', None): 'Install docker via your package manager',
    ('docker', 'Darwin', None): 'brew install --cask docker',
    ('docker', 'Windows', None): 'winget install Docker.DockerDesktop',
}


def get_install_instruction(dependency: str, os_info: OSInfo) -> str:
    """
    Get the OS-specific installation instruction for a dependency.

    Looks up installation instructions in order of specificity:
    1. (dependency, system, distro_id) - Most specific
    2. (dependency, system, None) - System-specific, any distro
    3. (dependency, None, None) - Generic, any system

    Examples:
        >>> macos = OSInfo(system='Darwin', release='', machine='arm64')
        >>> get_install_instruction('docker', macos)
        'brew install --cask docker'
    """
    lookups = [
        (dependency, os_info.system, os_info.distro_id),
        (dependency, os_info.system, None),
        (dependency, None, None),
    ]

    for key in lookups:
        if key in INSTALL_INSTRUCTIONS:
            return INSTALL_INSTRUCTIONS[key]

    return f"Install {dependency} using your system's package manager"
