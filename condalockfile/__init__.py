"""
conda-lockfile: reproducible conda environments.

Freezes an unpinned environment spec (deps.yml) into a pinned lockfile tagged
with the hash of the spec that produced it, and later verifies deployed
environments and lockfiles against that hash.
"""

VERSION = "0.3.0"
__version__ = VERSION
