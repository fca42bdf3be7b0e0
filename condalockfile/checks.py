"""
Drift checks between a spec and its lockfiles.

checkenv compares the spec with the lockfile deployed inside the environment
(<conda_root>/envs/<name>/deps.yml.lock). checklocks compares the spec with
any number of lockfiles and reports every mismatch, not just the first.
Both are read-only.
"""

import glob
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from condalockfile.cl_logging import setup_logging
from condalockfile.config import LOCKFILE_GLOB, LockfileConfig, load_config
from condalockfile.error_messages import format_error
from condalockfile.errors import (
    FileSystemError,
    HashMismatch,
    HashMismatchError,
    MissingHashError,
)
from condalockfile.lockfile.deploy import deployed_lockfile_path
from condalockfile.lockfile.hashing import compute_hash
from condalockfile.lockfile.models import read_spec
from condalockfile.lockfile.store import read_lockfile


@dataclass
class LockCheckReport:
    """Result of checking one spec against one or more lockfiles."""
    spec_path: str
    expected_hash: str
    checked: List[str] = field(default_factory=list)
    mismatches: List[HashMismatch] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


def find_lockfiles(spec_path: Union[str, Path]) -> List[Path]:
    """Lockfiles matching '<spec>.*.lock' next to the spec, sorted by name."""
    spec_path = Path(spec_path)
    pattern = LOCKFILE_GLOB.format(depfile=glob.escape(spec_path.name))
    return sorted(Path(p) for p in glob.glob(str(Path(glob.escape(str(spec_path.parent))) / pattern)))


def checkenv(spec_path: Union[str, Path], config: Optional[LockfileConfig] = None,
             logger=None) -> LockCheckReport:
    """
    Check that the deployed environment was created from the current spec.

    Raises:
        FileSystemError: If the spec or the deployed lockfile cannot be read.
        ConfigurationError: If CONDA_ROOT is not configured.
        MissingHashError: If the deployed lockfile has no hash.
        HashMismatchError: If the hashes differ; names both values.
    """
    if logger is None:
        logger = setup_logging(name="condalockfile.checkenv")
    config = config or load_config()

    spec = read_spec(spec_path)
    expected_hash = compute_hash(spec.raw_bytes)
    logger.verbose(f"env name: {spec.name}")

    lock_path = deployed_lockfile_path(config, spec.name)
    logger.verbose(f"lockfile path: {lock_path}")
    if not lock_path.exists():
        raise FileSystemError(
            format_error('DEPLOYED_LOCKFILE_NOT_FOUND', env_name=spec.name, path=lock_path),
            path=str(lock_path),
            operation="read",
        )
    found_hash, _ = read_lockfile(lock_path)

    report = LockCheckReport(spec_path=str(spec_path), expected_hash=expected_hash, checked=[str(lock_path)])
    if found_hash != expected_hash:
        mismatch = HashMismatch(str(spec_path), str(lock_path), expected_hash, found_hash)
        report.mismatches.append(mismatch)
        raise HashMismatchError(
            f"Environment '{spec.name}' does not match {spec_path}: "
            f"expected {expected_hash}, found {found_hash}",
            mismatches=report.mismatches,
        )

    logger.status(f"Environment '{spec.name}' matches {spec_path}")
    return report


def checklocks(spec_path: Union[str, Path], lock_paths: Optional[Sequence[Union[str, Path]]] = None,
               logger=None) -> LockCheckReport:
    """
    Check every lockfile against the spec.

    Every lockfile is evaluated; lockfiles without a hash count as mismatches.

    Args:
        spec_path: The spec the lockfiles should have been frozen from.
        lock_paths: Lockfiles to check (default: find_lockfiles(spec_path)).

    Raises:
        FileSystemError: If the spec or a lockfile cannot be read, or no lockfiles are found.
        HashMismatchError: Carrying every mismatching lockfile.
    """
    if logger is None:
        logger = setup_logging(name="condalockfile.checklocks")

    spec = read_spec(spec_path)
    expected_hash = compute_hash(spec.raw_bytes)

    if lock_paths:
        paths = [Path(p) for p in lock_paths]
    else:
        paths = find_lockfiles(spec_path)
        if not paths:
            spec_dir = Path(spec_path).parent
            raise FileSystemError(
                format_error('NO_LOCKFILES_FOUND',
                             pattern=LOCKFILE_GLOB.format(depfile=Path(spec_path).name),
                             directory=spec_dir),
                path=str(spec_dir),
                operation="glob",
            )

    report = LockCheckReport(spec_path=str(spec_path), expected_hash=expected_hash)
    for lock_path in paths:
        report.checked.append(str(lock_path))
        try:
            found_hash, _ = read_lockfile(lock_path)
        except MissingHashError:
            found_hash = None

        if found_hash != expected_hash:
            mismatch = HashMismatch(str(spec_path), str(lock_path), expected_hash, found_hash)
            report.mismatches.append(mismatch)
            logger.error(str(mismatch))
        else:
            logger.verbose(f"{lock_path} matches {spec_path}")

    if report.mismatches:
        raise HashMismatchError(
            f"{len(report.mismatches)} of {len(report.checked)} lockfile(s) do not match {spec_path}",
            mismatches=report.mismatches,
        )

    logger.status(f"All {len(report.checked)} lockfile(s) match {spec_path}")
    return report
