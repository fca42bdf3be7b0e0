"""
Freezing a spec into a lockfile.

    spec bytes --sha1--> expected hash
    spec --LocalFreezer / ContainerFreezer--> resolved document
    resolved document --superset check against spec--> write sigil + document

Nothing is written unless the resolved document contains every package the
spec requests.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from condalockfile.cl_logging import setup_logging
from condalockfile.config import LOCKFILE_TEMPLATE, PLATFORM, LockfileConfig, load_config
from condalockfile.environment import current_platform, normalize_platform
from condalockfile.lockfile.container import ContainerFreezer, check_platform_pair
from condalockfile.lockfile.generator import LocalFreezer
from condalockfile.lockfile.hashing import compute_hash
from condalockfile.lockfile.models import dump_document, read_spec
from condalockfile.lockfile.store import write_lockfile
from condalockfile.lockfile.validator import LockValidationResult, ensure_valid, format_validation_report
from condalockfile.utils import CommandExecutor


@dataclass
class FreezeResult:
    """What a successful freeze wrote."""
    lock_path: Path
    content_hash: str
    platform: PLATFORM
    document: Dict[str, Any]
    validation: LockValidationResult


def default_lockfile_path(spec_path: Union[str, Path], platform: PLATFORM) -> Path:
    """
    Lockfile path for ``platform`` next to the spec.

    Example:
        >>> default_lockfile_path("envs/deps.yml", PLATFORM.LINUX)
        PosixPath('envs/deps.yml.Linux.lock')
    """
    spec_path = Path(spec_path)
    return spec_path.with_name(LOCKFILE_TEMPLATE.format(depfile=spec_path.name, platform=platform.value))


def freeze(
    spec_path: Union[str, Path],
    lock_path: Optional[Union[str, Path]] = None,
    target_platform: Optional[Union[str, PLATFORM]] = None,
    config: Optional[LockfileConfig] = None,
    logger=None,
    executor: Optional[CommandExecutor] = None,
    host_platform: Optional[PLATFORM] = None,
) -> FreezeResult:
    """
    Resolve the spec at ``spec_path`` and write its lockfile.

    Args:
        spec_path: Environment spec to freeze.
        lock_path: Output path (default: <spec>.<Platform>.lock next to the spec).
        target_platform: Platform the lockfile is for (default: the host).
        config: Explicit configuration (default: load_config()).
        logger: Logger; a default one is created if omitted.
        executor: Command runner shared by the freezers.
        host_platform: Override of the detected host platform.

    Returns:
        FreezeResult describing the written lockfile.

    Raises:
        UnsupportedPlatformError: Before any side effect, for an unsupported host/target pair.
        FileSystemError, ParseError: If the spec cannot be read or parsed.
        DependencyError, ProcessError: If resolution fails.
        ValidationError: If resolution dropped a requested package; no lockfile is written.
    """
    if logger is None:
        logger = setup_logging(name="condalockfile.freeze")
    config = config or load_config()
    host = normalize_platform(host_platform) if host_platform else current_platform()
    target = normalize_platform(target_platform) if target_platform else host
    if target != host:
        check_platform_pair(host, target)

    spec = read_spec(spec_path)
    expected_hash = compute_hash(spec.raw_bytes)
    logger.verbose(f"Spec '{spec.name}' from {spec_path} has hash {expected_hash}")

    if target == host:
        logger.status(f"Freezing '{spec.name}' for {target.value}")
        document = LocalFreezer(config, executor=executor, logger=logger).freeze(spec)
    else:
        logger.status(f"Freezing '{spec.name}' for {target.value} in a container on {host.value}")
        freezer = ContainerFreezer(config, executor=executor, logger=logger, host_platform=host)
        document = freezer.freeze(spec, target)

    validation = ensure_valid(spec, document)
    logger.verbose(format_validation_report(validation))

    lock_path = Path(lock_path) if lock_path else default_lockfile_path(spec_path, target)
    write_lockfile(lock_path, expected_hash, dump_document(document))
    logger.status(f"Wrote lockfile: {lock_path}")

    return FreezeResult(
        lock_path=lock_path,
        content_hash=expected_hash,
        platform=target,
        document=document,
        validation=validation,
    )
