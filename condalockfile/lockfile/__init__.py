"""
Lockfile operations for reproducible conda environments.

A lockfile is a pinned environment document preceded by a single sigil line
carrying the SHA-1 of the spec it was frozen from:

    # ENVHASH: <40 hex chars>
    name: myenv
    dependencies:
      - numpy=1.26.4=py311h64a7726_0
      ...

Public exports:
    compute_hash, embed_hash, extract_hash: The hash sigil
    DependencySet, EnvironmentSpec: Parsed spec contents
    read_spec, parse_spec, extract_dependencies, package_name: Spec reading
    Lockfile, write_lockfile, read_lockfile, load_lockfile: Lockfile storage
    LockValidationResult, validate, check_lock, ensure_valid: Superset check
    LocalFreezer: Same-platform resolution with conda
    ContainerFreezer, BuildSpec, DockerfileBuilder: Cross-platform resolution
    freeze, FreezeResult: Spec to lockfile
    create_environment, CreateResult: Lockfile to installed environment
"""

from condalockfile.lockfile.hashing import (
    compute_hash,
    embed_hash,
    extract_hash,
)
from condalockfile.lockfile.models import (
    DependencySet,
    EnvironmentSpec,
    package_name,
    extract_dependencies,
    load_document,
    parse_spec,
    read_spec,
    prepare_resolved_document,
    dump_document,
)
from condalockfile.lockfile.store import (
    Lockfile,
    write_lockfile,
    split_lockfile,
    load_lockfile,
    read_lockfile,
)
from condalockfile.lockfile.validator import (
    LockValidationResult,
    check_lock,
    validate,
    ensure_valid,
    format_validation_report,
)
from condalockfile.lockfile.session import FreezeSession, freeze_session
from condalockfile.lockfile.generator import LocalFreezer
from condalockfile.lockfile.container import (
    BuildSpec,
    DockerfileBuilder,
    ContainerFreezer,
    check_platform_pair,
)
from condalockfile.lockfile.freeze import FreezeResult, default_lockfile_path, freeze
from condalockfile.lockfile.deploy import (
    CreateResult,
    create_environment,
    deployed_lockfile_path,
    environment_prefix,
)

__all__ = [
    # Hashing
    "compute_hash",
    "embed_hash",
    "extract_hash",
    # Models
    "DependencySet",
    "EnvironmentSpec",
    "package_name",
    "extract_dependencies",
    "load_document",
    "parse_spec",
    "read_spec",
    "prepare_resolved_document",
    "dump_document",
    # Store
    "Lockfile",
    "write_lockfile",
    "split_lockfile",
    "load_lockfile",
    "read_lockfile",
    # Validation
    "LockValidationResult",
    "check_lock",
    "validate",
    "ensure_valid",
    "format_validation_report",
    # Resolution
    "FreezeSession",
    "freeze_session",
    "LocalFreezer",
    "BuildSpec",
    "DockerfileBuilder",
    "ContainerFreezer",
    "check_platform_pair",
    # Commands
    "FreezeResult",
    "default_lockfile_path",
    "freeze",
    "CreateResult",
    "create_environment",
    "deployed_lockfile_path",
    "environment_prefix",
]
