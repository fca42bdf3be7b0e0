"""
Superset validation of a resolved environment against the spec it came from.

Resolution may add transitive packages but must never drop one the spec
asked for. Versions are not compared: pinning them is the point of freezing.
A package renamed during resolution looks the same as a dropped one.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

from condalockfile.errors import ValidationError
from condalockfile.lockfile.models import (
    DependencySet,
    EnvironmentSpec,
    extract_dependencies,
    load_document,
    parse_spec,
)


@dataclass
class LockValidationResult:
    """Outcome of comparing a resolved environment with its spec."""
    valid: bool
    env_name: str
    requested: DependencySet
    resolved: DependencySet
    missing_native: List[str] = field(default_factory=list)
    missing_sub: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if self.valid:
            return (f"All {len(self.requested.native)} conda and {len(self.requested.sub)} "
                    f"pip packages requested by '{self.env_name}' were resolved")
        issues = []
        if self.missing_native:
            issues.append(f"{len(self.missing_native)} conda package(s) missing")
        if self.missing_sub:
            issues.append(f"{len(self.missing_sub)} pip package(s) missing")
        return f"Validation failed: {', '.join(issues)}"


def _as_spec(spec: Union[EnvironmentSpec, bytes, str]) -> EnvironmentSpec:
    if isinstance(spec, EnvironmentSpec):
        return spec
    return parse_spec(spec, source="spec")


def _as_document(candidate: Union[Mapping[str, Any], bytes, str]) -> Mapping[str, Any]:
    if isinstance(candidate, (bytes, str)):
        return load_document(candidate, source="resolved environment")
    return candidate


def check_lock(spec: Union[EnvironmentSpec, bytes, str],
               candidate: Union[Mapping[str, Any], bytes, str]) -> LockValidationResult:
    """
    Compare the packages requested by ``spec`` with those in ``candidate``.

    Args:
        spec: Parsed spec or its raw bytes.
        candidate: Resolved environment document (mapping, or YAML text/bytes).

    Raises:
        ParseError: If either document is malformed.
    """
    spec = _as_spec(spec)
    requested = extract_dependencies(spec)
    resolved = extract_dependencies(_as_document(candidate))
    missing = requested.missing_from(resolved)

    return LockValidationResult(
        valid=not missing.native and not missing.sub,
        env_name=spec.name,
        requested=requested,
        resolved=resolved,
        missing_native=sorted(missing.native),
        missing_sub=sorted(missing.sub),
    )


def validate(spec: Union[EnvironmentSpec, bytes, str],
             candidate: Union[Mapping[str, Any], bytes, str]) -> bool:
    """Return True iff ``candidate`` contains every package ``spec`` requests."""
    return check_lock(spec, candidate).valid


def ensure_valid(spec: Union[EnvironmentSpec, bytes, str],
                 candidate: Union[Mapping[str, Any], bytes, str]) -> LockValidationResult:
    """
    Like check_lock(), but raise when packages are missing.

    Raises:
        ValidationError: Naming every requested package absent from ``candidate``.
    """
    result = check_lock(spec, candidate)
    if not result.valid:
        raise ValidationError(
            f"Resolved environment '{result.env_name}' is missing requested packages",
            missing_native=result.missing_native,
            missing_sub=result.missing_sub,
        )
    return result


def format_validation_report(result: LockValidationResult) -> str:
    """Format a validation result as a human-readable report."""
    lines = [
        "Lock Validation Report",
        "======================",
        f"Environment: {result.env_name}",
        f"Status: {'PASSED' if result.valid else 'FAILED'}",
        "",
        f"Requested: {len(result.requested.native)} conda, {len(result.requested.sub)} pip",
        f"Resolved:  {len(result.resolved.native)} conda, {len(result.resolved.sub)} pip",
    ]

    if result.missing_native or result.missing_sub:
        lines.append("")
        lines.append("Missing:")
        for name in result.missing_native:
            lines.append(f"  - {name} (conda)")
        for name in result.missing_sub:
            lines.append(f"  - {name} (pip)")

    return "\n".join(lines)
