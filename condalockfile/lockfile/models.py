"""
Data models for conda environment specs and resolved environments.

Specs are conda environment files:

    name: foo
    channels:
      - conda-forge
    dependencies:
      - numpy=1.2
      - pip:
        - flask

Every field access on a parsed document is fallible and surfaces ParseError;
only 'name' is required.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Union

import yaml

from condalockfile.error_messages import format_error
from condalockfile.errors import ErrorCode, FileSystemError, ParseError

# Keys describing where an environment is installed; not portable.
LOCAL_PATH_FIELDS = ("prefix",)

# Key of the mapping entry conda uses for pip dependencies
SUB_MANAGER_KEY = "pip"

_NAME_SEPARATORS = re.compile(r"[=<>!~\[;@\s]")


@dataclass(frozen=True)
class DependencySet:
    """Normalized package names requested by or resolved in an environment.

    Attributes:
        native: conda package names.
        sub: pip (language sub-manager) package names.
    """
    native: FrozenSet[str] = frozenset()
    sub: FrozenSet[str] = frozenset()

    def __iter__(self) -> Iterator[FrozenSet[str]]:
        return iter((self.native, self.sub))

    def missing_from(self, other: "DependencySet") -> "DependencySet":
        """Return the names in this set that ``other`` does not contain."""
        return DependencySet(
            native=frozenset(self.native - other.native),
            sub=frozenset(self.sub - other.sub),
        )

    def is_subset_of(self, other: "DependencySet") -> bool:
        return self.native <= other.native and self.sub <= other.sub


@dataclass
class EnvironmentSpec:
    """
    A parsed environment document plus the exact bytes it came from.

    Attributes:
        name: Environment name (required).
        dependencies: Raw entries of the 'dependencies' list.
        raw_bytes: Source bytes; hashing always uses these.
        document: The full parsed mapping.
        source: Path or label of the source, for error messages.
    """
    name: str
    dependencies: List[Any] = field(default_factory=list)
    raw_bytes: bytes = b""
    document: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None

    @property
    def channels(self) -> List[str]:
        channels = self.document.get("channels") or []
        if not isinstance(channels, list):
            raise ParseError(
                "'channels' must be a list",
                source=self.source,
                field_name="channels",
                code=ErrorCode.PARSE_INVALID_FIELD,
            )
        return [str(c) for c in channels]

    @property
    def dependency_set(self) -> DependencySet:
        return extract_dependencies(self.document)


def package_name(reference: str) -> Optional[str]:
    """
    Reduce a package reference to its normalized name.

    Drops a channel prefix and everything from the first version, build,
    extras or marker separator, then lower-cases. Option entries
    (starting with '-') have no name.

    Examples:
        >>> package_name("numpy=1.2.1=py37_0")
        'numpy'
        >>> package_name("conda-forge::Flask>=1.0")
        'flask'
        >>> package_name("requests[socks]==2.31")
        'requests'
    """
    reference = reference.strip()
    if reference.startswith("-"):
        # pip options such as -r requirements.txt or -e . name no package
        return None
    if "::" in reference:
        reference = reference.rsplit("::", 1)[1]
    name = _NAME_SEPARATORS.split(reference, maxsplit=1)[0].strip().lower()
    return name or None


def _sub_manager_entries(entry: Any) -> Optional[List[Any]]:
    """Return the nested entries of a sub-manager group, or None if entry is not one."""
    if isinstance(entry, list):
        return entry
    if isinstance(entry, dict) and list(entry.keys()) == [SUB_MANAGER_KEY]:
        nested = entry[SUB_MANAGER_KEY]
        if isinstance(nested, list):
            return nested
    return None


def _dependency_entries(document: Mapping[str, Any], source: Optional[str] = None) -> List[Any]:
    dependencies = document.get("dependencies")
    if dependencies is None:
        return []
    if not isinstance(dependencies, list):
        raise ParseError(
            "'dependencies' must be a list",
            source=source,
            field_name="dependencies",
            code=ErrorCode.PARSE_INVALID_FIELD,
        )
    return dependencies


def extract_dependencies(document: Union[EnvironmentSpec, Mapping[str, Any]]) -> DependencySet:
    """
    Split a document's dependencies into conda and pip name sets.

    A bare string entry is a conda dependency. A nested list entry (or a
    ``{pip: [...]}`` mapping) holds pip dependencies. Any other entry shape is
    ignored.

    Raises:
        ParseError: If 'dependencies' is present but not a list.
    """
    source = None
    if isinstance(document, EnvironmentSpec):
        source = document.source
        document = document.document

    native = set()
    sub = set()
    for entry in _dependency_entries(document, source):
        if isinstance(entry, str):
            name = package_name(entry)
            if name:
                native.add(name)
            continue

        nested = _sub_manager_entries(entry)
        if nested is None:
            continue
        for item in nested:
            if isinstance(item, str):
                name = package_name(item)
                if name:
                    sub.add(name)

    return DependencySet(native=frozenset(native), sub=frozenset(sub))


def load_document(data: Union[bytes, str], source: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the first YAML document of ``data`` as a mapping.

    Trailing documents are ignored.

    Raises:
        ParseError: If the text is not valid YAML or the first document is not a mapping.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Document is not valid UTF-8: {e}", source=source) from e

    try:
        document = next(iter(yaml.safe_load_all(data)), None)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}", source=source) from e

    if document is None:
        raise ParseError(
            "Document is empty",
            source=source,
            field_name="name",
            code=ErrorCode.PARSE_MISSING_NAME,
        )
    if not isinstance(document, dict):
        raise ParseError(
            f"Expected a mapping at the top level, got {type(document).__name__}",
            source=source,
        )
    return document


def document_name(document: Mapping[str, Any], source: Optional[str] = None) -> str:
    """
    Return the required 'name' field.

    Raises:
        ParseError: If 'name' is absent, not a string, or empty.
    """
    name = document.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ParseError(
            "Environment document has no 'name'" if name is None
            else f"Environment 'name' must be a non-empty string, got {name!r}",
            source=source,
            field_name="name",
            code=ErrorCode.PARSE_MISSING_NAME,
        )
    return name


def parse_spec(data: Union[bytes, str], source: Optional[str] = None) -> EnvironmentSpec:
    """
    Parse an environment spec.

    Args:
        data: Raw spec contents; kept verbatim in ``raw_bytes``.
        source: Path or label used in error messages.

    Raises:
        ParseError: If the document is malformed or has no valid 'name'.
    """
    raw_bytes = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    document = load_document(raw_bytes, source)
    return EnvironmentSpec(
        name=document_name(document, source),
        dependencies=list(_dependency_entries(document, source)),
        raw_bytes=raw_bytes,
        document=document,
        source=source,
    )


def read_spec(path: Union[str, Path]) -> EnvironmentSpec:
    """
    Read and parse a spec file.

    Raises:
        FileSystemError: If the file cannot be read.
        ParseError: If the contents are malformed.
    """
    path = Path(path)
    try:
        raw_bytes = path.read_bytes()
    except FileNotFoundError as e:
        raise FileSystemError(
            format_error('SPEC_NOT_FOUND', path=path), path=str(path), operation="read"
        ) from e
    except OSError as e:
        raise FileSystemError(
            f"Cannot read environment spec: {e}",
            path=str(path),
            operation="read",
            code=ErrorCode.FS_PERMISSION_DENIED,
        ) from e
    return parse_spec(raw_bytes, source=str(path))


def prepare_resolved_document(document: Mapping[str, Any], name: str) -> Dict[str, Any]:
    """
    Make an exported environment fit for a lockfile.

    The name is replaced by ``name`` (the ephemeral environment's name must
    never reach the lockfile) and local install path fields are removed.
    """
    resolved = {"name": name}
    for key, value in document.items():
        if key == "name" or key in LOCAL_PATH_FIELDS:
            continue
        resolved[key] = value
    return resolved


def dump_document(document: Mapping[str, Any]) -> str:
    """Serialize a document as block-style YAML, preserving key order."""
    return yaml.safe_dump(dict(document), default_flow_style=False, sort_keys=False)
