"""
Reading and writing lockfiles.

On disk a lockfile is the sigil line followed by the resolved environment
document:

    # ENVHASH: <sha1 of the spec>
    name: foo
    dependencies:
      - numpy=1.2.1=py37_0

Writes go to a temporary file in the target directory and are renamed into
place, so readers see either the old lockfile or the complete new one.
"""

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from condalockfile.error_messages import format_error
from condalockfile.errors import ErrorCode, FileSystemError, MissingHashError
from condalockfile.lockfile.hashing import SIGIL_BYTES, embed_hash
from condalockfile.lockfile.models import load_document


@dataclass
class Lockfile:
    """A lockfile read from disk."""
    path: Path
    content_hash: str
    document_bytes: bytes

    @property
    def document(self) -> Dict[str, Any]:
        return load_document(self.document_bytes, source=str(self.path))


def write_lockfile(path: Union[str, Path], content_hash: str, document: Union[bytes, str]) -> Path:
    """
    Write the sigil line for ``content_hash`` followed by ``document``.

    Raises:
        FileSystemError: If the lockfile cannot be written.
    """
    path = Path(path)
    if isinstance(document, str):
        document = document.encode("utf-8")
    payload = embed_hash(content_hash).encode("utf-8") + document

    temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        temp_path.write_bytes(payload)
        os.replace(temp_path, path)
    except OSError as e:
        raise FileSystemError(
            f"Cannot write lockfile: {e}",
            path=str(path),
            operation="write",
            code=ErrorCode.FS_WRITE_FAILED,
        ) from e
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return path


def split_lockfile(raw: bytes, path: str = None) -> Tuple[str, bytes]:
    """
    Split lockfile bytes into (hash, document bytes).

    The first line starting with the sigil is authoritative; it is removed
    from the returned document and any later sigil lines are left in place.

    Raises:
        MissingHashError: If no line starts with the sigil.
    """
    lines = raw.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.startswith(SIGIL_BYTES):
            content_hash = line[len(SIGIL_BYTES):].strip().decode("utf-8", errors="replace")
            document = b"".join(lines[:index] + lines[index + 1:])
            return content_hash, document
    raise MissingHashError(path=path)


def load_lockfile(path: Union[str, Path]) -> Lockfile:
    """
    Read a lockfile.

    Raises:
        FileSystemError: If the file cannot be read.
        MissingHashError: If it carries no sigil line.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise FileSystemError(
            format_error('LOCKFILE_NOT_FOUND', path=path), path=str(path), operation="read"
        ) from e
    except OSError as e:
        raise FileSystemError(
            f"Cannot read lockfile: {e}",
            path=str(path),
            operation="read",
            code=ErrorCode.FS_PERMISSION_DENIED,
        ) from e

    content_hash, document_bytes = split_lockfile(raw, path=str(path))
    return Lockfile(path=path, content_hash=content_hash, document_bytes=document_bytes)


def read_lockfile(path: Union[str, Path]) -> Tuple[str, bytes]:
    """Return (hash, document bytes) of the lockfile at ``path``."""
    lockfile = load_lockfile(path)
    return lockfile.content_hash, lockfile.document_bytes
