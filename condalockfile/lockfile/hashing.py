"""
Spec hashing and the '# ENVHASH:' sigil line.

The hash detects drift between a spec and the lockfile frozen from it; it is
not a security primitive.
"""

import hashlib
from typing import Union

from condalockfile.config import SIGIL
from condalockfile.errors import MissingHashError

SIGIL_BYTES = SIGIL.encode("utf-8")


def compute_hash(data: Union[bytes, str]) -> str:
    """Return the SHA-1 hex digest of the raw spec bytes.

    Strings are encoded as UTF-8 first. Callers should pass the bytes read
    from disk, never a re-serialized document.

    Example:
        >>> compute_hash(b"")
        'da39a3ee5e6b4b0d3255bfef95601890afd80709'
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha1(data).hexdigest()


def embed_hash(content_hash: str) -> str:
    """Return the sigil line for a hash, including the trailing newline."""
    return f"{SIGIL} {content_hash}\n"


def extract_hash(text: Union[bytes, str], path: str = None) -> str:
    """
    Return the hash from the first line that starts with the sigil.

    Args:
        text: Lockfile contents, as bytes or text.
        path: Lockfile path, used only in the error.

    Raises:
        MissingHashError: If no line starts with the sigil.
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    # only \r and \n end a line
    for line in text.splitlines():
        if line.startswith(SIGIL_BYTES):
            return line[len(SIGIL_BYTES):].strip().decode("utf-8", errors="replace")
    raise MissingHashError(path=path)
