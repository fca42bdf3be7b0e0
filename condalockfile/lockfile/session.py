"""
Ephemeral resources owned by a single freeze.

A FreezeSession bundles a scratch directory with the unique name given to the
temporary conda environment or container. It is created on entry and its
scratch directory is removed on every exit path.
"""

import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from condalockfile.config import DEFAULT_DEPFILE, DEPLOYED_LOCKFILE_NAME, EPHEMERAL_PREFIX
from condalockfile.utils import ephemeral_name


@dataclass
class FreezeSession:
    """
    Attributes:
        name: Unique name for the temporary environment or container.
        scratch_dir: Private directory for staged and harvested files.
    """
    name: str
    scratch_dir: Path

    @property
    def spec_path(self) -> Path:
        return self.scratch_dir / DEFAULT_DEPFILE

    @property
    def resolved_path(self) -> Path:
        return self.scratch_dir / DEPLOYED_LOCKFILE_NAME

    def stage_spec(self, raw_bytes: bytes) -> Path:
        """Write the spec bytes into the scratch directory and return the path."""
        self.spec_path.write_bytes(raw_bytes)
        return self.spec_path


@contextmanager
def freeze_session(logger, prefix: str = EPHEMERAL_PREFIX) -> Iterator[FreezeSession]:
    """Create a FreezeSession and delete its scratch directory on exit."""
    name = ephemeral_name(prefix)
    scratch_dir = Path(tempfile.mkdtemp(prefix=f"{name}-"))
    logger.debug(f"Created scratch directory {scratch_dir} for {name}")
    try:
        yield FreezeSession(name=name, scratch_dir=scratch_dir)
    finally:
        shutil.rmtree(scratch_dir, ignore_errors=True)
        if scratch_dir.exists():
            logger.warning(f"Failed to remove scratch directory: {scratch_dir}")
        else:
            logger.debug(f"Removed scratch directory {scratch_dir}")
