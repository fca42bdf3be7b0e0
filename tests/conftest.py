"""
Shared pytest fixtures for conda-lockfile tests.

These fixtures provide loggers, a mock command executor, sample specs on disk
and an explicit configuration pointing at fake conda/docker executables, so no
test needs conda or docker to be installed.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from condalockfile.config import (
    ENV_BASE_IMAGE,
    ENV_BUILDER_IMAGE,
    ENV_CONDA_EXE_VARS,
    ENV_CONDA_ROOT,
    ENV_DOCKER_EXE,
    ENV_TIMEOUT,
    PLATFORM,
    LockfileConfig,
)
from tests.fixtures import MockCommandExecutor, MockLogger, SAMPLE_SPEC


# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def spec_file(tmp_path) -> Path:
    """A deps.yml holding SAMPLE_SPEC in a fresh directory."""
    path = tmp_path / "deps.yml"
    path.write_text(SAMPLE_SPEC)
    return path


@pytest.fixture
def conda_root(tmp_path) -> Path:
    root = tmp_path / "conda"
    (root / "envs").mkdir(parents=True)
    return root


# =============================================================================
# Logger Fixtures
# =============================================================================

@pytest.fixture
def mock_logger():
    """
    Create a mock logger that captures all log calls.

    Usage:
        def test_something(mock_logger):
            some_function(logger=mock_logger)
            mock_logger.status.assert_called()
    """
    logger = MagicMock()
    for level in ['debug', 'info', 'warning', 'error', 'critical',
                  'status', 'verbose', 'verboser', 'ridiculous', 'result']:
        setattr(logger, level, MagicMock())
    return logger


@pytest.fixture
def capturing_logger() -> MockLogger:
    """
    A logger that records messages per level.

    Usage:
        def test_something(capturing_logger):
            some_function(logger=capturing_logger)
            capturing_logger.assert_logged('error', 'Hashes do not match')
    """
    return MockLogger()


# =============================================================================
# Executor and Configuration Fixtures
# =============================================================================

@pytest.fixture
def mock_executor() -> MockCommandExecutor:
    return MockCommandExecutor()


def _fake_executable(directory: Path, name: str) -> str:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def fake_bin(tmp_path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def config(conda_root, fake_bin) -> LockfileConfig:
    """Configuration with a conda root and fake conda/docker executables."""
    return LockfileConfig(
        conda_root=conda_root,
        conda_exe=_fake_executable(fake_bin, "conda"),
        docker_exe=_fake_executable(fake_bin, "docker"),
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the configuration reads."""
    for name in (ENV_CONDA_ROOT, ENV_DOCKER_EXE, ENV_TIMEOUT, ENV_BASE_IMAGE,
                 ENV_BUILDER_IMAGE) + tuple(ENV_CONDA_EXE_VARS):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def linux_host() -> PLATFORM:
    return PLATFORM.LINUX


@pytest.fixture
def macos_host() -> PLATFORM:
    return PLATFORM.MACOS


# =============================================================================
# Output Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def non_interactive_terminal():
    """Make progress output deterministic: log lines instead of spinners."""
    with patch('condalockfile.progress.is_interactive_terminal', return_value=False):
        yield
