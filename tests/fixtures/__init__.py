"""
Test fixtures package for conda-lockfile tests.

This package provides reusable mock classes and sample documents
for testing the freeze, create and check components.
"""

from tests.fixtures.mock_logger import MockLogger, create_mock_logger
from tests.fixtures.mock_executor import MockCommandExecutor
from tests.fixtures.sample_specs import (
    SAMPLE_SPEC,
    SAMPLE_EXPORT,
    SAMPLE_EXPORT_MISSING_FLASK,
    export_for,
)

__all__ = [
    # Mock classes
    'MockLogger',
    'create_mock_logger',
    'MockCommandExecutor',
    # Sample documents
    'SAMPLE_SPEC',
    'SAMPLE_EXPORT',
    'SAMPLE_EXPORT_MISSING_FLASK',
    'export_for',
]
