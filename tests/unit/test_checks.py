"""
Tests for drift checks in condalockfile.checks.

Tests cover:
- checkenv against the deployed lockfile
- checklocks reports every mismatching lockfile
- Lockfile discovery next to the spec
"""

import pytest

from condalockfile.checks import checkenv, checklocks, find_lockfiles
from condalockfile.config import LockfileConfig
from condalockfile.errors import (
    ConfigurationError,
    ErrorCode,
    FileSystemError,
    HashMismatchError,
    MissingHashError,
)
from condalockfile.lockfile.hashing import compute_hash
from condalockfile.lockfile.store import write_lockfile

LOCKED_DOCUMENT = "name: foo\ndependencies:\n- numpy=1.2.1=py37_0\n"


def _deploy(config, content_hash, name="foo"):
    prefix = config.conda_root / "envs" / name
    prefix.mkdir(parents=True, exist_ok=True)
    return write_lockfile(prefix / "deps.yml.lock", content_hash, LOCKED_DOCUMENT)


class TestFindLockfiles:

    def test_matches_platform_lockfiles(self, spec_file):
        for platform in ("Linux", "Darwin"):
            (spec_file.parent / f"deps.yml.{platform}.lock").write_text("x")
        (spec_file.parent / "deps.yml.lock").write_text("x")
        (spec_file.parent / "other.yml.Linux.lock").write_text("x")

        found = find_lockfiles(spec_file)
        assert [p.name for p in found] == ["deps.yml.Darwin.lock", "deps.yml.Linux.lock"]

    def test_uses_spec_name(self, tmp_path):
        spec_path = tmp_path / "environment.yml"
        (tmp_path / "environment.yml.Linux.lock").write_text("x")
        (tmp_path / "deps.yml.Linux.lock").write_text("x")
        assert [p.name for p in find_lockfiles(spec_path)] == ["environment.yml.Linux.lock"]

    def test_directory_with_glob_characters(self, tmp_path):
        directory = tmp_path / "env[1]"
        directory.mkdir()
        (directory / "deps.yml.Linux.lock").write_text("x")
        assert len(find_lockfiles(directory / "deps.yml")) == 1


class TestCheckenv:

    def test_matching_environment(self, spec_file, config, capturing_logger):
        _deploy(config, compute_hash(spec_file.read_bytes()))
        report = checkenv(spec_file, config=config, logger=capturing_logger)
        assert report.ok
        assert report.expected_hash == compute_hash(spec_file.read_bytes())
        capturing_logger.assert_logged('status', "Environment 'foo' matches")

    def test_single_byte_change_is_detected(self, spec_file, config, capturing_logger):
        original_hash = compute_hash(spec_file.read_bytes())
        _deploy(config, original_hash)
        spec_file.write_bytes(spec_file.read_bytes() + b" ")

        with pytest.raises(HashMismatchError) as exc_info:
            checkenv(spec_file, config=config, logger=capturing_logger)

        error = exc_info.value
        assert error.code == ErrorCode.HASH_MISMATCH
        assert original_hash in str(error)
        assert compute_hash(spec_file.read_bytes()) in str(error)
        assert len(error.mismatches) == 1
        assert error.mismatches[0].found == original_hash

    def test_deployed_lockfile_missing(self, spec_file, config, capturing_logger):
        with pytest.raises(FileSystemError) as exc_info:
            checkenv(spec_file, config=config, logger=capturing_logger)
        assert "deps.yml.lock" in exc_info.value.path

    def test_deployed_lockfile_without_hash(self, spec_file, config, capturing_logger):
        prefix = config.conda_root / "envs" / "foo"
        prefix.mkdir(parents=True)
        (prefix / "deps.yml.lock").write_text(LOCKED_DOCUMENT)
        with pytest.raises(MissingHashError):
            checkenv(spec_file, config=config, logger=capturing_logger)

    def test_conda_root_required(self, spec_file, capturing_logger):
        with pytest.raises(ConfigurationError):
            checkenv(spec_file, config=LockfileConfig(), logger=capturing_logger)

    def test_missing_spec(self, tmp_path, config, capturing_logger):
        with pytest.raises(FileSystemError):
            checkenv(tmp_path / "deps.yml", config=config, logger=capturing_logger)


class TestChecklocks:

    def test_all_match(self, spec_file, capturing_logger):
        expected = compute_hash(spec_file.read_bytes())
        for platform in ("Linux", "Darwin"):
            write_lockfile(spec_file.parent / f"deps.yml.{platform}.lock", expected, LOCKED_DOCUMENT)

        report = checklocks(spec_file, logger=capturing_logger)
        assert report.ok
        assert len(report.checked) == 2
        capturing_logger.assert_logged('status', 'All 2 lockfile(s) match')

    def test_reports_every_mismatch(self, spec_file, capturing_logger):
        expected = compute_hash(spec_file.read_bytes())
        write_lockfile(spec_file.parent / "deps.yml.Darwin.lock", "stale1", LOCKED_DOCUMENT)
        write_lockfile(spec_file.parent / "deps.yml.Linux.lock", expected, LOCKED_DOCUMENT)
        write_lockfile(spec_file.parent / "deps.yml.Windows.lock", "stale2", LOCKED_DOCUMENT)

        with pytest.raises(HashMismatchError) as exc_info:
            checklocks(spec_file, logger=capturing_logger)

        mismatches = exc_info.value.mismatches
        assert [m.found for m in mismatches] == ["stale1", "stale2"]
        assert all(m.expected == expected for m in mismatches)
        errors = capturing_logger.get_messages('error')
        assert len(errors) == 2
        assert errors[0].startswith(f"Hashes do not match {spec_file}, ")
        assert "lock    hash: stale1" in errors[0]
        assert f"depfile hash: {expected}" in errors[0]
        assert "2 of 3" in exc_info.value.message

    def test_explicit_lockfiles(self, spec_file, tmp_path, capturing_logger):
        expected = compute_hash(spec_file.read_bytes())
        custom = write_lockfile(tmp_path / "custom.lock", expected, LOCKED_DOCUMENT)
        write_lockfile(spec_file.parent / "deps.yml.Linux.lock", "stale", LOCKED_DOCUMENT)

        report = checklocks(spec_file, lock_paths=[custom], logger=capturing_logger)
        assert report.checked == [str(custom)]

    def test_lockfile_without_hash_is_a_mismatch(self, spec_file, capturing_logger):
        (spec_file.parent / "deps.yml.Linux.lock").write_text(LOCKED_DOCUMENT)
        with pytest.raises(HashMismatchError) as exc_info:
            checklocks(spec_file, logger=capturing_logger)
        assert exc_info.value.mismatches[0].found is None
        capturing_logger.assert_logged('error', '(no hash)')

    def test_no_lockfiles_found(self, spec_file, capturing_logger):
        with pytest.raises(FileSystemError) as exc_info:
            checklocks(spec_file, logger=capturing_logger)
        assert "deps.yml.*.lock" in str(exc_info.value)

    def test_unreadable_explicit_lockfile_propagates(self, spec_file, tmp_path, capturing_logger):
        with pytest.raises(FileSystemError):
            checklocks(spec_file, lock_paths=[tmp_path / "missing.lock"], logger=capturing_logger)
