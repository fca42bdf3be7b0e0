"""
Tests for utility functions in condalockfile.utils module.

Tests cover:
- format_command rendering
- ephemeral_name uniqueness
- CommandExecutor with subprocess patched
"""

import shutil
import subprocess
from unittest.mock import patch

import pytest

from condalockfile.errors import ErrorCode, ProcessError
from condalockfile.utils import CommandExecutor, ephemeral_name, format_command


class TestFormatCommand:

    def test_plain(self):
        assert format_command(["conda", "env", "list"]) == "conda env list"

    def test_quotes_spaces(self):
        assert format_command(["conda", "env", "export", "-n", "my env"]) == "conda env export -n 'my env'"

    def test_accepts_paths(self, tmp_path):
        assert format_command(["cat", tmp_path]) == f"cat {tmp_path}"


class TestEphemeralName:

    def test_prefix_and_length(self):
        name = ephemeral_name()
        assert name.startswith("conda-lockfile-")
        assert len(name) == len("conda-lockfile-") + 12

    def test_unique(self):
        assert len({ephemeral_name() for _ in range(50)}) == 50

    def test_custom_prefix(self):
        assert ephemeral_name("x").startswith("x-")


class TestCommandExecutor:
    """Tests for CommandExecutor with subprocess.run patched."""

    def _completed(self, stdout="out", stderr="", returncode=0):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)

    def test_execute_returns_output(self, mock_logger):
        executor = CommandExecutor(mock_logger)
        with patch("condalockfile.utils.subprocess.run", return_value=self._completed()) as mock_run:
            assert executor.execute(["conda", "info"], input_text="data") == ("out", "", 0)

        kwargs = mock_run.call_args.kwargs
        assert mock_run.call_args.args[0] == ["conda", "info"]
        assert kwargs["input"] == "data"
        assert kwargs["capture_output"] is True
        assert kwargs["timeout"] is None

    def test_output_decoded_leniently(self, mock_logger):
        executor = CommandExecutor(mock_logger)
        with patch("condalockfile.utils.subprocess.run", return_value=self._completed()) as mock_run:
            executor.execute(["conda", "env", "remove"])
        kwargs = mock_run.call_args.kwargs
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"

    @pytest.mark.skipif(shutil.which("printf") is None, reason="printf not available")
    def test_invalid_utf8_output_does_not_raise(self, mock_logger):
        """Bytes that are not UTF-8 come back as replacement characters."""
        stdout, _, return_code = CommandExecutor(mock_logger).execute(["printf", "\\377\\376ok"])
        assert return_code == 0
        assert stdout == "\ufffd\ufffdok"

    def test_default_timeout_used(self, mock_logger):
        executor = CommandExecutor(mock_logger, timeout=30)
        with patch("condalockfile.utils.subprocess.run", return_value=self._completed()) as mock_run:
            executor.execute(["conda", "info"])
            assert mock_run.call_args.kwargs["timeout"] == 30
            executor.execute(["conda", "info"], timeout=5)
            assert mock_run.call_args.kwargs["timeout"] == 5

    def test_missing_executable(self, mock_logger):
        executor = CommandExecutor(mock_logger)
        with patch("condalockfile.utils.subprocess.run", side_effect=FileNotFoundError("conda")):
            with pytest.raises(ProcessError) as exc_info:
                executor.execute(["conda", "info"])
        assert exc_info.value.exit_code == 127
        assert "installed" in exc_info.value.suggestion

    def test_timeout(self, mock_logger):
        executor = CommandExecutor(mock_logger, timeout=1)
        with patch("condalockfile.utils.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(cmd="conda", timeout=1)):
            with pytest.raises(ProcessError) as exc_info:
                executor.execute(["conda", "env", "create"])
        assert exc_info.value.code == ErrorCode.PROCESS_TIMEOUT

    def test_check_output_returns_stdout(self, mock_logger):
        executor = CommandExecutor(mock_logger)
        with patch("condalockfile.utils.subprocess.run", return_value=self._completed("yaml")):
            assert executor.check_output(["conda", "env", "export"], "export") == "yaml"

    def test_check_output_raises_on_failure(self, mock_logger):
        executor = CommandExecutor(mock_logger)
        failed = self._completed(stdout="", stderr="PackagesNotFoundError\n", returncode=1)
        with patch("condalockfile.utils.subprocess.run", return_value=failed):
            with pytest.raises(ProcessError) as exc_info:
                executor.check_output(["conda", "env", "create"], "create environment")

        error = exc_info.value
        assert error.message == "Failed to create environment"
        assert error.exit_code == 1
        assert error.stderr == "PackagesNotFoundError"
