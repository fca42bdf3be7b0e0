"""
Tests for cross-platform resolution in condalockfile.lockfile.container.

Tests cover:
- Platform pair checks happen before any command runs
- Resolver image description and rendering
- In-container steps are quoted argv lists
- Container and scratch directory cleanup on every exit path
"""

import json
import shlex
from pathlib import Path
from unittest.mock import patch

import pytest

from condalockfile.config import PLATFORM, LockfileConfig
from condalockfile.errors import DependencyError, ErrorCode, ProcessError, UnsupportedPlatformError
from condalockfile.lockfile.container import (
    BuildSpec,
    ContainerFreezer,
    DockerfileBuilder,
    check_platform_pair,
    join_steps,
    resolve_steps,
)
from condalockfile.lockfile.models import parse_spec
from tests.fixtures import MockCommandExecutor, SAMPLE_SPEC, export_for


def _scratch_dir(argv):
    volume = argv[argv.index("--volume") + 1]
    return Path(volume.rsplit(":", 1)[0])


def _container_run(export_text):
    """docker run response that writes the exported environment into the mount."""
    def run(argv, input_text):
        (_scratch_dir(argv) / "deps.yml.lock").write_text(export_text)
        return '', '', 0
    return run


@pytest.fixture
def spec():
    return parse_spec(SAMPLE_SPEC, source="deps.yml")


class TestCheckPlatformPair:

    def test_macos_to_linux_is_supported(self):
        check_platform_pair(PLATFORM.MACOS, PLATFORM.LINUX)

    @pytest.mark.parametrize("host,target", [
        (PLATFORM.LINUX, PLATFORM.MACOS),
        (PLATFORM.LINUX, PLATFORM.WINDOWS),
        (PLATFORM.MACOS, PLATFORM.WINDOWS),
        (PLATFORM.WINDOWS, PLATFORM.LINUX),
    ])
    def test_other_pairs_raise(self, host, target):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            check_platform_pair(host, target)
        message = str(exc_info.value)
        assert host.value in message
        assert target.value in message
        assert exc_info.value.code == ErrorCode.PLATFORM_UNSUPPORTED_PAIR


class TestDockerfileBuilder:

    def test_render(self):
        spec = BuildSpec(base_image="continuumio/miniconda3", tag="resolver:1", platform="linux/amd64")
        text = DockerfileBuilder().render(spec)
        lines = text.splitlines()
        assert lines[0] == "FROM --platform=linux/amd64 continuumio/miniconda3"
        assert 'LABEL org.opencontainers.image.title="conda-lockfile resolver"' in lines
        assert "WORKDIR /work" in lines
        assert lines[-1] == 'ENTRYPOINT ["/bin/sh", "-ec"]'
        assert text.endswith("\n")

    def test_labels_are_quoted(self):
        spec = BuildSpec(base_image="b", tag="t", platform="p", labels={"a": 'say "hi"'})
        assert "LABEL a=" + json.dumps('say "hi"') in DockerfileBuilder().render(spec)


class TestResolveSteps:

    def test_steps_use_mounted_paths(self):
        create, export = resolve_steps("foo", "/work")
        assert create[:3] == ["conda", "env", "create"]
        assert create[create.index("--file") + 1] == "/work/deps.yml"
        assert export[export.index("--file") + 1] == "/work/deps.yml.lock"

    def test_join_quotes_every_argument(self):
        script = join_steps([["echo", "a b"], ["echo", "$HOME; rm -rf /"]])
        assert script == "echo 'a b' && echo '$HOME; rm -rf /'"
        _, second = script.split(" && ")
        assert shlex.split(second) == ["echo", "$HOME; rm -rf /"]


class TestContainerFreezer:

    def _freezer(self, config, executor, logger):
        return ContainerFreezer(config, executor=executor, logger=logger, host_platform=PLATFORM.MACOS)

    def test_freeze_harvests_renamed_document(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({'docker run': _container_run(export_for("conda-lockfile-inside"))})
        document = self._freezer(config, executor, capturing_logger).freeze(spec, "Linux")

        assert document["name"] == "foo"
        assert "prefix" not in document
        assert "numpy=1.2.1=py37_0" in document["dependencies"]

    def test_command_sequence(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({'docker run': _container_run(export_for("x"))})
        self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)

        build, run, remove = executor.executed_argv
        assert build[1:] == ["build", "--platform", "linux/amd64", "--tag", config.builder_image, "-"]
        assert executor.inputs[0].startswith("FROM --platform=linux/amd64 ")

        assert run[1] == "run"
        name = run[run.index("--name") + 1]
        assert name.startswith("conda-lockfile-")
        assert run[run.index("--platform") + 1] == "linux/amd64"
        assert run[-2] == config.builder_image
        assert "conda env create" in run[-1] and "conda env export" in run[-1]

        assert remove[1:] == ["rm", "--force", name]

    def test_staged_spec_is_the_raw_bytes(self, config, spec, capturing_logger):
        staged = {}

        def run(argv, input_text):
            staged["bytes"] = (_scratch_dir(argv) / "deps.yml").read_bytes()
            return _container_run(export_for("x"))(argv, input_text)

        executor = MockCommandExecutor({'docker run': run})
        self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert staged["bytes"] == SAMPLE_SPEC.encode("utf-8")

    def test_unsupported_target_runs_nothing(self, config, spec, capturing_logger):
        executor = MockCommandExecutor()
        with pytest.raises(UnsupportedPlatformError):
            self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.WINDOWS)
        assert executor.executed_commands == []

    def test_linux_host_cannot_freeze_for_macos(self, config, spec, capturing_logger):
        executor = MockCommandExecutor()
        freezer = ContainerFreezer(config, executor=executor, logger=capturing_logger,
                                   host_platform=PLATFORM.LINUX)
        with pytest.raises(UnsupportedPlatformError):
            freezer.freeze(spec, "Darwin")
        assert executor.executed_commands == []

    def test_unknown_platform_raises(self, config, spec, capturing_logger):
        with pytest.raises(UnsupportedPlatformError):
            self._freezer(config, MockCommandExecutor(), capturing_logger).freeze(spec, "Plan9")

    def test_missing_docker_runs_nothing(self, spec, capturing_logger):
        executor = MockCommandExecutor()
        config = LockfileConfig(docker_exe="/nonexistent/docker")
        with patch('condalockfile.dependency_check.shutil.which', return_value=None):
            with pytest.raises(DependencyError):
                self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert executor.executed_commands == []

    def test_image_build_failure(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({'docker build': ('', 'pull access denied', 1)})
        with pytest.raises(ProcessError) as exc_info:
            self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert "pull access denied" in exc_info.value.stderr
        executor.assert_command_not_executed('docker run')

    def test_container_failure_removes_container_and_scratch(self, config, spec, capturing_logger):
        scratch_dirs = []

        def run(argv, input_text):
            scratch_dirs.append(_scratch_dir(argv))
            return '', 'ResolvePackageNotFound: numpy=1.2', 1

        executor = MockCommandExecutor({'docker run': run})
        with pytest.raises(ProcessError) as exc_info:
            self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)

        assert exc_info.value.exit_code == 1
        executor.assert_command_executed('docker rm --force conda-lockfile-')
        assert scratch_dirs and not scratch_dirs[0].exists()

    def test_missing_harvest_raises_bad_output(self, config, spec, capturing_logger):
        executor = MockCommandExecutor()
        with pytest.raises(ProcessError) as exc_info:
            self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert exc_info.value.code == ErrorCode.PROCESS_BAD_OUTPUT
        executor.assert_command_executed('docker rm --force')

    def test_garbage_harvest_raises_bad_output(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({'docker run': _container_run("- just\n- a list\n")})
        with pytest.raises(ProcessError) as exc_info:
            self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert exc_info.value.code == ErrorCode.PROCESS_BAD_OUTPUT

    def test_container_removal_failure_is_logged(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({
            'docker run': _container_run(export_for("x")),
            'docker rm': ('', 'No such container', 1),
        })
        document = self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        assert document["name"] == "foo"
        capturing_logger.assert_logged('warning', 'Failed to remove container')

    def test_progress_stages_are_logged(self, config, spec, capturing_logger):
        executor = MockCommandExecutor({'docker run': _container_run(export_for("x"))})
        self._freezer(config, executor, capturing_logger).freeze(spec, PLATFORM.LINUX)
        capturing_logger.assert_logged('status', 'Stage 1/3: Building resolver image')
        capturing_logger.assert_logged('status', 'Stage 3/3: Harvesting resolved environment')
