"""Tests for the git command runner."""

import importlib
import os

import pytest

from gitsource.errors import ToolMissingError, VcsCommandError
from gitsource.git import runner as runner_module
from gitsource.git.runner import GitRunner, is_network_failure

from ..repos import requires_git


class TestIsNetworkFailure:
    @pytest.mark.short
    @pytest.mark.parametrize(
        "stderr",
        [
            "fatal: unable to access 'https://host/repo.git/': "
            "Could not resolve host: host",
            "ssh: connect to host host port 22: Connection refused\n"
            "fatal: Could not read from remote repository.",
            "fatal: the remote end hung up unexpectedly",
        ],
    )
    def test_transport_failures(self, stderr):
        assert is_network_failure(stderr)

    @pytest.mark.short
    def test_other_failures(self):
        assert not is_network_failure("fatal: Needed a single revision")
        assert not is_network_failure("")


class TestGitRunner:
    @pytest.mark.short
    def test_missing_executable_is_unavailable(self):
        assert GitRunner(executable="git-does-not-exist-42").is_available() is False

    @pytest.mark.short
    def test_missing_executable_raises_tool_missing(self, tmp_path):
        runner = GitRunner(executable="git-does-not-exist-42")
        with pytest.raises(ToolMissingError, match="ensure Git is correctly installed"):
            runner.run(["--version"], working_dir=tmp_path)

    @requires_git
    @pytest.mark.integration
    def test_is_available(self):
        assert GitRunner().is_available() is True

    @requires_git
    @pytest.mark.integration
    def test_run_returns_lines(self, upstream_repo):
        lines = GitRunner().run(["rev-parse", "HEAD"], working_dir=upstream_repo.path)
        assert lines == [upstream_repo.second_commit]

    @requires_git
    @pytest.mark.integration
    def test_failure_raises_vcs_command_error(self, upstream_repo):
        with pytest.raises(VcsCommandError) as excinfo:
            GitRunner().run(
                ["rev-parse", "--verify", "no-such-ref^{commit}"],
                working_dir=upstream_repo.path,
            )
        assert excinfo.value.command[0] == "rev-parse"
        assert excinfo.value.status not in (None, 0)


class TestImport:
    @pytest.mark.short
    def test_leaves_environment_untouched(self, monkeypatch):
        monkeypatch.delenv("GIT_PYTHON_REFRESH", raising=False)

        importlib.reload(runner_module)

        assert "GIT_PYTHON_REFRESH" not in os.environ

    @pytest.mark.short
    def test_keeps_user_refresh_mode(self, monkeypatch):
        monkeypatch.setenv("GIT_PYTHON_REFRESH", "warn")

        importlib.reload(runner_module)

        assert os.environ["GIT_PYTHON_REFRESH"] == "warn"
