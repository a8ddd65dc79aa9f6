"""Tests for deterministic git invocation."""

import shutil
import sys

import pytest

from common.context import SyncContext
from common.errors import CommandError, SyncCancelledError
from vcs.commit import commit_and_tag_steps
from vcs.git import GitCommand, git_environment, run_command, run_pipeline
from versioning.parser import parse_npm_dependency

DEP = parse_npm_dependency("left-pad@1.3.0")


class TestGitEnvironment:
    """Test the identity every command runs under."""

    def test_identity(self):
        env = git_environment(DEP)
        assert env["GIT_AUTHOR_NAME"] == "left-pad@1.3.0 authors"
        assert env["GIT_COMMITTER_NAME"] == env["GIT_AUTHOR_NAME"]
        assert env["GIT_AUTHOR_EMAIL"] == env["GIT_COMMITTER_EMAIL"] == env["EMAIL"]
        assert env["GIT_AUTHOR_DATE"] == "Thu Apr 8 14:24:52 2021 +0200"
        assert env["GIT_COMMITTER_DATE"] == env["GIT_AUTHOR_DATE"]

    def test_commit_steps(self, tmp_path):
        steps = commit_and_tag_steps(str(tmp_path), "/srv/bare", DEP)
        assert [step.args[1] for step in steps] == ["init", "add", "commit", "-c", "remote", "push"]
        assert steps[3].args[-1] == "v1.3.0"
        assert "--no-verify" in steps[2].args
        assert "--no-verify" in steps[5].args
        assert all(step.cwd == str(tmp_path) for step in steps)


class TestRunCommand:
    """Test subprocess handling."""

    def test_output_and_environment(self, monkeypatch):
        monkeypatch.setenv("GIT_DIR", "/somewhere/else")
        script = "import os; print(os.environ.get('GIT_DIR'), os.environ['GIT_AUTHOR_NAME'])"
        out = run_command(SyncContext(), [sys.executable, "-c", script], None, git_environment(DEP))
        assert out.strip() == "None left-pad@1.3.0 authors"

    def test_non_zero_exit(self):
        script = "import sys; print('boom'); sys.exit(3)"
        with pytest.raises(CommandError) as excinfo:
            run_command(SyncContext(), [sys.executable, "-c", script], None, {})
        assert excinfo.value.returncode == 3
        assert "boom" in excinfo.value.output
        assert "failed with output" in str(excinfo.value)

    def test_cancelled_before_start(self):
        ctx = SyncContext()
        ctx.cancel()
        with pytest.raises(SyncCancelledError):
            run_command(ctx, [sys.executable, "-c", "pass"], None, {})

    def test_killed_on_deadline(self):
        with pytest.raises(SyncCancelledError):
            run_command(SyncContext(timeout=0.3), [sys.executable, "-c", "import time; time.sleep(30)"], None, {})

    def test_missing_executable(self, tmp_path):
        missing = str(tmp_path / "no-such-git")
        with pytest.raises(CommandError) as excinfo:
            run_command(SyncContext(), [missing, "--version"], None, {})
        assert excinfo.value.returncode == -1
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_pipeline_stops_at_first_failure(self, tmp_path):
        marker = tmp_path / "marker"
        steps = [
            GitCommand(args=(sys.executable, "-c", "import sys; sys.exit(1)")),
            GitCommand(args=(sys.executable, "-c", f"open({str(marker)!r}, 'w').close()")),
        ]
        with pytest.raises(CommandError):
            run_pipeline(SyncContext(), steps, DEP)
        assert not marker.exists()


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitCommand:
    """Test against a real git binary."""

    def test_of_prefixes_git(self):
        out = run_command(SyncContext(), GitCommand.of("--version").args, None, {})
        assert out.startswith("git version")

