"""Tests for running the agent process and dumping Warp logs."""

import subprocess
import sys

import pytest

from warp_agent_action.common.errors import AgentRunError
from warp_agent_action.runner import execute
from warp_agent_action.runner.agent import Channel
from warp_agent_action.runner.execute import dump_warp_log, run_agent, warp_log_path


class TestRunAgent:
    """Subprocess execution"""

    def test_captures_stdout(self, capsys):
        output = run_agent(sys.executable, ["-c", "print('hello'); print('world')"], "key")

        assert output == "hello\nworld\n"
        assert "hello\nworld\n" in capsys.readouterr().out

    def test_api_key_passed_through_environment(self):
        script = "import os; print(os.environ['WARP_API_KEY'])"
        assert run_agent(sys.executable, ["-c", script], "wk-123") == "wk-123\n"

    def test_api_key_not_logged(self, capsys):
        run_agent(sys.executable, ["-c", "pass"], "wk-super-secret")
        assert "wk-super-secret" not in capsys.readouterr().out

    def test_non_zero_exit_raises(self):
        with pytest.raises(AgentRunError) as exc_info:
            run_agent(sys.executable, ["-c", "import sys; sys.exit(3)"], "key")
        assert exc_info.value.returncode == 3
        assert "exit code 3" in str(exc_info.value)

    def test_process_reaped_when_echo_fails(self, monkeypatch):
        started = []
        real_popen = subprocess.Popen

        def recording_popen(*args, **kwargs):
            proc = real_popen(*args, **kwargs)
            started.append(proc)
            return proc

        class BrokenStdout:
            def write(self, text):
                if text == "hello\n":
                    raise OSError("broken pipe")

            def flush(self):
                pass

        monkeypatch.setattr(execute.subprocess, "Popen", recording_popen)
        monkeypatch.setattr(execute.sys, "stdout", BrokenStdout())

        with pytest.raises(OSError, match="broken pipe"):
            run_agent(sys.executable, ["-c", "print('hello')"], "key")

        (proc,) = started
        assert proc.stdout.closed
        assert proc.returncode == 0

    def test_missing_command_raises(self):
        with pytest.raises(OSError):
            run_agent("warp-cli-does-not-exist", ["agent", "run"], "key")


class TestWarpLog:
    """Locating and dumping the Warp log file"""

    def test_stable_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_STATE_DIR", str(tmp_path))
        assert warp_log_path(Channel.STABLE) == tmp_path / "warp-terminal" / "warp.log"

    def test_preview_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_STATE_DIR", str(tmp_path))
        assert warp_log_path(Channel.PREVIEW) == (
            tmp_path / "warp-terminal-preview" / "warp_preview.log"
        )

    def test_default_state_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert warp_log_path(Channel.STABLE) == (
            tmp_path / ".local" / "state" / "warp-terminal" / "warp.log"
        )

    def test_dump_prints_log_in_group(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("XDG_STATE_DIR", str(tmp_path))
        log_file = tmp_path / "warp-terminal" / "warp.log"
        log_file.parent.mkdir()
        log_file.write_text("ERROR agent crashed\n")

        dump_warp_log(Channel.STABLE)

        out = capsys.readouterr().out
        assert "::group::Warp Logs" in out
        assert "ERROR agent crashed" in out
        assert out.rstrip().endswith("::endgroup::")

    def test_missing_log_only_warns(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("XDG_STATE_DIR", str(tmp_path))

        dump_warp_log(Channel.PREVIEW)

        out = capsys.readouterr().out
        assert out.startswith("::warning::warp.log not found at ")
        assert "warp_preview.log" in out

    def test_unreadable_log_only_warns(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("XDG_STATE_DIR", str(tmp_path))
        log_file = tmp_path / "warp-terminal" / "warp.log"
        log_file.parent.mkdir()
        log_file.write_text("contents")

        def unreadable(self, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(type(log_file), "read_text", unreadable)
        dump_warp_log(Channel.STABLE)

        assert "::warning::Failed to read warp.log: denied" in capsys.readouterr().out
