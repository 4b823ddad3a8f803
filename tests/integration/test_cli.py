"""
Integration tests for the ttm command line.

Runs click commands against a temporary sessions directory.
"""

import subprocess
import tempfile
from pathlib import Path

from click.testing import CliRunner

from ttm.cli.main import cli
from ttm.config import today
from ttm.record.codec import CommandEntry, encode, session_started_line
from ttm.state import ActiveSession, SessionStateStore

LOG = session_started_line("TTM", "09:00:00") + encode([
    CommandEntry("09:00:01", "git status", ("On branch main",)),
    CommandEntry("09:00:09", "npm install", ("npm ERR! failed to fetch",)),
])


class CliTestBase:

    def setup_method(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        root = Path(self.tmpdir.name)
        self.sessions_dir = root / "sessions"
        self.state_file = root / "ttm-state.json"
        self.runner = CliRunner()

    def teardown_method(self):
        self.tmpdir.cleanup()

    def invoke(self, *args, **kwargs):
        base = ["--sessions-dir", str(self.sessions_dir), "--state-file", str(self.state_file)]
        return self.runner.invoke(cli, base + list(args), **kwargs)

    def write_log(self, date="2026-10-18", text=LOG):
        self.sessions_dir.mkdir(exist_ok=True)
        path = self.sessions_dir / f"session-{date}.log"
        path.write_text(text)
        return path


class TestStartStop(CliTestBase):
    """start and stop."""

    def test_start_records_until_exit(self):
        """Test a scripted session through the real prompt."""
        result = self.invoke("start", input="echo hello\n\nexit\n")

        assert result.exit_code == 0, result.output
        assert "hello" in result.output
        log = (self.sessions_dir / f"session-{today()}.log").read_text()
        assert "COMMAND: echo hello ===\nhello\n=== END ===" in log
        assert not self.state_file.exists()

    def test_start_conflict(self):
        """Test start refuses while another session is active."""
        SessionStateStore(self.state_file).save(ActiveSession(pid=424242, log_file="/x.log"))
        before = self.state_file.read_text()

        result = self.invoke("start", input="exit\n")

        assert result.exit_code == 1
        assert "already active" in result.output
        assert self.state_file.read_text() == before

    def test_stop_without_session(self):
        """Test stop reports nothing to stop and creates no state."""
        result = self.invoke("stop")

        assert result.exit_code == 1
        assert "No active session found." in result.output
        assert not self.state_file.exists()

    def test_stop_signals_recorder(self):
        """Test stop terminates the recorded pid and clears state."""
        proc = subprocess.Popen(["sleep", "30"])
        try:
            SessionStateStore(self.state_file).save(ActiveSession(pid=proc.pid, log_file="/x.log"))

            result = self.invoke("stop")

            assert result.exit_code == 0
            assert f"Stopped PID {proc.pid}" in result.output
            assert proc.wait(timeout=5) != 0
            assert not self.state_file.exists()
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()


class TestBrowsing(CliTestBase):
    """history, show, inputs, search, search-all."""

    def test_history(self):
        """Test session files are listed."""
        self.write_log("2026-10-17")
        self.write_log("2026-10-18")

        result = self.invoke("history")

        assert result.exit_code == 0
        assert result.output.index("session-2026-10-18.log") < result.output.index("session-2026-10-17.log")

    def test_history_empty(self):
        """Test empty sessions dir."""
        result = self.invoke("history")

        assert "No sessions yet." in result.output

    def test_show(self):
        """Test raw log is printed including boundaries."""
        self.write_log()

        result = self.invoke("show", "--date", "2026-10-18")

        assert result.output == LOG

    def test_show_missing(self):
        """Test missing log is informational."""
        result = self.invoke("show", "-d", "1999-01-01")

        assert result.exit_code == 0
        assert "No log for 1999-01-01" in result.output

    def test_bad_date(self):
        """Test malformed dates are rejected."""
        result = self.invoke("show", "--date", "../../etc/passwd")

        assert result.exit_code == 2

    def test_inputs(self):
        """Test only commands are printed."""
        self.write_log()

        result = self.invoke("inputs", "--date", "2026-10-18")

        assert result.output == "git status\nnpm install\n"

    def test_search(self):
        """Test search for git returns only git status."""
        self.write_log()

        result = self.invoke("search", "git", "--date", "2026-10-18")

        assert result.output == "git status\n"

    def test_search_all(self):
        """Test search across days."""
        self.write_log("2026-10-17")
        self.write_log("2026-10-18")

        result = self.invoke("search-all", "npm")

        assert "2026-10-18  npm install" in result.output
        assert "2026-10-17  npm install" in result.output


class TestExportReplay(CliTestBase):
    """export, export-all, replay, summarize."""

    def test_export(self):
        """Test Markdown written for a date."""
        self.write_log()

        result = self.invoke("export", "--date", "2026-10-18")

        assert result.exit_code == 0
        assert (self.sessions_dir / "session-2026-10-18.md").exists()

    def test_export_all(self):
        """Test every log exported."""
        self.write_log("2026-10-17")
        self.write_log("2026-10-18")

        result = self.invoke("export-all")

        assert result.output.count("Exported") == 2

    def test_replay_fast(self):
        """Test replaying a log by name."""
        self.write_log()

        result = self.invoke("replay", "session-2026-10-18.log", "--fast")

        assert result.exit_code == 0
        assert "[09:00:01] $ git status" in result.output
        assert "npm ERR! failed to fetch" in result.output
        assert "Replay finished." in result.output

    def test_replay_missing(self):
        """Test unknown replay file."""
        result = self.invoke("replay", "nope.log")

        assert "Session file not found" in result.output

    def test_replay_without_entries(self):
        """Test a log with only boundaries."""
        self.write_log(text=session_started_line("TTM", "09:00:00"))

        result = self.invoke("replay", "session-2026-10-18.log", "--fast")

        assert "No commands found in session log." in result.output

    def test_summarize_missing_log(self):
        """Test summarize without a log never calls the service."""
        result = self.invoke("summarize", "--date", "1999-01-01")

        assert result.exit_code == 0
        assert "No log file for 1999-01-01" in result.output

    def test_version(self):
        """Test version output."""
        result = self.invoke("version")

        assert result.output.startswith("ttm version ")

