"""
Unit tests for settings resolution and read-only log queries.
"""

import os
import tempfile
from pathlib import Path

from ttm.config import Settings, date_of, now_time, today
from ttm.history import list_sessions, read_log, search_all, search_entries
from ttm.record.codec import CommandEntry, decode, encode, session_started_line


class TestSettings:
    """Path resolution."""

    def setup_method(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def teardown_method(self):
        self.tmpdir.cleanup()

    def test_explicit_dir_created(self):
        """Test explicit sessions dir is created with state file beside it."""
        settings = Settings.resolve(sessions_dir=str(self.root / "logs" / "sessions"))

        assert settings.sessions_dir.is_dir()
        assert settings.state_file == (self.root / "logs" / "ttm-state.json").resolve()
        assert settings.tool_name == "TTM"
        assert settings.summary_model == "gpt-4o-mini"

    def test_explicit_state_file(self):
        """Test state file override."""
        settings = Settings.resolve(
            sessions_dir=str(self.root / "s"),
            state_file=str(self.root / "elsewhere.json"),
            summary_model="gpt-x",
        )

        assert settings.state_file == (self.root / "elsewhere.json").resolve()
        assert settings.summary_model == "gpt-x"

    def test_local_sessions_dir_preferred(self):
        """Test ./sessions is used when it exists."""
        (self.root / "sessions").mkdir()
        cwd = os.getcwd()
        os.chdir(self.root)
        try:
            settings = Settings.resolve()
        finally:
            os.chdir(cwd)

        assert settings.sessions_dir == (self.root / "sessions").resolve()

    def test_file_names(self):
        """Test per-date file naming."""
        settings = Settings.resolve(sessions_dir=str(self.root))

        assert settings.session_file_for_date("2026-10-18").name == "session-2026-10-18.log"
        assert settings.export_file_for_date("2026-10-18").name == "session-2026-10-18.md"
        assert settings.summary_file_for_date("2026-10-18").name == "summary-2026-10-18.txt"

    def test_list_session_files(self):
        """Test only session logs are listed, newest first."""
        settings = Settings.resolve(sessions_dir=str(self.root))
        for name in ["session-2026-01-02.log", "session-2026-03-01.log",
                     "session-2026-03-01.md", "summary-2026-03-01.txt", "session-bad.log"]:
            (self.root / name).write_text("")

        names = [p.name for p in settings.list_session_files()]

        assert names == ["session-2026-03-01.log", "session-2026-01-02.log"]

    def test_date_helpers(self):
        """Test date and time formats."""
        assert len(today()) == 10 and today()[4] == "-"
        assert len(now_time()) == 8 and now_time()[2] == ":"
        assert date_of(Path("session-2026-10-18.log")) == "2026-10-18"
        assert date_of(Path("notes.log")) is None


class TestQueries:
    """history, show, search, search-all."""

    def setup_method(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.settings = Settings.resolve(sessions_dir=self.tmpdir.name)

    def teardown_method(self):
        self.tmpdir.cleanup()

    def write(self, date, entries, sessions=1):
        text = "".join(session_started_line("TTM", "09:00:00") for _ in range(sessions))
        text += encode(entries)
        self.settings.session_file_for_date(date).write_text(text)

    def test_search_returns_matching_commands_only(self):
        """Test searching for git skips npm."""
        entries = [
            CommandEntry("09:00:00", "git status", ("clean",)),
            CommandEntry("09:00:05", "npm install", ("ok",)),
        ]

        found = search_entries(decode(encode(entries)), "git")

        assert [e.command for e in found] == ["git status"]

    def test_search_is_case_sensitive(self):
        """Test plain substring semantics."""
        entries = [CommandEntry("09:00:00", "Git status", ())]

        assert search_entries(entries, "git") == []

    def test_search_all(self):
        """Test search across days, newest first."""
        self.write("2026-10-17", [CommandEntry("09:00:00", "git pull", ())])
        self.write("2026-10-18", [CommandEntry("09:00:00", "git push", ()),
                                  CommandEntry("09:01:00", "ls", ())])

        results = search_all(self.settings, "git")

        assert [(d, e.command) for d, e in results] == [
            ("2026-10-18", "git push"),
            ("2026-10-17", "git pull"),
        ]

    def test_read_log(self):
        """Test raw read and missing day."""
        self.write("2026-10-18", [])

        assert read_log(self.settings, "2026-10-18").startswith("=== TTM session started")
        assert read_log(self.settings, "1999-01-01") is None

    def test_list_sessions(self):
        """Test listing counts sessions per day."""
        self.write("2026-10-17", [], sessions=2)
        self.write("2026-10-18", [])

        listed = list_sessions(self.settings)

        assert [(s.date, s.sessions) for s in listed] == [("2026-10-18", 1), ("2026-10-17", 2)]
        assert listed[0].path.name == "session-2026-10-18.log"
