"""Smoke tests for the command-line interface."""
from rich.console import Console
from typer.testing import CliRunner

from chorus.cli.app import app
from chorus.cli.log import ConsoleLog
from chorus.config import LogLevel, RouterConfig

runner = CliRunner()


class TestCommands:
    """Tests for commands that need no vendor keys."""

    def test_models_lists_registry(self):
        """Test the models table includes personas and standard models."""
        result = runner.invoke(app, ["models"])

        assert result.exit_code == 0
        assert "therapist" in result.output
        assert "grok" in result.output

    def test_group_needs_two_members(self):
        """Test a group with one member is refused."""
        result = runner.invoke(app, ["group", "hello", "--member", "yogi"])

        assert result.exit_code == 1
        assert "at least two members" in result.output

    def test_send_without_key(self, monkeypatch):
        """Test sending without GEMINI_API_KEY fails cleanly."""
        monkeypatch.setattr("chorus.cli.app.get_config", lambda: RouterConfig())

        result = runner.invoke(app, ["send", "hello", "--store", "memory"])

        assert result.exit_code == 1
        assert "GEMINI_API_KEY" in result.output

    def test_history_lists_chats(self, monkeypatch, tmp_path):
        """Test chats created with `new` are listed by `history`."""
        monkeypatch.setenv("CHORUS_DB_PATH", str(tmp_path / "chats.db"))

        created = runner.invoke(app, ["new", "--title", "Ideas", "--store", "sqlite"])
        listed = runner.invoke(app, ["history", "--store", "sqlite"])

        assert created.exit_code == 0
        assert listed.exit_code == 0
        assert "Ideas" in listed.output


class TestConsoleLog:
    """Tests for the Rich debug callback."""

    def test_threshold(self):
        """Test messages below the level are dropped."""
        console = Console(record=True, width=120)
        sink = ConsoleLog(console, LogLevel.WARNING)

        sink("info", "fanout", "quiet")
        sink("warning", "fanout", "2 requested models returned no response")

        output = console.export_text()
        assert "quiet" not in output
        assert "2 requested models returned no response" in output
