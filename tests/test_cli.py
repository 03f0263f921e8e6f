"""Tests for the typer CLI."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from paperwise.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep load_config from picking up a config.yaml in the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def draft(tmp_path):
    path = tmp_path / "draft.txt"
    path.write_text("Teh cat sat on the mat.\nIt were a good day.", encoding="utf-8")
    return path


class TestStatsCommand:
    def test_prints_counts(self, draft):
        result = runner.invoke(app, ["stats", str(draft)])
        assert result.exit_code == 0
        assert "Words: 11" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["stats", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestCheckCommand:
    def test_apply_all_writes_corrected_text(self, draft, engine_entry):
        entries = [engine_entry("Teh", "The", "spelling"), engine_entry("It were", "It was")]
        with patch("paperwise.cli.LLMClient"), patch("paperwise.cli.SuggestionAnalyzer") as mock_cls:
            mock_cls.return_value = AsyncMock(return_value=entries)
            result = runner.invoke(app, ["check", str(draft), "--no-cache", "--apply-all"])

        assert result.exit_code == 0, result.output
        assert "Suggestions (2)" in result.output
        corrected = draft.with_name("draft.corrected.txt").read_text(encoding="utf-8")
        assert corrected == "The cat sat on the mat.\nIt was a good day."

    def test_no_suggestions(self, draft):
        with patch("paperwise.cli.LLMClient"), patch("paperwise.cli.SuggestionAnalyzer") as mock_cls:
            mock_cls.return_value = AsyncMock(return_value=[])
            result = runner.invoke(app, ["check", str(draft), "--no-cache"])

        assert result.exit_code == 0
        assert "No suggestions" in result.output

    def test_short_text_rejected(self, tmp_path):
        path = tmp_path / "short.txt"
        path.write_text("Too short.", encoding="utf-8")
        result = runner.invoke(app, ["check", str(path), "--no-cache"])
        assert result.exit_code == 1
        assert "too short" in result.output.lower()

    def test_invalid_setting(self, draft):
        with patch("paperwise.cli.LLMClient"):
            result = runner.invoke(app, ["check", str(draft), "--formality", "sarcastic", "--no-cache"])
        assert result.exit_code == 1
        assert "Invalid analysis settings" in result.output
