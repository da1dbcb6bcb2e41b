"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from typer.testing import CliRunner

from drillcore.config import get_settings
from drillcore.delivery.cli import app

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point the CLI at a throwaway database."""
    monkeypatch.setenv("DRILLCORE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("DRILLCORE_NAMESPACE", "smoke")
    monkeypatch.delenv("DRILLCORE_CATALOG_PATH", raising=False)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "drillcore" in result.stdout.lower()
        assert "queue" in result.stdout

    @pytest.mark.parametrize("command", ["rate", "review", "queue", "report", "export"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])

        assert result.exit_code == 0, result.stdout


class TestCLIRecording:
    def test_rate_then_due(self):
        result = runner.invoke(app, ["rate", "m1_warmup_1", "1"])

        assert result.exit_code == 0, result.stdout
        assert "quality 5" in result.stdout

        result = runner.invoke(app, ["due"])
        assert result.exit_code == 0
        assert "Nothing due today" in result.stdout

    def test_rate_rejects_bad_rating(self):
        result = runner.invoke(app, ["rate", "m1_warmup_1", "7"])

        assert result.exit_code != 0

    def test_review_raw_quality(self):
        result = runner.invoke(app, ["review", "m1_warmup_1", "2"])

        assert result.exit_code == 0, result.stdout
        assert "interval 1d" in result.stdout


class TestCLIQueueAndReport:
    def test_empty_report(self):
        result = runner.invoke(app, ["report"])

        assert result.exit_code == 0
        assert "No reviews yet" in result.stdout

    def test_report_after_reviews(self):
        for i in range(5):
            runner.invoke(app, ["review", f"m1_warmup_{i}", "5"])

        result = runner.invoke(app, ["report"])

        assert result.exit_code == 0, result.stdout
        assert "Modules" in result.stdout

        result = runner.invoke(app, ["trend"])
        assert result.exit_code == 0
        assert "Snapshots" in result.stdout

    def test_queue_short_message(self):
        result = runner.invoke(app, ["queue", "--mode", "review", "--count", "5"])

        assert result.exit_code == 0, result.stdout
        assert "No exercises available" in result.stdout

    def test_queue_preselects_mode(self):
        result = runner.invoke(app, ["queue"])

        assert result.exit_code == 0, result.stdout
        assert "Mode: discover" in result.stdout


class TestCLIBackup:
    def test_export_import(self, isolated_data_dir):
        backup = isolated_data_dir / "backup.json"
        runner.invoke(app, ["review", "m1_warmup_1", "5"])

        result = runner.invoke(app, ["export", str(backup)])
        assert result.exit_code == 0, result.stdout
        assert "srs" in json.loads(backup.read_text(encoding="utf-8"))

        result = runner.invoke(app, ["import", str(backup)])
        assert result.exit_code == 0, result.stdout
        assert "Restored" in result.stdout

    def test_import_invalid_file(self, isolated_data_dir):
        bad = isolated_data_dir / "bad.json"
        bad.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["import", str(bad)])

        assert result.exit_code == 1
        assert "missing metadata" in result.stdout
