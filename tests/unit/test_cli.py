"""Unit tests for the command-line interface."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from pantry_telemetry.cli import format_kg_delta, main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestFormatting:
    @pytest.mark.parametrize(
        ("delta", "expected"),
        [(1.5, "+1.50 kg"), (-0.25, "-0.25 kg"), (0.0, "0.00 kg"), (None, "—")],
    )
    def test_format_kg_delta(self, delta, expected):
        assert format_kg_delta(delta) == expected


class TestReconstructCommand:
    """Test the reconstruct command."""

    def test_json_output(self, runner: CliRunner, payload_file: Path):
        result = runner.invoke(main, ["reconstruct", str(payload_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert set(payload) == {"weightSamples", "doorSamples", "cycles"}
        assert payload["cycles"][0]["deltaKg"] == pytest.approx(-0.5)
        assert payload["cycles"][0]["durationMinutes"] == 2
        assert payload["doorSamples"][0]["state"] == "open"

    def test_text_output(self, runner: CliRunner, payload_file: Path):
        result = runner.invoke(main, ["reconstruct", str(payload_file)])

        assert result.exit_code == 0
        assert "Pantry Telemetry Summary" in result.stdout
        assert "Latest weight: 9.50 kg" in result.stdout
        assert "Removed 0.50 kg" in result.stdout
        assert "1 cycles · 1 shown" in result.stdout

    def test_payload_from_config(self, runner: CliRunner, tmp_path: Path, payload_file):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.dump({"data_dir": ".", "telemetry_file": "history.json"}))

        result = runner.invoke(main, ["reconstruct", "--config", str(config), "--json"])

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["cycles"]) == 1

    def test_date_window_excludes_everything(self, runner: CliRunner, payload_file):
        result = runner.invoke(
            main, ["reconstruct", str(payload_file), "--from-date", "2024-06-01"]
        )

        assert result.exit_code == 0
        assert "No telemetry records found" in result.stdout

    def test_missing_payload_argument_fails(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(main, ["reconstruct", str(tmp_path / "missing.json")])

        assert result.exit_code != 0

    def test_no_payload_configured_aborts(self, runner: CliRunner, monkeypatch):
        monkeypatch.delenv("PANTRY_TELEMETRY_TELEMETRY_FILE", raising=False)

        result = runner.invoke(main, ["reconstruct"])

        assert result.exit_code == 1

    def test_invalid_limit_rejected(self, runner: CliRunner, payload_file: Path):
        result = runner.invoke(main, ["reconstruct", str(payload_file), "--limit", "0"])

        assert result.exit_code == 2


class TestSummarizeCommand:
    """Test the summarize command."""

    def test_text_summary(self, runner: CliRunner, payload_file: Path):
        result = runner.invoke(main, ["summarize", str(payload_file)])

        assert result.exit_code == 0
        assert "Records loaded: 2" in result.stdout
        assert "Recent Activity" not in result.stdout

    def test_json_summary(self, runner: CliRunner, payload_file: Path):
        result = runner.invoke(main, ["summarize", str(payload_file), "--json"])

        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        assert summary["totalCycles"] == 1
        assert summary["recentActivity"][0]["kind"] == "removed"
        assert [p["marker"] for p in summary["chartPoints"]] == ["open", "close"]
