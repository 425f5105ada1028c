"""
Tests for the Typer CLI.
"""

import json

import pendulum
from typer.testing import CliRunner

from bookableslots.cli.app import app

runner = CliRunner()

ALL_WEEK_CONFIG = """
timezone: UTC
buffer_time: 0
minimum_notice: 0
booking_window: 400
slot_duration: 60
schedule:
""" + "".join(
    f'  - day: {day}\n    start_time: "09:00"\n    end_time: "17:00"\n'
    for day in ("SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")
)


def _write_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(ALL_WEEK_CONFIG, encoding="utf-8")
    return path


def _future_day(days: int = 3):
    return pendulum.now("UTC").add(days=days).start_of("day")


class TestPreviewCommand:
    """Tests for the preview command."""

    def test_json_output(self, tmp_path):
        """Test totals are reported as JSON."""
        config = _write_config(tmp_path)
        start = _future_day().format("YYYY-MM-DD")

        result = runner.invoke(
            app, ["preview", "--config", str(config), "--start", start, "--days", "2", "--json"]
        )

        assert result.exit_code == 0, result.output
        assert '"totalSlots": 16' in result.output
        assert '"totalHours": 16.0' in result.output

    def test_table_output(self, tmp_path):
        """Test the table lists each day."""
        config = _write_config(tmp_path)
        start = _future_day()

        result = runner.invoke(
            app, ["preview", "--config", str(config), "--start", start.format("YYYY-MM-DD"), "--days", "1"]
        )

        assert result.exit_code == 0, result.output
        assert start.format("YYYY-MM-DD") in result.output
        assert "8 slot(s)" in result.output
        assert "buffer 0 min" in result.output

    def test_missing_config(self, tmp_path):
        """Test a missing config file exits with an error."""
        result = runner.invoke(app, ["preview", "--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_start_date(self, tmp_path):
        """Test an unparsable start date exits with an error."""
        config = _write_config(tmp_path)

        result = runner.invoke(app, ["preview", "--config", str(config), "--start", "tomorrow"])

        assert result.exit_code == 1


class TestSlotsCommand:
    """Tests for the slots command."""

    def test_busy_file_removes_slot(self, tmp_path):
        """Test busy intervals from a JSON file are honoured."""
        config = _write_config(tmp_path)
        day = _future_day(5)
        busy_file = tmp_path / "busy.json"
        busy_file.write_text(
            json.dumps(
                [
                    {
                        "calendarId": "work",
                        "start": day.add(hours=10).to_iso8601_string(),
                        "end": day.add(hours=11).to_iso8601_string(),
                    }
                ]
            ),
            encoding="utf-8",
        )

        result = runner.invoke(
            app,
            [
                "slots",
                "--config", str(config),
                "--date", day.format("YYYY-MM-DD"),
                "--busy-file", str(busy_file),
                "--calendar", "work",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "7 slot(s)" in result.output
        assert "  09:00 (60 min)" in result.output
        assert "  10:00 (60 min)" not in result.output
        assert "  11:00 (60 min)" in result.output


def test_version():
    """Test the version command prints the package version."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
