"""
Unit tests for data export utilities and the command-line runner.
"""

import csv

import pytest

from guidedflight.cli import main
from guidedflight.core.scenario import constant_control, get_preset, simulate
from guidedflight.utils.export import export_flight_csv, export_summary_txt


@pytest.fixture(scope="module")
def flight():
    config = get_preset("vertical_test")
    config.duration = 0.1
    return config, simulate(config, constant_control(1.0))


class TestExport:
    """Test CSV and text export."""

    def test_csv_header_and_rows(self, flight, tmp_path):
        _, record = flight
        path = tmp_path / "out" / "flight.csv"

        assert export_flight_csv(record, str(path))

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Time (s)"
        assert len(rows[0]) == 17
        assert len(rows) == len(record.time) + 1
        assert float(rows[-1][0]) == pytest.approx(0.1)

    def test_csv_to_directory_fails(self, flight, tmp_path):
        _, record = flight
        assert not export_flight_csv(record, str(tmp_path))

    def test_summary(self, flight, tmp_path):
        config, record = flight
        path = tmp_path / "summary.txt"

        assert export_summary_txt(record, config, str(path))

        text = path.read_text(encoding="utf-8")
        assert "vertical_test" in text
        assert "Apogee" in text
        assert "Completed" in text


class TestCommandLine:
    """Test the headless runner entry point."""

    def test_list(self, capsys):
        assert main(["--list"]) == 0
        assert "vertical_test" in capsys.readouterr().out

    def test_run_preset_with_csv(self, tmp_path, capsys):
        path = tmp_path / "run.csv"
        assert main(["--preset", "vertical_test", "--csv", str(path)]) == 0
        assert path.exists()
        assert "Apogee" in capsys.readouterr().out

    def test_unknown_preset(self, capsys):
        assert main(["--preset", "nope"]) == 2
        assert "Unknown preset" in capsys.readouterr().out

    def test_missing_scenario_file(self, tmp_path):
        assert main(["--scenario", str(tmp_path / "missing.flight")]) == 2
