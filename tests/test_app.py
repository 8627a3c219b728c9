"""
tests/test_app.py
─────────────────
Tests for the command-line entry point.
"""
import json

from app import main


class TestSimulateCommand:
    def test_writes_csv(self, tmp_path):
        out = tmp_path / "sim.csv"
        assert main(["simulate", str(out), "--rows", "50", "--seed", "1"]) == 0
        lines = out.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 51
        assert "Logging time" in lines[0]


class TestAnalyzeCommand:
    def test_report_from_csv(self, tmp_path, capsys):
        out = tmp_path / "sim.csv"
        main(["simulate", str(out), "--rows", "120", "--seed", "2"])
        capsys.readouterr()

        assert main(["analyze", str(out), "--period", "shift"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["period"] == "shift"
        assert report["summary"]["total_energy_kwh"] > 0
        assert {"idle_analysis", "production_efficiency", "recommendations", "breakdown"} <= set(report)

    def test_intervals_and_findings(self, tmp_path, capsys):
        out = tmp_path / "sim.csv"
        main(["simulate", str(out), "--rows", "120", "--seed", "2"])
        capsys.readouterr()

        assert main(["analyze", str(out), "--intervals", "10", "--findings", "3"]) == 0
        text = capsys.readouterr().out
        assert "total_consumed_kwh" in text
        assert "[critical]" in text or "[warning]" in text

    def test_missing_input(self):
        assert main(["analyze"]) == 2

    def test_strict_aborts_on_bad_timestamp(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("Logging time,Equipment status\nnot-a-timestamp,Idle\n", encoding="utf-8")
        assert main(["analyze", str(path), "--strict"]) == 1

    def test_daily_and_hourly_tables(self, tmp_path, capsys):
        out = tmp_path / "sim.csv"
        main(["simulate", str(out), "--rows", "720", "--seed", "3"])
        capsys.readouterr()

        assert main(["analyze", str(out), "--daily", "--hourly"]) == 0
        text = capsys.readouterr().out
        assert "energy_consumed_kwh" in text
        assert "hour_label" in text
        assert "01:00" in text
