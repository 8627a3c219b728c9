"""
tests/test_phases.py
─────────────────────
Tests for production/idle phase segmentation and idle-period detection.
"""
import pytest

from config.findings import Severity
from config.thresholds import WasteThresholds
from src.analytics.phases import detect_idle_periods, identify_production_phases, is_idle, is_producing
from src.data.models import PhaseType


def _sequence(make_reading, pattern: str, step_s: float = 60.0, power: float = 20.0):
    """P = producing/operating with boards, I = idle with no boards."""
    readings = []
    for i, kind in enumerate(pattern):
        if kind == "P":
            readings.append(make_reading(offset_s=i * step_s, status="Operating", boards_inside=5, active_power=34.0))
        else:
            readings.append(make_reading(offset_s=i * step_s, status="Idle", boards_inside=0, active_power=power))
    return readings


class TestClassification:
    def test_boards_inside_means_producing(self, make_reading):
        assert is_producing(make_reading(status="Idle", boards_inside=2))

    def test_operating_status_means_producing(self, make_reading):
        assert is_producing(make_reading(status="Operating", boards_inside=0))

    def test_operating_without_boards_is_idle_for_energy(self, make_reading):
        reading = make_reading(status="Operating", boards_inside=0)
        assert is_idle(reading)
        assert is_producing(reading)


class TestIdentifyProductionPhases:
    def test_empty_input(self):
        assert identify_production_phases([]) == []

    def test_single_phase(self, make_reading):
        readings = _sequence(make_reading, "PPPP")
        phases = identify_production_phases(readings)
        assert len(phases) == 1
        assert phases[0].type == PhaseType.PRODUCTION
        assert phases[0].start_index == 0
        assert phases[0].end_index == 3
        assert phases[0].duration_minutes == pytest.approx(3.0)

    def test_alternating_types(self, make_reading):
        phases = identify_production_phases(_sequence(make_reading, "PPIIIPIP"))
        types = [p.type for p in phases]
        assert types == [
            PhaseType.PRODUCTION,
            PhaseType.IDLE,
            PhaseType.PRODUCTION,
            PhaseType.IDLE,
            PhaseType.PRODUCTION,
        ]
        for a, b in zip(types, types[1:]):
            assert a != b

    def test_partition_reconstructs_input(self, make_reading):
        readings = _sequence(make_reading, "IPPIIIPPPIPI")
        phases = identify_production_phases(readings)
        rebuilt = [r for p in phases for r in p.readings]
        assert rebuilt == readings
        assert all(a is b for a, b in zip(rebuilt, readings))

    def test_indices_contiguous(self, make_reading):
        readings = _sequence(make_reading, "IPPIIIPPPIPI")
        phases = identify_production_phases(readings)
        assert phases[0].start_index == 0
        assert phases[-1].end_index == len(readings) - 1
        for prev, nxt in zip(phases, phases[1:]):
            assert nxt.start_index == prev.end_index + 1

    def test_phase_times_and_duration(self, make_reading):
        readings = _sequence(make_reading, "PPIII")
        idle = identify_production_phases(readings)[1]
        assert idle.start_time == readings[2].timestamp
        assert idle.end_time == readings[4].timestamp
        assert idle.duration_minutes == pytest.approx(2.0)

    def test_trailing_phase_closed(self, make_reading):
        phases = identify_production_phases(_sequence(make_reading, "PPI"))
        assert phases[-1].type == PhaseType.IDLE
        assert phases[-1].duration_minutes == 0.0
        assert len(phases[-1].readings) == 1


class TestDetectIdlePeriods:
    def test_idle_run_measured_to_next_active_reading(self, make_reading):
        readings = _sequence(make_reading, "PIIIIP", power=20.0)
        periods = detect_idle_periods(readings)
        assert len(periods) == 1
        period = periods[0]
        assert period.start_time == readings[1].timestamp
        assert period.end_time == readings[5].timestamp
        assert period.duration_minutes == pytest.approx(4.0)
        assert period.record_count == 4
        assert period.avg_power_kw == pytest.approx(20.0)
        assert period.energy_wasted_kwh == pytest.approx(20.0 * 4 / 60)
        assert period.potential_savings_kwh == pytest.approx(period.energy_wasted_kwh * 0.7)
        assert period.severity == Severity.INFO

    def test_short_runs_dropped(self, make_reading):
        # 10 s sampling: a two-sample idle blip lasts 20 s
        readings = _sequence(make_reading, "PPIIPP", step_s=10.0)
        assert detect_idle_periods(readings) == []

    def test_never_shorter_than_one_minute(self, make_reading):
        readings = _sequence(make_reading, "PIPIIPIIIIIIIPIIIIIIIIIP", step_s=10.0)
        periods = detect_idle_periods(readings)
        assert periods
        assert all(p.duration_minutes >= 1.0 for p in periods)

    def test_exactly_one_minute_kept(self, make_reading):
        readings = _sequence(make_reading, "PIP", step_s=60.0)
        periods = detect_idle_periods(readings)
        assert len(periods) == 1
        assert periods[0].duration_minutes == 1.0

    def test_unterminated_run_not_reported(self, make_reading):
        readings = _sequence(make_reading, "PIIIII")
        assert detect_idle_periods(readings) == []

    @pytest.mark.parametrize(
        "idle_minutes, expected",
        [(15, Severity.INFO), (16, Severity.WARNING), (30, Severity.WARNING), (31, Severity.CRITICAL)],
    )
    def test_severity_by_duration(self, make_reading, idle_minutes, expected):
        readings = _sequence(make_reading, "P" + "I" * idle_minutes + "P")
        periods = detect_idle_periods(readings)
        assert periods[0].duration_minutes == pytest.approx(idle_minutes)
        assert periods[0].severity == expected

    def test_custom_thresholds(self, make_reading):
        readings = _sequence(make_reading, "PIIIP")
        thresholds = WasteThresholds(min_idle_duration_min=5.0)
        assert detect_idle_periods(readings, thresholds) == []
