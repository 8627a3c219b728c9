"""
tests/test_models.py
─────────────────────
Tests for Pydantic v2 data models.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from config.findings import Severity, WasteCategory
from src.data.models import EfficiencyResult, EfficiencyStatus, Reading, WasteFinding, ZoneReading


class TestZoneReading:
    def test_derived_fields(self):
        zone = ZoneReading(upper_temp_c=250.0, lower_temp_c=240.0)
        assert zone.avg_temp == 245.0
        assert zone.delta == 10.0

    def test_delta_is_absolute(self):
        zone = ZoneReading(upper_temp_c=150.0, lower_temp_c=170.0)
        assert zone.delta == 20.0

    def test_frozen(self):
        zone = ZoneReading(upper_temp_c=150.0, lower_temp_c=148.0)
        with pytest.raises(ValidationError):
            zone.upper_temp_c = 300.0

    def test_derived_fields_in_dump(self):
        data = ZoneReading(upper_temp_c=100.0, lower_temp_c=90.0).model_dump()
        assert data["avg_temp"] == 95.0
        assert data["delta"] == 10.0


class TestReading:
    def test_frozen(self, make_reading):
        reading = make_reading()
        with pytest.raises(ValidationError):
            reading.timestamp = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_defaults(self, now):
        reading = Reading(timestamp=now)
        assert reading.operational.status == "Unknown"
        assert reading.zones == {}
        assert reading.energy.active_power_kw == 0.0

    def test_negative_boards_inside_rejected(self, now):
        with pytest.raises(ValidationError):
            Reading(timestamp=now, operational={"boards_inside": -1})

    def test_zone_keys_are_ints(self, now):
        reading = Reading(timestamp=now, zones={3: {"upper_temp_c": 1.0}, 1: {"upper_temp_c": 2.0}})
        assert list(reading.zones) == [3, 1]
        assert all(isinstance(k, int) for k in reading.zones)


class TestWasteFinding:
    def test_json_uses_enum_values(self):
        finding = WasteFinding(
            category=WasteCategory.POWER_FACTOR,
            severity=Severity.WARNING,
            message="Power factor at 0.88 is below minimum 0.9",
            value=0.88,
            threshold=0.9,
        )
        data = finding.model_dump(mode="json")
        assert data["category"] == "power_factor"
        assert data["severity"] == "warning"
        assert data["zone"] is None


class TestEfficiencyResult:
    def test_efficiency_capped_by_validation(self):
        with pytest.raises(ValidationError):
            EfficiencyResult(
                status=EfficiencyStatus.OPTIMAL,
                efficiency=120.0,
                energy_consumed_kwh=10.0,
                boards_produced=20,
            )
