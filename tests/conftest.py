"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the reflow waste monitor test suite.
"""
import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SIMULATION_SEED", "42")


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def profile_zones() -> dict[int, tuple[float, float]]:
    """Upper/lower pairs sitting on the default reflow profile (±1 °C)."""
    from config.thresholds import DEFAULT_ZONE_TARGETS_C
    return {zone_id: (target + 1.0, target - 1.0) for zone_id, target in DEFAULT_ZONE_TARGETS_C.items()}


@pytest.fixture
def make_row():
    """Factory for raw logger rows keyed by the export's column names."""
    from config.columns import ENERGY_COLUMNS, OPERATIONAL_COLUMNS, zone_columns

    def _make(
        timestamp: object = "2024-06-01 10:45:30",
        status: object = "Operating",
        boards_inside: object = "5",
        boards_produced: object = "100",
        active_power: object = "34.2",
        power_factor: object = "0.95",
        cumulative: object = "1000.5",
        zone_temps: dict[int, tuple[object, object]] | None = None,
    ) -> dict[str, object]:
        row: dict[str, object] = {
            OPERATIONAL_COLUMNS["logging_time"]: timestamp,
            OPERATIONAL_COLUMNS["equipment_status"]: status,
            OPERATIONAL_COLUMNS["boards_inside"]: boards_inside,
            OPERATIONAL_COLUMNS["boards_produced"]: boards_produced,
            ENERGY_COLUMNS["active_power"]: active_power,
            ENERGY_COLUMNS["power_factor"]: power_factor,
            ENERGY_COLUMNS["cumulative_energy"]: cumulative,
        }
        for zone_id, (upper, lower) in (zone_temps or {}).items():
            cols = zone_columns(zone_id)
            row[cols.upper] = upper
            row[cols.lower] = lower
        return row

    return _make


@pytest.fixture
def make_reading(now):
    """Factory for Readings offset in seconds from `now`."""
    from src.data.models import EnergyBlock, OperationalBlock, Reading, ZoneReading

    def _make(
        offset_s: float = 0.0,
        status: str = "Operating",
        boards_inside: int = 5,
        boards_produced: int = 0,
        active_power: float = 34.0,
        power_factor: float = 0.95,
        cumulative: float = 0.0,
        zones: dict[int, tuple[float, float]] | None = None,
    ) -> Reading:
        return Reading(
            timestamp=now + timedelta(seconds=offset_s),
            energy=EnergyBlock(
                cumulative_energy_kwh=cumulative,
                active_power_kw=active_power,
                power_factor=power_factor,
            ),
            operational=OperationalBlock(
                status=status,
                boards_inside=boards_inside,
                boards_produced=boards_produced,
            ),
            zones={
                zone_id: ZoneReading(upper_temp_c=upper, lower_temp_c=lower)
                for zone_id, (upper, lower) in (zones or {}).items()
            },
        )

    return _make


@pytest.fixture
def idle_reading(make_reading):
    return make_reading(status="Idle", boards_inside=0, active_power=20.0, power_factor=0.95)
