"""
src/data/simulator.py
─────────────────────
Synthetic data-logger rows for an SMT reflow oven.

Generates raw rows keyed by the logger's column names, so they go through
the same parser as a real CSV export.

Shift pattern (hour of day, UTC):
  22:00–06:00   Standby   (~8.5 kW, no boards)
  12:00–13:00   Idle      (lunch, ~18 kW, oven still at temperature)
  10:00–10:15,
  15:00–15:15   Idle      (short breaks)
  otherwise     Operating (~34 kW), with random 2 % idle blips

Design:
  - Reproducible with SIMULATION_SEED
  - Cumulative energy integrates active power per sample (monotonic)
  - One board leaves the oven every 60 s while producing
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import numpy as np
import pandas as pd

from config.columns import (
    COOLING_COLUMNS,
    ENERGY_COLUMNS,
    OPERATIONAL_COLUMNS,
    STATUS_IDLE,
    STATUS_OPERATING,
    ZONE_IDS,
    zone_columns,
)
from config.settings import settings
from config.thresholds import DEFAULT_ZONE_TARGETS_C
from src.data.models import Reading
from src.data.parser import parse_rows

STATUS_STANDBY = "Standby"

BASE_POWER_KW: dict[str, float] = {
    STATUS_OPERATING: 34.4,
    STATUS_IDLE: 18.2,
    STATUS_STANDBY: 8.5,
}

# Temperature variance per zone (σ of the slow profile oscillation)
ZONE_VARIANCE_C: dict[int, float] = {1: 5, 2: 5, 3: 4, 4: 4, 5: 3, 6: 3, 7: 5, 8: 6, 9: 5, 10: 10}

PRODUCT_NUMBERS = ["A-001", "B-002", "C-003", "D-004", "E-005"]
VOLTAGE_V = 480.0
FREQUENCY_HZ = 60.0
SECONDS_PER_BOARD = 60.0


def _shift_status(ts: datetime, rng: np.random.Generator) -> str:
    hour = ts.hour
    if hour < 6 or hour >= 22:
        return STATUS_STANDBY
    if hour == 12 or (hour in (10, 15) and ts.minute < 15):
        return STATUS_IDLE
    if rng.random() < 0.02:
        return STATUS_IDLE
    return STATUS_OPERATING


def _zone_values(zone_id: int, producing: bool, index: int, rng: np.random.Generator) -> dict[str, float]:
    base = DEFAULT_ZONE_TARGETS_C.get(zone_id, 180.0)
    variance = ZONE_VARIANCE_C.get(zone_id, 4)
    offset = 0.0 if producing else -20.0
    upper = base + offset + np.sin(index * 0.1) * variance + rng.uniform(-2.0, 2.0)
    lower = upper - rng.uniform(1.0, 4.0)
    blower_upper = upper + rng.uniform(3.0, 8.0)

    cols = zone_columns(zone_id)
    return {
        cols.upper: round(max(25.0, upper), 2),
        cols.lower: round(max(25.0, lower), 2),
        cols.blower_upper: round(max(30.0, blower_upper), 2),
        cols.blower_lower: round(max(30.0, blower_upper - 2.5), 2),
    }


# ── Public API ────────────────────────────────────────────────────────────────

def generate_raw_rows(
    count: int = settings.SIMULATION_ROWS,
    start: datetime | None = None,
    seed: int = settings.SIMULATION_SEED,
    sample_interval_s: float = settings.SAMPLE_INTERVAL_S,
) -> list[dict[str, object]]:
    """
    Generate `count` consecutive logger rows, `sample_interval_s` apart.

    `start` defaults to midnight UTC of the current day.
    """
    rng = np.random.default_rng(seed)
    if start is None:
        start = datetime.now(tz=UTC).replace(hour=0, minute=0, second=0, microsecond=0)

    rows: list[dict[str, object]] = []
    cumulative_kwh = 0.0
    boards_produced = 0
    board_clock = 0.0

    for i in range(count):
        ts = start + timedelta(seconds=i * sample_interval_s)
        status = _shift_status(ts, rng)
        producing = status == STATUS_OPERATING

        active_kw = BASE_POWER_KW[status] + rng.uniform(-2.0, 2.0)
        pf = rng.uniform(0.92, 0.98) if producing else rng.uniform(0.75, 0.88)
        apparent_kva = active_kw / pf
        reactive_kvar = np.sqrt(apparent_kva ** 2 - active_kw ** 2)

        if i > 0:
            cumulative_kwh += active_kw * sample_interval_s / 3600.0
        if producing:
            board_clock += sample_interval_s
            while board_clock >= SECONDS_PER_BOARD:
                boards_produced += 1
                board_clock -= SECONDS_PER_BOARD

        row: dict[str, object] = {
            OPERATIONAL_COLUMNS["logging_time"]: ts.strftime("%Y-%m-%d %H:%M:%S"),
            ENERGY_COLUMNS["cumulative_energy"]: round(cumulative_kwh, 4),
            ENERGY_COLUMNS["current"]: round(active_kw * 1000.0 / (VOLTAGE_V * np.sqrt(3)), 2),
            ENERGY_COLUMNS["voltage"]: VOLTAGE_V,
            ENERGY_COLUMNS["active_power"]: round(active_kw, 3),
            ENERGY_COLUMNS["reactive_power"]: round(float(reactive_kvar), 3),
            ENERGY_COLUMNS["apparent_power"]: round(apparent_kva, 3),
            ENERGY_COLUMNS["power_factor"]: round(pf, 3),
            ENERGY_COLUMNS["frequency"]: FREQUENCY_HZ,
            OPERATIONAL_COLUMNS["equipment_status"]: status,
            OPERATIONAL_COLUMNS["boards_inside"]: int(rng.integers(3, 8)) if producing else 0,
            OPERATIONAL_COLUMNS["boards_produced"]: boards_produced,
            OPERATIONAL_COLUMNS["product_number"]: PRODUCT_NUMBERS[(i // 100) % len(PRODUCT_NUMBERS)],
            OPERATIONAL_COLUMNS["conveyor_speed"]: 1.0 if producing else 0.0,
            OPERATIONAL_COLUMNS["alarm_count"]: int(rng.integers(1, 3)) if rng.random() < 0.05 else 0,
            OPERATIONAL_COLUMNS["flow_rate"]: round(rng.uniform(4.5, 5.5), 2) if producing else 0.0,
            OPERATIONAL_COLUMNS["o2_concentration"]: round(rng.uniform(90.0, 110.0), 1),
            COOLING_COLUMNS["cool1"]: round(rng.uniform(45.0, 55.0), 1),
            COOLING_COLUMNS["cool2"]: round(rng.uniform(40.0, 50.0), 1),
        }
        for zone_id in ZONE_IDS:
            row.update(_zone_values(zone_id, producing, i, rng))
        rows.append(row)

    return rows


def generate_readings(
    count: int = settings.SIMULATION_ROWS,
    start: datetime | None = None,
    seed: int = settings.SIMULATION_SEED,
    sample_interval_s: float = settings.SAMPLE_INTERVAL_S,
) -> list[Reading]:
    """Simulated rows, parsed into Readings."""
    return parse_rows(generate_raw_rows(count, start, seed, sample_interval_s))


def to_dataframe(rows: list[dict[str, object]]) -> pd.DataFrame:
    """Raw rows as a DataFrame with the logger's column names (CSV export shape)."""
    return pd.DataFrame(rows)
