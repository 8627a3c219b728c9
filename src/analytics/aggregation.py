"""
src/analytics/aggregation.py
────────────────────────────
Fixed-interval aggregation of oven readings.

  group_by_interval()     → bucket readings by start of their time interval
  calculate_group_stats() → energy / zone / operational stats for one bucket
  summarize_intervals()   → both steps, one IntervalStats per bucket
  stats_to_frame()        → tabular view for reports and CLI output
  summarize_daily()       → per-day energy, average power, idle % and cost
  hourly_profile()        → average power and idle % by hour of day

Readings must already be sorted by timestamp; nothing here sorts.

Cumulative energy is assumed monotonic inside a bucket. A negative delta
(meter rollover or reset) is kept as-is, flagged on EnergyStats.counter_reset
and logged.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from config.settings import settings
from config.thresholds import DEFAULT_THRESHOLDS, WasteThresholds
from src.analytics.phases import is_idle
from src.data.models import EnergyStats, IntervalStats, OperationalStats, Reading, ZoneStats

logger = logging.getLogger(__name__)


def cumulative_energy_delta(first: Reading, last: Reading) -> float:
    """Energy consumed between two readings from the cumulative meter (kWh)."""
    delta = last.energy.cumulative_energy_kwh - first.energy.cumulative_energy_kwh
    if delta < 0:
        logger.warning(
            f"Cumulative energy decreased between {first.timestamp.isoformat()} "
            f"and {last.timestamp.isoformat()} ({delta:.3f} kWh): possible meter reset"
        )
    return delta


def calculate_energy_delta(current: Reading, previous: Reading | None) -> float:
    if previous is None:
        return 0.0
    return current.energy.cumulative_energy_kwh - previous.energy.cumulative_energy_kwh


# ── Grouping ──────────────────────────────────────────────────────────────────

def group_by_interval(
    readings: Sequence[Reading],
    interval_minutes: int = 60,
) -> dict[str, list[Reading]]:
    """
    Group readings into buckets keyed by the ISO start time of their interval.

    The bucket start is the timestamp with minutes floored to a multiple of
    `interval_minutes` within the hour and seconds zeroed. Intervals of 60
    minutes or more therefore collapse to hourly buckets.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

    groups: dict[str, list[Reading]] = {}
    for reading in readings:
        ts = reading.timestamp
        start = ts.replace(
            minute=(ts.minute // interval_minutes) * interval_minutes,
            second=0,
            microsecond=0,
        )
        groups.setdefault(start.isoformat(), []).append(reading)
    return groups


# ── Statistics ────────────────────────────────────────────────────────────────

def _zone_ids(readings: Sequence[Reading]) -> list[int]:
    ids: set[int] = set()
    for reading in readings:
        ids.update(reading.zones)
    return sorted(ids)


def _zone_stats(readings: Sequence[Reading], zone_id: int) -> ZoneStats:
    zones = [r.zones[zone_id] for r in readings if zone_id in r.zones]
    temps = np.array([z.avg_temp for z in zones], dtype=float)
    deltas = np.array([z.delta for z in zones], dtype=float)
    max_temp = float(temps.max())
    min_temp = float(temps.min())
    return ZoneStats(
        avg_temp=float(temps.mean()),
        max_temp=max_temp,
        min_temp=min_temp,
        avg_delta=float(deltas.mean()),
        temp_variance=max_temp - min_temp,
    )


def calculate_group_stats(readings: Sequence[Reading]) -> IntervalStats | None:
    """
    Summary statistics for one group of readings.

    Returns None for an empty group.
    """
    if not readings:
        return None

    first, last = readings[0], readings[-1]

    power = np.array([r.energy.active_power_kw for r in readings], dtype=float)
    pf = np.array([r.energy.power_factor for r in readings], dtype=float)
    boards = np.array([r.operational.boards_inside for r in readings], dtype=float)
    o2 = np.array([r.operational.o2_concentration for r in readings], dtype=float)

    total_consumed = cumulative_energy_delta(first, last)

    energy = EnergyStats(
        total_consumed_kwh=total_consumed,
        avg_power_kw=float(power.mean()),
        max_power_kw=float(power.max()),
        min_power_kw=float(power.min()),
        avg_power_factor=float(pf.mean()),
        counter_reset=total_consumed < 0,
    )

    operational = OperationalStats(
        avg_boards_inside=float(boards.mean()),
        total_boards_produced=last.operational.boards_produced - first.operational.boards_produced,
        avg_o2=float(o2.mean()),
        total_alarms=int(sum(r.operational.alarm_count for r in readings)),
    )

    return IntervalStats(
        start_time=first.timestamp,
        end_time=last.timestamp,
        record_count=len(readings),
        energy=energy,
        zones={zone_id: _zone_stats(readings, zone_id) for zone_id in _zone_ids(readings)},
        operational=operational,
    )


def summarize_intervals(
    readings: Sequence[Reading],
    interval_minutes: int = settings.DEFAULT_INTERVAL_MINUTES,
) -> list[IntervalStats]:
    """Group readings and compute stats per bucket, in bucket order."""
    groups = group_by_interval(readings, interval_minutes)
    stats = [calculate_group_stats(group) for group in groups.values()]
    logger.debug(f"Summarized {len(readings)} readings into {len(groups)} intervals of {interval_minutes} min")
    return [s for s in stats if s is not None]


def stats_to_frame(stats: Sequence[IntervalStats]) -> pd.DataFrame:
    """Flatten IntervalStats into a DataFrame, one row per interval."""
    rows: list[dict] = []
    for s in stats:
        row = {
            "start_time": s.start_time,
            "end_time": s.end_time,
            "record_count": s.record_count,
            **s.energy.model_dump(),
            **s.operational.model_dump(),
        }
        for zone_id, zone in s.zones.items():
            row[f"zone{zone_id}_avg_temp"] = round(zone.avg_temp, 2)
            row[f"zone{zone_id}_avg_delta"] = round(zone.avg_delta, 2)
        rows.append(row)
    return pd.DataFrame(rows)


# ── Daily and hour-of-day rollups ─────────────────────────────────────────────

DAILY_COLUMNS = ["date", "energy_consumed_kwh", "avg_power_kw", "idle_percentage", "cost", "reading_count"]
HOURLY_COLUMNS = ["hour", "hour_label", "avg_power_kw", "idle_percentage", "reading_count"]


def _readings_frame(readings: Sequence[Reading]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "time": pd.to_datetime([r.timestamp for r in readings], utc=True),
            "active_power_kw": [r.energy.active_power_kw for r in readings],
            "cumulative_energy_kwh": [r.energy.cumulative_energy_kwh for r in readings],
            "idle": [float(is_idle(r)) for r in readings],
        }
    )


def summarize_daily(
    readings: Sequence[Reading],
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> pd.DataFrame:
    """
    One row per UTC calendar day.

    Energy is the spread of the cumulative counter within the day (max − min),
    idle % the share of readings classed idle, cost energy × tariff.
    """
    if not readings:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    df = _readings_frame(readings)
    daily = (
        df.assign(date=df["time"].dt.strftime("%Y-%m-%d"))
        .groupby("date", sort=True)
        .agg(
            max_energy=("cumulative_energy_kwh", "max"),
            min_energy=("cumulative_energy_kwh", "min"),
            avg_power_kw=("active_power_kw", "mean"),
            idle_share=("idle", "mean"),
            reading_count=("active_power_kw", "size"),
        )
        .reset_index()
    )
    daily["energy_consumed_kwh"] = daily["max_energy"] - daily["min_energy"]
    daily["idle_percentage"] = daily["idle_share"] * 100.0
    daily["cost"] = daily["energy_consumed_kwh"] * thresholds.tariff_per_kwh
    logger.debug(f"Rolled {len(readings)} readings into {len(daily)} days")
    return daily[DAILY_COLUMNS]


def hourly_profile(readings: Sequence[Reading]) -> pd.DataFrame:
    """Average power and idle % per hour of day (0–23, UTC), across all days."""
    if not readings:
        return pd.DataFrame(columns=HOURLY_COLUMNS)

    df = _readings_frame(readings)
    hourly = (
        df.assign(hour=df["time"].dt.hour)
        .groupby("hour", sort=True)
        .agg(
            avg_power_kw=("active_power_kw", "mean"),
            idle_share=("idle", "mean"),
            reading_count=("active_power_kw", "size"),
        )
        .reset_index()
    )
    hourly["hour_label"] = hourly["hour"].map(lambda h: f"{h:02d}:00")
    hourly["idle_percentage"] = hourly["idle_share"] * 100.0
    return hourly[HOURLY_COLUMNS]
