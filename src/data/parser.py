"""
src/data/parser.py
──────────────────
Convert raw data-logger rows (column name → string/number) into Readings.

Numeric policy: every numeric field is parsed with an explicit default of 0.
Missing keys, blanks, text, NaN and ±inf all fall back to the default and are
never reported. The timestamp is the one field with no default: an unusable
value raises InvalidTimestamp, since every downstream ordering depends on it.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

import numpy as np
import pandas as pd

from config.columns import (
    COOLING_COLUMNS,
    ENERGY_COLUMNS,
    OPERATIONAL_COLUMNS,
    STATUS_UNKNOWN,
    ZONE_IDS,
    zone_columns,
)
from src.data.models import CoolingBlock, EnergyBlock, OperationalBlock, Reading, ZoneReading

logger = logging.getLogger(__name__)


class InvalidTimestamp(ValueError):
    """Raised when a row's logging time is missing or cannot be parsed."""

    def __init__(self, raw: object):
        super().__init__(f"Invalid or missing timestamp: {raw!r}")
        self.raw = raw


# ── Field helpers ─────────────────────────────────────────────────────────────

def parse_numeric_or_default(raw: object, default: float = 0.0) -> float:
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if not np.isfinite(value):
        return default
    return value


def parse_int_or_default(raw: object, default: int = 0) -> int:
    """Integer fields accept "12", 12, 12.0 and "12.7" (truncated to 12)."""
    if isinstance(raw, (int, np.integer)) and not isinstance(raw, bool):
        return int(raw)
    value = parse_numeric_or_default(raw, default=np.nan)
    if np.isnan(value):
        return default
    return int(value)


def parse_text_or_default(raw: object, default: str = "") -> str:
    if raw is None:
        return default
    if isinstance(raw, float) and np.isnan(raw):
        return default
    text = str(raw).strip()
    return text or default


def parse_timestamp(raw: object) -> datetime:
    """
    Parse a logging timestamp into a tz-aware UTC datetime.

    Naive values are taken as UTC; aware values are converted to UTC.
    Plain numbers are epoch seconds (SQL exports often store them that way).
    """
    if raw is None or isinstance(raw, bool) or (isinstance(raw, str) and not raw.strip()):
        raise InvalidTimestamp(raw)
    numeric = isinstance(raw, (int, float, np.integer, np.floating))
    if numeric and not np.isfinite(raw):
        raise InvalidTimestamp(raw)
    try:
        ts = pd.Timestamp(raw, unit="s") if numeric else pd.Timestamp(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidTimestamp(raw) from exc
    if pd.isna(ts):
        raise InvalidTimestamp(raw)

    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return ts.to_pydatetime()


# ── Row parsing ───────────────────────────────────────────────────────────────

def _parse_zone(row: Mapping[str, object], zone_id: int) -> ZoneReading:
    cols = zone_columns(zone_id)
    return ZoneReading(
        upper_temp_c=parse_numeric_or_default(row.get(cols.upper), default=0.0),
        lower_temp_c=parse_numeric_or_default(row.get(cols.lower), default=0.0),
        blower_upper_temp_c=parse_numeric_or_default(row.get(cols.blower_upper), default=0.0),
        blower_lower_temp_c=parse_numeric_or_default(row.get(cols.blower_lower), default=0.0),
    )


def parse_row(row: Mapping[str, object], zone_ids: Iterable[int] = ZONE_IDS) -> Reading:
    """
    Build a Reading from one raw row. Unknown columns are ignored.

    Raises:
        InvalidTimestamp: the logging time column is missing or unparseable.
    """
    timestamp = parse_timestamp(row.get(OPERATIONAL_COLUMNS["logging_time"]))

    energy = EnergyBlock(
        cumulative_energy_kwh=parse_numeric_or_default(row.get(ENERGY_COLUMNS["cumulative_energy"]), default=0.0),
        current_a=parse_numeric_or_default(row.get(ENERGY_COLUMNS["current"]), default=0.0),
        voltage_v=parse_numeric_or_default(row.get(ENERGY_COLUMNS["voltage"]), default=0.0),
        active_power_kw=parse_numeric_or_default(row.get(ENERGY_COLUMNS["active_power"]), default=0.0),
        reactive_power_kvar=parse_numeric_or_default(row.get(ENERGY_COLUMNS["reactive_power"]), default=0.0),
        apparent_power_kva=parse_numeric_or_default(row.get(ENERGY_COLUMNS["apparent_power"]), default=0.0),
        power_factor=parse_numeric_or_default(row.get(ENERGY_COLUMNS["power_factor"]), default=0.0),
        frequency_hz=parse_numeric_or_default(row.get(ENERGY_COLUMNS["frequency"]), default=0.0),
    )

    operational = OperationalBlock(
        status=parse_text_or_default(row.get(OPERATIONAL_COLUMNS["equipment_status"]), default=STATUS_UNKNOWN),
        # A negative count is as malformed as a non-numeric one
        boards_inside=max(0, parse_int_or_default(row.get(OPERATIONAL_COLUMNS["boards_inside"]), default=0)),
        boards_produced=parse_int_or_default(row.get(OPERATIONAL_COLUMNS["boards_produced"]), default=0),
        product_number=parse_text_or_default(row.get(OPERATIONAL_COLUMNS["product_number"]), default=""),
        conveyor_speed=parse_numeric_or_default(row.get(OPERATIONAL_COLUMNS["conveyor_speed"]), default=0.0),
        alarm_count=parse_int_or_default(row.get(OPERATIONAL_COLUMNS["alarm_count"]), default=0),
        flow_rate=parse_numeric_or_default(row.get(OPERATIONAL_COLUMNS["flow_rate"]), default=0.0),
        o2_concentration=parse_numeric_or_default(row.get(OPERATIONAL_COLUMNS["o2_concentration"]), default=0.0),
    )

    cooling = CoolingBlock(
        cool1_c=parse_numeric_or_default(row.get(COOLING_COLUMNS["cool1"]), default=0.0),
        cool2_c=parse_numeric_or_default(row.get(COOLING_COLUMNS["cool2"]), default=0.0),
    )

    zones = {zone_id: _parse_zone(row, zone_id) for zone_id in sorted(zone_ids)}

    return Reading(
        timestamp=timestamp,
        energy=energy,
        operational=operational,
        zones=zones,
        cooling=cooling,
    )


def parse_rows(
    rows: Iterable[Mapping[str, object]],
    skip_invalid: bool = False,
    zone_ids: Iterable[int] = ZONE_IDS,
) -> list[Reading]:
    """
    Parse a batch of rows, preserving input order.

    With skip_invalid=False the first InvalidTimestamp aborts the batch;
    otherwise offending rows are logged and dropped.
    """
    zone_ids = tuple(zone_ids)
    readings: list[Reading] = []
    skipped = 0

    for index, row in enumerate(rows):
        try:
            readings.append(parse_row(row, zone_ids=zone_ids))
        except InvalidTimestamp as exc:
            if not skip_invalid:
                raise
            skipped += 1
            logger.warning(f"Skipping row {index}: {exc}")

    if skipped:
        logger.info(f"Parsed {len(readings)} rows, skipped {skipped} with invalid timestamps")
    return readings
