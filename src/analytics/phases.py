"""
src/analytics/phases.py
───────────────────────
Production / idle segmentation of a reading sequence.

Two classifications are used, matching how the oven reports its state:
  producing  → boards inside OR status "Operating"    (phase segmentation)
  idle       → status not "Operating" OR no boards    (idle-period detection)

They are not complements: an "Operating" oven with an empty conveyor is both
producing (for phases) and idle (for idle-energy accounting).
"""
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from config.columns import STATUS_OPERATING
from config.findings import Severity
from config.thresholds import DEFAULT_THRESHOLDS, WasteThresholds
from src.data.models import IdlePeriod, Phase, PhaseType, Reading


def is_producing(reading: Reading) -> bool:
    return reading.operational.boards_inside > 0 or reading.operational.status == STATUS_OPERATING


def is_idle(reading: Reading) -> bool:
    return reading.operational.status != STATUS_OPERATING or reading.operational.boards_inside == 0


def _minutes_between(start: Reading, end: Reading) -> float:
    return (end.timestamp - start.timestamp).total_seconds() / 60.0


# ── Phases ────────────────────────────────────────────────────────────────────

def _build_phase(readings: Sequence[Reading], phase_type: PhaseType, start: int, end: int) -> Phase:
    return Phase(
        type=phase_type,
        start_index=start,
        end_index=end,
        start_time=readings[start].timestamp,
        end_time=readings[end].timestamp,
        duration_minutes=_minutes_between(readings[start], readings[end]),
        readings=list(readings[start:end + 1]),
    )


def identify_production_phases(readings: Sequence[Reading]) -> list[Phase]:
    """
    Partition readings into alternating production and idle phases.

    Phases are contiguous, non-overlapping and together cover every reading
    in input order. A phase's duration runs from its first to its last
    reading, so a single-reading phase lasts 0 minutes.
    """
    phases: list[Phase] = []
    if not readings:
        return phases

    def phase_type(reading: Reading) -> PhaseType:
        return PhaseType.PRODUCTION if is_producing(reading) else PhaseType.IDLE

    start = 0
    current = phase_type(readings[0])

    for index in range(1, len(readings)):
        kind = phase_type(readings[index])
        if kind != current:
            phases.append(_build_phase(readings, current, start, index - 1))
            start, current = index, kind

    phases.append(_build_phase(readings, current, start, len(readings) - 1))
    return phases


# ── Idle periods ──────────────────────────────────────────────────────────────

def _idle_severity(duration: float, thresholds: WasteThresholds) -> Severity:
    if duration > thresholds.idle_duration_critical_min:
        return Severity.CRITICAL
    if duration > thresholds.idle_duration_warning_min:
        return Severity.WARNING
    return Severity.INFO


def detect_idle_periods(
    readings: Sequence[Reading],
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> list[IdlePeriod]:
    """
    Find idle runs and estimate the energy they waste.

    A run ends at the first non-idle reading that follows it; its duration is
    measured up to that reading. A run still open at the end of the input has
    no known end and is not reported. Runs shorter than
    `thresholds.min_idle_duration_min` are dropped.
    """
    periods: list[IdlePeriod] = []
    run: list[Reading] = []

    for reading in readings:
        if is_idle(reading):
            run.append(reading)
            continue
        if not run:
            continue

        duration = _minutes_between(run[0], reading)
        if duration >= thresholds.min_idle_duration_min:
            avg_power = float(np.mean([r.energy.active_power_kw for r in run]))
            energy_wasted = avg_power * (duration / 60.0)
            periods.append(
                IdlePeriod(
                    start_time=run[0].timestamp,
                    end_time=reading.timestamp,
                    duration_minutes=duration,
                    record_count=len(run),
                    avg_power_kw=avg_power,
                    energy_wasted_kwh=energy_wasted,
                    severity=_idle_severity(duration, thresholds),
                    potential_savings_kwh=energy_wasted * thresholds.recoverable_idle_fraction,
                )
            )
        run = []

    return periods
