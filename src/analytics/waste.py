"""
src/analytics/waste.py
──────────────────────
Per-reading waste classification and production efficiency.

Rules evaluated by analyze_data_point() (all independent, all may fire):
  idle_power       idle AND active power > idle_power_max_kw
                   critical above idle_power_max_kw × idle_power_critical_factor
  power_factor     PF < power_factor_min, critical below power_factor_critical
  temp_overshoot   zone avg > target + temp_overshoot_max_c, critical beyond 2×
  temp_undershoot  boards inside AND zone avg < target − temp_undershoot_max_c,
                   critical beyond 2×
  zone_imbalance   |upper − lower| > zone_imbalance_max_c, always warning

Savings estimates are rough $ figures from the WasteThresholds cost model:
  idle power       (P − standby) × assumed idle hours × tariff
  power factor     ΔQ × reactive charge, Q = √(S² − P²) at current vs target PF
  temperature      reference power × (overshoot / 10 × 2 %) × tariff  ($/h)
  imbalance        delta × imbalance_savings_per_c
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import timedelta

import numpy as np

from config.columns import STATUS_IDLE
from config.findings import SEVERITY_ORDER, Severity, WasteCategory
from config.thresholds import DEFAULT_THRESHOLDS, WasteThresholds
from src.analytics.aggregation import cumulative_energy_delta
from src.data.models import EfficiencyResult, EfficiencyStatus, Reading, WasteFinding, ZoneReading

logger = logging.getLogger(__name__)


# ── Savings estimators ────────────────────────────────────────────────────────

def estimate_idle_power_savings(active_power_kw: float, thresholds: WasteThresholds = DEFAULT_THRESHOLDS) -> float:
    excess = active_power_kw - thresholds.standby_power_max_kw
    return excess * thresholds.assumed_idle_hours * thresholds.tariff_per_kwh


def estimate_power_factor_savings(
    power_factor: float,
    active_power_kw: float,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> float:
    """Reactive demand saved by correcting PF up to the minimum target."""
    if power_factor <= 0.0 or active_power_kw <= 0.0:
        return 0.0

    current_apparent = active_power_kw / power_factor
    target_apparent = active_power_kw / thresholds.power_factor_min
    current_reactive = np.sqrt(max(0.0, current_apparent ** 2 - active_power_kw ** 2))
    target_reactive = np.sqrt(max(0.0, target_apparent ** 2 - active_power_kw ** 2))
    return float((current_reactive - target_reactive) * thresholds.reactive_charge_per_kvar)


def estimate_temperature_savings(overshoot_c: float, thresholds: WasteThresholds = DEFAULT_THRESHOLDS) -> float:
    reduction = (overshoot_c / 10.0) * thresholds.temp_savings_per_10c
    return thresholds.reference_oven_power_kw * reduction * thresholds.tariff_per_kwh


# ── Zone rules ────────────────────────────────────────────────────────────────

def resolve_zone_targets(
    zone_ids: Sequence[int],
    target_temps: Mapping[int, float] | None = None,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> dict[int, float]:
    """Target per zone: call override, then profile default, then flat fallback."""
    targets = {**thresholds.zone_targets_c, **(target_temps or {})}
    return {zone_id: targets.get(zone_id, thresholds.fallback_zone_target_c) for zone_id in zone_ids}


def _zone_findings(
    zone_id: int,
    zone: ZoneReading,
    target: float,
    loaded: bool,
    thresholds: WasteThresholds,
) -> list[WasteFinding]:
    findings: list[WasteFinding] = []
    avg = zone.avg_temp

    if avg > target + thresholds.temp_overshoot_max_c:
        overshoot = avg - target
        findings.append(
            WasteFinding(
                category=WasteCategory.TEMP_OVERSHOOT,
                severity=Severity.CRITICAL if overshoot > thresholds.temp_overshoot_max_c * 2 else Severity.WARNING,
                message=f"Zone {zone_id} temperature overshoot: {avg:.1f}°C vs target {target:g}°C (+{overshoot:.1f}°C)",
                zone=zone_id,
                value=avg,
                target=target,
                deviation=overshoot,
                potential_savings=estimate_temperature_savings(overshoot, thresholds),
            )
        )

    if loaded and avg < target - thresholds.temp_undershoot_max_c:
        undershoot = target - avg
        findings.append(
            WasteFinding(
                category=WasteCategory.TEMP_UNDERSHOOT,
                severity=Severity.CRITICAL if undershoot > thresholds.temp_undershoot_max_c * 2 else Severity.WARNING,
                message=f"Zone {zone_id} below profile with boards inside: {avg:.1f}°C vs target {target:g}°C (-{undershoot:.1f}°C)",
                zone=zone_id,
                value=avg,
                target=target,
                deviation=-undershoot,
            )
        )

    if zone.delta > thresholds.zone_imbalance_max_c:
        findings.append(
            WasteFinding(
                category=WasteCategory.ZONE_IMBALANCE,
                severity=Severity.WARNING,
                message=f"Zone {zone_id} heater imbalance: {zone.delta:.1f}°C difference between upper and lower",
                zone=zone_id,
                value=zone.delta,
                threshold=thresholds.zone_imbalance_max_c,
                potential_savings=zone.delta * thresholds.imbalance_savings_per_c,
            )
        )

    return findings


# ── Main API ──────────────────────────────────────────────────────────────────

def analyze_data_point(
    current: Reading,
    previous: Reading | None = None,
    target_temps: Mapping[int, float] | None = None,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> list[WasteFinding]:
    """
    Classify one reading against the waste rules.

    Args:
        current: Reading to evaluate (not modified)
        previous: Preceding reading; accepted so callers can scan pairwise,
            none of the current rules depend on it
        target_temps: Per-call zone target overrides (zone id → °C)
        thresholds: Threshold and cost model

    Returns:
        Findings in rule order: idle power, power factor, then per zone.
    """
    findings: list[WasteFinding] = []
    energy = current.energy
    operational = current.operational

    idle = operational.status == STATUS_IDLE or operational.boards_inside == 0
    if idle and energy.active_power_kw > thresholds.idle_power_max_kw:
        critical_kw = thresholds.idle_power_max_kw * thresholds.idle_power_critical_factor
        findings.append(
            WasteFinding(
                category=WasteCategory.IDLE_POWER,
                severity=Severity.CRITICAL if energy.active_power_kw > critical_kw else Severity.WARNING,
                message=(
                    f"Idle power consumption at {energy.active_power_kw:.1f} kW "
                    f"exceeds threshold of {thresholds.idle_power_max_kw:g} kW"
                ),
                value=energy.active_power_kw,
                threshold=thresholds.idle_power_max_kw,
                deviation=energy.active_power_kw - thresholds.idle_power_max_kw,
                potential_savings=estimate_idle_power_savings(energy.active_power_kw, thresholds),
            )
        )

    if energy.power_factor < thresholds.power_factor_min:
        findings.append(
            WasteFinding(
                category=WasteCategory.POWER_FACTOR,
                severity=Severity.CRITICAL if energy.power_factor < thresholds.power_factor_critical else Severity.WARNING,
                message=f"Power factor at {energy.power_factor:.2f} is below minimum {thresholds.power_factor_min:g}",
                value=energy.power_factor,
                threshold=thresholds.power_factor_min,
                deviation=thresholds.power_factor_min - energy.power_factor,
                potential_savings=estimate_power_factor_savings(
                    energy.power_factor, energy.active_power_kw, thresholds
                ),
            )
        )

    targets = resolve_zone_targets(list(current.zones), target_temps, thresholds)
    loaded = operational.boards_inside > 0
    for zone_id, zone in current.zones.items():
        findings.extend(_zone_findings(zone_id, zone, targets[zone_id], loaded, thresholds))

    return findings


def scan_readings(
    readings: Sequence[Reading],
    target_temps: Mapping[int, float] | None = None,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> list[WasteFinding]:
    """Run analyze_data_point over a whole sequence, in order."""
    findings: list[WasteFinding] = []
    previous: Reading | None = None
    for reading in readings:
        findings.extend(analyze_data_point(reading, previous, target_temps, thresholds))
        previous = reading
    return findings


def rank_findings(findings: Sequence[WasteFinding]) -> list[WasteFinding]:
    """Most severe first, then by estimated savings."""
    return sorted(
        findings,
        key=lambda f: (SEVERITY_ORDER[f.severity], f.potential_savings),
        reverse=True,
    )


# ── Production efficiency ─────────────────────────────────────────────────────

def _efficiency_status(efficiency: float, thresholds: WasteThresholds) -> EfficiencyStatus:
    if efficiency >= thresholds.efficiency_optimal_pct:
        return EfficiencyStatus.OPTIMAL
    if efficiency >= thresholds.efficiency_acceptable_pct:
        return EfficiencyStatus.ACCEPTABLE
    return EfficiencyStatus.INEFFICIENT


def analyze_production_efficiency(
    readings: Sequence[Reading],
    window_minutes: float | None = None,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
) -> EfficiencyResult | None:
    """
    Energy per board between the first and last reading.

    efficiency = min(100, target kWh/board ÷ actual kWh/board × 100)

    Args:
        readings: Time-ordered readings
        window_minutes: Only use readings within this many minutes of the
            last one; None uses the whole sequence

    Returns:
        None with fewer than 2 readings. NO_PRODUCTION (efficiency 0) when
        the board counter did not move; COUNTER_RESET (efficiency 0) when
        the energy or board counter went backwards.
    """
    if window_minutes is not None and readings:
        cutoff = readings[-1].timestamp - timedelta(minutes=window_minutes)
        readings = [r for r in readings if r.timestamp >= cutoff]

    if len(readings) < 2:
        return None

    first, last = readings[0], readings[-1]
    energy_consumed = cumulative_energy_delta(first, last)
    boards_produced = last.operational.boards_produced - first.operational.boards_produced

    if boards_produced == 0:
        return EfficiencyResult(
            status=EfficiencyStatus.NO_PRODUCTION,
            efficiency=0.0,
            energy_consumed_kwh=energy_consumed,
            boards_produced=0,
        )

    if energy_consumed < 0 or boards_produced < 0:
        logger.warning(
            f"Counter reset inside efficiency window: energy {energy_consumed:.3f} kWh, boards {boards_produced}"
        )
        return EfficiencyResult(
            status=EfficiencyStatus.COUNTER_RESET,
            efficiency=0.0,
            energy_consumed_kwh=energy_consumed,
            boards_produced=boards_produced,
        )

    target = thresholds.target_kwh_per_board
    kwh_per_board = energy_consumed / boards_produced
    if kwh_per_board == 0:
        efficiency = 100.0
    else:
        efficiency = min(100.0, (target / kwh_per_board) * 100.0)

    return EfficiencyResult(
        status=_efficiency_status(efficiency, thresholds),
        efficiency=efficiency,
        kwh_per_board=kwh_per_board,
        target_kwh_per_board=target,
        energy_consumed_kwh=energy_consumed,
        boards_produced=boards_produced,
        potential_savings_kwh=(kwh_per_board - target) * boards_produced if kwh_per_board > target else 0.0,
    )
