"""
src/analytics/report.py
───────────────────────
Period waste metrics, recommendations, and the summary report.

Energy accounting in calculate_waste_metrics() (per reading, Δt = time to the
next reading, the last reading reuses the previous gap; gaps are capped at
ReportPolicy.max_sample_gap_s):
  idle waste     status ≠ Operating and P > standby → (P − standby) × Δt
  low-PF waste   PF < minimum → (PF_min − PF) × P × penalty factor × Δt
  thermal waste  mean over readings of Σ max(0, delta − balanced delta) for
                 zones hotter than hot_zone_temp_c, × factor × total energy

Recommendations are gated by ReportPolicy and ranked high → low priority,
then by potential savings.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from config.columns import STATUS_OPERATING
from config.findings import PRIORITY_ORDER, Priority, Severity, WasteCategory
from config.thresholds import DEFAULT_POLICY, DEFAULT_THRESHOLDS, ReportPolicy, WasteThresholds
from src.analytics.aggregation import cumulative_energy_delta
from src.analytics.phases import detect_idle_periods
from src.analytics.waste import analyze_production_efficiency
from src.data.models import (
    BreakdownItem,
    EfficiencyResult,
    EfficiencyStatus,
    IdleAnalysis,
    IdlePeriod,
    Reading,
    Recommendation,
    SummaryTotals,
    WasteBreakdown,
    WasteMetrics,
    WasteSummaryReport,
)

logger = logging.getLogger(__name__)


def _share(value: float, total: float) -> float:
    return value / total * 100.0 if total > 0 else 0.0


def _sample_hours(readings: Sequence[Reading], policy: ReportPolicy) -> np.ndarray:
    """Hours each reading stands for: the gap to the next one, capped."""
    seconds = np.array([r.timestamp.timestamp() for r in readings])
    gaps = np.diff(seconds)
    gaps = np.append(gaps, gaps[-1])
    return np.clip(gaps, 0.0, policy.max_sample_gap_s) / 3600.0


# ── Metrics ───────────────────────────────────────────────────────────────────

def calculate_waste_metrics(
    readings: Sequence[Reading],
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
    policy: ReportPolicy = DEFAULT_POLICY,
) -> WasteMetrics:
    """Accumulate idle, power factor and thermal waste over a reading sequence."""
    if len(readings) < 2:
        return WasteMetrics()

    sample_hours = _sample_hours(readings, policy)
    total_energy = cumulative_energy_delta(readings[0], readings[-1])

    idle_energy = 0.0
    low_pf_energy = 0.0
    temp_deviation = 0.0
    idle_records = 0
    low_pf_records = 0

    for reading, hours in zip(readings, sample_hours):
        power = reading.energy.active_power_kw
        pf = reading.energy.power_factor

        if reading.operational.status != STATUS_OPERATING and power > thresholds.standby_power_max_kw:
            idle_records += 1
            idle_energy += (power - thresholds.standby_power_max_kw) * hours

        if pf < thresholds.power_factor_min:
            low_pf_records += 1
            low_pf_energy += (thresholds.power_factor_min - pf) * power * policy.pf_penalty_factor * hours

        for zone in reading.zones.values():
            if zone.avg_temp > policy.hot_zone_temp_c:
                temp_deviation += max(0.0, zone.delta - policy.balanced_delta_c)

    # Thermal waste scales with consumption; a reset meter contributes nothing
    temp_waste = (temp_deviation / len(readings)) * policy.temp_waste_factor * max(total_energy, 0.0)
    total_waste = idle_energy + low_pf_energy + temp_waste

    metrics = WasteMetrics(
        total_energy_kwh=total_energy,
        idle_energy_kwh=idle_energy,
        low_pf_energy_kwh=low_pf_energy,
        temp_waste_kwh=temp_waste,
        total_waste_kwh=total_waste,
        waste_percentage=_share(total_waste, total_energy),
        low_pf_records=low_pf_records,
        idle_records=idle_records,
    )
    metrics.recommendations = generate_recommendations(metrics, len(readings), thresholds, policy)
    return metrics


# ── Recommendations ───────────────────────────────────────────────────────────

def rank_recommendations(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    return sorted(
        recommendations,
        key=lambda r: (PRIORITY_ORDER[r.priority], r.potential_savings),
        reverse=True,
    )


def generate_recommendations(
    metrics: WasteMetrics,
    record_count: int,
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
    policy: ReportPolicy = DEFAULT_POLICY,
) -> list[Recommendation]:
    """Threshold-gated recommendations from accumulated waste metrics."""
    recommendations: list[Recommendation] = []

    if metrics.idle_energy_kwh > policy.idle_energy_gate_kwh:
        recommendations.append(
            Recommendation(
                priority=Priority.HIGH,
                category=WasteCategory.IDLE_POWER.value,
                title="Reduce Idle Power Consumption",
                description=(
                    f"{metrics.idle_energy_kwh:.2f} kWh wasted during idle periods. "
                    "Consider implementing automatic standby mode."
                ),
                potential_savings=metrics.idle_energy_kwh * policy.idle_savings_fraction,
                implementation="Configure equipment to enter deep standby after 10 minutes of inactivity",
            )
        )

    if record_count > 0 and metrics.low_pf_records > record_count * policy.low_pf_fraction_gate:
        low_pf_pct = metrics.low_pf_records / record_count * 100.0
        recommendations.append(
            Recommendation(
                priority=Priority.MEDIUM,
                category=WasteCategory.POWER_FACTOR.value,
                title="Power Factor Correction Needed",
                description=f"Power factor below {thresholds.power_factor_min:g} in {low_pf_pct:.0f}% of readings.",
                potential_savings=metrics.low_pf_energy_kwh * policy.pf_savings_fraction,
                implementation="Install capacitor bank for reactive power compensation",
            )
        )

    if metrics.temp_waste_kwh > policy.temp_waste_gate_kwh:
        recommendations.append(
            Recommendation(
                priority=Priority.MEDIUM,
                category="temperature",
                title="Zone Temperature Optimization",
                description="Temperature variations between upper and lower heaters causing inefficiency.",
                potential_savings=metrics.temp_waste_kwh * policy.temp_savings_fraction,
                implementation="Calibrate zone heaters and check thermal insulation",
            )
        )

    return rank_recommendations(recommendations)


def _standby_recommendation(periods: Sequence[IdlePeriod], thresholds: WasteThresholds) -> Recommendation | None:
    long_periods = [p for p in periods if p.severity == Severity.CRITICAL]
    if not long_periods:
        return None
    minutes = sum(p.duration_minutes for p in long_periods)
    return Recommendation(
        priority=Priority.MEDIUM,
        category=WasteCategory.STANDBY_DURATION.value,
        title="Shorten Extended Standby Periods",
        description=(
            f"{len(long_periods)} idle period(s) longer than {thresholds.idle_duration_critical_min:g} minutes "
            f"({minutes:.0f} min total) with the oven at full thermal load."
        ),
        potential_savings=sum(p.potential_savings_kwh for p in long_periods),
        implementation="Lower zone setpoints and blower speed when the line is idle for more than 30 minutes",
    )


def _efficiency_recommendation(efficiency: EfficiencyResult | None) -> Recommendation | None:
    if efficiency is None or efficiency.status != EfficiencyStatus.INEFFICIENT:
        return None
    return Recommendation(
        priority=Priority.LOW,
        category=WasteCategory.PRODUCTION_INEFFICIENCY.value,
        title="Improve Energy per Board",
        description=(
            f"{efficiency.kwh_per_board:.3f} kWh per board against a target of "
            f"{efficiency.target_kwh_per_board:.2f} kWh ({efficiency.efficiency:.0f}% efficiency)."
        ),
        potential_savings=efficiency.potential_savings_kwh,
        implementation="Increase conveyor loading and batch products to reduce gaps between boards",
    )


# ── Summary report ────────────────────────────────────────────────────────────

def _idle_analysis(periods: Sequence[IdlePeriod]) -> IdleAnalysis:
    total_minutes = sum(p.duration_minutes for p in periods)
    return IdleAnalysis(
        total_idle_minutes=total_minutes,
        total_idle_waste_kwh=sum(p.energy_wasted_kwh for p in periods),
        period_count=len(periods),
        average_duration_minutes=total_minutes / len(periods) if periods else 0.0,
        worst_period=max(periods, key=lambda p: p.energy_wasted_kwh, default=None),
    )


def generate_waste_summary(
    readings: Sequence[Reading],
    period: str = "day",
    thresholds: WasteThresholds = DEFAULT_THRESHOLDS,
    policy: ReportPolicy = DEFAULT_POLICY,
) -> WasteSummaryReport:
    """
    Build the waste summary for one reporting period.

    Combines waste metrics, idle periods and production efficiency; the
    input is not modified.
    """
    metrics = calculate_waste_metrics(readings, thresholds, policy)
    idle_periods = detect_idle_periods(readings, thresholds)
    efficiency = analyze_production_efficiency(readings, thresholds=thresholds)

    recommendations = list(metrics.recommendations)
    for extra in (_standby_recommendation(idle_periods, thresholds), _efficiency_recommendation(efficiency)):
        if extra is not None:
            recommendations.append(extra)

    savings_kwh = metrics.total_waste_kwh * policy.summary_savings_fraction
    total_waste = metrics.total_waste_kwh

    report = WasteSummaryReport(
        period=period,
        summary=SummaryTotals(
            total_energy_kwh=metrics.total_energy_kwh,
            total_waste_kwh=total_waste,
            waste_percentage=metrics.waste_percentage,
            potential_savings_kwh=savings_kwh,
            potential_savings_cost=savings_kwh * thresholds.tariff_per_kwh,
        ),
        idle_analysis=_idle_analysis(idle_periods),
        production_efficiency=efficiency,
        recommendations=rank_recommendations(recommendations),
        breakdown=WasteBreakdown(
            idle=BreakdownItem(value=metrics.idle_energy_kwh, percentage=_share(metrics.idle_energy_kwh, total_waste)),
            power_factor=BreakdownItem(
                value=metrics.low_pf_energy_kwh, percentage=_share(metrics.low_pf_energy_kwh, total_waste)
            ),
            thermal=BreakdownItem(value=metrics.temp_waste_kwh, percentage=_share(metrics.temp_waste_kwh, total_waste)),
        ),
    )

    logger.info(
        f"Waste summary ({period}): {len(readings)} readings, {total_waste:.2f} kWh waste, "
        f"{len(report.recommendations)} recommendations"
    )
    return report
