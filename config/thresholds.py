"""
config/thresholds.py
────────────────────
Waste detection thresholds and report policy for the SMT reflow oven.

Both objects are immutable and passed explicitly into every analysis call;
the module-level defaults hold the plant's standard values.

Reflow profile (default zone targets, °C):
  Zones 1–3  → preheat     130 / 150 / 165
  Zones 4–6  → soak        175 / 185 / 195
  Zones 7–8  → reflow      220 / 245 (peak)
  Zones 9–10 → cooling     210 / 160
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

DEFAULT_ZONE_TARGETS_C: Mapping[int, float] = MappingProxyType({
    1: 130.0,
    2: 150.0,
    3: 165.0,
    4: 175.0,
    5: 185.0,
    6: 195.0,
    7: 220.0,
    8: 245.0,
    9: 210.0,
    10: 160.0,
})


@dataclass(frozen=True)
class WasteThresholds:
    # Power
    idle_power_max_kw: float = 15.0
    idle_power_critical_factor: float = 1.5
    standby_power_max_kw: float = 12.0
    power_factor_min: float = 0.90
    power_factor_critical: float = 0.85

    # Temperature
    temp_overshoot_max_c: float = 10.0
    temp_undershoot_max_c: float = 8.0
    zone_imbalance_max_c: float = 15.0
    zone_targets_c: Mapping[int, float] = field(default_factory=lambda: DEFAULT_ZONE_TARGETS_C)
    fallback_zone_target_c: float = 180.0

    # Idle periods (minutes)
    min_idle_duration_min: float = 1.0
    idle_duration_warning_min: float = 15.0
    idle_duration_critical_min: float = 30.0
    recoverable_idle_fraction: float = 0.7

    # Production efficiency
    target_kwh_per_board: float = 0.55
    efficiency_optimal_pct: float = 90.0
    efficiency_acceptable_pct: float = 75.0

    # Cost model
    tariff_per_kwh: float = 0.12
    assumed_idle_hours: float = 1.0
    reactive_charge_per_kvar: float = 0.05   # $/kVAR-month
    reference_oven_power_kw: float = 35.0
    temp_savings_per_10c: float = 0.02       # 2 % energy per 10 °C
    imbalance_savings_per_c: float = 0.02

    def __post_init__(self):
        # Copy caller dicts into a read-only view
        object.__setattr__(self, "zone_targets_c", MappingProxyType(dict(self.zone_targets_c)))


@dataclass(frozen=True)
class ReportPolicy:
    # Energy accounting
    max_sample_gap_s: float = 300.0       # longer logger gaps count as this
    pf_penalty_factor: float = 0.1
    hot_zone_temp_c: float = 200.0
    balanced_delta_c: float = 5.0
    temp_waste_factor: float = 0.01

    # Recommendation gates
    idle_energy_gate_kwh: float = 0.5
    low_pf_fraction_gate: float = 0.10
    temp_waste_gate_kwh: float = 1.0

    # Recoverable share per recommendation
    idle_savings_fraction: float = 0.7
    pf_savings_fraction: float = 0.8
    temp_savings_fraction: float = 0.5
    summary_savings_fraction: float = 0.7


DEFAULT_THRESHOLDS = WasteThresholds()
DEFAULT_POLICY = ReportPolicy()
