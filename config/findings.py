"""
config/findings.py
──────────────────
Waste finding severities, categories, and recommendation priorities.
"""

from enum import Enum


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class WasteCategory(str, Enum):
    IDLE_POWER = "idle_power"
    POWER_FACTOR = "power_factor"
    TEMP_OVERSHOOT = "temp_overshoot"
    TEMP_UNDERSHOOT = "temp_undershoot"
    STANDBY_DURATION = "standby_duration"
    RAMP_INEFFICIENCY = "ramp_inefficiency"
    ZONE_IMBALANCE = "zone_imbalance"
    PRODUCTION_INEFFICIENCY = "production_inefficiency"
    THERMAL_LOSS = "thermal_loss"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Severity ordering for sorting (higher = more severe)
SEVERITY_ORDER: dict[str, int] = {
    Severity.CRITICAL: 3,
    Severity.WARNING: 2,
    Severity.INFO: 1,
}

PRIORITY_ORDER: dict[str, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}
