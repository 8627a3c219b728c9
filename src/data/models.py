"""
src/data/models.py
──────────────────
Pydantic v2 data models for oven readings, interval statistics, phases,
waste findings, and summary reports.

Readings are frozen: zone `avg_temp` and `delta` are computed fields, always
derived from the upper/lower heater temperatures and never stored.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from config.findings import Priority, Severity, WasteCategory

# ── Readings ──────────────────────────────────────────────────────────────────


class ZoneReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    upper_temp_c: float = 0.0
    lower_temp_c: float = 0.0
    blower_upper_temp_c: float = 0.0
    blower_lower_temp_c: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_temp(self) -> float:
        return (self.upper_temp_c + self.lower_temp_c) / 2

    @computed_field  # type: ignore[prop-decorator]
    @property
    def delta(self) -> float:
        return abs(self.upper_temp_c - self.lower_temp_c)


class EnergyBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    cumulative_energy_kwh: float = 0.0
    current_a: float = 0.0
    voltage_v: float = 0.0
    active_power_kw: float = 0.0
    reactive_power_kvar: float = 0.0
    apparent_power_kva: float = 0.0
    power_factor: float = 0.0
    frequency_hz: float = 0.0


class OperationalBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "Unknown"
    boards_inside: int = Field(default=0, ge=0)
    boards_produced: int = 0
    product_number: str = ""
    conveyor_speed: float = 0.0
    alarm_count: int = 0
    flow_rate: float = 0.0
    o2_concentration: float = 0.0


class CoolingBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    cool1_c: float = 0.0
    cool2_c: float = 0.0


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    energy: EnergyBlock = Field(default_factory=EnergyBlock)
    operational: OperationalBlock = Field(default_factory=OperationalBlock)
    zones: dict[int, ZoneReading] = Field(default_factory=dict)
    cooling: CoolingBlock = Field(default_factory=CoolingBlock)


# ── Interval statistics ───────────────────────────────────────────────────────


class EnergyStats(BaseModel):
    total_consumed_kwh: float
    avg_power_kw: float
    max_power_kw: float
    min_power_kw: float
    avg_power_factor: float
    counter_reset: bool = False


class ZoneStats(BaseModel):
    avg_temp: float
    max_temp: float
    min_temp: float
    avg_delta: float
    temp_variance: float


class OperationalStats(BaseModel):
    avg_boards_inside: float
    total_boards_produced: int
    avg_o2: float
    total_alarms: int


class IntervalStats(BaseModel):
    start_time: datetime
    end_time: datetime
    record_count: int = Field(gt=0)
    energy: EnergyStats
    zones: dict[int, ZoneStats]
    operational: OperationalStats


# ── Phases ────────────────────────────────────────────────────────────────────


class PhaseType(str, Enum):
    PRODUCTION = "production"
    IDLE = "idle"


class Phase(BaseModel):
    type: PhaseType
    start_index: int
    end_index: int
    start_time: datetime
    end_time: datetime
    duration_minutes: float
    readings: list[Reading]


class IdlePeriod(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: float = Field(ge=0.0)
    record_count: int
    avg_power_kw: float
    energy_wasted_kwh: float
    severity: Severity
    potential_savings_kwh: float


# ── Waste findings ────────────────────────────────────────────────────────────


class WasteFinding(BaseModel):
    category: WasteCategory
    severity: Severity
    message: str
    value: float
    zone: int | None = None
    threshold: float | None = None
    target: float | None = None
    deviation: float | None = None
    potential_savings: float = 0.0


class EfficiencyStatus(str, Enum):
    OPTIMAL = "optimal"
    ACCEPTABLE = "acceptable"
    INEFFICIENT = "inefficient"
    NO_PRODUCTION = "no_production"
    COUNTER_RESET = "counter_reset"


class EfficiencyResult(BaseModel):
    status: EfficiencyStatus
    efficiency: float = Field(ge=0.0, le=100.0)
    kwh_per_board: float | None = None
    target_kwh_per_board: float | None = None
    energy_consumed_kwh: float
    boards_produced: int
    potential_savings_kwh: float = 0.0


# ── Reports ───────────────────────────────────────────────────────────────────


class Recommendation(BaseModel):
    priority: Priority
    category: str
    title: str
    description: str
    potential_savings: float
    implementation: str


class WasteMetrics(BaseModel):
    total_energy_kwh: float = 0.0
    idle_energy_kwh: float = 0.0
    low_pf_energy_kwh: float = 0.0
    temp_waste_kwh: float = 0.0
    total_waste_kwh: float = 0.0
    waste_percentage: float = 0.0
    low_pf_records: int = 0
    idle_records: int = 0
    recommendations: list[Recommendation] = Field(default_factory=list)


class SummaryTotals(BaseModel):
    total_energy_kwh: float
    total_waste_kwh: float
    waste_percentage: float
    potential_savings_kwh: float
    potential_savings_cost: float


class IdleAnalysis(BaseModel):
    total_idle_minutes: float
    total_idle_waste_kwh: float
    period_count: int
    average_duration_minutes: float
    worst_period: IdlePeriod | None = None


class BreakdownItem(BaseModel):
    value: float
    percentage: float


class WasteBreakdown(BaseModel):
    idle: BreakdownItem
    power_factor: BreakdownItem
    thermal: BreakdownItem


class WasteSummaryReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str
    summary: SummaryTotals
    idle_analysis: IdleAnalysis
    production_efficiency: EfficiencyResult | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    breakdown: WasteBreakdown
