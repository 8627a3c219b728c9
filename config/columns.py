"""
config/columns.py
─────────────────
Column names of the reflow oven data-logger export.

Each heating zone N contributes four temperature columns:
  ZONEN UPPER / ZONEN LOWER       → heater element temperatures
  BLOWERN UPPER / BLOWERN LOWER   → convection blower temperatures
"""
from dataclasses import dataclass

from config.settings import settings


@dataclass(frozen=True)
class ZoneColumns:
    upper: str
    lower: str
    blower_upper: str
    blower_lower: str


def zone_columns(zone_id: int) -> ZoneColumns:
    return ZoneColumns(
        upper=f"ZONE{zone_id} UPPER Temperature (°C)",
        lower=f"ZONE{zone_id} LOWER Temperature (°C)",
        blower_upper=f"BLOWER{zone_id} UPPER Temperature (°C)",
        blower_lower=f"BLOWER{zone_id} LOWER Temperature (°C)",
    )


ZONE_IDS: tuple[int, ...] = tuple(range(1, settings.ZONE_COUNT + 1))

ZONE_COLUMNS: dict[int, ZoneColumns] = {zone_id: zone_columns(zone_id) for zone_id in ZONE_IDS}

ENERGY_COLUMNS: dict[str, str] = {
    "cumulative_energy": "Cumulative electric energy (kWh)",
    "current": "Electric current (A)",
    "voltage": "Voltage (V)",
    "active_power": "Active power (kW)",
    "reactive_power": "Reactive power (kVAR)",
    "apparent_power": "Apparent power (kVA)",
    "power_factor": "Power factor (PF)",
    "frequency": "AC frequency (Hz)",
}

OPERATIONAL_COLUMNS: dict[str, str] = {
    "logging_time": "Logging time",
    "boards_inside": "Number of boards inside equipment",
    "boards_produced": "Number of boards produced",
    "product_number": "Product number information",
    "conveyor_speed": "C/V (Conveyor speed m/min)",
    "equipment_status": "Equipment status",
    "alarm_count": "Number of alarms",
    "flow_rate": "Flow rate (L/min)",
    "o2_concentration": "O2 concentration (ppm)",
}

COOLING_COLUMNS: dict[str, str] = {
    "cool1": "COOL1 upper",
    "cool2": "COOL2 upper",
}

STATUS_OPERATING = "Operating"
STATUS_IDLE = "Idle"
STATUS_UNKNOWN = "Unknown"
