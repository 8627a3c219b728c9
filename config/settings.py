"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Ingestion
    ZONE_COUNT: int = int(os.getenv("ZONE_COUNT", "10"))
    SKIP_INVALID_ROWS: bool = os.getenv("SKIP_INVALID_ROWS", "true").lower() == "true"

    # Analysis defaults
    DEFAULT_INTERVAL_MINUTES: int = int(os.getenv("DEFAULT_INTERVAL_MINUTES", "60"))
    DEFAULT_PERIOD: str = os.getenv("DEFAULT_PERIOD", "day")

    # Simulation
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))
    SIMULATION_ROWS: int = int(os.getenv("SIMULATION_ROWS", "8640"))  # 24 h at 10 s
    SAMPLE_INTERVAL_S: float = float(os.getenv("SAMPLE_INTERVAL_S", "10"))


settings = Settings()
