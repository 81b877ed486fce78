"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_REFERENCE_TABLES = Path(__file__).resolve().parent / "data" / "reference_tables.json"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"
    reference_tables_path: str = str(DEFAULT_REFERENCE_TABLES)

    # Pace customisation defaults
    default_base_time: str = "00:19:57"
    default_base_distance: str = "5km"
    adjustment_factor_min: float = 80.0
    adjustment_factor_max: float = 120.0
    range_pace_spread_pct: float = 12.0

    # Completion matching
    distance_match_tolerance: float = 0.10

    # Race prediction
    allow_race_extrapolation: bool = False

    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    request_id_header_name: str = "X-Request-ID"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
        "cors_origins": "",
    },
}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _split_origins(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])
    origins = os.getenv("CORS_ORIGINS", profile.get("cors_origins", "http://localhost:3000"))

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        reference_tables_path=os.getenv("REFERENCE_TABLES_PATH", str(DEFAULT_REFERENCE_TABLES)),
        default_base_time=os.getenv("DEFAULT_BASE_TIME", "00:19:57"),
        default_base_distance=os.getenv("DEFAULT_BASE_DISTANCE", "5km"),
        adjustment_factor_min=float(os.getenv("ADJUSTMENT_FACTOR_MIN", "80")),
        adjustment_factor_max=float(os.getenv("ADJUSTMENT_FACTOR_MAX", "120")),
        range_pace_spread_pct=float(os.getenv("RANGE_PACE_SPREAD_PCT", "12")),
        distance_match_tolerance=float(os.getenv("DISTANCE_MATCH_TOLERANCE", "0.10")),
        allow_race_extrapolation=_env_bool("ALLOW_RACE_EXTRAPOLATION", False),
        cors_origins=_split_origins(origins),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER_NAME", "X-Request-ID"),
    )
