"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jumpmeter.core.exceptions import ConfigurationError


class DetectorSettings(BaseSettings):
    """Phase state machine thresholds."""

    model_config = SettingsConfigDict(env_prefix="JUMP_")

    alpha: float = Field(default=0.2, gt=0.0, le=1.0)
    flight_eps_mag: float = Field(default=0.5, gt=0.0)
    flight_eps_vert: float = Field(default=0.6, gt=0.0)
    move_thresh: float = Field(default=1.2, gt=0.0)
    min_flight: float = Field(default=0.10, ge=0.0)
    max_flight: float = Field(default=1.20, gt=0.0)
    min_contact: float = Field(default=0.08, ge=0.0)
    contact_fallback: float = Field(default=0.20, ge=0.0)

    @model_validator(mode="after")
    def _check_flight_window(self) -> "DetectorSettings":
        if self.min_flight >= self.max_flight:
            raise ValueError("min_flight must be smaller than max_flight")
        return self


class CalibrationSettings(BaseSettings):
    """At-rest gravity calibration settings."""

    model_config = SettingsConfigDict(env_prefix="CALIB_")

    window_ms: float = Field(default=1000.0, ge=500.0, le=2000.0)
    min_samples: int = Field(default=10, ge=1)
    min_gravity: float = 5.0
    max_gravity: float = 15.0

    @property
    def window_s(self) -> float:
        """Calibration window in seconds."""
        return self.window_ms / 1000.0


class IngestSettings(BaseSettings):
    """Upstream sample adaptation and denoising."""

    model_config = SettingsConfigDict(env_prefix="INGEST_")

    denoise: bool = True
    noise_floor: float = Field(default=0.1, ge=0.0)
    gravity_axis: Literal["x", "y", "z"] = "y"
    gravity_axis_floor: float = Field(default=3.0, ge=0.0)
    gravity_included: bool = True


class MetricsSettings(BaseSettings):
    """Jump metric parameters."""

    model_config = SettingsConfigDict(env_prefix="METRICS_")

    gravity: float = Field(default=9.80665, gt=0.0)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None
    trace: bool = False


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Named threshold sets. "standard" is the canonical default.
THRESHOLD_PROFILES: dict[str, dict[str, Any]] = {
    "standard": {
        "alpha": 0.2,
        "flight_eps_mag": 0.5,
        "flight_eps_vert": 0.6,
        "move_thresh": 1.2,
        "min_flight": 0.10,
        "max_flight": 1.20,
        "min_contact": 0.08,
        "contact_fallback": 0.20,
    },
    "sensitive": {
        "alpha": 0.2,
        "flight_eps_mag": 0.4,
        "flight_eps_vert": 0.5,
        "move_thresh": 1.0,
        "min_flight": 0.10,
        "max_flight": 1.20,
        "min_contact": 0.08,
        "contact_fallback": 0.20,
    },
}


def get_profile(name: str) -> DetectorSettings:
    """Build detector settings from a named threshold profile.

    Args:
        name: Profile name (see THRESHOLD_PROFILES)

    Returns:
        DetectorSettings populated with the profile's thresholds

    Raises:
        ConfigurationError: If the profile is unknown
    """
    try:
        values = THRESHOLD_PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(THRESHOLD_PROFILES))
        raise ConfigurationError(f"Unknown threshold profile {name!r} (known: {known})") from None
    return DetectorSettings(**values)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
