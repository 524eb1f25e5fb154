"""
Simulation Settings and Configuration Management

Uses pydantic-settings for environment overrides and an immutable pydantic
model for the tariff, emission and grid constants consumed by every
calculation function.
"""

from functools import lru_cache
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BandName = Literal["peak", "midpeak", "offpeak"]


class TariffRates(BaseModel):
    """Price per kWh for each TOU band (local currency)."""

    model_config = ConfigDict(frozen=True)

    peak: float = Field(default=20.0, ge=0)
    midpeak: float = Field(default=12.0, ge=0)
    offpeak: float = Field(default=8.0, ge=0)

    def rate_for(self, band: str) -> float:
        """Get the rate for a band name ("peak", "midpeak", "offpeak")."""
        return float(getattr(self, band))


class TariffTimeRange(BaseModel):
    """Inclusive hour range [start, end] mapped to a band."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, le=23)
    end: int = Field(ge=0, le=23)
    band: BandName

    @model_validator(mode="after")
    def validate_order(self) -> "TariffTimeRange":
        """Wrapping ranges are expressed as two ranges, never start > end"""
        if self.start > self.end:
            raise ValueError(
                f"start ({self.start}) must not exceed end ({self.end}); "
                "split ranges that cross midnight in two"
            )
        return self


DEFAULT_TIME_BANDS: Tuple[TariffTimeRange, ...] = (
    # Off-peak: 22:00-06:00
    TariffTimeRange(start=22, end=23, band="offpeak"),
    TariffTimeRange(start=0, end=5, band="offpeak"),
    # Mid-peak: 06:00-18:00
    TariffTimeRange(start=6, end=17, band="midpeak"),
    # Peak: 18:00-22:00
    TariffTimeRange(start=18, end=21, band="peak"),
)


class EmissionFactors(BaseModel):
    """kg CO2 per kWh (electricity) or per fuel unit (kg or liter)."""

    model_config = ConfigDict(frozen=True)

    electricity: float = Field(default=0.45, ge=0)
    charcoal: float = Field(default=9.5, ge=0)
    lpg: float = Field(default=3.0, ge=0)
    kerosene: float = Field(default=2.5, ge=0)
    firewood: float = Field(default=1.8, ge=0)

    def for_fuel(self, fuel_type: str) -> float:
        """Get the factor for a fuel type name."""
        return float(getattr(self, fuel_type))


class GridStressWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    peak: float = 3.0
    midpeak: float = 2.0
    offpeak: float = 1.0


class EfficiencyScoreWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    offpeak_percentage: float = 0.4
    load_factor: float = 0.3
    grid_stress: float = 0.3


class SimulationConfig(BaseModel):
    """Immutable constant set injected into the calculation functions.

    Attributes:
        tariff_rates: Price per kWh for each band
        time_bands: Ordered hour-range-to-band table (first match wins)
        emission_factors: CO2 factors for electricity and fuels
        tree_absorption_per_year: kg CO2 absorbed by one tree per year
        grid_stress_weights: Band weights of the stress score
        efficiency_weights: Blend weights of the efficiency score
        stress_normalization_factor: Stress points removed from 100 per unit
        days_per_month: Monthly multiplier of a daily figure
        days_per_year: Annual multiplier of a daily figure
        sampling_interval_minutes: Load profile sample spacing
        ramp_minutes: Load profile on/off ramp window
    """

    model_config = ConfigDict(frozen=True)

    tariff_rates: TariffRates = Field(default_factory=TariffRates)
    time_bands: Tuple[TariffTimeRange, ...] = DEFAULT_TIME_BANDS
    emission_factors: EmissionFactors = Field(default_factory=EmissionFactors)
    tree_absorption_per_year: float = Field(default=21.0, gt=0)
    grid_stress_weights: GridStressWeights = Field(default_factory=GridStressWeights)
    efficiency_weights: EfficiencyScoreWeights = Field(
        default_factory=EfficiencyScoreWeights
    )
    stress_normalization_factor: float = Field(default=5.0, ge=0)
    days_per_month: int = Field(default=30, gt=0)
    days_per_year: int = Field(default=365, gt=0)
    sampling_interval_minutes: int = Field(default=15, gt=0, le=60)
    ramp_minutes: int = Field(default=15, ge=0, le=30)

    @field_validator("sampling_interval_minutes")
    @classmethod
    def validate_sampling_interval(cls, v: int) -> int:
        """Samples must land on every hour boundary"""
        if 60 % v != 0:
            raise ValueError("sampling_interval_minutes must divide 60")
        return v

    @property
    def samples_per_day(self) -> int:
        """Number of load profile samples over 24 hours"""
        return (24 * 60) // self.sampling_interval_minutes

    def band_for_hour(self, hour: int) -> BandName:
        """First inclusive range containing the hour wins, else mid-peak"""
        for time_range in self.time_bands:
            if time_range.start <= hour <= time_range.end:
                return time_range.band
        return "midpeak"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SimulationConfig":
        """Build a config from environment settings, keeping other defaults."""
        return cls(
            tariff_rates=TariffRates(
                peak=settings.peak_rate,
                midpeak=settings.midpeak_rate,
                offpeak=settings.offpeak_rate,
            ),
            emission_factors=EmissionFactors(
                electricity=settings.electricity_emission_factor,
            ),
            sampling_interval_minutes=settings.sampling_interval_minutes,
            ramp_minutes=settings.ramp_minutes,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return self.model_dump(mode="json")


class Settings(BaseSettings):
    """Simulator settings loaded from environment variables"""

    # Application
    app_name: str = "TOU Household Energy Simulator"
    environment: str = Field(default="development", validation_alias="ENERGYSIM_ENVIRONMENT")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="ENERGYSIM_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="ENERGYSIM_LOG_JSON")

    # Tariff (currency per kWh)
    peak_rate: float = Field(default=20.0, ge=0, validation_alias="ENERGYSIM_PEAK_RATE")
    midpeak_rate: float = Field(default=12.0, ge=0, validation_alias="ENERGYSIM_MIDPEAK_RATE")
    offpeak_rate: float = Field(default=8.0, ge=0, validation_alias="ENERGYSIM_OFFPEAK_RATE")

    # Emissions (kg CO2 per kWh)
    electricity_emission_factor: float = Field(
        default=0.45, ge=0, validation_alias="ENERGYSIM_ELECTRICITY_EMISSION_FACTOR"
    )

    # Load profile
    sampling_interval_minutes: int = Field(
        default=15, validation_alias="ENERGYSIM_SAMPLING_INTERVAL_MINUTES"
    )
    ramp_minutes: int = Field(default=15, validation_alias="ENERGYSIM_RAMP_MINUTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid"""
        allowed = ["development", "staging", "production", "test"]
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name"""
        allowed: List[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()


@lru_cache()
def get_default_config() -> SimulationConfig:
    """Get the process-wide read-only simulation config, built once."""
    return SimulationConfig.from_settings(get_settings())


def resolve_config(config: Optional[SimulationConfig] = None) -> SimulationConfig:
    """Return the given config or the process-wide default."""
    return config if config is not None else get_default_config()
