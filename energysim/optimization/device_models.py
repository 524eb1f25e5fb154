"""
Device Data Models for TOU Cost Simulation

This module defines the data structures for representing household devices,
their hourly usage selections, and every derived calculation result.

Time Convention:
- All hours are in 24-hour format (0-23), one TimeBlock per hour
- Load profile samples are minutes since midnight (0-1439)
- Monthly/annual figures are daily x 30 / daily x 365 by convention

Only SelectedDevice (and its TimeBlock list) is mutable; every result type
is a frozen dataclass rebuilt from scratch on each recomputation.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from energysim.config.settings import resolve_config


HOURS_PER_DAY = 24
MINUTES_PER_DAY = HOURS_PER_DAY * 60


class RateBand(Enum):
    """TOU price tiers."""

    PEAK = "peak"
    MIDPEAK = "midpeak"
    OFFPEAK = "offpeak"


class DeviceCategory(Enum):
    COOKING = "cooking"
    HEATING = "heating"
    REFRIGERATION = "refrigeration"
    LIGHTING = "lighting"
    OTHER = "other"


class LoadProfileType(Enum):
    """Intra-hour power draw shape of a device."""

    CONTINUOUS = "continuous"
    PULSING = "pulsing"
    CYCLING = "cycling"


class FuelType(Enum):
    CHARCOAL = "charcoal"
    LPG = "lpg"
    KEROSENE = "kerosene"
    FIREWOOD = "firewood"


class Scenario(Enum):
    """Cost comparison scenarios.

    CURRENT (A): alternative fuel where configured, else current electric use
    ELECTRIC (B): everything electric with the user-selected hours
    OPTIMIZED (C): everything electric with optimizer-selected hours
    """

    CURRENT = "current"
    ELECTRIC = "electric"
    OPTIMIZED = "optimized"


def _format_minutes(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM format."""
    hour = (minutes // 60) % HOURS_PER_DAY
    minute = minutes % 60
    return f"{hour:02d}:{minute:02d}"


def _generate_device_id() -> str:
    return f"device-{uuid4().hex[:12]}"


@dataclass(frozen=True)
class Device:
    """Catalog device (immutable reference data).

    Attributes:
        id: Catalog identifier
        name: Human-readable name
        category: Device category
        wattage: Rated power in watts
        load_profile_type: Instantaneous draw shape
        device_type: Free-form device type label
        typical_usage_hours: Typical hours of use per day
        requires_alternative_fuel: Whether a non-electric baseline applies
    """

    id: str
    name: str
    category: DeviceCategory
    wattage: float
    load_profile_type: LoadProfileType = LoadProfileType.CONTINUOUS
    device_type: str = ""
    typical_usage_hours: Optional[float] = None
    requires_alternative_fuel: bool = False

    def __post_init__(self):
        if self.wattage < 0:
            raise ValueError(f"Wattage must be non-negative, got {self.wattage}")

    @property
    def power_kw(self) -> float:
        """Get rated power in kilowatts."""
        return self.wattage / 1000

    def with_wattage(self, wattage: float) -> "Device":
        """Copy of this device with an overridden wattage."""
        return replace(self, wattage=wattage)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "wattage": self.wattage,
            "load_profile_type": self.load_profile_type.value,
            "device_type": self.device_type,
            "typical_usage_hours": self.typical_usage_hours,
            "requires_alternative_fuel": self.requires_alternative_fuel,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        """Create from dictionary."""
        data = data.copy()
        data["category"] = DeviceCategory(data["category"])
        if "load_profile_type" in data:
            data["load_profile_type"] = LoadProfileType(data["load_profile_type"])
        return cls(**data)


@dataclass
class TimeBlock:
    """One hour slot of a device's daily schedule."""

    hour: int
    is_selected: bool = False
    rate_band: Optional[RateBand] = None

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be 0-23, got {self.hour}")
        if self.rate_band is None:
            # Band of the default tariff table
            self.rate_band = RateBand(resolve_config().band_for_hour(self.hour))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hour": self.hour,
            "is_selected": self.is_selected,
            "rate_band": self.rate_band.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeBlock":
        return cls(
            hour=data["hour"],
            is_selected=data.get("is_selected", False),
            rate_band=RateBand(data["rate_band"]) if data.get("rate_band") else None,
        )


@dataclass(frozen=True)
class AlternativeFuel:
    """Non-electric cooking baseline.

    Attributes:
        fuel_type: Kind of fuel
        cost_per_unit: Price per unit (kg or liter)
        daily_consumption: Units consumed per day
        unit: Unit of measure
    """

    fuel_type: FuelType
    cost_per_unit: float
    daily_consumption: float
    unit: str = "kg"

    def __post_init__(self):
        if self.cost_per_unit < 0:
            raise ValueError(f"Cost per unit must be non-negative, got {self.cost_per_unit}")
        if self.daily_consumption < 0:
            raise ValueError(
                f"Daily consumption must be non-negative, got {self.daily_consumption}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fuel_type": self.fuel_type.value,
            "cost_per_unit": self.cost_per_unit,
            "daily_consumption": self.daily_consumption,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlternativeFuel":
        data = data.copy()
        data["fuel_type"] = FuelType(data["fuel_type"])
        return cls(**data)


@dataclass
class SelectedDevice:
    """A catalog device bound to a daily schedule.

    Identity is the generated instance ``id``; the same catalog device may
    be selected more than once.

    Attributes:
        device: The catalog device (possibly with overridden wattage)
        time_blocks: Exactly 24 blocks, one per hour
        duration: Hours of use per day (0-24)
        alternative_fuel: Optional non-electric baseline
        meals_per_day: Optional meal count for cooking devices
        id: Instance identifier
    """

    device: Device
    time_blocks: List[TimeBlock]
    duration: float
    alternative_fuel: Optional[AlternativeFuel] = None
    meals_per_day: Optional[int] = None
    id: str = field(default_factory=_generate_device_id)

    def __post_init__(self):
        self.time_blocks = sorted(self.time_blocks, key=lambda block: block.hour)
        self._validate()

    def _validate(self):
        """Validate device configuration."""
        hours = [block.hour for block in self.time_blocks]
        if len(hours) != HOURS_PER_DAY or set(hours) != set(range(HOURS_PER_DAY)):
            raise ValueError(
                f"Expected exactly one time block per hour (24), got hours {hours}"
            )
        if not 0 <= self.duration <= HOURS_PER_DAY:
            raise ValueError(f"Duration must be 0-24 hours, got {self.duration}")
        if self.meals_per_day is not None and self.meals_per_day < 1:
            raise ValueError(f"Meals per day must be positive, got {self.meals_per_day}")

    @property
    def selected_blocks(self) -> List[TimeBlock]:
        return [block for block in self.time_blocks if block.is_selected]

    @property
    def selected_hours(self) -> List[int]:
        return [block.hour for block in self.selected_blocks]

    def toggle_hour(self, hour: int) -> None:
        """Flip the selection of one hour."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be 0-23, got {hour}")
        block = self.time_blocks[hour]
        block.is_selected = not block.is_selected

    def set_selected_hours(self, hours: Iterable[int]) -> None:
        """Select exactly the given hours."""
        wanted = set(hours)
        invalid = [hour for hour in wanted if not 0 <= hour <= 23]
        if invalid:
            raise ValueError(f"Hours must be 0-23, got {sorted(invalid)}")
        for block in self.time_blocks:
            block.is_selected = block.hour in wanted

    def with_time_blocks(self, time_blocks: List[TimeBlock]) -> "SelectedDevice":
        """Copy of this device (same id) with another schedule."""
        return replace(self, time_blocks=time_blocks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "device": self.device.to_dict(),
            "time_blocks": [block.to_dict() for block in self.time_blocks],
            "duration": self.duration,
            "alternative_fuel": (
                self.alternative_fuel.to_dict() if self.alternative_fuel else None
            ),
            "meals_per_day": self.meals_per_day,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectedDevice":
        """Create from dictionary."""
        fuel_data = data.get("alternative_fuel")
        kwargs: Dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(
            device=Device.from_dict(data["device"]),
            time_blocks=[TimeBlock.from_dict(b) for b in data["time_blocks"]],
            duration=data["duration"],
            alternative_fuel=AlternativeFuel.from_dict(fuel_data) if fuel_data else None,
            meals_per_day=data.get("meals_per_day"),
            **kwargs,
        )


@dataclass(frozen=True)
class BandBreakdown:
    """Per-band split of a cost (currency) or energy (kWh) figure."""

    peak: float = 0.0
    midpeak: float = 0.0
    offpeak: float = 0.0

    @property
    def total(self) -> float:
        return self.peak + self.midpeak + self.offpeak

    def for_band(self, band: RateBand) -> float:
        return getattr(self, band.value)

    def to_dict(self) -> Dict[str, float]:
        return {"peak": self.peak, "midpeak": self.midpeak, "offpeak": self.offpeak}


@dataclass(frozen=True)
class CostBreakdown:
    """Cost over three horizons with an optional band split.

    Attributes:
        daily: Cost per day
        monthly: daily x days_per_month
        annual: daily x days_per_year
        breakdown: Daily cost per band (None for fuels)
    """

    daily: float
    monthly: float
    annual: float
    breakdown: Optional[BandBreakdown] = None

    @classmethod
    def from_daily(
        cls,
        daily: float,
        breakdown: Optional[BandBreakdown] = None,
        days_per_month: int = 30,
        days_per_year: int = 365,
    ) -> "CostBreakdown":
        return cls(
            daily=daily,
            monthly=daily * days_per_month,
            annual=daily * days_per_year,
            breakdown=breakdown,
        )

    @classmethod
    def zero(cls, with_breakdown: bool = True) -> "CostBreakdown":
        return cls(
            daily=0.0,
            monthly=0.0,
            annual=0.0,
            breakdown=BandBreakdown() if with_breakdown else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daily": self.daily,
            "monthly": self.monthly,
            "annual": self.annual,
            "breakdown": self.breakdown.to_dict() if self.breakdown else None,
        }


@dataclass(frozen=True)
class GridMetrics:
    """Grid impact of a usage pattern.

    Attributes:
        peak_usage: kWh during peak hours
        midpeak_usage: kWh during mid-peak hours
        offpeak_usage: kWh during off-peak hours
        load_factor: Average over peak load (0-100)
        stress_score: Band-weighted kWh (lower is better)
        efficiency_score: Composite score (0-10)
    """

    peak_usage: float
    midpeak_usage: float
    offpeak_usage: float
    load_factor: float
    stress_score: float
    efficiency_score: float

    @property
    def total_kwh(self) -> float:
        return self.peak_usage + self.midpeak_usage + self.offpeak_usage

    @property
    def offpeak_percentage(self) -> float:
        total = self.total_kwh
        return (self.offpeak_usage / total) * 100 if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peak_usage": self.peak_usage,
            "midpeak_usage": self.midpeak_usage,
            "offpeak_usage": self.offpeak_usage,
            "load_factor": self.load_factor,
            "stress_score": self.stress_score,
            "efficiency_score": self.efficiency_score,
        }


@dataclass(frozen=True)
class AggregatedGridMetrics(GridMetrics):
    """Grid metrics of the whole household.

    Attributes:
        total_daily_kwh: Combined daily energy
        peak_load_hour: Hour with the highest combined load
        device_contributions: Percentage of total kWh per device id
    """

    total_daily_kwh: float = 0.0
    peak_load_hour: int = 0
    device_contributions: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "total_daily_kwh": self.total_daily_kwh,
            "peak_load_hour": self.peak_load_hour,
            "device_contributions": dict(self.device_contributions),
        })
        return data


@dataclass(frozen=True)
class EmissionData:
    """Monthly CO2 figures (kg) and the trees-equivalent of the savings.

    ``saved`` is negative when electricity emits more than the baseline;
    only ``trees_equivalent`` is floored at zero.
    """

    current: float
    baseline: float
    saved: float
    trees_equivalent: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "current": self.current,
            "baseline": self.baseline,
            "saved": self.saved,
            "trees_equivalent": self.trees_equivalent,
        }


@dataclass(frozen=True)
class LoadProfilePoint:
    """One sub-hourly sample of the combined load curve.

    Attributes:
        time_minutes: Minutes since midnight
        hour: Hour of day of the sample
        rate_band: TOU band of the sample
        rate: Price per kWh of the sample
        total_load_kw: Combined power of all devices
        device_loads_kw: Power per device id
        cost: Cost of the sample interval at its band rate
    """

    time_minutes: int
    hour: int
    rate_band: RateBand
    rate: float
    total_load_kw: float
    device_loads_kw: Dict[str, float]
    cost: float

    @property
    def time(self) -> str:
        return _format_minutes(self.time_minutes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "time_minutes": self.time_minutes,
            "hour": self.hour,
            "rate_band": self.rate_band.value,
            "rate": self.rate,
            "total_load_kw": self.total_load_kw,
            "device_loads_kw": dict(self.device_loads_kw),
            "cost": self.cost,
        }


@dataclass(frozen=True)
class LoadProfileComparison:
    """Integrated totals of the as-configured and optimized load curves."""

    current_daily_kwh: float
    optimized_daily_kwh: float
    current_daily_cost: float
    optimized_daily_cost: float
    current_monthly_cost: float
    optimized_monthly_cost: float
    saved: float
    saved_percentage: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "current_daily_kwh": self.current_daily_kwh,
            "optimized_daily_kwh": self.optimized_daily_kwh,
            "current_daily_cost": self.current_daily_cost,
            "optimized_daily_cost": self.optimized_daily_cost,
            "current_monthly_cost": self.current_monthly_cost,
            "optimized_monthly_cost": self.optimized_monthly_cost,
            "saved": self.saved,
            "saved_percentage": self.saved_percentage,
        }


@dataclass(frozen=True)
class AggregatedCosts:
    """Costs of one scenario across all devices.

    Attributes:
        total: Combined daily/monthly/annual cost
        by_device: CostBreakdown per device id
        breakdown: Combined daily cost per band
    """

    total: CostBreakdown
    by_device: Dict[str, CostBreakdown]
    breakdown: BandBreakdown

    def device_share(self, device_id: str) -> float:
        """Percentage of the total daily cost owed to one device."""
        if self.total.daily <= 0 or device_id not in self.by_device:
            return 0.0
        return (self.by_device[device_id].daily / self.total.daily) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total.to_dict(),
            "by_device": {k: v.to_dict() for k, v in self.by_device.items()},
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class DeviceSavings:
    """Monthly cost of one device under each scenario."""

    device_id: str
    device_name: str
    current_cost: float
    electric_cost: float
    optimized_cost: float
    monthly_savings: float
    annual_savings: float
    percentage_savings: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_id": self.device_id,
            "device_name": self.device_name,
            "current_cost": self.current_cost,
            "electric_cost": self.electric_cost,
            "optimized_cost": self.optimized_cost,
            "monthly_savings": self.monthly_savings,
            "annual_savings": self.annual_savings,
            "percentage_savings": self.percentage_savings,
        }


@dataclass(frozen=True)
class MultiDeviceState:
    """Complete computed result for a device list.

    Attributes:
        devices: Snapshot of the device list the state was computed from
        scenario_a: Costs with fuel baselines (current situation)
        scenario_b: Costs all-electric with current hours
        scenario_c: Costs all-electric with optimized hours
        grid_metrics: Combined grid metrics of the current hours
        emissions: Combined monthly emissions
        load_profile: Sampled load curve of the current hours
        optimized_load_profile: Sampled load curve of the optimized hours
        load_profile_comparison: Integrated totals of both curves
        device_savings: Per-device scenario comparison
    """

    devices: Tuple[SelectedDevice, ...]
    scenario_a: AggregatedCosts
    scenario_b: AggregatedCosts
    scenario_c: AggregatedCosts
    grid_metrics: AggregatedGridMetrics
    emissions: EmissionData
    load_profile: Tuple[LoadProfilePoint, ...]
    optimized_load_profile: Tuple[LoadProfilePoint, ...]
    load_profile_comparison: LoadProfileComparison
    device_savings: Tuple[DeviceSavings, ...] = ()

    def scenario(self, scenario: Scenario) -> AggregatedCosts:
        """Get the aggregated costs of one scenario."""
        return {
            Scenario.CURRENT: self.scenario_a,
            Scenario.ELECTRIC: self.scenario_b,
            Scenario.OPTIMIZED: self.scenario_c,
        }[scenario]

    @property
    def monthly_savings(self) -> float:
        """Scenario A minus scenario C, per month."""
        return self.scenario_a.total.monthly - self.scenario_c.total.monthly

    @property
    def annual_savings(self) -> float:
        """Scenario A minus scenario C, per year."""
        return self.scenario_a.total.annual - self.scenario_c.total.annual

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "devices": [d.to_dict() for d in self.devices],
            "aggregated_costs": {
                "scenario_a": self.scenario_a.to_dict(),
                "scenario_b": self.scenario_b.to_dict(),
                "scenario_c": self.scenario_c.to_dict(),
            },
            "aggregated_metrics": self.grid_metrics.to_dict(),
            "emissions": self.emissions.to_dict(),
            "load_profile": [p.to_dict() for p in self.load_profile],
            "optimized_load_profile": [p.to_dict() for p in self.optimized_load_profile],
            "load_profile_comparison": self.load_profile_comparison.to_dict(),
            "device_savings": [s.to_dict() for s in self.device_savings],
            "monthly_savings": self.monthly_savings,
            "annual_savings": self.annual_savings,
        }

    def summary(self) -> str:
        """Generate human-readable summary."""
        metrics = self.grid_metrics
        lines = [
            "=" * 60,
            "HOUSEHOLD ENERGY SUMMARY",
            "=" * 60,
            f"Devices: {len(self.devices)}",
            "",
            "MONTHLY COST BY SCENARIO:",
            f"  A - Current:             {self.scenario_a.total.monthly:>12.2f}",
            f"  B - Electric (as used):  {self.scenario_b.total.monthly:>12.2f}",
            f"  C - Electric (optimized):{self.scenario_c.total.monthly:>12.2f}",
            f"  Savings A -> C:          {self.monthly_savings:>12.2f} / month",
            f"                           {self.annual_savings:>12.2f} / year",
            "",
            "GRID IMPACT:",
            f"  Daily Energy: {metrics.total_daily_kwh:.2f} kWh",
            f"  Peak Load Hour: {metrics.peak_load_hour:02d}:00",
            f"  Load Factor: {metrics.load_factor:.1f}%",
            f"  Stress Score: {metrics.stress_score:.2f}",
            f"  Efficiency Score: {metrics.efficiency_score:.1f}/10",
            "",
            "EMISSIONS (kg CO2 / month):",
            f"  Current: {self.emissions.current:.2f}",
            f"  Baseline: {self.emissions.baseline:.2f}",
            f"  Saved: {self.emissions.saved:.2f} "
            f"({self.emissions.trees_equivalent:.1f} trees)",
        ]

        if self.device_savings:
            lines.extend(["", "DEVICES:"])
            for savings in self.device_savings:
                lines.append(f"  {savings.device_name} [{savings.device_id}]:")
                lines.append(
                    f"    A/B/C: {savings.current_cost:.2f} / "
                    f"{savings.electric_cost:.2f} / {savings.optimized_cost:.2f}"
                )
                lines.append(
                    f"    Savings: {savings.monthly_savings:.2f} "
                    f"({savings.percentage_savings:.1f}%)"
                )

        lines.append("=" * 60)
        return "\n".join(lines)
