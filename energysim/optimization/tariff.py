"""
Time-of-Use Tariff Calculations

Rate classification plus the electric and fuel cost calculators.

Cost model:
    A device's daily duration is spread evenly over its selected hour
    blocks. Each block costs (wattage x hours_per_block / 1000) x rate of
    the block's band. With no selected block the result is the zero
    breakdown.
"""

from typing import Iterable, List, Optional

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    AlternativeFuel,
    BandBreakdown,
    CostBreakdown,
    Device,
    RateBand,
    TimeBlock,
)


def rate_for_hour(hour: int, config: Optional[SimulationConfig] = None) -> RateBand:
    """Get the TOU band for an hour of day.

    Scans the ordered band table; the first inclusive range containing the
    hour wins. Hours matched by no range fall back to mid-peak.

    Args:
        hour: Hour of day (0-23)
        config: Simulation config (uses defaults if not provided)

    Returns:
        RateBand for the hour
    """
    return RateBand(resolve_config(config).band_for_hour(hour))


def get_rate(band: RateBand, config: Optional[SimulationConfig] = None) -> float:
    """Get the price per kWh of a band."""
    return resolve_config(config).tariff_rates.rate_for(band.value)


def create_time_blocks(
    selected_hours: Iterable[int] = (),
    config: Optional[SimulationConfig] = None,
) -> List[TimeBlock]:
    """Build the 24 hourly blocks with their bands.

    Args:
        selected_hours: Hours to mark as selected
        config: Simulation config (uses defaults if not provided)

    Returns:
        List of 24 TimeBlocks ordered by hour
    """
    config = resolve_config(config)
    selected = set(selected_hours)
    return [
        TimeBlock(
            hour=hour,
            is_selected=hour in selected,
            rate_band=rate_for_hour(hour, config),
        )
        for hour in range(HOURS_PER_DAY)
    ]


def calculate_electricity_cost(wattage: float, hours: float, rate: float) -> float:
    """Cost of running a load for some hours at a flat rate."""
    kwh = (wattage * hours) / 1000
    return kwh * rate


def hours_per_selected_block(time_blocks: Iterable[TimeBlock], duration: float) -> float:
    """Share of the daily duration assigned to each selected block (0 if none)."""
    selected_count = sum(1 for block in time_blocks if block.is_selected)
    if selected_count == 0:
        return 0.0
    return duration / selected_count


def calculate_tou_cost(
    device: Device,
    time_blocks: Iterable[TimeBlock],
    daily_duration_hours: float,
    config: Optional[SimulationConfig] = None,
) -> CostBreakdown:
    """Calculate the TOU cost of a device under an hour selection.

    Args:
        device: Device being costed
        time_blocks: Hour blocks (only selected ones are charged)
        daily_duration_hours: Hours of use per day
        config: Simulation config (uses defaults if not provided)

    Returns:
        CostBreakdown with daily/monthly/annual totals and band split
    """
    config = resolve_config(config)
    blocks = list(time_blocks)
    hours_per_block = hours_per_selected_block(blocks, daily_duration_hours)

    band_costs = {band: 0.0 for band in RateBand}
    for block in blocks:
        if not block.is_selected:
            continue
        band_costs[block.rate_band] += calculate_electricity_cost(
            device.wattage,
            hours_per_block,
            get_rate(block.rate_band, config),
        )

    breakdown = BandBreakdown(
        peak=band_costs[RateBand.PEAK],
        midpeak=band_costs[RateBand.MIDPEAK],
        offpeak=band_costs[RateBand.OFFPEAK],
    )
    return CostBreakdown.from_daily(
        breakdown.total,
        breakdown=breakdown,
        days_per_month=config.days_per_month,
        days_per_year=config.days_per_year,
    )


def calculate_fuel_cost(fuel: AlternativeFuel, days: int = 1) -> float:
    """Cost of an alternative fuel over a number of days."""
    return fuel.cost_per_unit * fuel.daily_consumption * days


def calculate_fuel_cost_breakdown(
    fuel: AlternativeFuel,
    config: Optional[SimulationConfig] = None,
) -> CostBreakdown:
    """Daily/monthly/annual cost of an alternative fuel (no band split)."""
    config = resolve_config(config)
    return CostBreakdown.from_daily(
        calculate_fuel_cost(fuel, 1),
        days_per_month=config.days_per_month,
        days_per_year=config.days_per_year,
    )
