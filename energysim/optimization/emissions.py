"""
CO2 Emissions Calculations

Converts electric energy and fuel consumption to kg CO2 and compares the
electric option against a fuel baseline on a monthly basis.
"""

from typing import Iterable, Optional

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    AlternativeFuel,
    Device,
    EmissionData,
    SelectedDevice,
)


def calculate_total_kwh(device: Device, hours: float) -> float:
    """Energy drawn by a device over some hours."""
    return (device.wattage * hours) / 1000


def calculate_electricity_co2(
    kwh: float,
    config: Optional[SimulationConfig] = None,
) -> float:
    """kg CO2 of grid electricity."""
    return kwh * resolve_config(config).emission_factors.electricity


def calculate_fuel_co2(
    fuel: AlternativeFuel,
    days: int = 30,
    config: Optional[SimulationConfig] = None,
) -> float:
    """kg CO2 of burning a fuel's daily consumption over some days."""
    factor = resolve_config(config).emission_factors.for_fuel(fuel.fuel_type.value)
    return fuel.daily_consumption * days * factor


def trees_equivalent(
    monthly_saved_kg: float,
    config: Optional[SimulationConfig] = None,
) -> float:
    """Trees needed for a year to absorb twelve months of savings (>= 0)."""
    config = resolve_config(config)
    return max(0.0, (monthly_saved_kg * 12) / config.tree_absorption_per_year)


def calculate_emission_data(
    current_kwh: float,
    baseline_fuel: Optional[AlternativeFuel] = None,
    config: Optional[SimulationConfig] = None,
) -> EmissionData:
    """Compare monthly electric emissions against a fuel baseline.

    Without a baseline fuel the baseline equals the electric emissions
    (net-zero comparison). A negative ``saved`` value means electricity is
    dirtier than the fuel and is reported as-is.

    Args:
        current_kwh: Daily electric energy
        baseline_fuel: Optional fuel the device replaces
        config: Simulation config (uses defaults if not provided)

    Returns:
        EmissionData in kg CO2 per month
    """
    config = resolve_config(config)
    days = config.days_per_month
    current = calculate_electricity_co2(current_kwh * days, config)

    baseline = current
    if baseline_fuel is not None:
        baseline = calculate_fuel_co2(baseline_fuel, days, config)

    saved = baseline - current
    return EmissionData(
        current=current,
        baseline=baseline,
        saved=saved,
        trees_equivalent=trees_equivalent(saved, config),
    )


def aggregate_multi_device_emissions(
    devices: Iterable[SelectedDevice],
    config: Optional[SimulationConfig] = None,
) -> EmissionData:
    """Combined monthly emissions of a device list.

    Current and baseline are summed per device; savings and the trees
    equivalent are recomputed from the sums.
    """
    config = resolve_config(config)
    total_current = 0.0
    total_baseline = 0.0

    for selected in devices:
        kwh = calculate_total_kwh(selected.device, selected.duration)
        emissions = calculate_emission_data(kwh, selected.alternative_fuel, config)
        total_current += emissions.current
        total_baseline += emissions.baseline

    saved = total_baseline - total_current
    return EmissionData(
        current=total_current,
        baseline=total_baseline,
        saved=saved,
        trees_equivalent=trees_equivalent(saved, config),
    )
