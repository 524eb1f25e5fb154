"""
Reference Data

Device catalog, alternative fuel prices and typical household consumption,
plus the demonstration household used to seed a new simulation.

Wattages are reference values; a SelectedDevice may carry an overridden
copy of its catalog device.
"""

from typing import Dict, Iterable, List, Optional

from energysim.config.settings import SimulationConfig
from energysim.exceptions import DeviceNotFoundError, FuelNotFoundError
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    AlternativeFuel,
    Device,
    DeviceCategory,
    FuelType,
    LoadProfileType,
    SelectedDevice,
)
from energysim.optimization.tariff import create_time_blocks


DEVICE_CATALOG: List[Device] = [
    Device(
        id="electric-pressure-cooker",
        name="Electric Pressure Cooker (EPC)",
        category=DeviceCategory.COOKING,
        wattage=1000,
        load_profile_type=LoadProfileType.PULSING,
        device_type="Electric Pressure Cooker",
        typical_usage_hours=1.5,
        requires_alternative_fuel=True,
    ),
    Device(
        id="induction-cooker",
        name="Induction Cooker",
        category=DeviceCategory.COOKING,
        wattage=2000,
        load_profile_type=LoadProfileType.PULSING,
        device_type="Induction Cooker",
        typical_usage_hours=2,
        requires_alternative_fuel=True,
    ),
    Device(
        id="led-bulb",
        name="LED Bulb",
        category=DeviceCategory.LIGHTING,
        wattage=10,
        load_profile_type=LoadProfileType.CONTINUOUS,
        device_type="LED Bulb",
        typical_usage_hours=6,
    ),
    Device(
        id="fridge",
        name="Refrigerator",
        category=DeviceCategory.REFRIGERATION,
        wattage=150,
        load_profile_type=LoadProfileType.CYCLING,
        device_type="Refrigerator",
        typical_usage_hours=24,
    ),
    Device(
        id="tv",
        name="Smart TV",
        category=DeviceCategory.OTHER,
        wattage=90,
        load_profile_type=LoadProfileType.CONTINUOUS,
        device_type="Television",
        typical_usage_hours=5,
    ),
    Device(
        id="fan",
        name="Electric Fan",
        category=DeviceCategory.OTHER,
        wattage=75,
        load_profile_type=LoadProfileType.CYCLING,
        device_type="Fan",
        typical_usage_hours=8,
    ),
]

# Price per unit (local currency) and unit of each fuel
ALTERNATIVE_FUELS: Dict[FuelType, Dict] = {
    FuelType.CHARCOAL: {"cost_per_unit": 150.0, "unit": "kg"},
    FuelType.LPG: {"cost_per_unit": 150.0, "unit": "kg"},
    FuelType.KEROSENE: {"cost_per_unit": 130.0, "unit": "liter"},
    FuelType.FIREWOOD: {"cost_per_unit": 50.0, "unit": "kg"},
}

# Units burned per day by a typical family
FUEL_DAILY_CONSUMPTION: Dict[FuelType, float] = {
    FuelType.CHARCOAL: 1.5,
    FuelType.LPG: 0.4,
    FuelType.KEROSENE: 0.5,
    FuelType.FIREWOOD: 3.0,
}

DEFAULT_MEALS_PER_DAY = 2


def get_device(device_id: str) -> Device:
    """Look up a catalog device by id."""
    for device in DEVICE_CATALOG:
        if device.id == device_id:
            return device
    raise DeviceNotFoundError(f"Device not in catalog: {device_id}")


def get_alternative_fuel(fuel_type, daily_consumption: Optional[float] = None) -> AlternativeFuel:
    """Build an AlternativeFuel from the reference prices.

    Args:
        fuel_type: FuelType or its string value
        daily_consumption: Override of the typical daily consumption

    Returns:
        AlternativeFuel
    """
    try:
        kind = FuelType(fuel_type)
    except ValueError as e:
        raise FuelNotFoundError(f"Unknown alternative fuel: {fuel_type}", e)

    reference = ALTERNATIVE_FUELS[kind]
    return AlternativeFuel(
        fuel_type=kind,
        cost_per_unit=reference["cost_per_unit"],
        daily_consumption=(
            FUEL_DAILY_CONSUMPTION[kind] if daily_consumption is None else daily_consumption
        ),
        unit=reference["unit"],
    )


def create_selected_device(
    device_id: str,
    selected_hours: Iterable[int] = (),
    duration: Optional[float] = None,
    wattage: Optional[float] = None,
    fuel_type=None,
    meals_per_day: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> SelectedDevice:
    """Bind a catalog device to a schedule.

    Unset values follow the usual household defaults: refrigeration runs all
    day, everything else one hour; cooking devices serve two meals.

    Args:
        device_id: Catalog id
        selected_hours: Hours of day the device is used
        duration: Hours of use per day
        wattage: Rated power override in watts
        fuel_type: Alternative fuel the device replaces, if any
        meals_per_day: Meal count for cooking devices
        config: Simulation config used to classify hours

    Returns:
        New SelectedDevice with a fresh id
    """
    device = get_device(device_id)
    if wattage is not None:
        device = device.with_wattage(wattage)

    if duration is None:
        duration = HOURS_PER_DAY if device.category == DeviceCategory.REFRIGERATION else 1
    if meals_per_day is None and device.category == DeviceCategory.COOKING:
        meals_per_day = DEFAULT_MEALS_PER_DAY

    return SelectedDevice(
        device=device,
        time_blocks=create_time_blocks(selected_hours, config),
        duration=duration,
        alternative_fuel=get_alternative_fuel(fuel_type) if fuel_type is not None else None,
        meals_per_day=meals_per_day,
    )


def create_default_scenario(config: Optional[SimulationConfig] = None) -> List[SelectedDevice]:
    """Demonstration household: fridge, evening TV, induction cooker on LPG, LED bulb."""
    return [
        create_selected_device(
            "fridge", range(HOURS_PER_DAY), duration=24, wattage=160, config=config
        ),
        create_selected_device(
            "tv", [17, 18, 19, 20, 21], duration=5, wattage=110, config=config
        ),
        create_selected_device(
            "induction-cooker",
            [7, 12, 19],
            duration=3,
            wattage=1800,
            fuel_type=FuelType.LPG,
            meals_per_day=3,
            config=config,
        ),
        create_selected_device(
            "led-bulb", [18, 19, 20, 21], duration=4, wattage=10, config=config
        ),
    ]
