"""
Pytest Configuration and Fixtures for Simulator Tests

Provides shared fixtures for:
- Simulation configs (default and minute-resolution)
- Catalog-style devices and schedules
- Demonstration households
"""

from typing import Iterable, Optional

import pytest

from energysim.config.settings import SimulationConfig
from energysim.optimization.device_models import (
    AlternativeFuel,
    Device,
    DeviceCategory,
    FuelType,
    LoadProfileType,
    SelectedDevice,
)
from energysim.optimization.tariff import create_time_blocks


PEAK_HOURS = [18, 19, 20, 21]
OFFPEAK_HOURS = [22, 23, 0, 1, 2, 3, 4, 5]


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def config() -> SimulationConfig:
    """Default tariff (20/12/8), 15-minute sampling, 15-minute ramps."""
    return SimulationConfig()


@pytest.fixture
def minute_config() -> SimulationConfig:
    """One sample per minute for waveform and ramp checks."""
    return SimulationConfig(sampling_interval_minutes=1, ramp_minutes=15)


# =============================================================================
# Device Fixtures
# =============================================================================


def build_device(
    wattage: float = 1000,
    load_profile_type: LoadProfileType = LoadProfileType.CONTINUOUS,
    category: DeviceCategory = DeviceCategory.OTHER,
    device_id: str = "test-device",
) -> Device:
    return Device(
        id=device_id,
        name=f"Test {device_id}",
        category=category,
        wattage=wattage,
        load_profile_type=load_profile_type,
    )


def build_selected(
    hours: Iterable[int],
    duration: float,
    wattage: float = 1000,
    load_profile_type: LoadProfileType = LoadProfileType.CONTINUOUS,
    fuel: Optional[AlternativeFuel] = None,
    config: Optional[SimulationConfig] = None,
) -> SelectedDevice:
    return SelectedDevice(
        device=build_device(wattage, load_profile_type),
        time_blocks=create_time_blocks(hours, config or SimulationConfig()),
        duration=duration,
        alternative_fuel=fuel,
    )


@pytest.fixture
def make_selected():
    """Factory building a SelectedDevice from hours and duration."""
    return build_selected


@pytest.fixture
def kilowatt_device() -> Device:
    """1000 W continuous device."""
    return build_device()


@pytest.fixture
def lpg() -> AlternativeFuel:
    """LPG at 150 per kg, 0.4 kg per day."""
    return AlternativeFuel(
        fuel_type=FuelType.LPG,
        cost_per_unit=150.0,
        daily_consumption=0.4,
        unit="kg",
    )


@pytest.fixture
def peak_device(config) -> SelectedDevice:
    """1000 W used 2 hours at the start of the evening peak."""
    return build_selected([18, 19], duration=2, config=config)


@pytest.fixture
def offpeak_device(config) -> SelectedDevice:
    """500 W used 4 hours overnight."""
    return build_selected([0, 1, 2, 3], duration=4, wattage=500, config=config)


@pytest.fixture
def cooker_on_lpg(config, lpg) -> SelectedDevice:
    """1800 W pulsing cooker replacing LPG, used at breakfast, lunch and dinner."""
    return build_selected(
        [7, 12, 19],
        duration=3,
        wattage=1800,
        load_profile_type=LoadProfileType.PULSING,
        fuel=lpg,
        config=config,
    )


@pytest.fixture
def household(peak_device, offpeak_device, cooker_on_lpg):
    """Mixed three-device household."""
    return [peak_device, offpeak_device, cooker_on_lpg]
