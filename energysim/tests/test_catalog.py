"""
Tests for reference data lookups and the demonstration household.
"""

import pytest

from energysim.catalog import (
    DEVICE_CATALOG,
    create_default_scenario,
    create_selected_device,
    get_alternative_fuel,
    get_device,
)
from energysim.exceptions import DeviceNotFoundError, EnergySimError, FuelNotFoundError
from energysim.optimization.device_models import DeviceCategory, FuelType, LoadProfileType


class TestDeviceCatalog:
    def test_catalog_ids_unique(self):
        ids = [device.id for device in DEVICE_CATALOG]

        assert len(ids) == len(set(ids)) == 6

    def test_get_device(self):
        fridge = get_device("fridge")

        assert fridge.wattage == 150
        assert fridge.load_profile_type == LoadProfileType.CYCLING
        assert fridge.category == DeviceCategory.REFRIGERATION

    def test_cookers_pulse_and_need_fuel(self):
        for device_id in ["electric-pressure-cooker", "induction-cooker"]:
            device = get_device(device_id)
            assert device.load_profile_type == LoadProfileType.PULSING
            assert device.requires_alternative_fuel

    def test_unknown_device(self):
        with pytest.raises(DeviceNotFoundError) as exc_info:
            get_device("toaster")

        assert isinstance(exc_info.value, EnergySimError)
        assert "toaster" in exc_info.value.message


class TestAlternativeFuels:
    @pytest.mark.parametrize("fuel,price,daily,unit", [
        ("charcoal", 150, 1.5, "kg"),
        ("lpg", 150, 0.4, "kg"),
        ("kerosene", 130, 0.5, "liter"),
        ("firewood", 50, 3.0, "kg"),
    ])
    def test_reference_fuels(self, fuel, price, daily, unit):
        reference = get_alternative_fuel(fuel)

        assert reference.fuel_type == FuelType(fuel)
        assert reference.cost_per_unit == price
        assert reference.daily_consumption == daily
        assert reference.unit == unit

    def test_consumption_override(self):
        assert get_alternative_fuel(FuelType.LPG, daily_consumption=1.0).daily_consumption == 1.0

    def test_unknown_fuel(self):
        with pytest.raises(FuelNotFoundError) as exc_info:
            get_alternative_fuel("biogas")

        assert isinstance(exc_info.value.original_error, ValueError)


class TestCreateSelectedDevice:
    """Tests for binding catalog devices to schedules"""

    def test_fridge_defaults_to_full_day(self, config):
        fridge = create_selected_device("fridge", range(24), config=config)

        assert fridge.duration == 24
        assert fridge.meals_per_day is None
        assert fridge.alternative_fuel is None

    def test_cooker_defaults_to_two_meals(self, config):
        cooker = create_selected_device("induction-cooker", [19], config=config)

        assert cooker.duration == 1
        assert cooker.meals_per_day == 2

    def test_overrides(self, config):
        cooker = create_selected_device(
            "induction-cooker", [7, 19], duration=2, wattage=1800, fuel_type="charcoal",
            meals_per_day=3, config=config,
        )

        assert cooker.device.wattage == 1800
        assert get_device("induction-cooker").wattage == 2000
        assert cooker.alternative_fuel.fuel_type == FuelType.CHARCOAL
        assert cooker.selected_hours == [7, 19]
        assert cooker.meals_per_day == 3


class TestDefaultScenario:
    def test_household(self, config):
        devices = create_default_scenario(config)

        assert [d.device.id for d in devices] == ["fridge", "tv", "induction-cooker", "led-bulb"]
        assert [d.device.wattage for d in devices] == [160, 110, 1800, 10]
        assert [d.duration for d in devices] == [24, 5, 3, 4]

    def test_cooker_replaces_lpg(self, config):
        cooker = create_default_scenario(config)[2]

        assert cooker.alternative_fuel.fuel_type == FuelType.LPG
        assert cooker.meals_per_day == 3
        assert cooker.selected_hours == [7, 12, 19]

    def test_fresh_ids_each_time(self, config):
        first = {d.id for d in create_default_scenario(config)}
        second = {d.id for d in create_default_scenario(config)}

        assert first.isdisjoint(second)
