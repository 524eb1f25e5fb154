"""
Tests for TOU rate classification and the cost calculators.
"""

import pytest

from energysim.config.settings import SimulationConfig, TariffRates
from energysim.optimization.device_models import (
    AlternativeFuel,
    FuelType,
    RateBand,
)
from energysim.optimization.tariff import (
    calculate_electricity_cost,
    calculate_fuel_cost,
    calculate_fuel_cost_breakdown,
    calculate_tou_cost,
    create_time_blocks,
    get_rate,
    hours_per_selected_block,
    rate_for_hour,
)


# =============================================================================
# RATE CLASSIFIER
# =============================================================================


class TestRateForHour:
    """Tests for hour-of-day band lookup"""

    @pytest.mark.parametrize("hour", [22, 23, 0, 1, 2, 3, 4, 5])
    def test_offpeak_hours(self, hour, config):
        assert rate_for_hour(hour, config) == RateBand.OFFPEAK

    @pytest.mark.parametrize("hour", range(6, 18))
    def test_midpeak_hours(self, hour, config):
        assert rate_for_hour(hour, config) == RateBand.MIDPEAK

    @pytest.mark.parametrize("hour", [18, 19, 20, 21])
    def test_peak_hours(self, hour, config):
        assert rate_for_hour(hour, config) == RateBand.PEAK

    def test_band_counts(self, config):
        """8 off-peak, 12 mid-peak and 4 peak hours"""
        bands = [rate_for_hour(hour, config) for hour in range(24)]

        assert bands.count(RateBand.OFFPEAK) == 8
        assert bands.count(RateBand.MIDPEAK) == 12
        assert bands.count(RateBand.PEAK) == 4

    def test_unmatched_hour_falls_back_to_midpeak(self):
        """An empty band table classifies every hour as mid-peak"""
        config = SimulationConfig(time_bands=())

        assert all(rate_for_hour(hour, config) == RateBand.MIDPEAK for hour in range(24))

    def test_get_rate(self, config):
        assert get_rate(RateBand.PEAK, config) == 20.0
        assert get_rate(RateBand.MIDPEAK, config) == 12.0
        assert get_rate(RateBand.OFFPEAK, config) == 8.0


class TestCreateTimeBlocks:
    """Tests for building the 24 hourly blocks"""

    def test_always_24_blocks_in_hour_order(self, config):
        blocks = create_time_blocks(config=config)

        assert len(blocks) == 24
        assert [block.hour for block in blocks] == list(range(24))
        assert not any(block.is_selected for block in blocks)

    def test_selected_hours_marked(self, config):
        blocks = create_time_blocks([0, 18], config)

        assert [block.hour for block in blocks if block.is_selected] == [0, 18]
        assert blocks[18].rate_band == RateBand.PEAK
        assert blocks[0].rate_band == RateBand.OFFPEAK


# =============================================================================
# DEVICE COST
# =============================================================================


class TestCalculateTouCost:
    """Tests for TOU cost of a device under an hour selection"""

    def test_two_peak_hours(self, kilowatt_device, config):
        """2 kWh at 20 per kWh"""
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks([18, 19], config), 2, config)

        assert cost.daily == pytest.approx(40.0)
        assert cost.breakdown.peak == pytest.approx(40.0)

    def test_two_offpeak_hours(self, kilowatt_device, config):
        """2 kWh at 8 per kWh"""
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks([1, 2], config), 2, config)

        assert cost.daily == pytest.approx(16.0)
        assert cost.breakdown.offpeak == pytest.approx(16.0)

    def test_one_hour_in_each_band(self, kilowatt_device, config):
        cost = calculate_tou_cost(
            kilowatt_device, create_time_blocks([12, 18, 2], config), 3, config
        )

        assert cost.daily == pytest.approx(40.0)
        assert cost.breakdown.peak == pytest.approx(20.0)
        assert cost.breakdown.midpeak == pytest.approx(12.0)
        assert cost.breakdown.offpeak == pytest.approx(8.0)

    def test_duration_spread_evenly(self, kilowatt_device, config):
        """1 hour over two blocks is half an hour in each"""
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks([2, 18], config), 1, config)

        assert cost.breakdown.offpeak == pytest.approx(4.0)
        assert cost.breakdown.peak == pytest.approx(10.0)

    def test_no_selected_blocks_is_zero(self, kilowatt_device, config):
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks(config=config), 5, config)

        assert cost.daily == 0.0
        assert cost.monthly == 0.0
        assert cost.annual == 0.0
        assert cost.breakdown.total == 0.0

    def test_zero_duration_is_zero(self, kilowatt_device, config):
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks([18], config), 0, config)

        assert cost.daily == 0.0

    @pytest.mark.parametrize("hours,duration", [([18], 1), ([3, 9, 20], 2.5), (range(24), 24)])
    def test_monthly_and_annual_scale_linearly(self, hours, duration, kilowatt_device, config):
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks(hours, config), duration, config)

        assert cost.monthly == pytest.approx(cost.daily * 30)
        assert cost.annual == pytest.approx(cost.daily * 365)

    def test_peak_to_offpeak_saves_sixty_percent(self, kilowatt_device, config):
        """(peak - offpeak) / peak = (20 - 8) / 20"""
        peak = calculate_tou_cost(kilowatt_device, create_time_blocks([18, 19, 20, 21], config), 4, config)
        offpeak = calculate_tou_cost(kilowatt_device, create_time_blocks([0, 1, 2, 3], config), 4, config)

        savings = (peak.daily - offpeak.daily) / peak.daily * 100
        assert savings == pytest.approx(60.0)

    def test_custom_rates(self, kilowatt_device):
        config = SimulationConfig(tariff_rates=TariffRates(peak=30, midpeak=15, offpeak=5))
        cost = calculate_tou_cost(kilowatt_device, create_time_blocks([18], config), 1, config)

        assert cost.daily == pytest.approx(30.0)


class TestCostPrimitives:
    def test_electricity_cost(self):
        assert calculate_electricity_cost(1500, 2, 10) == pytest.approx(30.0)

    def test_hours_per_selected_block(self, config):
        blocks = create_time_blocks([1, 2, 3, 4], config)

        assert hours_per_selected_block(blocks, 2) == pytest.approx(0.5)
        assert hours_per_selected_block(create_time_blocks(config=config), 2) == 0.0


# =============================================================================
# FUEL COST
# =============================================================================


class TestFuelCost:
    """Tests for alternative fuel costs"""

    def test_daily_cost(self, lpg):
        assert calculate_fuel_cost(lpg) == pytest.approx(60.0)

    def test_cost_over_days(self, lpg):
        assert calculate_fuel_cost(lpg, days=7) == pytest.approx(420.0)

    def test_breakdown(self, lpg, config):
        cost = calculate_fuel_cost_breakdown(lpg, config)

        assert cost.daily == pytest.approx(60.0)
        assert cost.monthly == pytest.approx(1800.0)
        assert cost.annual == pytest.approx(21900.0)
        assert cost.breakdown is None

    def test_zero_consumption(self, config):
        fuel = AlternativeFuel(fuel_type=FuelType.CHARCOAL, cost_per_unit=150, daily_consumption=0)

        assert calculate_fuel_cost_breakdown(fuel, config).monthly == 0.0
