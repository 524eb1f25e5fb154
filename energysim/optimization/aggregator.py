"""
Multi-Device Aggregation

Composes the per-device calculators into the full household state.

Scenarios:
- A (current): fuel cost where a baseline fuel is configured, else the
  electric cost of the user-selected hours
- B (electric): electric cost of the user-selected hours
- C (optimized): electric cost of the optimizer-selected hours for the
  same daily duration

Grid metrics are recomputed from the summed band distribution, never
averaged from per-device scores.
"""

import copy
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import structlog

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    AggregatedCosts,
    AggregatedGridMetrics,
    BandBreakdown,
    CostBreakdown,
    DeviceSavings,
    MultiDeviceState,
    RateBand,
    Scenario,
    SelectedDevice,
)
from energysim.optimization.emissions import aggregate_multi_device_emissions
from energysim.optimization.grid_metrics import (
    calculate_grid_distribution,
    metrics_from_distribution,
)
from energysim.optimization.load_profile import compare_load_profiles, simulate_load_profile
from energysim.optimization.scheduler import generate_optimized_time_blocks
from energysim.optimization.tariff import (
    calculate_fuel_cost_breakdown,
    calculate_tou_cost,
    hours_per_selected_block,
)

logger = structlog.get_logger(__name__)


def calculate_device_cost(
    selected: SelectedDevice,
    scenario: Scenario,
    config: Optional[SimulationConfig] = None,
) -> CostBreakdown:
    """Cost of one device under one scenario."""
    config = resolve_config(config)

    if scenario == Scenario.CURRENT and selected.alternative_fuel is not None:
        return calculate_fuel_cost_breakdown(selected.alternative_fuel, config)

    if scenario == Scenario.OPTIMIZED:
        blocks = generate_optimized_time_blocks(selected.duration, config)
    else:
        blocks = selected.time_blocks

    return calculate_tou_cost(selected.device, blocks, selected.duration, config)


def aggregate_multi_device_costs(
    devices: Iterable[SelectedDevice],
    scenario: Scenario,
    config: Optional[SimulationConfig] = None,
) -> AggregatedCosts:
    """Combine the costs of every device under one scenario.

    Args:
        devices: Devices to cost
        scenario: Which comparison scenario to apply
        config: Simulation config (uses defaults if not provided)

    Returns:
        AggregatedCosts with the combined total, band split and per-device map
    """
    config = resolve_config(config)
    by_device: Dict[str, CostBreakdown] = {}
    band_totals = {band: 0.0 for band in RateBand}
    total_daily = 0.0

    for selected in devices:
        cost = calculate_device_cost(selected, scenario, config)
        by_device[selected.id] = cost
        total_daily += cost.daily
        # Fuel costs have no band split
        if cost.breakdown is not None:
            for band in RateBand:
                band_totals[band] += cost.breakdown.for_band(band)

    breakdown = BandBreakdown(
        peak=band_totals[RateBand.PEAK],
        midpeak=band_totals[RateBand.MIDPEAK],
        offpeak=band_totals[RateBand.OFFPEAK],
    )
    total = CostBreakdown.from_daily(
        total_daily,
        breakdown=breakdown,
        days_per_month=config.days_per_month,
        days_per_year=config.days_per_year,
    )
    return AggregatedCosts(total=total, by_device=by_device, breakdown=breakdown)


def hourly_combined_load(
    devices: Iterable[SelectedDevice],
    optimized: bool = False,
    config: Optional[SimulationConfig] = None,
) -> np.ndarray:
    """Combined kW per hour of day under the even-distribution model.

    Each selected block of a device carries its kWh share spread over the
    hour, so the hourly kWh equals the average kW of that hour.
    """
    config = resolve_config(config)
    hourly = np.zeros(HOURS_PER_DAY, dtype=np.float64)

    for selected in devices:
        blocks = (
            generate_optimized_time_blocks(selected.duration, config)
            if optimized
            else selected.time_blocks
        )
        kwh_per_block = (
            selected.device.wattage * hours_per_selected_block(blocks, selected.duration)
        ) / 1000
        for block in blocks:
            if block.is_selected:
                hourly[block.hour] += kwh_per_block

    return hourly


def aggregate_grid_metrics(
    devices: Sequence[SelectedDevice],
    config: Optional[SimulationConfig] = None,
) -> AggregatedGridMetrics:
    """Household grid metrics from the summed band distribution.

    The peak load is the highest hourly combined load; ``peak_load_hour``
    is the earliest hour reaching it. Device contributions are each
    device's kWh as a percentage of the combined kWh.

    Args:
        devices: Devices with their current hour selections
        config: Simulation config (uses defaults if not provided)

    Returns:
        AggregatedGridMetrics (all zero for an empty list)
    """
    config = resolve_config(config)

    device_kwh: Dict[str, float] = {}
    band_totals = {band: 0.0 for band in RateBand}
    for selected in devices:
        distribution = calculate_grid_distribution(
            selected.device, selected.time_blocks, selected.duration
        )
        device_kwh[selected.id] = distribution.total
        for band in RateBand:
            band_totals[band] += distribution.for_band(band)

    combined = BandBreakdown(
        peak=band_totals[RateBand.PEAK],
        midpeak=band_totals[RateBand.MIDPEAK],
        offpeak=band_totals[RateBand.OFFPEAK],
    )

    hourly = hourly_combined_load(devices, config=config)
    peak_load_kw = float(hourly.max())
    # argmax returns the first index of the maximum
    peak_load_hour = int(np.argmax(hourly)) if peak_load_kw > 0 else 0

    metrics = metrics_from_distribution(combined, peak_load_kw, config)
    total_kwh = combined.total
    contributions = {
        device_id: (kwh / total_kwh) * 100 if total_kwh > 0 else 0.0
        for device_id, kwh in device_kwh.items()
    }

    return AggregatedGridMetrics(
        peak_usage=metrics.peak_usage,
        midpeak_usage=metrics.midpeak_usage,
        offpeak_usage=metrics.offpeak_usage,
        load_factor=metrics.load_factor,
        stress_score=metrics.stress_score,
        efficiency_score=metrics.efficiency_score,
        total_daily_kwh=total_kwh,
        peak_load_hour=peak_load_hour,
        device_contributions=contributions,
    )


def calculate_device_savings(
    selected: SelectedDevice,
    scenario_a: AggregatedCosts,
    scenario_b: AggregatedCosts,
    scenario_c: AggregatedCosts,
) -> DeviceSavings:
    """Compare one device's monthly cost across the three scenarios.

    Savings are A minus C; the percentage is relative to A (0 when A is 0).
    """
    zero = CostBreakdown.zero()
    current = scenario_a.by_device.get(selected.id, zero)
    electric = scenario_b.by_device.get(selected.id, zero)
    optimized = scenario_c.by_device.get(selected.id, zero)

    monthly_savings = current.monthly - optimized.monthly
    return DeviceSavings(
        device_id=selected.id,
        device_name=selected.device.name,
        current_cost=current.monthly,
        electric_cost=electric.monthly,
        optimized_cost=optimized.monthly,
        monthly_savings=monthly_savings,
        annual_savings=current.annual - optimized.annual,
        percentage_savings=(
            (monthly_savings / current.monthly) * 100 if current.monthly > 0 else 0.0
        ),
    )


def recompute(
    devices: Sequence[SelectedDevice],
    config: Optional[SimulationConfig] = None,
) -> MultiDeviceState:
    """Rebuild the complete household state from a device list.

    Pure and idempotent: the devices are copied into the state, so later
    edits to the caller's list never leak into a computed result.

    Args:
        devices: Current device list
        config: Simulation config (uses defaults if not provided)

    Returns:
        MultiDeviceState
    """
    config = resolve_config(config)
    snapshot: List[SelectedDevice] = copy.deepcopy(list(devices))

    scenario_a = aggregate_multi_device_costs(snapshot, Scenario.CURRENT, config)
    scenario_b = aggregate_multi_device_costs(snapshot, Scenario.ELECTRIC, config)
    scenario_c = aggregate_multi_device_costs(snapshot, Scenario.OPTIMIZED, config)

    load_profile = simulate_load_profile(snapshot, optimized=False, config=config)
    optimized_load_profile = simulate_load_profile(snapshot, optimized=True, config=config)

    state = MultiDeviceState(
        devices=tuple(snapshot),
        scenario_a=scenario_a,
        scenario_b=scenario_b,
        scenario_c=scenario_c,
        grid_metrics=aggregate_grid_metrics(snapshot, config),
        emissions=aggregate_multi_device_emissions(snapshot, config),
        load_profile=tuple(load_profile),
        optimized_load_profile=tuple(optimized_load_profile),
        load_profile_comparison=compare_load_profiles(
            load_profile, optimized_load_profile, config
        ),
        device_savings=tuple(
            calculate_device_savings(selected, scenario_a, scenario_b, scenario_c)
            for selected in snapshot
        ),
    )

    logger.debug(
        "multi_device_state_recomputed",
        device_count=len(snapshot),
        monthly_savings=round(state.monthly_savings, 2),
    )
    return state
