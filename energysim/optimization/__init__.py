"""
TOU Cost and Load Simulation Module

Deterministic calculation engine turning household device schedules into
cost, emissions, grid-impact and load-curve results under a Time-of-Use
tariff.

Key Components:
- device_models: Data models for devices, schedules and results
- tariff: Rate classification and electric/fuel cost calculators
- scheduler: Greedy lowest-cost hour selection
- emissions: CO2 calculations against fuel baselines
- grid_metrics: Load factor, stress and efficiency scores
- load_profile: Sub-hourly power curve simulation
- aggregator: Three-scenario household aggregation
- simulator: Stateful household API

Scenarios:
- A (current): fuel baseline where configured, else today's electric use
- B (electric): all electric with the user-selected hours
- C (optimized): all electric with the optimizer's hours

Example Usage:
    from energysim import HouseholdSimulator

    simulator = HouseholdSimulator()
    simulator.add_catalog_device("fridge", range(24), duration=24)
    simulator.add_catalog_device(
        "induction-cooker", [7, 19], duration=2, fuel_type="lpg"
    )

    state = simulator.state
    print(f"Monthly savings A -> C: {state.monthly_savings:.2f}")
    print(state.summary())
"""

from energysim.optimization.device_models import (
    AggregatedCosts,
    AggregatedGridMetrics,
    AlternativeFuel,
    BandBreakdown,
    CostBreakdown,
    Device,
    DeviceCategory,
    DeviceSavings,
    EmissionData,
    FuelType,
    GridMetrics,
    LoadProfileComparison,
    LoadProfilePoint,
    LoadProfileType,
    MultiDeviceState,
    RateBand,
    Scenario,
    SelectedDevice,
    TimeBlock,
)
from energysim.optimization.tariff import (
    calculate_fuel_cost,
    calculate_fuel_cost_breakdown,
    calculate_tou_cost,
    create_time_blocks,
    rate_for_hour,
)
from energysim.optimization.scheduler import (
    generate_optimized_time_blocks,
    optimize_multi_device_schedule,
)
from energysim.optimization.emissions import (
    aggregate_multi_device_emissions,
    calculate_emission_data,
)
from energysim.optimization.grid_metrics import calculate_grid_metrics
from energysim.optimization.load_profile import (
    compare_load_profiles,
    load_profile_to_dataframe,
    simulate_load_profile,
)
from energysim.optimization.aggregator import (
    aggregate_grid_metrics,
    aggregate_multi_device_costs,
    recompute,
)

__all__ = [
    "AggregatedCosts",
    "AggregatedGridMetrics",
    "AlternativeFuel",
    "BandBreakdown",
    "CostBreakdown",
    "Device",
    "DeviceCategory",
    "DeviceSavings",
    "EmissionData",
    "FuelType",
    "GridMetrics",
    "LoadProfileComparison",
    "LoadProfilePoint",
    "LoadProfileType",
    "MultiDeviceState",
    "RateBand",
    "Scenario",
    "SelectedDevice",
    "TimeBlock",
    "calculate_fuel_cost",
    "calculate_fuel_cost_breakdown",
    "calculate_tou_cost",
    "create_time_blocks",
    "rate_for_hour",
    "generate_optimized_time_blocks",
    "optimize_multi_device_schedule",
    "aggregate_multi_device_emissions",
    "calculate_emission_data",
    "calculate_grid_metrics",
    "compare_load_profiles",
    "load_profile_to_dataframe",
    "simulate_load_profile",
    "aggregate_grid_metrics",
    "aggregate_multi_device_costs",
    "recompute",
]
