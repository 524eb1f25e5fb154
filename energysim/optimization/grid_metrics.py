"""
Grid Impact Metrics

Load factor, band-weighted stress score and the composite 0-10 efficiency
score of a usage pattern.

Metric definitions:
- Load factor = average load / peak load x 100, average = daily kWh / 24
- Stress score = peak kWh x 3 + mid-peak kWh x 2 + off-peak kWh x 1
- Efficiency = (off-peak % x 0.4 + load factor x 0.3
                + max(0, 100 - stress x 5) x 0.3) / 10, clamped to [0, 10]
"""

from typing import Iterable, Optional

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    BandBreakdown,
    Device,
    GridMetrics,
    RateBand,
    TimeBlock,
)
from energysim.optimization.tariff import hours_per_selected_block


def calculate_grid_distribution(
    device: Device,
    time_blocks: Iterable[TimeBlock],
    hours: float,
) -> BandBreakdown:
    """Split a device's daily kWh across bands.

    Uses the same even distribution over selected blocks as the cost
    calculator.

    Returns:
        BandBreakdown in kWh
    """
    blocks = list(time_blocks)
    kwh_per_block = (device.wattage * hours_per_selected_block(blocks, hours)) / 1000

    usage = {band: 0.0 for band in RateBand}
    for block in blocks:
        if block.is_selected:
            usage[block.rate_band] += kwh_per_block

    return BandBreakdown(
        peak=usage[RateBand.PEAK],
        midpeak=usage[RateBand.MIDPEAK],
        offpeak=usage[RateBand.OFFPEAK],
    )


def calculate_load_factor(average_load: float, peak_load: float) -> float:
    """Average over peak load as a percentage (0 when there is no peak)."""
    if peak_load <= 0:
        return 0.0
    return (average_load / peak_load) * 100


def calculate_grid_stress(
    peak_kwh: float,
    midpeak_kwh: float,
    offpeak_kwh: float,
    config: Optional[SimulationConfig] = None,
) -> float:
    """Band-weighted energy; lower is better."""
    weights = resolve_config(config).grid_stress_weights
    return (
        peak_kwh * weights.peak
        + midpeak_kwh * weights.midpeak
        + offpeak_kwh * weights.offpeak
    )


def calculate_efficiency_score(
    offpeak_percentage: float,
    load_factor: float,
    grid_stress: float,
    config: Optional[SimulationConfig] = None,
) -> float:
    """Composite efficiency score clamped to [0, 10]."""
    config = resolve_config(config)
    weights = config.efficiency_weights

    # Lower stress is better
    normalized_stress = max(0.0, 100 - grid_stress * config.stress_normalization_factor)

    score = (
        offpeak_percentage * weights.offpeak_percentage
        + load_factor * weights.load_factor
        + normalized_stress * weights.grid_stress
    )
    return min(10.0, max(0.0, score / 10))


def metrics_from_distribution(
    distribution: BandBreakdown,
    peak_load_kw: float,
    config: Optional[SimulationConfig] = None,
) -> GridMetrics:
    """Derive all grid metrics from a band distribution and a peak load.

    Args:
        distribution: Daily kWh per band
        peak_load_kw: Peak load the average is compared against
        config: Simulation config (uses defaults if not provided)

    Returns:
        GridMetrics
    """
    config = resolve_config(config)
    total_kwh = distribution.total
    offpeak_percentage = (distribution.offpeak / total_kwh) * 100 if total_kwh > 0 else 0.0

    load_factor = calculate_load_factor(total_kwh / HOURS_PER_DAY, peak_load_kw)
    stress_score = calculate_grid_stress(
        distribution.peak, distribution.midpeak, distribution.offpeak, config
    )
    efficiency_score = calculate_efficiency_score(
        offpeak_percentage, load_factor, stress_score, config
    )

    return GridMetrics(
        peak_usage=distribution.peak,
        midpeak_usage=distribution.midpeak,
        offpeak_usage=distribution.offpeak,
        load_factor=load_factor,
        stress_score=stress_score,
        efficiency_score=efficiency_score,
    )


def calculate_grid_metrics(
    device: Device,
    time_blocks: Iterable[TimeBlock],
    hours: float,
    config: Optional[SimulationConfig] = None,
) -> GridMetrics:
    """Grid metrics of a single device.

    The peak load is the device's rated power, so the load factor measures
    how evenly its use is spread over the day rather than a metered peak.
    """
    distribution = calculate_grid_distribution(device, time_blocks, hours)
    return metrics_from_distribution(distribution, device.power_kw, config)
