"""
Greedy TOU Schedule Optimizer

Picks the cheapest hours for a device's daily duration by filling whole
bands in price order: off-peak first, then mid-peak, then peak.

Any hour is interchangeable for the device (no dependency between
consecutive hours) and every hour of a band costs the same, so filling the
cheapest band first is optimal for a fixed 24-hour tariff.
"""

import math
from typing import Dict, List, Optional

import structlog

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    RateBand,
    SelectedDevice,
    TimeBlock,
)
from energysim.optimization.tariff import create_time_blocks, get_rate

logger = structlog.get_logger(__name__)

# Tie-break order when two bands share a rate
_BAND_PRIORITY = (RateBand.OFFPEAK, RateBand.MIDPEAK, RateBand.PEAK)


def band_fill_order(config: Optional[SimulationConfig] = None) -> List[RateBand]:
    """Get bands from cheapest to most expensive."""
    config = resolve_config(config)
    return sorted(_BAND_PRIORITY, key=lambda band: get_rate(band, config))


def clamp_hours_needed(hours_needed: float) -> int:
    """Clamp a requested duration to a whole number of blocks in [0, 24].

    Fractional hours round up: a 1.5-hour duration occupies two blocks.
    """
    if hours_needed is None or math.isnan(hours_needed) or hours_needed <= 0:
        return 0
    return min(HOURS_PER_DAY, int(math.ceil(hours_needed)))


def generate_optimized_time_blocks(
    hours_needed: float,
    config: Optional[SimulationConfig] = None,
) -> List[TimeBlock]:
    """Build the lowest-cost hour selection for a daily duration.

    Args:
        hours_needed: Hours of use per day (clamped to 0-24)
        config: Simulation config (uses defaults if not provided)

    Returns:
        List of 24 TimeBlocks with the chosen hours selected
    """
    config = resolve_config(config)
    time_blocks = create_time_blocks(config=config)

    by_band: Dict[RateBand, List[TimeBlock]] = {band: [] for band in RateBand}
    for block in time_blocks:
        by_band[block.rate_band].append(block)

    remaining = clamp_hours_needed(hours_needed)
    for band in band_fill_order(config):
        to_select = min(remaining, len(by_band[band]))
        for block in by_band[band][:to_select]:
            block.is_selected = True
        remaining -= to_select
        if remaining == 0:
            break

    return time_blocks


def optimize_multi_device_schedule(
    devices: List[SelectedDevice],
    config: Optional[SimulationConfig] = None,
) -> List[SelectedDevice]:
    """Copies of the devices (same ids) with optimized hour selections.

    Args:
        devices: Devices to reschedule
        config: Simulation config (uses defaults if not provided)

    Returns:
        New SelectedDevice list; the input devices are not modified
    """
    config = resolve_config(config)
    optimized = [
        device.with_time_blocks(generate_optimized_time_blocks(device.duration, config))
        for device in devices
    ]
    logger.debug("multi_device_schedule_optimized", device_count=len(optimized))
    return optimized
