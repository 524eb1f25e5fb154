"""
Sub-hourly Load Profile Simulation

Reconstructs a power-vs-time curve for each device from its selected hour
blocks, sampled every ``sampling_interval_minutes`` (15 by default, 96
samples per day).

Algorithm Overview:
1. Merge the selected hours into contiguous runs; a run that reaches 24:00
   and one that starts at 00:00 are joined across midnight
2. For each sample time t and run [s, e) on minutes-since-midnight
   (modular, so e may exceed 1440):
   - s <= t < e: rated power x waveform multiplier at (t - s)
   - ramp window before s: linear rise from 0 to the level at s
   - ramp window after e: linear fall from the level just before e to 0
   - otherwise: 0
3. Sum a device's runs, capped at its rated power
4. Sum devices, price each sample at its hour's band rate

Waveforms (multiplier of rated power while active):
- continuous: 1
- pulsing: 8-minute duty cycle, 35% at full power, 8% idle, plus jitter
- cycling: 30-minute compressor cycle, 10 minutes on, standby 12-35%
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import structlog

from energysim.config.settings import SimulationConfig, resolve_config
from energysim.optimization.device_models import (
    HOURS_PER_DAY,
    MINUTES_PER_DAY,
    LoadProfileComparison,
    LoadProfilePoint,
    LoadProfileType,
    SelectedDevice,
    TimeBlock,
)
from energysim.optimization.scheduler import generate_optimized_time_blocks
from energysim.optimization.tariff import get_rate, rate_for_hour

logger = structlog.get_logger(__name__)

PULSING_CYCLE_MINUTES = 8
PULSING_ACTIVE_FRACTION = 0.35
PULSING_IDLE_MULTIPLIER = 0.08
PULSING_PRIMARY_JITTER = 0.15
PULSING_SECONDARY_JITTER = 0.1

CYCLING_CYCLE_MINUTES = 30
CYCLING_ACTIVE_MINUTES = 10
CYCLING_ACTIVE_FRACTION = CYCLING_ACTIVE_MINUTES / CYCLING_CYCLE_MINUTES
CYCLING_STANDBY_MULTIPLIER = 0.12
CYCLING_MAX_STANDBY_MULTIPLIER = 0.35
CYCLING_COOLDOWN_AMPLITUDE = 0.05
CYCLING_STANDBY_WAVE_AMPLITUDE = 0.03

# Offset used to read a waveform just before a run ends
_LEFT_LIMIT_MINUTES = 1e-6


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def get_load_profile_multiplier(
    load_profile_type: LoadProfileType,
    relative_minutes: float,
) -> float:
    """Get the fraction of rated power drawn at a point of an active run.

    Args:
        load_profile_type: Device draw shape
        relative_minutes: Minutes since the run started

    Returns:
        Multiplier of rated power
    """
    minutes = relative_minutes % MINUTES_PER_DAY

    if load_profile_type == LoadProfileType.PULSING:
        cycle_progress = (minutes % PULSING_CYCLE_MINUTES) / PULSING_CYCLE_MINUTES
        base_pulse = 1.0 if cycle_progress < PULSING_ACTIVE_FRACTION else PULSING_IDLE_MULTIPLIER
        high_frequency_wave = math.sin((minutes / PULSING_CYCLE_MINUTES) * 2 * math.pi)
        secondary_wave = math.sin(
            (minutes / (PULSING_CYCLE_MINUTES / 2)) * 2 * math.pi + math.pi / 3
        )
        jitter = (
            high_frequency_wave * PULSING_PRIMARY_JITTER
            + secondary_wave * PULSING_SECONDARY_JITTER
        )
        return _clamp(base_pulse + jitter, PULSING_IDLE_MULTIPLIER, 1.0)

    if load_profile_type == LoadProfileType.CYCLING:
        cycle_progress = (minutes % CYCLING_CYCLE_MINUTES) / CYCLING_CYCLE_MINUTES
        if cycle_progress < CYCLING_ACTIVE_FRACTION:
            return 1.0

        off_phase_progress = (cycle_progress - CYCLING_ACTIVE_FRACTION) / (
            1 - CYCLING_ACTIVE_FRACTION
        )
        compressor_cooldown = 1 - off_phase_progress
        standby_wave = math.sin(off_phase_progress * math.pi)
        return _clamp(
            CYCLING_STANDBY_MULTIPLIER
            + compressor_cooldown * CYCLING_COOLDOWN_AMPLITUDE
            + standby_wave * CYCLING_STANDBY_WAVE_AMPLITUDE,
            CYCLING_STANDBY_MULTIPLIER,
            CYCLING_MAX_STANDBY_MULTIPLIER,
        )

    return 1.0


def calculate_power_at_time(
    time_minutes: float,
    start_minutes: int,
    end_minutes: int,
    device_power: float,
    load_profile_type: LoadProfileType,
    ramp_minutes: float = 15,
) -> float:
    """Power drawn at one instant by one active run.

    A run whose end is not after its start crosses midnight. A run lasting
    24 hours or more is always on and has no ramps.

    Args:
        time_minutes: Sample time in minutes since midnight
        start_minutes: Run start in minutes since midnight
        end_minutes: Run end in minutes (may be < start or > 1440)
        device_power: Rated power (any unit; the result uses the same)
        load_profile_type: Device draw shape
        ramp_minutes: Length of the on/off ramp windows

    Returns:
        Instantaneous power
    """
    length = end_minutes - start_minutes
    if length <= 0:
        length += MINUTES_PER_DAY
    start = start_minutes % MINUTES_PER_DAY
    offset = (time_minutes - start) % MINUTES_PER_DAY

    if length >= MINUTES_PER_DAY:
        return device_power * get_load_profile_multiplier(load_profile_type, offset)

    if offset < length:
        return device_power * get_load_profile_multiplier(load_profile_type, offset)

    if ramp_minutes <= 0:
        return 0.0

    after_end = offset - length
    if after_end < ramp_minutes:
        end_level = get_load_profile_multiplier(
            load_profile_type, max(0.0, length - _LEFT_LIMIT_MINUTES)
        )
        return device_power * end_level * (1 - after_end / ramp_minutes)

    before_start = MINUTES_PER_DAY - offset
    if before_start < ramp_minutes:
        start_level = get_load_profile_multiplier(load_profile_type, 0)
        return device_power * start_level * (1 - before_start / ramp_minutes)

    return 0.0


def merge_selected_runs(time_blocks: Iterable[TimeBlock]) -> List[Tuple[int, int]]:
    """Merge selected hours into contiguous runs.

    Returns:
        List of (start_minutes, end_minutes); a run crossing midnight has
        end_minutes > 1440, a full-day selection is [(0, 1440)]
    """
    hours = sorted({block.hour for block in time_blocks if block.is_selected})
    if not hours:
        return []
    if len(hours) == HOURS_PER_DAY:
        return [(0, MINUTES_PER_DAY)]

    runs = []
    run_start = prev_hour = hours[0]
    for hour in hours[1:]:
        if hour != prev_hour + 1:
            runs.append((run_start, prev_hour + 1))
            run_start = hour
        prev_hour = hour
    runs.append((run_start, prev_hour + 1))

    # Join the run ending at 24:00 with the one starting at 00:00
    if len(runs) > 1 and runs[0][0] == 0 and runs[-1][1] == HOURS_PER_DAY:
        first = runs.pop(0)
        last = runs.pop()
        runs.append((last[0], HOURS_PER_DAY + first[1]))

    return [(start * 60, end * 60) for start, end in runs]


def sample_times(config: Optional[SimulationConfig] = None) -> np.ndarray:
    """Sample instants of one day in minutes since midnight."""
    config = resolve_config(config)
    return np.arange(0, MINUTES_PER_DAY, config.sampling_interval_minutes)


def simulate_device_power(
    selected: SelectedDevice,
    times: Sequence[float],
    time_blocks: Optional[Sequence[TimeBlock]] = None,
    config: Optional[SimulationConfig] = None,
) -> np.ndarray:
    """Power curve of one device in watts.

    Args:
        selected: Device and its schedule
        times: Sample instants in minutes since midnight
        time_blocks: Schedule override (defaults to the device's own blocks)
        config: Simulation config (uses defaults if not provided)

    Returns:
        Array of watts, one value per sample
    """
    config = resolve_config(config)
    blocks = selected.time_blocks if time_blocks is None else time_blocks
    runs = merge_selected_runs(blocks)
    wattage = selected.device.wattage
    profile_type = selected.device.load_profile_type

    power = np.zeros(len(times), dtype=np.float64)
    for start, end in runs:
        power += np.array([
            calculate_power_at_time(t, start, end, wattage, profile_type, config.ramp_minutes)
            for t in times
        ], dtype=np.float64)

    return np.minimum(power, wattage)


def simulate_load_profile(
    devices: Sequence[SelectedDevice],
    optimized: bool = False,
    config: Optional[SimulationConfig] = None,
) -> List[LoadProfilePoint]:
    """Sampled combined load curve of a device list.

    Args:
        devices: Devices to simulate
        optimized: Re-derive each device's hours with the optimizer first
        config: Simulation config (uses defaults if not provided)

    Returns:
        One LoadProfilePoint per sample, empty when there are no devices
    """
    config = resolve_config(config)
    if not devices:
        return []

    times = sample_times(config)
    interval_hours = config.sampling_interval_minutes / 60

    device_power: Dict[str, np.ndarray] = {}
    for selected in devices:
        blocks = (
            generate_optimized_time_blocks(selected.duration, config)
            if optimized
            else selected.time_blocks
        )
        device_power[selected.id] = simulate_device_power(selected, times, blocks, config) / 1000

    total_kw = np.sum(np.vstack(list(device_power.values())), axis=0)

    points = []
    for index, minutes in enumerate(times):
        hour = int(minutes) // 60
        band = rate_for_hour(hour, config)
        rate = get_rate(band, config)
        load_kw = float(total_kw[index])
        points.append(LoadProfilePoint(
            time_minutes=int(minutes),
            hour=hour,
            rate_band=band,
            rate=rate,
            total_load_kw=load_kw,
            device_loads_kw={
                device_id: float(power[index]) for device_id, power in device_power.items()
            },
            cost=load_kw * rate * interval_hours,
        ))

    logger.debug(
        "load_profile_simulated",
        device_count=len(devices),
        samples=len(points),
        optimized=optimized,
    )
    return points


def compare_load_profiles(
    current: Sequence[LoadProfilePoint],
    optimized: Sequence[LoadProfilePoint],
    config: Optional[SimulationConfig] = None,
) -> LoadProfileComparison:
    """Integrate the as-configured and optimized curves over the day.

    Daily savings are the integral of the per-sample cost difference.
    """
    config = resolve_config(config)
    interval_hours = config.sampling_interval_minutes / 60

    current_kwh = sum(p.total_load_kw for p in current) * interval_hours
    optimized_kwh = sum(p.total_load_kw for p in optimized) * interval_hours
    current_cost = sum(p.cost for p in current)
    optimized_cost = sum(p.cost for p in optimized)

    saved = current_cost - optimized_cost
    return LoadProfileComparison(
        current_daily_kwh=current_kwh,
        optimized_daily_kwh=optimized_kwh,
        current_daily_cost=current_cost,
        optimized_daily_cost=optimized_cost,
        current_monthly_cost=current_cost * config.days_per_month,
        optimized_monthly_cost=optimized_cost * config.days_per_month,
        saved=saved,
        saved_percentage=(saved / current_cost) * 100 if current_cost > 0 else 0.0,
    )


def load_profile_to_dataframe(points: Sequence[LoadProfilePoint]) -> pd.DataFrame:
    """Tabulate a load curve, one row per sample indexed by HH:MM.

    Per-device loads become ``load_kw_<device id>`` columns.
    """
    rows = []
    for point in points:
        row = {
            "time": point.time,
            "time_minutes": point.time_minutes,
            "hour": point.hour,
            "rate_band": point.rate_band.value,
            "rate": point.rate,
            "total_load_kw": point.total_load_kw,
            "cost": point.cost,
        }
        for device_id, load in point.device_loads_kw.items():
            row[f"load_kw_{device_id}"] = load
        rows.append(row)

    columns = ["time", "time_minutes", "hour", "rate_band", "rate", "total_load_kw", "cost"]
    if not rows:
        return pd.DataFrame(columns=columns).set_index("time")
    return pd.DataFrame(rows).set_index("time")
