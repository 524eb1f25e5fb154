"""
High-Level Household Simulation API

Owns the mutable device list and keeps the derived household state in sync
with it: every mutation triggers a full recomputation.

Features:
- Device registration from the catalog or as ready SelectedDevices
- Per-device edits and hour toggling
- Demonstration household preset
- Tariff regime comparison
- JSON export/import of the device list
"""

import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import structlog

from energysim import catalog
from energysim.config.settings import SimulationConfig, resolve_config
from energysim.exceptions import DeviceNotFoundError
from energysim.optimization.aggregator import recompute
from energysim.optimization.device_models import (
    AlternativeFuel,
    MultiDeviceState,
    SelectedDevice,
)
from energysim.optimization.tariff import create_time_blocks

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "duration",
    "time_blocks",
    "selected_hours",
    "wattage",
    "alternative_fuel",
    "meals_per_day",
)


class HouseholdSimulator:
    """Stateful wrapper around the pure household calculation.

    Example:
        simulator = HouseholdSimulator()
        simulator.add_catalog_device("fridge", range(24), duration=24)
        simulator.add_catalog_device("induction-cooker", [19], duration=1, fuel_type="lpg")
        print(simulator.state.summary())
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        """Initialize the simulator.

        Args:
            config: Optional simulation config (process default if omitted)
        """
        self.config = resolve_config(config)
        self.devices: List[SelectedDevice] = []
        self._last_state: Optional[MultiDeviceState] = None
        self.recompute()

    def recompute(self) -> MultiDeviceState:
        """Rebuild the household state from the current device list."""
        self._last_state = recompute(self.devices, self.config)
        return self._last_state

    @property
    def state(self) -> MultiDeviceState:
        """Household state of the current device list."""
        if self._last_state is None:
            return self.recompute()
        return self._last_state

    def get_last_state(self) -> Optional[MultiDeviceState]:
        return self._last_state

    def add_device(self, device: SelectedDevice) -> "HouseholdSimulator":
        """Add a configured device.

        Args:
            device: Device to add

        Returns:
            Self for method chaining
        """
        if any(d.id == device.id for d in self.devices):
            raise ValueError(f"Device '{device.id}' already exists")

        self.devices.append(device)
        logger.debug("device_added", device_id=device.id, catalog_id=device.device.id)
        self.recompute()
        return self

    def add_catalog_device(
        self,
        device_id: str,
        selected_hours: Iterable[int] = (),
        **kwargs,
    ) -> "HouseholdSimulator":
        """Add a catalog device bound to a schedule.

        Args:
            device_id: Catalog id (e.g. "fridge", "induction-cooker")
            selected_hours: Hours of day the device is used
            **kwargs: duration, wattage, fuel_type, meals_per_day

        Returns:
            Self for method chaining
        """
        device = catalog.create_selected_device(
            device_id, selected_hours, config=self.config, **kwargs
        )
        return self.add_device(device)

    def get_device(self, device_id: str) -> SelectedDevice:
        """Get a device of the list by instance id."""
        for device in self.devices:
            if device.id == device_id:
                return device
        raise DeviceNotFoundError(f"No device with id {device_id}")

    def update_device(self, device_id: str, **updates: Any) -> "HouseholdSimulator":
        """Replace fields of one device.

        Accepted fields: duration, time_blocks, selected_hours, wattage,
        alternative_fuel, meals_per_day. The device keeps its id; the
        updated device is validated as a whole.

        Returns:
            Self for method chaining
        """
        unknown = set(updates) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        current = self.get_device(device_id)
        changes: Dict[str, Any] = {}
        if "duration" in updates:
            changes["duration"] = updates["duration"]
        if "time_blocks" in updates:
            changes["time_blocks"] = list(updates["time_blocks"])
        if "selected_hours" in updates:
            changes["time_blocks"] = create_time_blocks(updates["selected_hours"], self.config)
        if "wattage" in updates:
            changes["device"] = current.device.with_wattage(updates["wattage"])
        if "alternative_fuel" in updates:
            fuel = updates["alternative_fuel"]
            if fuel is not None and not isinstance(fuel, AlternativeFuel):
                fuel = catalog.get_alternative_fuel(fuel)
            changes["alternative_fuel"] = fuel
        if "meals_per_day" in updates:
            changes["meals_per_day"] = updates["meals_per_day"]

        updated = replace(current, **changes)
        self.devices = [updated if d.id == device_id else d for d in self.devices]
        logger.debug("device_updated", device_id=device_id, fields=sorted(updates))
        self.recompute()
        return self

    def toggle_time_block(self, device_id: str, hour: int) -> "HouseholdSimulator":
        """Flip one hour of a device's schedule.

        Returns:
            Self for method chaining
        """
        self.get_device(device_id).toggle_hour(hour)
        self.recompute()
        return self

    def remove_device(self, device_id: str) -> "HouseholdSimulator":
        """Remove a device by instance id (no-op when absent).

        Returns:
            Self for method chaining
        """
        self.devices = [d for d in self.devices if d.id != device_id]
        self.recompute()
        return self

    def clear_devices(self) -> "HouseholdSimulator":
        """Remove all devices.

        Returns:
            Self for method chaining
        """
        self.devices = []
        self.recompute()
        return self

    def load_devices(self, devices: Iterable[SelectedDevice]) -> "HouseholdSimulator":
        """Replace the device list.

        Returns:
            Self for method chaining
        """
        self.devices = list(devices)
        self.recompute()
        return self

    def load_default_scenario(self) -> "HouseholdSimulator":
        """Replace the device list with the demonstration household.

        Returns:
            Self for method chaining
        """
        return self.load_devices(catalog.create_default_scenario(self.config))

    def compare_tariffs(
        self,
        configs: Dict[str, SimulationConfig],
    ) -> Dict[str, MultiDeviceState]:
        """Compute the current household under several tariff regimes.

        Args:
            configs: Mapping of regime name to simulation config

        Returns:
            Mapping of regime name to MultiDeviceState
        """
        return {name: recompute(self.devices, config) for name, config in configs.items()}

    def export_to_json(self, filepath: Union[str, Path]) -> None:
        """Export the device list and its computed state to a JSON file.

        Args:
            filepath: Output file path
        """
        data = {
            "timestamp": datetime.now().isoformat(),
            "config": self.config.to_dict(),
            "state": self.state.to_dict(),
        }

        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)

    def import_devices_from_json(self, filepath: Union[str, Path]) -> "HouseholdSimulator":
        """Append devices from a JSON file.

        Accepts either a file written by export_to_json or a plain
        ``{"devices": [...]}`` document.

        Returns:
            Self for method chaining
        """
        with open(filepath, "r") as f:
            data = json.load(f)

        device_data = data.get("state", data).get("devices", [])
        imported = [SelectedDevice.from_dict(item) for item in device_data]

        known_ids = {d.id for d in self.devices}
        for device in imported:
            if device.id in known_ids:
                raise ValueError(f"Device '{device.id}' already exists")
            known_ids.add(device.id)

        self.devices = self.devices + imported
        self.recompute()
        return self
