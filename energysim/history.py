"""
Comparison History

Named snapshots of a device list together with the savings it achieved,
kept newest first and bounded to the latest ``MAX_HISTORY_ITEMS``.

The JSON layout written by ``export_json``/``save_to_file`` is a list of
snapshot dictionaries and is what ``import_json``/``load_from_file``
accept.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from uuid import uuid4

import structlog

from energysim.config.settings import SimulationConfig
from energysim.exceptions import ComparisonNotFoundError, HistoryImportError
from energysim.optimization.aggregator import recompute
from energysim.optimization.device_models import MultiDeviceState, SelectedDevice

logger = structlog.get_logger(__name__)

MAX_HISTORY_ITEMS = 10


def _generate_comparison_id(timestamp: datetime) -> str:
    return f"comparison-{int(timestamp.timestamp() * 1000)}-{uuid4().hex[:9]}"


@dataclass
class ComparisonSnapshot:
    """A saved device list and the savings it produced.

    Attributes:
        id: Snapshot identifier
        timestamp: When the snapshot was taken
        name: User-facing label
        devices: Serialized SelectedDevice dictionaries
        monthly_savings: Scenario A minus scenario C per month
        annual_savings: Scenario A minus scenario C per year
    """

    id: str
    timestamp: datetime
    name: str
    devices: List[Dict[str, Any]] = field(default_factory=list)
    monthly_savings: float = 0.0
    annual_savings: float = 0.0

    def to_devices(self) -> List[SelectedDevice]:
        """Rebuild the saved device list."""
        return [SelectedDevice.from_dict(item) for item in self.devices]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "name": self.name,
            "devices": self.devices,
            "monthly_savings": self.monthly_savings,
            "annual_savings": self.annual_savings,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonSnapshot":
        return cls(
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            name=data.get("name") or data["id"],
            devices=list(data.get("devices", [])),
            monthly_savings=float(data.get("monthly_savings", 0.0)),
            annual_savings=float(data.get("annual_savings", 0.0)),
        )


def create_snapshot(
    devices: Sequence[SelectedDevice],
    state: MultiDeviceState,
    name: Optional[str] = None,
) -> ComparisonSnapshot:
    """Capture a device list and its A-versus-C savings."""
    timestamp = datetime.now()
    return ComparisonSnapshot(
        id=_generate_comparison_id(timestamp),
        timestamp=timestamp,
        name=name or f"Comparison {timestamp.date().isoformat()}",
        devices=[device.to_dict() for device in devices],
        monthly_savings=state.monthly_savings,
        annual_savings=state.annual_savings,
    )


class ComparisonHistory:
    """Bounded, newest-first list of comparison snapshots."""

    def __init__(self, max_items: int = MAX_HISTORY_ITEMS):
        if max_items < 1:
            raise ValueError(f"max_items must be positive, got {max_items}")
        self.max_items = max_items
        self._items: List[ComparisonSnapshot] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[ComparisonSnapshot]:
        """Snapshots, newest first."""
        return list(self._items)

    def save(
        self,
        devices: Sequence[SelectedDevice],
        state: MultiDeviceState,
        name: Optional[str] = None,
    ) -> ComparisonSnapshot:
        """Record a comparison at the front of the history.

        Args:
            devices: Device list being compared
            state: State computed from that list
            name: Optional label (defaults to "Comparison <date>")

        Returns:
            The stored snapshot
        """
        snapshot = create_snapshot(devices, state, name)
        self._items.insert(0, snapshot)
        self._items = self._items[: self.max_items]
        logger.info(
            "comparison_saved",
            comparison_id=snapshot.id,
            device_count=len(snapshot.devices),
            history_size=len(self._items),
        )
        return snapshot

    def get(self, comparison_id: str) -> ComparisonSnapshot:
        for item in self._items:
            if item.id == comparison_id:
                return item
        raise ComparisonNotFoundError(f"No saved comparison with id {comparison_id}")

    def delete(self, comparison_id: str) -> None:
        """Remove a snapshot (no-op when absent)."""
        self._items = [item for item in self._items if item.id != comparison_id]
        logger.info("comparison_deleted", comparison_id=comparison_id)

    def rename(self, comparison_id: str, name: str) -> ComparisonSnapshot:
        snapshot = self.get(comparison_id)
        snapshot.name = name
        logger.info("comparison_renamed", comparison_id=comparison_id, name=name)
        return snapshot

    def clear(self) -> None:
        self._items = []
        logger.info("comparison_history_cleared")

    def restore(
        self,
        comparison_id: str,
        config: Optional[SimulationConfig] = None,
    ) -> Tuple[List[SelectedDevice], MultiDeviceState]:
        """Rebuild a saved device list and recompute its state.

        Savings are recomputed rather than read back, so a snapshot
        restored under a different tariff reflects that tariff.
        """
        devices = self.get(comparison_id).to_devices()
        return devices, recompute(devices, config)

    def export_json(self) -> str:
        """Serialize the history, newest first."""
        return json.dumps([item.to_dict() for item in self._items], indent=2)

    def import_json(self, json_data: str) -> int:
        """Merge snapshots from a JSON payload in front of the existing ones.

        Imported snapshots come first, only the first of repeated ids in the
        payload is kept, existing snapshots with the same id are dropped,
        and the result is trimmed to ``max_items``.

        Args:
            json_data: JSON array of snapshot dictionaries

        Returns:
            Number of snapshots imported

        Raises:
            HistoryImportError: If the payload is not a valid snapshot list
        """
        try:
            payload = json.loads(json_data)
        except ValueError as e:
            logger.warning("comparison_history_import_rejected", reason="invalid_json")
            raise HistoryImportError("Invalid history payload: not JSON", e)

        if not isinstance(payload, list):
            logger.warning("comparison_history_import_rejected", reason="not_a_list")
            raise HistoryImportError("Invalid history payload: expected an array")

        try:
            imported = [ComparisonSnapshot.from_dict(item) for item in payload]
            for snapshot in imported:
                snapshot.to_devices()
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("comparison_history_import_rejected", reason="invalid_item")
            raise HistoryImportError(f"Invalid history item: {e}", e)

        unique = {}
        for snapshot in imported:
            unique.setdefault(snapshot.id, snapshot)
        imported = list(unique.values())

        imported_ids = set(unique)
        merged = imported + [item for item in self._items if item.id not in imported_ids]
        self._items = merged[: self.max_items]

        logger.info(
            "comparison_history_imported",
            imported=len(imported),
            history_size=len(self._items),
        )
        return len(imported)

    def save_to_file(self, filepath: Union[str, Path]) -> None:
        with open(filepath, "w") as f:
            f.write(self.export_json())

    def load_from_file(self, filepath: Union[str, Path]) -> int:
        """Import snapshots from a file written by save_to_file."""
        with open(filepath, "r") as f:
            return self.import_json(f.read())
