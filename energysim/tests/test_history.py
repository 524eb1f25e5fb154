"""
Tests for comparison snapshots and the bounded history.
"""

import json

import pytest

from energysim.exceptions import ComparisonNotFoundError, HistoryImportError
from energysim.history import (
    MAX_HISTORY_ITEMS,
    ComparisonHistory,
    ComparisonSnapshot,
    create_snapshot,
)
from energysim.optimization.aggregator import recompute


@pytest.fixture
def household_state(household, config):
    return recompute(household, config)


@pytest.fixture
def history():
    return ComparisonHistory()


class TestComparisonSnapshot:
    def test_create_snapshot(self, household, household_state):
        snapshot = create_snapshot(household, household_state, "Evening cooking")

        assert snapshot.id.startswith("comparison-")
        assert snapshot.name == "Evening cooking"
        assert len(snapshot.devices) == 3
        assert snapshot.monthly_savings == pytest.approx(household_state.monthly_savings)
        assert snapshot.annual_savings == pytest.approx(household_state.annual_savings)

    def test_default_name_uses_date(self, household, household_state):
        snapshot = create_snapshot(household, household_state)

        assert snapshot.name == f"Comparison {snapshot.timestamp.date().isoformat()}"

    def test_serialization(self, household, household_state):
        snapshot = create_snapshot(household, household_state)
        restored = ComparisonSnapshot.from_dict(json.loads(json.dumps(snapshot.to_dict())))

        assert restored == snapshot
        assert [d.id for d in restored.to_devices()] == [d.id for d in household]


class TestComparisonHistory:
    """Test suite for history management"""

    def test_newest_first(self, history, household, household_state):
        first = history.save(household, household_state, "first")
        second = history.save(household, household_state, "second")

        assert [item.id for item in history.items] == [second.id, first.id]

    def test_bounded(self, history, household, household_state):
        saved = [history.save(household, household_state, f"run {i}") for i in range(12)]

        assert len(history) == MAX_HISTORY_ITEMS
        assert history.items[0].id == saved[-1].id
        assert saved[0].id not in {item.id for item in history.items}

    def test_get_missing(self, history):
        with pytest.raises(ComparisonNotFoundError):
            history.get("comparison-missing")

    def test_rename(self, history, household, household_state):
        snapshot = history.save(household, household_state)
        history.rename(snapshot.id, "Renamed")

        assert history.get(snapshot.id).name == "Renamed"

    def test_delete_and_clear(self, history, household, household_state):
        first = history.save(household, household_state)
        history.save(household, household_state)

        history.delete(first.id)
        assert len(history) == 1

        history.clear()
        assert len(history) == 0

    def test_restore_recomputes(self, history, household, household_state, config):
        snapshot = history.save(household, household_state)

        devices, state = history.restore(snapshot.id, config)

        assert [d.id for d in devices] == [d.id for d in household]
        assert state.monthly_savings == pytest.approx(household_state.monthly_savings)

    def test_custom_bound(self):
        with pytest.raises(ValueError):
            ComparisonHistory(max_items=0)


class TestHistoryImportExport:
    def test_export_import(self, history, household, household_state):
        history.save(household, household_state, "saved")
        other = ComparisonHistory()

        assert other.import_json(history.export_json()) == 1
        assert other.items[0].name == "saved"

    def test_imported_items_go_first(self, history, household, household_state):
        source = ComparisonHistory()
        imported = source.save(household, household_state, "imported")
        existing = history.save(household, household_state, "existing")

        history.import_json(source.export_json())

        assert [item.id for item in history.items] == [imported.id, existing.id]

    def test_import_trims(self, history, household, household_state):
        source = ComparisonHistory()
        for i in range(8):
            source.save(household, household_state, f"imported {i}")
        for i in range(5):
            history.save(household, household_state, f"existing {i}")

        history.import_json(source.export_json())

        assert len(history) == MAX_HISTORY_ITEMS
        assert [item.name for item in history.items[:8]] == [f"imported {i}" for i in range(7, -1, -1)]

    def test_import_replaces_same_id(self, history, household, household_state):
        snapshot = history.save(household, household_state, "old name")
        payload = json.loads(history.export_json())
        payload[0]["name"] = "new name"

        history.import_json(json.dumps(payload))

        assert len(history) == 1
        assert history.get(snapshot.id).name == "new name"

    def test_repeated_ids_keep_first(self, history, household, household_state):
        source = ComparisonHistory()
        snapshot = source.save(household, household_state, "first copy")
        payload = json.loads(source.export_json())
        payload.append(dict(payload[0], name="second copy"))

        assert history.import_json(json.dumps(payload)) == 1
        assert len(history) == 1
        assert history.get(snapshot.id).name == "first copy"

    @pytest.mark.parametrize("payload", [
        "not json",
        '{"id": "comparison-1"}',
        '[{"name": "no id"}]',
        '[{"id": "c", "timestamp": "2024-01-01T00:00:00", "devices": [{"device": {}}]}]',
    ])
    def test_invalid_payload(self, history, payload):
        with pytest.raises(HistoryImportError):
            history.import_json(payload)

        assert len(history) == 0

    def test_file_round_trip(self, history, household, household_state, tmp_path):
        history.save(household, household_state, "on disk")
        path = tmp_path / "history.json"

        history.save_to_file(path)
        restored = ComparisonHistory()

        assert restored.load_from_file(path) == 1
        assert restored.items[0].name == "on disk"
