"""
Tests for invoice_roi/core/storage.py

Each test gets its own SQLite file under pytest's tmp_path.
"""

from datetime import datetime

import pytest

from invoice_roi.core.models import ScenarioInput
from invoice_roi.core.storage import ScenarioStorage


def test_save_then_get_round_trips_all_fields(storage, example_scenario):
    """Every field except created_at comes back as saved."""
    storage.save(example_scenario)
    loaded = storage.get(example_scenario.id)

    assert loaded is not None
    assert loaded.model_dump(exclude={"created_at"}) == example_scenario.model_dump()
    assert loaded.to_input() == example_scenario


def test_save_stamps_created_at(storage, example_scenario):
    record = storage.save(example_scenario)

    stamped = datetime.fromisoformat(record.created_at)
    assert stamped.tzinfo is not None
    assert storage.get(example_scenario.id).created_at == record.created_at


def test_save_with_existing_id_overwrites(storage, example_scenario):
    """Overwrite semantics: one record, latest values, fresh timestamp."""
    first = storage.save(example_scenario)

    updated = example_scenario.model_copy(update={"scenario_name": "Renamed", "hourly_wage": 35.0})
    second = storage.save(updated)

    loaded = storage.get(example_scenario.id)
    assert loaded.scenario_name == "Renamed"
    assert loaded.hourly_wage == 35.0
    assert loaded.created_at == second.created_at
    assert second.created_at >= first.created_at
    assert len(storage.list()) == 1


def test_get_unknown_id_returns_none(storage):
    assert storage.get("does-not-exist") is None


def test_list_returns_summaries_only(storage, example_scenario):
    storage.save(example_scenario)
    summaries = storage.list()

    assert len(summaries) == 1
    assert set(summaries[0].model_dump().keys()) == {"id", "scenario_name", "created_at"}
    assert summaries[0].id == example_scenario.id
    assert summaries[0].scenario_name == example_scenario.scenario_name


def test_list_is_newest_first(storage, example_scenario, profitable_scenario):
    storage.save(example_scenario)
    storage.save(profitable_scenario)

    ids = [s.id for s in storage.list()]
    assert ids == [profitable_scenario.id, example_scenario.id]


def test_overwrite_keeps_list_position(storage, example_scenario, profitable_scenario):
    """Updating a scenario leaves it in place; only new ids go to the front."""
    storage.save(example_scenario)
    storage.save(profitable_scenario)
    storage.save(example_scenario.model_copy(update={"scenario_name": "Renamed"}))

    summaries = storage.list()
    assert [s.id for s in summaries] == [profitable_scenario.id, example_scenario.id]
    assert summaries[1].scenario_name == "Renamed"

    storage.save(example_scenario.model_copy(update={"id": "scn-new"}))
    assert storage.list()[0].id == "scn-new"


def test_delete_removes_scenario(storage, example_scenario):
    storage.save(example_scenario)
    storage.delete(example_scenario.id)

    assert storage.get(example_scenario.id) is None
    assert storage.list() == []


def test_delete_unknown_id_is_noop(storage, example_scenario):
    storage.save(example_scenario)
    storage.delete("never-saved")

    assert len(storage.list()) == 1


def test_save_requires_id(storage, example_payload):
    with pytest.raises(ValueError):
        storage.save(ScenarioInput(**example_payload))


def test_storage_persists_across_instances(tmp_path, example_scenario):
    db_path = tmp_path / "nested" / "scenarios.db"
    ScenarioStorage(db_path).save(example_scenario)

    assert ScenarioStorage(db_path).get(example_scenario.id) is not None


def test_get_stats_counts_scenarios(storage, example_scenario, profitable_scenario):
    storage.save(example_scenario)
    storage.save(profitable_scenario)

    stats = storage.get_stats()
    assert stats["total_scenarios"] == 2
    assert stats["database_path"] == str(storage.db_path)
