"""Unit tests for loading and saving preferences."""

from __future__ import annotations

import pytest

from app.schemas import UserPreferences
from datastore.kv_store import JsonKeyValueStore
from services.preferences import PREFERENCES_KEY, PreferenceStore


def test_load_returns_defaults_when_nothing_stored() -> None:
    prefs = PreferenceStore(JsonKeyValueStore()).load()

    assert prefs == UserPreferences()
    assert prefs.temperature_unit == "celsius"
    assert prefs.wind_unit == "kmh"
    assert prefs.time_format == "12"
    assert prefs.notification_timing == "both"
    assert prefs.notifications.model_dump() == {
        "temperature": True,
        "precipitation": True,
        "wind": True,
        "comfort": True,
    }


def test_partial_blob_is_merged_over_defaults() -> None:
    store = JsonKeyValueStore()
    store.put(PREFERENCES_KEY, {"temperatureUnit": "fahrenheit", "notifications": {"wind": False}})

    prefs = PreferenceStore(store).load()

    assert prefs.temperature_unit == "fahrenheit"
    assert prefs.wind_unit == "kmh"
    assert prefs.notifications.wind is False
    assert prefs.notifications.comfort is True


@pytest.mark.parametrize(
    "blob",
    ["not a mapping", ["list"], {"windUnit": "knots"}, {"unknownField": 1}],
)
def test_corrupt_blob_falls_back_to_defaults(blob) -> None:
    store = JsonKeyValueStore()
    store.put(PREFERENCES_KEY, blob)

    assert PreferenceStore(store).load() == UserPreferences()


def test_save_then_load_changes_only_given_field(tmp_path) -> None:
    path = tmp_path / "store.json"
    preferences = PreferenceStore(JsonKeyValueStore(persistence_path=path))
    preferences.load()
    preferences.save({"temperatureUnit": "fahrenheit", "timeFormat": "24"})
    before = preferences.current

    preferences.save({"windUnit": "mph"})

    reloaded = PreferenceStore(JsonKeyValueStore(persistence_path=path)).load()
    assert reloaded.wind_unit == "mph"
    assert reloaded.model_dump(exclude={"wind_unit"}) == before.model_dump(exclude={"wind_unit"})


def test_save_writes_full_camel_case_object() -> None:
    store = JsonKeyValueStore()
    preferences = PreferenceStore(store)

    preferences.save({"wind_unit": "mph"})

    assert store.get(PREFERENCES_KEY) == {
        "temperatureUnit": "celsius",
        "windUnit": "mph",
        "timeFormat": "12",
        "notifications": {
            "temperature": True,
            "precipitation": True,
            "wind": True,
            "comfort": True,
        },
        "notificationTiming": "both",
    }


def test_save_merges_individual_toggles() -> None:
    preferences = PreferenceStore(JsonKeyValueStore())
    preferences.save({"notifications": {"wind": False}})

    updated = preferences.save({"notifications": {"comfort": False}})

    assert updated.notifications.wind is False
    assert updated.notifications.comfort is False
    assert updated.notifications.temperature is True


def test_invalid_save_leaves_state_unchanged() -> None:
    store = JsonKeyValueStore()
    preferences = PreferenceStore(store)
    preferences.save({"windUnit": "mph"})

    with pytest.raises(ValueError):
        preferences.save({"windUnit": "knots"})
    with pytest.raises(ValueError):
        preferences.save({"colour": "blue"})

    assert preferences.current.wind_unit == "mph"
    assert store.get(PREFERENCES_KEY)["windUnit"] == "mph"


def test_write_failure_is_raised_after_memory_update() -> None:
    class FailingStore(JsonKeyValueStore):
        def put(self, key, value) -> None:
            raise OSError("quota exceeded")

    preferences = PreferenceStore(FailingStore())

    with pytest.raises(OSError):
        preferences.save({"timeFormat": "24"})

    assert preferences.current.time_format == "24"
