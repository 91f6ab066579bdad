"""Unit tests for the notification registry."""

from __future__ import annotations

from datetime import datetime, timezone

from app.schemas import Category, Notification, Severity, UserPreferences
from datastore.kv_store import JsonKeyValueStore
from services.registry import DISMISSED_KEY, NotificationRegistry
from services.rules import NotificationEngine


def _notification(notification_id: str) -> Notification:
    return Notification(
        id=notification_id,
        category=Category.comfort,
        severity=Severity.info,
        title=notification_id,
        message="message",
        icon="droplets",
        timestamp=datetime(2026, 10, 16, tzinfo=timezone.utc),
    )


def _batch(*ids: str) -> list[Notification]:
    return [_notification(notification_id) for notification_id in ids]


def test_active_list_preserves_insertion_order() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("c", "a", "b"))

    assert [n.id for n in registry.active_list()] == ["c", "a", "b"]


def test_dismiss_removes_exactly_one_entry() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a", "b", "c"))

    assert registry.dismiss("b") is True

    assert [n.id for n in registry.active_list()] == ["a", "c"]
    assert len(registry) == 3


def test_dismiss_unknown_id_is_noop() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a"))

    assert registry.dismiss("missing") is False
    assert [n.id for n in registry.active_list()] == ["a"]


def test_dismiss_all_keeps_stored_count() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a", "b"))
    registry.dismiss("a")

    assert registry.dismiss_all() == 1

    assert registry.active_list() == []
    assert len(registry) == 2
    assert all(n.dismissed for n in registry.all())


def test_replace_discards_previous_batch() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a", "b"))

    registry.replace(_batch("c"))

    assert [n.id for n in registry.all()] == ["c"]


def test_replace_keeps_dismissal_for_rederived_ids() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a", "b"))
    registry.dismiss("a")

    registry.replace(_batch("a", "b"))

    assert [n.id for n in registry.active_list()] == ["b"]


def test_dismissal_forgotten_once_advisory_disappears() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a"))
    registry.dismiss("a")
    registry.replace(_batch("b"))

    registry.replace(_batch("a"))

    assert [n.id for n in registry.active_list()] == ["a"]


def test_returned_entries_are_copies() -> None:
    registry = NotificationRegistry()
    registry.replace(_batch("a"))

    registry.active_list()[0].dismissed = True

    assert [n.id for n in registry.active_list()] == ["a"]


def test_dismissals_persist_across_instances(tmp_path) -> None:
    store = JsonKeyValueStore(persistence_path=tmp_path / "store.json")
    registry = NotificationRegistry(store=store)
    registry.replace(_batch("a", "b"))
    registry.dismiss("b")

    reloaded = NotificationRegistry(
        store=JsonKeyValueStore(persistence_path=tmp_path / "store.json")
    )
    reloaded.replace(_batch("a", "b"))

    assert [n.id for n in reloaded.active_list()] == ["a"]


def test_malformed_dismissal_state_is_ignored() -> None:
    store = JsonKeyValueStore()
    store.put(DISMISSED_KEY, {"not": "a list"})

    registry = NotificationRegistry(store=store)
    registry.replace(_batch("a"))

    assert [n.id for n in registry.active_list()] == ["a"]


def test_dismissed_rain_warning_does_not_hide_next_day_after_rollover(
    reading_factory, day_factory
) -> None:
    engine = NotificationEngine(clock=lambda: datetime(2026, 10, 16, tzinfo=timezone.utc))
    registry = NotificationRegistry()
    reading = reading_factory()
    registry.replace(
        engine.analyze(reading, [day_factory(offset=1, precipitation_chance=80)], UserPreferences())
    )
    (warning,) = registry.active_list()
    registry.dismiss(warning.id)

    rolled = [
        day_factory(offset=2, precipitation_chance=95),
        day_factory(offset=3, precipitation_chance=20),
    ]
    registry.replace(engine.analyze(reading, rolled, UserPreferences()))

    active = registry.active_list()
    assert [n.id for n in active] == ["precipitation-high-chance-2026-10-18"]
    assert "95% chance of rain tomorrow" in active[0].message
    assert not any(n.dismissed for n in registry.all())
