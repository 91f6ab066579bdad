"""Loading and saving user preferences through the key/value store."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from app.schemas import NotificationToggles, UserPreferences
from datastore.kv_store import JsonKeyValueStore

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "weatherAppPreferences"

_FIELD_BY_ALIAS = {
    field.alias: name
    for name, field in UserPreferences.model_fields.items()
    if field.alias
}


def _merge(base: UserPreferences, partial: Mapping[str, Any]) -> UserPreferences:
    """Merge ``partial`` over ``base`` field by field.

    Keys may use either field names or their camelCase aliases. Nested
    notification toggles are merged individually.
    """
    merged: Dict[str, Any] = base.model_dump()
    for raw_key, value in partial.items():
        key = _FIELD_BY_ALIAS.get(raw_key, raw_key)
        if key == "notifications" and isinstance(value, Mapping):
            toggles = NotificationToggles.model_validate(
                {**merged["notifications"], **dict(value)}
            )
            merged["notifications"] = toggles.model_dump()
        else:
            merged[key] = value
    return UserPreferences.model_validate(merged)


class PreferenceStore:
    """Keeps the current preferences in memory and writes every change through."""

    def __init__(self, store: JsonKeyValueStore) -> None:
        self._store = store
        self._current = UserPreferences()

    @property
    def current(self) -> UserPreferences:
        return self._current.model_copy(deep=True)

    def load(self) -> UserPreferences:
        """Read persisted preferences, falling back to defaults on bad data."""
        raw = self._store.get(PREFERENCES_KEY)
        defaults = UserPreferences()
        if raw is None:
            self._current = defaults
        elif not isinstance(raw, Mapping):
            logger.warning("Ignoring malformed preferences", extra={"key": PREFERENCES_KEY})
            self._current = defaults
        else:
            try:
                self._current = _merge(defaults, raw)
            except ValidationError as exc:
                logger.warning(
                    "Ignoring invalid preferences",
                    extra={"key": PREFERENCES_KEY, "reason": exc.error_count()},
                )
                self._current = defaults
        return self.current

    def save(self, partial: Mapping[str, Any]) -> UserPreferences:
        """Merge ``partial`` into the current preferences and persist the result.

        Raises ``ValueError`` for unknown fields or invalid values, leaving the
        current preferences unchanged.
        """
        try:
            updated = _merge(self._current, partial)
        except ValidationError as exc:
            raise ValueError(f"Invalid preferences: {exc.errors()[0]['msg']}") from exc

        self._current = updated
        try:
            self._store.put(PREFERENCES_KEY, updated.model_dump(by_alias=True))
        except OSError:
            logger.exception("Failed to persist preferences", extra={"key": PREFERENCES_KEY})
            raise
        return self.current
