"""In-memory collection of the latest notifications and their dismissal state."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from app.schemas import Notification
from datastore.kv_store import JsonKeyValueStore

logger = logging.getLogger(__name__)

DISMISSED_KEY = "dismissedNotifications"


class NotificationRegistry:
    """Holds the most recent analysis batch.

    Each ``replace`` discards the previous batch. Dismissals are remembered by
    notification id, so an advisory re-derived on the next refresh stays
    dismissed. With a store, the dismissed ids survive restarts.
    """

    def __init__(self, store: Optional[JsonKeyValueStore] = None) -> None:
        self._store = store
        self._entries: List[Notification] = []
        self._dismissed: Set[str] = self._load_dismissed()

    def __len__(self) -> int:
        return len(self._entries)

    def replace(self, batch: Iterable[Notification]) -> None:
        entries: List[Notification] = []
        for notification in batch:
            entry = notification.model_copy(deep=True)
            if entry.id in self._dismissed:
                entry.dismissed = True
            entries.append(entry)
        self._entries = entries
        self._dismissed = {entry.id for entry in entries if entry.dismissed}
        self._persist()

    def all(self) -> List[Notification]:
        return [entry.model_copy(deep=True) for entry in self._entries]

    def active_list(self) -> List[Notification]:
        return [entry.model_copy(deep=True) for entry in self._entries if not entry.dismissed]

    def dismiss(self, notification_id: str) -> bool:
        """Mark one notification dismissed. Unknown ids are ignored."""
        for entry in self._entries:
            if entry.id == notification_id:
                entry.dismissed = True
                self._dismissed.add(notification_id)
                self._persist()
                logger.info("Notification dismissed", extra={"notification_id": notification_id})
                return True
        logger.debug("Dismiss ignored for unknown id", extra={"notification_id": notification_id})
        return False

    def dismiss_all(self) -> int:
        """Mark every stored notification dismissed and return how many were active."""
        newly_dismissed = 0
        for entry in self._entries:
            if not entry.dismissed:
                entry.dismissed = True
                newly_dismissed += 1
            self._dismissed.add(entry.id)
        self._persist()
        logger.info(
            "All notifications dismissed", extra={"notification_count": newly_dismissed}
        )
        return newly_dismissed

    def _load_dismissed(self) -> Set[str]:
        if self._store is None:
            return set()
        raw = self._store.get(DISMISSED_KEY, [])
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            logger.warning("Ignoring malformed dismissal state", extra={"key": DISMISSED_KEY})
            return set()
        return set(raw)

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.put(DISMISSED_KEY, sorted(self._dismissed))
        except OSError as exc:
            logger.warning(
                "Could not persist dismissal state",
                extra={"key": DISMISSED_KEY, "reason": str(exc)},
            )
