from __future__ import annotations
import copy
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

from settings import get_settings

logger = logging.getLogger(__name__)


class JsonKeyValueStore:
    """Durable key/value store backed by a single JSON document.

    Values must be JSON-serializable. They are deep-copied on the way in and
    out so callers never share state with the store.
    """

    def __init__(self, persistence_path: Optional[Path] = None) -> None:
        self._items: Dict[str, Any] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._items:
                return default
            return copy.deepcopy(self._items[key])

    def put(self, key: str, value: Any) -> None:
        # Fail before touching state when the value cannot be serialized.
        json.dumps(value)
        with self._lock:
            self._items[key] = copy.deepcopy(value)
            self._persist()

    def delete(self, key: str) -> None:
        with self._lock:
            if key in self._items:
                del self._items[key]
                self._persist()

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._items)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        self.persistence_path.write_text(json.dumps(self._items, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Ignoring unreadable store file",
                extra={"key": str(self.persistence_path)},
            )
            data = {}

        if not isinstance(data, dict):
            logger.warning(
                "Ignoring store file without a top-level object",
                extra={"key": str(self.persistence_path)},
            )
            data = {}

        self._items = data


@lru_cache
def build_default_store(path: Optional[str] = None) -> JsonKeyValueStore:
    settings = get_settings()
    store_path = settings.store_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return JsonKeyValueStore(persistence_path=persistence)
