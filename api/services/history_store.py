"""
Recently viewed locations, kept in an injected key-value store.

The store is passed in rather than reached globally, so the same history
logic runs over an in-process dict in tests and a JSON file in the service.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

HISTORY_KEY = "locationHistory"
MAX_HISTORY_ITEMS = 20

# Fields copied from a location into its history entry
HISTORY_FIELDS = ["id", "name", "address", "city", "state", "latitude", "longitude", "icon"]


class KeyValueStore(Protocol):
    """Minimal string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store. Contents are lost on restart."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Store persisted as a single JSON object on disk."""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read key-value store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def clear(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class LocationHistory:
    """Most-recent-first list of locations a user has viewed."""

    def __init__(self, store: KeyValueStore, key: str = HISTORY_KEY,
                 max_items: int = MAX_HISTORY_ITEMS):
        self.store = store
        self.key = key
        self.max_items = max_items

    def get(self) -> List[Dict]:
        """Get history, most recently viewed first. Unreadable data yields []."""
        stored = self.store.get(self.key)
        if not stored:
            return []

        try:
            history = json.loads(stored)
        except json.JSONDecodeError as e:
            logger.error(f"Error reading history '{self.key}': {e}")
            return []

        if not isinstance(history, list):
            return []

        return sorted(
            (item for item in history if isinstance(item, dict)),
            key=lambda item: item.get("viewedAt") or "",
            reverse=True
        )

    def add(self, location: Dict) -> List[Dict]:
        """Record a view, moving the location to the top and capping the list."""
        entry = {field: location.get(field) for field in HISTORY_FIELDS}
        entry["viewedAt"] = datetime.now(timezone.utc).isoformat()

        history = [item for item in self.get() if item.get("id") != location.get("id")]
        updated = [entry, *history][:self.max_items]

        self.store.set(self.key, json.dumps(updated))
        return updated

    def remove(self, location_id: str) -> List[Dict]:
        """Remove one location from history"""
        history = [item for item in self.get() if item.get("id") != location_id]
        self.store.set(self.key, json.dumps(history))
        return history

    def clear(self) -> None:
        self.store.clear(self.key)


def history_for_user(store: KeyValueStore, user_id: str,
                     max_items: int = MAX_HISTORY_ITEMS) -> LocationHistory:
    """History scoped to one user within a shared store."""
    return LocationHistory(store, key=f"{HISTORY_KEY}:{user_id}", max_items=max_items)
