"""Key-value stores with optional per-key expiry."""

import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Protocol

from teamfeed.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Protocol for string key-value stores."""

    def get(self, key: str) -> str | None:
        """Return the value for key, or None if absent or expired."""
        ...

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store value under key, expiring after ttl seconds if given."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class MemoryStore:
    """In-process store. Used for tests and single-process development."""

    def __init__(self, clock=time.time):
        self._data: dict[str, tuple[str, float | None]] = {}
        self._clock = clock

    def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        self._data[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently held, expired or not."""
        return list(self._data)
class FileStore:
    """File-backed store: one JSON document per key.

    Each file holds ``{"key", "value", "expires_at"}``. File names are the
    SHA-1 of the key so arbitrary keys are safe on disk. Writes go to a
    temporary file that is renamed over the entry, so readers see either the
    old or the new document.
    """

    def __init__(self, store_dir: Path, clock=time.time):
        self.store_dir = store_dir
        self._clock = clock

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.store_dir / f"{digest}.json"

    def _load(self, key: str) -> dict | None:
        try:
            data = json.loads(self._path(key).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreUnavailableError(f"Could not read store entry {key}: {e}")
        if not isinstance(data, dict):
            raise json.JSONDecodeError("Store entry is not an object", "", 0)
        return data

    def get(self, key: str) -> str | None:
        try:
            data = self._load(key)
        except json.JSONDecodeError:
            # Only delete entries that fail a second read too
            try:
                data = self._load(key)
            except json.JSONDecodeError:
                logger.warning(f"Discarding corrupt store entry for {key}")
                self.delete(key)
                return None
        if data is None:
            return None

        expires_at = data.get("expires_at")
        if expires_at is not None and self._clock() >= expires_at:
            self.delete(key)
            return None
        return data.get("value")

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        payload = {"key": key, "value": value, "expires_at": expires_at}
        tmp_name = None
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.store_dir, suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                json.dump(payload, f)
            os.replace(tmp_name, self._path(key))
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreUnavailableError(f"Could not write store entry {key}: {e}")

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Could not delete store entry {key}: {e}")
