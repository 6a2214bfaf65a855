from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from app.models.survey import Answer, SessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreResult:
    """Outcome of a persistence call."""

    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "StoreResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: BaseException | str) -> "StoreResult":
        return cls(ok=False, error=str(error))


class KeyValueStorage(Protocol):
    """String key to string value storage, shaped like browser local storage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStorage(KeyValueStorage):
    """Dictionary-backed storage used by tests and embedded sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._items


class FileKeyValueStorage(KeyValueStorage):
    """Simple file-backed implementation holding every key in one JSON object."""

    def __init__(self, storage_path: Path) -> None:
        self._path = Path(storage_path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all_unlocked().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            payload = self._read_all_unlocked()
            payload[key] = value
            self._write_all_unlocked(payload)

    def _read_all_unlocked(self) -> Dict[str, str]:
        if not self._path.is_file():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable storage file %s", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write_all_unlocked(self, payload: Dict[str, str]) -> None:
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class SessionStore:
    """Reads and writes session records in a key-value storage."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load(self, session_id: str) -> List[Answer]:
        """Return the answers stored for a session, or an empty list."""

        record = self.load_record(session_id)
        if record is None:
            return []
        return list(record.answers)

    def load_record(self, session_id: str) -> Optional[SessionRecord]:
        """Return the full stored record, or ``None`` when absent or unparsable."""

        try:
            raw_value = self._storage.get_item(session_id)
        except OSError as exc:
            logger.error("Could not read session %s: %s", session_id, exc)
            return None
        if raw_value is None:
            return None

        try:
            return SessionRecord.model_validate(json.loads(raw_value))
        except (json.JSONDecodeError, ValidationError):
            logger.warning("Discarding unparsable record for session %s", session_id)
            return None

    def save(self, session_id: str, payload: SessionRecord | Dict[str, Any]) -> StoreResult:
        """Serialize ``payload`` and replace whatever is stored for the session."""

        if isinstance(payload, SessionRecord):
            payload = payload.to_payload()

        try:
            serialized = json.dumps(payload)
            self._storage.set_item(session_id, serialized)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Could not save session %s: %s", session_id, exc)
            return StoreResult.failure(exc)

        logger.debug("Saved session %s", session_id)
        return StoreResult.success()


_STORE_INSTANCE: Optional[SessionStore] = None
_STORE_LOCK = threading.Lock()


def get_session_store() -> SessionStore:
    """Return the shared session store backed by the configured storage file."""

    global _STORE_INSTANCE
    if _STORE_INSTANCE is None:
        with _STORE_LOCK:
            if _STORE_INSTANCE is None:
                from app.core.config import settings

                _STORE_INSTANCE = SessionStore(FileKeyValueStorage(settings.storage_path))
    return _STORE_INSTANCE


__all__ = [
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
    "KeyValueStorage",
    "SessionStore",
    "StoreResult",
    "get_session_store",
]
