"""Best-effort key-value persistence for sessions and final results.

Mirrors browser session storage: flat JSON strings under fixed keys.
Every failure is logged and swallowed because the in-memory Session stays
valid regardless of what was persisted.
"""

import json
import logging
import os
import re
from typing import Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from game.errors import PersistenceFailure
from game.models import FinalResult, Session

logger = logging.getLogger(__name__)

SESSION_KEY = "tongue-twister-session"
FINAL_RESULT_KEY = "tongue-twister-result"

ModelT = TypeVar("ModelT", bound=BaseModel)


class KeyValueStore:
    """Interface for string key-value stores.

    Implementations raise ``PersistenceFailure`` on I/O problems; the module
    level helpers are the ones that swallow them.
    """

    def save(self, key: str, value: str) -> None:
        raise NotImplementedError

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store, one per browser session."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def save(self, key: str, value: str) -> None:
        self._data[key] = value

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """One JSON file per key under a directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return os.path.join(self.directory, f"{safe_key}.json")

    def save(self, key: str, value: str) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(self._path(key), "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            raise PersistenceFailure(f"Could not save '{key}': {e}") from e

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise PersistenceFailure(f"Could not load '{key}': {e}") from e

    def clear(self, key: str) -> None:
        try:
            os.remove(self._path(key))
            # Drop the per-session directory once nothing is left in it.
            if not os.listdir(self.directory):
                os.rmdir(self.directory)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceFailure(f"Could not clear '{key}': {e}") from e


# ============================================================================
# BEST-EFFORT HELPERS
# ============================================================================


def _save_model(store: Optional[KeyValueStore], key: str, model: BaseModel) -> None:
    if store is None:
        return
    try:
        store.save(key, model.model_dump_json())
    except PersistenceFailure as e:
        logger.warning("[STORE] Save failed for %s: %s", key, e)


def _load_model(
    store: Optional[KeyValueStore], key: str, model_cls: Type[ModelT]
) -> Optional[ModelT]:
    if store is None:
        return None
    try:
        raw = store.load(key)
    except PersistenceFailure as e:
        logger.warning("[STORE] Load failed for %s: %s", key, e)
        return None
    if not raw:
        return None
    try:
        return model_cls.model_validate_json(raw)
    except (ValidationError, json.JSONDecodeError) as e:
        logger.warning("[STORE] Discarding unreadable %s record: %s", key, e)
        return None


def _clear_key(store: Optional[KeyValueStore], key: str) -> None:
    if store is None:
        return
    try:
        store.clear(key)
    except PersistenceFailure as e:
        logger.warning("[STORE] Clear failed for %s: %s", key, e)


def save_session(store: Optional[KeyValueStore], session: Session) -> None:
    _save_model(store, SESSION_KEY, session)


def load_session(store: Optional[KeyValueStore]) -> Optional[Session]:
    return _load_model(store, SESSION_KEY, Session)


def clear_session(store: Optional[KeyValueStore]) -> None:
    _clear_key(store, SESSION_KEY)


def save_final_result(store: Optional[KeyValueStore], result: FinalResult) -> None:
    _save_model(store, FINAL_RESULT_KEY, result)


def load_final_result(store: Optional[KeyValueStore]) -> Optional[FinalResult]:
    return _load_model(store, FINAL_RESULT_KEY, FinalResult)


def clear_final_result(store: Optional[KeyValueStore]) -> None:
    _clear_key(store, FINAL_RESULT_KEY)


def create_store(storage_dir: Optional[str] = None) -> KeyValueStore:
    """File-backed store when a directory is configured, else in-memory."""
    if storage_dir:
        logger.info("[STORE] Using JSON file store at %s", storage_dir)
        return JsonFileStore(storage_dir)
    return MemoryStore()
