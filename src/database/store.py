"""
Knife Hit - Key-Value Stores

Durable storage behind the economy ledger. Every store tolerates missing
keys (the caller's default is returned). Failed writes are logged and
dropped; a failed read raises StoreReadError so the ledger can tell an
unreachable backend from an empty one.
"""

from __future__ import annotations

import copy
import logging
import queue
import threading
from typing import Any

from pydantic import ValidationError
from supabase import Client

from src.config.settings import Settings
from src.database.models import StoredValue
from src.engine.economy import KeyValueStore, StoreReadError

logger = logging.getLogger(__name__)


class MemoryStore:
    """Process-local store, used when Supabase is not configured and in tests."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def as_dict(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)


class SupabaseStore:
    """Stores values in the `kv_store` table, one row per profile and key."""

    def __init__(self, client: Client, profile_id: str, table: str = "kv_store") -> None:
        self.client = client
        self.profile_id = profile_id
        self.table = client.table(table)

    def get(self, key: str, default: Any = None) -> Any:
        """Fetch a value, returning ``default`` when missing or malformed.

        Raises:
            StoreReadError: If the query itself fails
        """
        try:
            data = (
                self.table
                .select("*")
                .eq("profile_id", self.profile_id)
                .eq("key", key)
                .execute()
            )
        except Exception as exc:
            logger.exception("Failed to read %s for profile %s", key, self.profile_id)
            raise StoreReadError(f"Could not read {key}") from exc

        if not data.data:
            return default
        try:
            row = StoredValue.model_validate(data.data[0])
        except ValidationError:
            logger.warning("Malformed row for %s: %r", key, data.data[0])
            return default
        return default if row.value is None else row.value

    def set(self, key: str, value: Any) -> None:
        """Insert or update a value."""
        try:
            (
                self.table
                .upsert(
                    {"profile_id": self.profile_id, "key": key, "value": value},
                    on_conflict="profile_id,key",
                )
                .execute()
            )
        except Exception:
            logger.exception("Failed to write %s for profile %s", key, self.profile_id)


_STOP = object()


class BackgroundWriteStore:
    """Wraps another store so writes happen on a daemon worker thread.

    Gameplay never waits for storage. Values written but not yet flushed are
    served from a local overlay so reads stay consistent.
    """

    def __init__(self, inner: KeyValueStore) -> None:
        self._inner = inner
        self._queue: queue.Queue = queue.Queue()
        self._pending: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._write_loop,
            daemon=True,
            name="kv-writer",
        )
        self._thread.start()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key in self._pending:
                return self._pending[key]
        return self._inner.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._pending[key] = value
        self._queue.put((key, value))

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until queued writes are done.

        Returns:
            True if the queue drained before ``timeout``
        """
        done = threading.Event()
        self._queue.put((_STOP, done))
        return done.wait(timeout)

    def close(self, timeout: float | None = 5.0) -> None:
        """Drain pending writes and stop the worker."""
        self.flush(timeout)
        self._queue.put((_STOP, None))
        self._thread.join(timeout)

    def _write_loop(self) -> None:
        while True:
            key, value = self._queue.get()
            if key is _STOP:
                if value is None:
                    return
                value.set()
                continue
            try:
                self._inner.set(key, value)
            except Exception:
                logger.exception("Background write failed for %s", key)
            finally:
                with self._lock:
                    if self._pending.get(key, _STOP) is value:
                        del self._pending[key]


def build_store(settings: Settings, client: Client | None = None) -> KeyValueStore:
    """Pick the durable store for the configured environment.

    Uses Supabase when credentials are configured (or a client is given),
    otherwise an in-memory store. Either way writes go through a
    BackgroundWriteStore.
    """
    if client is None and settings.has_supabase:
        from src.database.client import get_supabase_client

        try:
            client = get_supabase_client()
        except Exception:
            logger.exception("Supabase unavailable; keeping economy in memory")

    if client is not None:
        inner: KeyValueStore = SupabaseStore(client, settings.profile_id, settings.storage_table)
    else:
        inner = MemoryStore()
    return BackgroundWriteStore(inner)
