"""
In-memory store of blocked countries
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.monitoring.metrics import record_expired_blocks, update_blocked_countries
from modules.countries.models import CountryBlockEntry

logger = logging.getLogger("app")


class CountryBlockStore:
    """
    Потокобезопасное хранилище блокировок стран.

    At most one entry per country code. Every operation runs under a single
    lock, so add-if-absent and remove are atomic per key. Expired temporal
    entries are evicted lazily by point reads (get / is_blocked / remove) and
    eagerly by sweep_expired(). The blocked_countries_count gauge is set
    under the same lock, so it always matches the last mutation.
    """

    def __init__(self):
        self._entries: Dict[str, CountryBlockEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(country_code: str) -> str:
        return country_code.strip().upper()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _add_if_absent(self, entry: CountryBlockEntry) -> bool:
        key = self._key(entry.country_code)
        with self._lock:
            current = self._entries.get(key)
            if current is not None and not current.is_expired(self._now()):
                return False
            # Просроченная временная запись не мешает новой блокировке
            self._entries[key] = entry
            update_blocked_countries(len(self._entries))
        return True

    def add(self, entry: CountryBlockEntry) -> bool:
        """Add a permanent block. False if the code is already blocked."""
        return self._add_if_absent(entry)

    def add_temporal(self, entry: CountryBlockEntry) -> bool:
        """Add a temporal block. Any existing block (permanent or temporal) rejects it."""
        return self._add_if_absent(entry)

    def remove(self, country_code: str) -> bool:
        key = self._key(country_code)
        with self._lock:
            entry = self._entries.pop(key, None)
            update_blocked_countries(len(self._entries))

        if entry is None:
            return False
        if entry.is_expired(self._now()):
            record_expired_blocks("lazy")
            return False
        return True

    def get(self, country_code: str) -> Optional[CountryBlockEntry]:
        key = self._key(country_code)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_expired(self._now()):
                return entry
            del self._entries[key]
            update_blocked_countries(len(self._entries))

        logger.debug({
            "event": "temporal_block_expired",
            "country_code": key,
            "path": "lazy",
        })
        record_expired_blocks("lazy")
        return None

    def is_blocked(self, country_code: str) -> bool:
        return self.get(country_code) is not None

    def list_all(self, filter_expired: bool = True) -> List[CountryBlockEntry]:
        """Snapshot of all entries. Read-only: expired ones are hidden, not evicted."""
        with self._lock:
            entries = list(self._entries.values())

        if not filter_expired:
            return entries

        now = self._now()
        return [e for e in entries if not e.is_expired(now)]

    def sweep_expired(self) -> int:
        """
        Remove every expired temporal entry.

        Returns:
            Number of removed entries
        """
        now = self._now()
        removed = 0

        with self._lock:
            for key, entry in list(self._entries.items()):
                try:
                    expired = entry.is_expired(now)
                except (AttributeError, TypeError) as e:
                    logger.error({
                        "event": "temporal_block_sweep_skipped",
                        "country_code": key,
                        "error": str(e),
                    })
                    continue

                if expired:
                    del self._entries[key]
                    removed += 1
            update_blocked_countries(len(self._entries))

        record_expired_blocks("sweep", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
