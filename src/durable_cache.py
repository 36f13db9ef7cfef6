"""
Durable cache for the last known ship booking.

Keeps one envelope {"data": <ShipInfo dict>, "timestamp": <epoch ms>} under a
fixed key in a KeyValueStore and answers freshness questions about it.
Never contacts the network.

Reads never raise: an unreadable or corrupted entry is reported as absent and
removed so the next read starts clean.  Writes and explicit clears raise
PersistenceError.
"""

import json
import logging
from dataclasses import dataclass
from datetime import timedelta

from src.adapters.ports import ShipInfo
from src.domain.clock import Clock, now_ms
from src.domain.errors import PersistenceError
from src.domain.key_value_store import KeyValueStore

log = logging.getLogger(__name__)

CACHE_KEY = "ship_info_data_cache"
DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=30)


@dataclass(frozen=True)
class CacheMetadata:
    fetched_at: int  # epoch ms


class DurableCache:

    def __init__(
        self,
        store: KeyValueStore,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        clock: Clock = now_ms,
        key: str = CACHE_KEY,
    ):
        self._store = store
        self._window_ms = int(freshness_window.total_seconds() * 1000)
        self._clock = clock
        self._key = key
        self._last_written_at = 0

    async def put(self, snapshot: ShipInfo) -> None:
        """Overwrite the entry with snapshot stamped now."""
        # fetched_at never goes backwards, even if the clock does
        timestamp = max(self._clock(), self._last_written_at)
        envelope = {"data": snapshot.to_dict(), "timestamp": timestamp}
        await self._store.set(self._key, json.dumps(envelope))
        self._last_written_at = timestamp
        log.info("Ship info %s saved to cache", snapshot.ship_reference)

    async def get(self, ignore_expiry: bool = False) -> ShipInfo | None:
        """
        Return the cached snapshot, or None.

        An expired entry is removed and None returned, unless ignore_expiry
        is set. That is reserved for the stale-on-error fallback.
        """
        envelope = await self._read_envelope()
        if envelope is None:
            return None

        try:
            snapshot = ShipInfo.from_dict(envelope["data"])
            timestamp = int(envelope["timestamp"])
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            log.error("Cached ship info is corrupted: %s", exc)
            await self._remove_quietly()
            return None

        if not ignore_expiry and self.is_expired(timestamp):
            log.info("Ship info cache has expired")
            await self._remove_quietly()
            return None

        log.debug("Ship info retrieved from cache (age=%dms)", self._clock() - timestamp)
        return snapshot

    async def get_metadata(self) -> CacheMetadata | None:
        """Peek at the entry's age without parsing the snapshot or evicting."""
        try:
            raw = await self._store.get(self._key)
        except PersistenceError as exc:
            log.error("Failed to read cache metadata: %s", exc)
            return None
        if not raw:
            return None
        try:
            return CacheMetadata(fetched_at=int(json.loads(raw)["timestamp"]))
        except (ValueError, KeyError, TypeError) as exc:
            log.error("Cache metadata unreadable: %s", exc)
            return None

    def is_expired(self, timestamp: int) -> bool:
        return self._clock() - timestamp >= self._window_ms

    async def clear(self) -> None:
        await self._store.remove(self._key)
        log.info("Ship info cache cleared")

    async def extend_lifetime(self) -> bool:
        """
        Re-stamp the stored snapshot as fetched now.

        For data that is about to expire but is known to still be valid.
        Returns False if there is nothing to extend or the write fails.
        """
        snapshot = await self.get(ignore_expiry=True)
        if snapshot is None:
            return False
        try:
            await self.put(snapshot)
        except PersistenceError as exc:
            log.error("Failed to extend cache lifetime: %s", exc)
            return False
        return True

    async def _read_envelope(self) -> dict | None:
        try:
            raw = await self._store.get(self._key)
        except PersistenceError as exc:
            log.error("Failed to read ship info cache: %s", exc)
            await self._remove_quietly()
            return None
        if not raw:
            log.debug("No ship info in cache")
            return None
        try:
            envelope = json.loads(raw)
        except ValueError as exc:
            log.error("Cached ship info is not valid JSON: %s", exc)
            await self._remove_quietly()
            return None
        if not isinstance(envelope, dict):
            log.error("Cached ship info has unexpected shape: %s", type(envelope).__name__)
            await self._remove_quietly()
            return None
        return envelope

    async def _remove_quietly(self) -> None:
        try:
            await self._store.remove(self._key)
        except PersistenceError as exc:
            log.error("Failed to clear ship info cache entry: %s", exc)
