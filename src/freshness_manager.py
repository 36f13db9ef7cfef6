"""
Freshness manager — the single owner of the ship booking state.

Wires DataSource (remote + memo) and DurableCache (last known snapshot on
disk) behind one small surface for presentation layers:

    subscribe(observer) -> Subscription
    load() / refresh() / clear_all() / is_cache_valid() / get_state()

Guarantees:
  - at most one fetch pipeline runs at a time; concurrent callers share it
  - a failed fetch falls back once, to the durable cache ignoring expiry
  - every state change is delivered to observers after the mutating call's
    synchronous work is done, and only if something actually changed
  - results of a pipeline overtaken by clear_all() are not applied
"""

import asyncio
import logging
import warnings
import weakref
from dataclasses import dataclass, replace
from typing import Callable

from src.adapters.ports import ShipInfo
from src.data_source import DataSource
from src.domain.clock import Clock, now_ms
from src.domain.errors import BookingError, PersistenceError, StaleDataWarning
from src.durable_cache import DurableCache

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerState:
    is_loading: bool = False
    error: Exception | None = None     # may coexist with snapshot (stale-on-error)
    snapshot: ShipInfo | None = None
    last_updated: int | None = None    # epoch ms


Observer = Callable[[ManagerState], None]


@dataclass
class ManagerConfig:
    source: DataSource
    cache: DurableCache
    refresh_on_load: bool = True
    clock: Clock = now_ms


class Subscription:
    """Handle returned by subscribe(). Call it, or unsubscribe(), to stop updates."""

    def __init__(self, manager: "FreshnessManager"):
        self._manager = weakref.ref(manager)

    def unsubscribe(self) -> None:
        manager = self._manager()
        if manager is not None:
            manager._observers.pop(self, None)

    __call__ = unsubscribe


class FreshnessManager:
    """
    Coordinates load/refresh/clear for the ship booking.

    Construct one per owner (screen, CLI, service) and pass it around;
    there is no process-wide instance.
    """

    def __init__(self, config: ManagerConfig):
        self._cfg = config
        self._state = ManagerState()
        self._observers: dict[Subscription, Observer] = {}
        self._in_flight: asyncio.Task | None = None
        self._in_flight_forced = False
        self._generation = 0

    # -- observation ---------------------------------------------------------

    def get_state(self) -> ManagerState:
        return self._state

    def subscribe(self, observer: Observer) -> Subscription:
        """Register observer and feed it the current state once, right away."""
        subscription = Subscription(self)
        self._observers[subscription] = observer
        self._deliver(observer, self._state)
        return subscription

    # -- operations ----------------------------------------------------------

    async def load(self) -> ShipInfo:
        """
        Return the ship booking, fetching it if needed.

        Joins the in-flight pipeline when there is one.  On remote failure
        with nothing held in memory, serves the durable cache even if expired
        (state.error is still set); otherwise re-raises the fetch error.
        """
        return await self._coalesce(force_refresh=self._cfg.refresh_on_load)

    async def refresh(self) -> ShipInfo:
        """Drop the memo and fetch from the remote, bypassing every cache."""
        self._cfg.source.clear_memo()
        return await self._coalesce(force_refresh=True)

    async def clear_all(self) -> None:
        """
        Forget the snapshot everywhere.

        The in-memory state is reset only once the durable entry is gone.
        error and is_loading are left alone.
        """
        self._cfg.source.clear_memo()
        # Loads already in flight must not repopulate what is being cleared
        self._generation += 1
        try:
            await self._cfg.cache.clear()
        except PersistenceError as exc:
            log.error("Error clearing ship info caches: %s", exc)
            raise
        self._set_state(snapshot=None, last_updated=None)
        log.info("All ship info caches cleared")

    async def is_cache_valid(self) -> bool:
        last_updated = self._state.last_updated
        if last_updated is not None and not self._cfg.cache.is_expired(last_updated):
            return True
        metadata = await self._cfg.cache.get_metadata()
        return metadata is not None and not self._cfg.cache.is_expired(metadata.fetched_at)

    # -- pipeline ------------------------------------------------------------

    async def _coalesce(self, force_refresh: bool) -> ShipInfo:
        while self._in_flight is not None:
            if self._in_flight_forced or not force_refresh:
                log.debug("Joining in-flight ship info load")
                return await asyncio.shield(self._in_flight)
            # A refresh must reach the remote: let the plain load settle first
            log.debug("Waiting for in-flight load before refreshing")
            await asyncio.wait({self._in_flight})

        task = asyncio.ensure_future(self._pipeline(force_refresh, self._generation))
        self._in_flight = task
        self._in_flight_forced = force_refresh
        # Callers may be cancelled; the shared pipeline always runs to completion
        return await asyncio.shield(task)

    async def _pipeline(self, force_refresh: bool, generation: int) -> ShipInfo:
        try:
            return await self._run(force_refresh, generation)
        finally:
            self._in_flight = None
            if self._state.is_loading:
                self._set_state(is_loading=False)

    async def _run(self, force_refresh: bool, generation: int) -> ShipInfo:
        cfg = self._cfg

        if not force_refresh and self._state.snapshot is not None:
            self._set_state(is_loading=False, last_updated=cfg.clock())
            return self._state.snapshot

        self._set_state(is_loading=True, error=None)

        if not force_refresh:
            # An expired entry must survive until the fallback tier has run
            metadata = await cfg.cache.get_metadata()
            if metadata is not None and not cfg.cache.is_expired(metadata.fetched_at):
                cached = await cfg.cache.get(ignore_expiry=True)
                if cached is not None:
                    if generation != self._generation:
                        return self._discard(cached)
                    self._set_state(
                        snapshot=cached,
                        is_loading=False,
                        last_updated=metadata.fetched_at,
                    )
                    log.debug("Ship info served from durable cache")
                    return cached

        written = False
        try:
            snapshot = await cfg.source.fetch(force_refresh=force_refresh)
            if generation == self._generation:
                await cfg.cache.put(snapshot)
                written = True
        except BookingError as exc:
            return await self._fall_back(exc, generation)

        if generation != self._generation:
            if written:
                # clear_all() ran while the entry was being written
                await self._undo_write()
            return self._discard(snapshot)

        self._set_state(
            snapshot=snapshot,
            is_loading=False,
            last_updated=cfg.clock(),
            error=None,
        )
        return snapshot

    def _discard(self, snapshot: ShipInfo) -> ShipInfo:
        log.info("Discarding ship info from a load overtaken by clear_all()")
        self._cfg.source.clear_memo()
        self._set_state(is_loading=False)
        return snapshot

    async def _undo_write(self) -> None:
        try:
            await self._cfg.cache.clear()
        except PersistenceError as exc:
            log.error("Failed to remove ship info written after clear_all(): %s", exc)

    async def _fall_back(self, error: BookingError, generation: int) -> ShipInfo:
        log.error("Error loading ship info: %s", error)

        if generation == self._generation and self._state.snapshot is None:
            stale = await self._cfg.cache.get(ignore_expiry=True)
            if stale is not None and generation == self._generation:
                log.warning("Serving durably cached ship info %s after failure", stale.ship_reference)
                # Raised inside the shared load task, so it points at the manager
                warnings.warn(
                    f"Serving durably cached ship info after failure: {error}",
                    StaleDataWarning,
                )
                self._set_state(snapshot=stale, is_loading=False, error=error)
                return stale

        if generation == self._generation:
            self._set_state(is_loading=False, error=error)
        else:
            self._set_state(is_loading=False)
        raise error

    # -- state + notification ------------------------------------------------

    def _set_state(self, **changes) -> None:
        state = replace(self._state, **changes)
        if state == self._state:
            return
        self._state = state
        asyncio.get_running_loop().call_soon(self._notify, state)

    def _notify(self, state: ManagerState) -> None:
        for subscription, observer in list(self._observers.items()):
            # Skip observers removed by an earlier callback in this round
            if subscription not in self._observers:
                continue
            self._deliver(observer, state)

    @staticmethod
    def _deliver(observer: Observer, state: ManagerState) -> None:
        try:
            observer(state)
        except Exception as exc:
            log.error("State observer %r failed: %s", observer, exc)
