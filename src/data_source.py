"""
Memoising wrapper around the remote BookingGateway.

Keeps the last successful response in process for one freshness window so
repeated loads don't hit the remote.  When the remote fails, any memo (even
an expired one) is served as a degraded success.
"""

import logging
import warnings
from datetime import timedelta

from src.adapters.ports import BookingGateway, ShipInfo
from src.domain.clock import Clock, now_ms
from src.domain.errors import FetchError, StaleDataWarning

log = logging.getLogger(__name__)


class DataSource:

    def __init__(
        self,
        gateway: BookingGateway,
        freshness_window: timedelta = timedelta(minutes=30),
        clock: Clock = now_ms,
    ):
        self._gateway = gateway
        self._ttl_ms = int(freshness_window.total_seconds() * 1000)
        self._clock = clock
        self._memo: ShipInfo | None = None
        self._memo_at: int | None = None

    @property
    def has_memo(self) -> bool:
        return self._memo is not None

    async def fetch(self, force_refresh: bool = False) -> ShipInfo:
        """
        Return the current ship booking.

        Serves the memo while it is fresh unless force_refresh is set.
        Raises FetchError if the remote fails and there is no memo at all.
        """
        if self._memo is not None and self._memo_at is not None and not force_refresh:
            if not self.is_expired(self._memo_at):
                log.debug("Using memoised ship info")
                return self._memo
            log.debug("Memoised ship info has expired, fetching new data")

        try:
            ship_info = await self._gateway.fetch_ship_info(force_refresh=force_refresh)
        except Exception as exc:
            if self._memo is not None:
                log.warning("Remote fetch failed, serving memoised ship info: %s", exc)
                warnings.warn(
                    f"Serving memoised ship info after remote failure: {exc}",
                    StaleDataWarning,
                    stacklevel=2,
                )
                return self._memo
            log.error("Remote fetch failed with nothing memoised: %s", exc)
            raise FetchError("Failed to fetch ship info from source") from exc

        self._memo = ship_info
        self._memo_at = self._clock()
        log.info("Fetched ship info %s from remote", ship_info.ship_reference)
        return ship_info

    def is_expired(self, timestamp: int) -> bool:
        return self._clock() - timestamp >= self._ttl_ms

    def clear_memo(self) -> None:
        self._memo = None
        self._memo_at = None
        log.debug("Memoised ship info cleared")
