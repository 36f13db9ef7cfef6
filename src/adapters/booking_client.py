import asyncio

import requests

from .ports import BookingGateway, ShipInfo


class BookingClient(BookingGateway):
    """Adapter: real booking HTTP client."""

    def __init__(self, base_url: str, api_key: str | None = None, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self.session.headers.update({"Api-Key": api_key})

    async def fetch_ship_info(self, force_refresh: bool = False) -> ShipInfo:
        headers = {"Cache-Control": "no-cache"} if force_refresh else {}
        # requests is blocking; run it off the event loop
        resp = await asyncio.to_thread(
            self.session.get,
            f"{self._base_url}/booking",
            headers=headers,
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return ShipInfo.from_dict(resp.json())
