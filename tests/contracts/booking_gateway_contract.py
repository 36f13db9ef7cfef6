"""
Adapter contract for BookingGateway.

Any implementation (real HTTP client, in-memory simulator, ...) must pass
these tests.  Subclass this and provide create_gateway().
"""

from abc import ABC, abstractmethod

import pytest

from src.adapters.ports import BookingGateway, ShipInfo


class BookingGatewayContract(ABC):
    """Contract tests that every BookingGateway implementation must satisfy."""

    @abstractmethod
    def create_gateway(self) -> BookingGateway:
        """Return a fresh instance of the adapter under test."""
        ...

    @pytest.mark.asyncio
    async def test_fetch_returns_ship_info(self):
        gw = self.create_gateway()
        info = await gw.fetch_ship_info()
        assert isinstance(info, ShipInfo)
        assert info.ship_reference

    @pytest.mark.asyncio
    async def test_forced_fetch_returns_ship_info(self):
        gw = self.create_gateway()
        info = await gw.fetch_ship_info(force_refresh=True)
        assert isinstance(info, ShipInfo)

    @pytest.mark.asyncio
    async def test_segments_have_both_ends(self):
        gw = self.create_gateway()
        info = await gw.fetch_ship_info()
        for segment in info.segments:
            pair = segment.origin_and_destination_pair
            assert pair.origin.code, "Segment origin must have a code"
            assert pair.destination.code, "Segment destination must have a code"

    @pytest.mark.asyncio
    async def test_record_survives_dict_round_trip(self):
        """The durable cache stores to_dict(); from_dict() must restore it exactly."""
        gw = self.create_gateway()
        info = await gw.fetch_ship_info()
        assert ShipInfo.from_dict(info.to_dict()) == info
