import asyncio
import copy

from .ports import BookingGateway, Location, OriginAndDestinationPair, Segment, ShipInfo


def sample_ship_info() -> ShipInfo:
    """The record served by the simulator unless a test injects another one."""
    return ShipInfo(
        ship_reference="ABCDEF",
        ship_token="AAAABBBCCCCDDD",
        can_issue_ticket_checking=False,
        expiry_time="1722409261",
        duration=2430,
        segments=[
            Segment(
                id=1,
                origin_and_destination_pair=OriginAndDestinationPair(
                    origin=Location("AAA", "AAA DisplayName", "www.ship.com"),
                    origin_city="BBB",
                    destination=Location("BBB", "BBB DisplayName", "www.ship.com"),
                    destination_city="AAA",
                ),
            ),
            Segment(
                id=2,
                origin_and_destination_pair=OriginAndDestinationPair(
                    origin=Location("BBB", "BBB DisplayName", "www.ship.com"),
                    origin_city="BBB",
                    destination=Location("CCC", "CCC DisplayName", "www.ship.com"),
                    destination_city="CCC",
                ),
            ),
        ],
    )


class SimulatorBookingGateway(BookingGateway):
    """
    In-memory fake for testing. No mocking framework needed.

    Test helpers:
        inject_ship_info()  — change the record returned by later fetches
        fail_with()         — make every fetch raise the given exception
        recover()           — stop failing
        hold() / release()  — park fetches on a gate until released
        delay               — seconds to sleep inside each fetch
        calls               — number of fetches that reached the "remote"
        force_flags         — force_refresh value of every fetch, in order
    """

    def __init__(self, ship_info: ShipInfo | None = None, delay: float = 0.0):
        self._ship_info = ship_info or sample_ship_info()
        self._error: Exception | None = None
        self._gate: asyncio.Event | None = None
        self.delay = delay
        self.calls = 0
        self.force_flags: list[bool] = []

    def inject_ship_info(self, ship_info: ShipInfo) -> None:
        self._ship_info = ship_info

    def fail_with(self, error: Exception) -> None:
        self._error = error

    def recover(self) -> None:
        self._error = None

    def hold(self) -> None:
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def fetch_ship_info(self, force_refresh: bool = False) -> ShipInfo:
        self.calls += 1
        self.force_flags.append(force_refresh)
        if self._gate is not None:
            await self._gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._error is not None:
            raise self._error
        # Hand out a copy, as a real client would deserialise a fresh object
        return copy.deepcopy(self._ship_info)
