from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class Location:
    """A port of call."""

    code: str
    display_name: str
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        return cls(
            code=data["code"],
            display_name=data.get("displayName", ""),
            url=data.get("url", ""),
        )

    def to_dict(self) -> dict:
        return {"code": self.code, "displayName": self.display_name, "url": self.url}


@dataclass
class OriginAndDestinationPair:
    """Where a segment leaves from and where it arrives."""

    origin: Location
    origin_city: str
    destination: Location
    destination_city: str

    @classmethod
    def from_dict(cls, data: dict) -> "OriginAndDestinationPair":
        return cls(
            origin=Location.from_dict(data["origin"]),
            origin_city=data.get("originCity", ""),
            destination=Location.from_dict(data["destination"]),
            destination_city=data.get("destinationCity", ""),
        )

    def to_dict(self) -> dict:
        return {
            "origin": self.origin.to_dict(),
            "originCity": self.origin_city,
            "destination": self.destination.to_dict(),
            "destinationCity": self.destination_city,
        }


@dataclass
class Segment:
    """One leg of a ship booking."""

    id: int
    origin_and_destination_pair: OriginAndDestinationPair

    @classmethod
    def from_dict(cls, data: dict) -> "Segment":
        return cls(
            id=int(data["id"]),
            origin_and_destination_pair=OriginAndDestinationPair.from_dict(
                data["originAndDestinationPair"]
            ),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "originAndDestinationPair": self.origin_and_destination_pair.to_dict(),
        }


@dataclass
class ShipInfo:
    """
    A ship booking record — the unit of data that is fetched, cached and served.

    The camelCase dict form is both the remote wire format and the payload
    stored in the durable cache envelope.
    """

    ship_reference: str
    ship_token: str
    can_issue_ticket_checking: bool
    expiry_time: str  # unix seconds, as sent by the remote
    duration: int     # minutes
    segments: list[Segment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ShipInfo":
        return cls(
            ship_reference=data["shipReference"],
            ship_token=data["shipToken"],
            can_issue_ticket_checking=bool(data.get("canIssueTicketChecking", False)),
            expiry_time=str(data["expiryTime"]),
            duration=int(data.get("duration", 0)),
            segments=[Segment.from_dict(s) for s in data.get("segments", [])],
        )

    def to_dict(self) -> dict:
        return {
            "shipReference": self.ship_reference,
            "shipToken": self.ship_token,
            "canIssueTicketChecking": self.can_issue_ticket_checking,
            "expiryTime": self.expiry_time,
            "duration": self.duration,
            "segments": [s.to_dict() for s in self.segments],
        }


class BookingGateway(ABC):
    """
    Port: how we obtain the current ship booking from the remote side.

    The freshness core depends ONLY on this interface.
    It doesn't know or care whether the record comes from the real
    booking API or an in-memory simulator.  Timeouts belong here too.
    """

    @abstractmethod
    async def fetch_ship_info(self, force_refresh: bool = False) -> ShipInfo:
        """
        Fetch the current record.

        force_refresh asks intermediaries (HTTP caches, proxies) to bypass
        their own copies.  Any failure is raised as-is.
        """
        ...
