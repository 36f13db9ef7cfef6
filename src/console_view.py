from datetime import datetime

from src.adapters.ports import ShipInfo
from src.freshness_manager import ManagerState


def format_expiry(expiry_time: str) -> str:
    """Render a unix-seconds string as local time; anything else is returned unchanged."""
    try:
        return datetime.fromtimestamp(int(expiry_time)).strftime("%Y-%m-%d %H:%M")
    except (ValueError, OverflowError, OSError):
        return expiry_time


class ConsoleStateView:
    """Observer: print every state the manager delivers. For dev/CLI use."""

    def __init__(self):
        self.states: list[ManagerState] = []

    def __call__(self, state: ManagerState) -> None:
        self.states.append(state)

        status = "loading" if state.is_loading else "idle"
        updated = (
            datetime.fromtimestamp(state.last_updated / 1000).strftime("%H:%M:%S")
            if state.last_updated
            else "never"
        )
        print(f"[{status}] last updated: {updated}")
        if state.error is not None:
            print(f"  error: {state.error}")
        if state.snapshot is not None:
            print(render_ship_info(state.snapshot))


def render_ship_info(ship_info: ShipInfo) -> str:
    lines = [
        f"{'=' * 60}",
        f"  SHIP: {ship_info.ship_reference}",
        f"  EXPIRES: {format_expiry(ship_info.expiry_time)}",
        f"  DURATION: {ship_info.duration} min",
        f"  TICKET CHECKING: {'yes' if ship_info.can_issue_ticket_checking else 'no'}",
        f"{'=' * 60}",
    ]
    for segment in ship_info.segments:
        pair = segment.origin_and_destination_pair
        lines.append(
            f"  #{segment.id}  {pair.origin.code} ({pair.origin.display_name})"
            f" → {pair.destination.code} ({pair.destination.display_name})"
        )
    return "\n".join(lines)
