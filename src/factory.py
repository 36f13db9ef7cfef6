import os
from datetime import timedelta

from src.adapters.ports import BookingGateway
from src.data_source import DataSource
from src.domain.key_value_store import KeyValueStore
from src.durable_cache import DurableCache
from src.freshness_manager import FreshnessManager, ManagerConfig


def create_booking_gateway(source: str | None = None) -> BookingGateway:
    """
    Factory: create the right remote adapter based on config.

    The source can be passed explicitly or read from the BOOKING_SOURCE
    env var. Defaults to "simulator".
    """
    source = source or os.environ.get("BOOKING_SOURCE", "simulator")

    if source == "http":
        from src.adapters.booking_client import BookingClient

        return BookingClient(
            base_url=os.environ["BOOKING_API_URL"],
            api_key=os.environ.get("BOOKING_API_KEY") or None,
            timeout=float(os.environ.get("BOOKING_API_TIMEOUT", "10")),
        )

    if source == "simulator":
        from src.adapters.simulator_booking import SimulatorBookingGateway

        return SimulatorBookingGateway()

    raise ValueError(f"Unknown booking source: {source!r}")


def create_key_value_store(backend: str | None = None) -> KeyValueStore:
    """Factory for the durable store, from BOOKING_STORE ("sqlite" by default)."""
    backend = backend or os.environ.get("BOOKING_STORE", "sqlite")

    if backend == "sqlite":
        from src.adapters.sqlite_store import SqliteKeyValueStore

        db_path = os.environ.get("DB_PATH", "data/bookings.db")
        if db_path != ":memory:" and os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return SqliteKeyValueStore(db_path=db_path)

    if backend == "memory":
        from src.adapters.simulator_store import InMemoryKeyValueStore

        return InMemoryKeyValueStore()

    raise ValueError(f"Unknown booking store: {backend!r}")


def create_manager(
    gateway: BookingGateway | None = None,
    store: KeyValueStore | None = None,
) -> FreshnessManager:
    """
    Wire a FreshnessManager from env config.

    FRESHNESS_WINDOW_MINUTES (default 30) is shared by the memo and the
    durable cache. REFRESH_ON_LOAD (default true) makes load() go to the
    remote even when something is already held.
    """
    window = timedelta(minutes=float(os.environ.get("FRESHNESS_WINDOW_MINUTES", "30")))
    refresh_on_load = os.environ.get("REFRESH_ON_LOAD", "true").strip().lower() in ("1", "true", "yes")

    config = ManagerConfig(
        source=DataSource(gateway or create_booking_gateway(), freshness_window=window),
        cache=DurableCache(store or create_key_value_store(), freshness_window=window),
        refresh_on_load=refresh_on_load,
    )
    return FreshnessManager(config)
