"""
Error kinds raised by the booking freshness core.

FetchError and PersistenceError are failures; StaleDataWarning is only a
signal that degraded (memoised or durably cached) data was served.
"""


class BookingError(Exception):
    """Base class for failures surfaced by the freshness core."""


class FetchError(BookingError):
    """The remote call failed and no memoised snapshot was available."""


class PersistenceError(BookingError):
    """The durable store rejected a read, write or remove."""


class StaleDataWarning(UserWarning):
    """Previously known data was served after a remote failure."""
