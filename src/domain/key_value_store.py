"""
KeyValueStore port — durable string storage for the booking cache.

The cache serialises its envelope to a string and keeps it under a single
fixed key.  It doesn't know or care whether the bytes land in SQLite, a
file, or a dict in memory.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Port: get/set/remove over string keys and string values.

    Implementations raise PersistenceError when the backing store fails.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any prior value."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""
        ...
