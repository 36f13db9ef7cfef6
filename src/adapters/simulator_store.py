"""
In-memory KeyValueStore for testing — no database required.

Test helpers:
    fail_reads / fail_writes / fail_removes  — make the matching call raise PersistenceError
    inject_raw()                             — plant an arbitrary (e.g. corrupted) value
    values                                   — the underlying dict, for assertions
"""

from src.domain.errors import PersistenceError
from src.domain.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):

    def __init__(self):
        self.values: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.fail_removes = False

    def inject_raw(self, key: str, value: str) -> None:
        self.values[key] = value

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise PersistenceError(f"Simulated read failure for {key!r}")
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Simulated write failure for {key!r}")
        self.values[key] = value

    async def remove(self, key: str) -> None:
        if self.fail_removes:
            raise PersistenceError(f"Simulated remove failure for {key!r}")
        self.values.pop(key, None)
