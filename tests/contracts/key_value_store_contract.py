"""
Adapter contract for KeyValueStore.

Any implementation (in-memory, SQLite, ...) must pass these tests.
"""

from abc import ABC, abstractmethod

import pytest

from src.domain.key_value_store import KeyValueStore


class KeyValueStoreContract(ABC):

    @abstractmethod
    def create_store(self) -> KeyValueStore:
        """Return a fresh, empty store."""
        ...

    @pytest.mark.asyncio
    async def test_unknown_key_returns_none(self):
        store = self.create_store()
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self):
        store = self.create_store()
        await store.set("k", '{"a": 1}')
        assert await store.get("k") == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_overwrite_replaces_value(self):
        store = self.create_store()
        await store.set("k", "first")
        await store.set("k", "second")
        assert await store.get("k") == "second"

    @pytest.mark.asyncio
    async def test_remove_deletes_value(self):
        store = self.create_store()
        await store.set("k", "v")
        await store.remove("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self):
        store = self.create_store()
        await store.remove("never-set")  # must not raise
        await store.remove("never-set")
        assert await store.get("never-set") is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        store = self.create_store()
        await store.set("a", "1")
        await store.set("b", "2")
        await store.remove("a")
        assert await store.get("b") == "2"
