"""Tests for the in-memory TTL store."""

import pytest

from newsbot.core.errors import StoreUnavailableError
from newsbot.services.cache.backends.base import TTL_MISSING, TTL_PERSISTENT
from newsbot.services.cache.backends.memory_backend import MemoryBackend


class TestMemoryBackend:
    """Tests for basic store commands."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, connected_memory_backend):
        assert await connected_memory_backend.set("k", "v") is True
        assert await connected_memory_backend.get("k") == "v"

    @pytest.mark.asyncio
    async def test_get_missing(self, connected_memory_backend):
        assert await connected_memory_backend.get("missing") is None

    @pytest.mark.asyncio
    async def test_entries_expire(self, connected_memory_backend, clock):
        await connected_memory_backend.set("k", "v", ttl=10)
        clock.advance(9)
        assert await connected_memory_backend.get("k") == "v"
        clock.advance(1)
        assert await connected_memory_backend.get("k") is None
        assert await connected_memory_backend.exists("k") is False

    @pytest.mark.asyncio
    async def test_ttl_values(self, connected_memory_backend, clock):
        await connected_memory_backend.set("expiring", "v", ttl=30)
        await connected_memory_backend.set("persistent", "v")

        clock.advance(10)

        assert await connected_memory_backend.ttl("expiring") == 20
        assert await connected_memory_backend.ttl("persistent") == TTL_PERSISTENT
        assert await connected_memory_backend.ttl("missing") == TTL_MISSING

    @pytest.mark.asyncio
    async def test_only_if_absent(self, connected_memory_backend):
        assert await connected_memory_backend.set("k", "first", only_if_absent=True) is True
        assert await connected_memory_backend.set("k", "second", only_if_absent=True) is False
        assert await connected_memory_backend.get("k") == "first"

    @pytest.mark.asyncio
    async def test_only_if_absent_after_expiry(self, connected_memory_backend, clock):
        await connected_memory_backend.set("k", "first", ttl=5)
        clock.advance(5)
        assert await connected_memory_backend.set("k", "second", only_if_absent=True) is True

    @pytest.mark.asyncio
    async def test_expire(self, connected_memory_backend, clock):
        await connected_memory_backend.set("k", "v", ttl=10)
        clock.advance(8)

        assert await connected_memory_backend.expire("k", 10) is True
        assert await connected_memory_backend.ttl("k") == 10
        assert await connected_memory_backend.expire("missing", 10) is False

    @pytest.mark.asyncio
    async def test_delete_counts_removed_keys(self, connected_memory_backend):
        await connected_memory_backend.set("a", "1")
        await connected_memory_backend.set("b", "2")

        assert await connected_memory_backend.delete("a", "b", "c") == 2
        assert await connected_memory_backend.delete("a") == 0

    @pytest.mark.asyncio
    async def test_keys_glob(self, connected_memory_backend):
        await connected_memory_backend.set("session:1", "{}")
        await connected_memory_backend.set("session:2", "{}")
        await connected_memory_backend.set("query:abc", "{}")

        assert sorted(await connected_memory_backend.keys("session:*")) == ["session:1", "session:2"]
        assert len(await connected_memory_backend.keys()) == 3

    @pytest.mark.asyncio
    async def test_keys_skip_expired(self, connected_memory_backend, clock):
        await connected_memory_backend.set("short", "v", ttl=1)
        await connected_memory_backend.set("long", "v", ttl=100)
        clock.advance(2)

        assert await connected_memory_backend.keys() == ["long"]
        assert connected_memory_backend.get_entry_count() == 1

    @pytest.mark.asyncio
    async def test_memory_usage(self, connected_memory_backend):
        assert await connected_memory_backend.memory_usage() == 0
        await connected_memory_backend.set("key", "value")
        assert await connected_memory_backend.memory_usage() == len("key") + len("value")


class TestMemoryBackendConnection:
    """Tests for connection state."""

    @pytest.mark.asyncio
    async def test_commands_fail_when_not_connected(self):
        backend = MemoryBackend()

        assert backend.enabled is False
        with pytest.raises(StoreUnavailableError):
            await backend.get("k")

    @pytest.mark.asyncio
    async def test_disconnect_clears_storage(self):
        backend = MemoryBackend()
        await backend.connect()
        await backend.set("k", "v")
        await backend.disconnect()
        await backend.connect()

        assert await backend.get("k") is None
