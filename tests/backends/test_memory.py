import asyncio

import pytest
import pytest_asyncio

from storefront_cachex.backends.memory import MemoryBackend
from storefront_cachex.types import FetchResult


@pytest_asyncio.fixture
def memory_backend(clock):
    return MemoryBackend(clock=clock)


@pytest.mark.asyncio
async def test_memory_backend_set_get(memory_backend: MemoryBackend):
    key = 'products-all-{"limit":15,"skip":0}'
    value = FetchResult.ok(["a", "b"], total=2)

    await memory_backend.set(key, value, ttl=300)
    retrieved_value = await memory_backend.get(key)

    assert retrieved_value == value


@pytest.mark.asyncio
async def test_memory_backend_get_nonexistent_key(memory_backend: MemoryBackend):
    assert await memory_backend.get("nonexistent_key") is None


@pytest.mark.asyncio
async def test_memory_backend_hit_just_before_expiry(memory_backend, clock):
    await memory_backend.set("categories", FetchResult.ok(["Spor"]), ttl=1800)

    clock.advance(1800 - 0.001)
    assert await memory_backend.get("categories") == FetchResult.ok(["Spor"])


@pytest.mark.asyncio
async def test_memory_backend_miss_after_expiry_removes_entry(memory_backend, clock):
    await memory_backend.set("categories", FetchResult.ok(["Spor"]), ttl=1800)

    clock.advance(1800 + 0.001)
    assert await memory_backend.get("categories") is None
    # Expired entries are dropped on read
    assert "categories" not in memory_backend.cache


@pytest.mark.asyncio
async def test_memory_backend_entry_at_exact_expiry_is_stale(memory_backend, clock):
    await memory_backend.set("product-1", "value", ttl=600)

    clock.advance(600)
    assert await memory_backend.get("product-1") is None


@pytest.mark.asyncio
async def test_memory_backend_set_overwrites_and_resets_expiry(memory_backend, clock):
    await memory_backend.set("product-1", "old", ttl=10)
    clock.advance(8)
    await memory_backend.set("product-1", "new", ttl=10)
    clock.advance(8)

    assert await memory_backend.get("product-1") == "new"


@pytest.mark.asyncio
async def test_memory_backend_without_ttl_never_expires(memory_backend, clock):
    await memory_backend.set("forever", "value")
    clock.advance(10**9)

    assert await memory_backend.get("forever") == "value"


@pytest.mark.asyncio
async def test_memory_backend_delete(memory_backend: MemoryBackend):
    await memory_backend.set("product-1", "value", ttl=60)
    await memory_backend.delete("product-1")

    assert await memory_backend.get("product-1") is None


@pytest.mark.asyncio
async def test_memory_backend_clear(memory_backend: MemoryBackend):
    await memory_backend.set("key1", "value1", ttl=60)
    await memory_backend.set("key2", "value2", ttl=60)
    await memory_backend.clear()

    assert await memory_backend.get("key1") is None
    assert await memory_backend.get("key2") is None


@pytest.mark.asyncio
async def test_memory_backend_clear_twice_is_harmless(memory_backend: MemoryBackend):
    await memory_backend.set("key1", "value1", ttl=60)
    await memory_backend.clear()
    await memory_backend.clear()

    assert await memory_backend.get("key1") is None


@pytest.mark.asyncio
async def test_memory_backend_cleanup(memory_backend, clock):
    await memory_backend.set("key1", "value1", ttl=1)
    await memory_backend.set("key2", "value2", ttl=60)
    clock.advance(2)

    removed = await memory_backend.cleanup()

    assert removed == 1
    assert list(memory_backend.cache) == ["key2"]


@pytest.mark.asyncio
async def test_memory_backend_entries_snapshot(memory_backend, clock):
    await memory_backend.set("key1", "value1", ttl=1)
    await memory_backend.set("key2", "value2", ttl=60)
    clock.advance(2)

    entries = dict(await memory_backend.entries())

    assert set(entries) == {"key1", "key2"}
    assert not entries["key1"].is_valid(clock())
    assert entries["key2"].is_valid(clock())


@pytest.mark.asyncio
async def test_memory_backend_start_cleanup(memory_backend: MemoryBackend):
    memory_backend.start_cleanup()
    assert memory_backend._cleanup_task is not None
    assert not memory_backend._cleanup_task.done()
    memory_backend.stop_cleanup()


@pytest.mark.asyncio
async def test_memory_backend_double_start_cleanup(memory_backend: MemoryBackend):
    memory_backend.start_cleanup()
    original_task = memory_backend._cleanup_task
    memory_backend.start_cleanup()
    assert memory_backend._cleanup_task is original_task
    memory_backend.stop_cleanup()


@pytest.mark.asyncio
async def test_memory_backend_stop_cleanup_when_not_running(
    memory_backend: MemoryBackend,
):
    memory_backend.stop_cleanup()  # Should not raise any error
    assert memory_backend._cleanup_task is None


@pytest.mark.asyncio
async def test_memory_backend_cleanup_task_sweeps_expired_items(clock):
    backend = MemoryBackend(cleanup_interval=0.01, clock=clock)
    await backend.set("key1", "value1", ttl=1)
    await backend.set("key2", "value2", ttl=60)
    clock.advance(2)

    backend.start_cleanup()
    await asyncio.sleep(0.05)
    backend.stop_cleanup()

    assert list(backend.cache) == ["key2"]


@pytest.mark.asyncio
async def test_memory_backend_concurrent_writes_last_writer_wins(clock):
    backend = MemoryBackend(clock=clock)

    await asyncio.gather(*(backend.set("key", i, ttl=60) for i in range(50)))

    assert await backend.get("key") == 49
