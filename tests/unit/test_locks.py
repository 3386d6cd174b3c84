"""Tests for KeyedLock."""
import asyncio

import pytest

from worklog.utils.locks import KeyedLock


@pytest.mark.asyncio
class TestKeyedLock:
    """Tests for per-key serialization."""

    async def test_same_key_serialized(self):
        """Test two holders of one key never run their blocks concurrently."""
        locks = KeyedLock()
        events = []

        async def worker(name):
            async with locks.hold("owner"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    async def test_different_keys_independent(self):
        """Test holding one key does not block another."""
        locks = KeyedLock()
        entered = asyncio.Event()

        async def other():
            async with locks.hold("second"):
                entered.set()

        async with locks.hold("first"):
            await asyncio.wait_for(other(), timeout=1)

        assert entered.is_set()

    async def test_lock_released_after_use(self):
        """Test unused keys are forgotten."""
        locks = KeyedLock()

        async with locks.hold("owner"):
            assert "owner" in locks._locks

        assert "owner" not in locks._locks

    async def test_released_on_error(self):
        """Test an exception inside the block releases the key."""
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("owner"):
                raise RuntimeError("boom")

        assert "owner" not in locks._locks
        async with locks.hold("owner"):
            pass
