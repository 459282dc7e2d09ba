from __future__ import annotations

import json
import unittest

from taskq.services.store import InMemoryQueueStore, QueueStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryQueueStore(unittest.IsolatedAsyncioTestCase):
    async def test_satisfies_protocol(self) -> None:
        self.assertIsInstance(InMemoryQueueStore(), QueueStore)

    async def test_dequeue_is_lifo(self) -> None:
        store = InMemoryQueueStore()
        await store.enqueue({"type": "wechat", "text": "A"})
        await store.enqueue({"type": "wechat", "text": "B"})

        first = json.loads(await store.dequeue())
        second = json.loads(await store.dequeue())

        self.assertEqual(first["text"], "B")
        self.assertEqual(second["text"], "A")
        self.assertIsNone(await store.dequeue())

    async def test_enqueue_keeps_non_ascii_text(self) -> None:
        store = InMemoryQueueStore()
        await store.enqueue({"type": "wechat", "text": "你好"})
        self.assertIn("你好", store.snapshot()[0])

    async def test_initial_entries_are_raw_text(self) -> None:
        store = InMemoryQueueStore(["not json", '{"type": "bogus"}'])
        self.assertEqual(await store.length(), 2)
        self.assertEqual(await store.dequeue(), '{"type": "bogus"}')
        self.assertEqual(await store.dequeue(), "not json")

    async def test_lock_is_exclusive_until_released(self) -> None:
        store = InMemoryQueueStore()
        self.assertTrue(await store.try_acquire_lock("lock", 60))
        self.assertFalse(await store.try_acquire_lock("lock", 60))
        self.assertTrue(await store.is_locked("lock"))

        await store.release_lock("lock")

        self.assertFalse(await store.is_locked("lock"))
        self.assertTrue(await store.try_acquire_lock("lock", 60))

    async def test_lock_expires_after_ttl(self) -> None:
        clock = FakeClock()
        store = InMemoryQueueStore(clock=clock)
        self.assertTrue(await store.try_acquire_lock("lock", 60))

        clock.now += 59
        self.assertFalse(await store.try_acquire_lock("lock", 60))

        clock.now += 2
        self.assertFalse(await store.is_locked("lock"))
        self.assertTrue(await store.try_acquire_lock("lock", 60))

    async def test_release_missing_lock_is_noop(self) -> None:
        store = InMemoryQueueStore()
        await store.release_lock("never-taken")
        self.assertFalse(await store.is_locked("never-taken"))


if __name__ == "__main__":
    unittest.main()
