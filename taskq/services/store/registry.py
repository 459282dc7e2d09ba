from __future__ import annotations

from typing import Callable, Dict

from taskq.config import Settings
from taskq.services.store.base import QueueStore
from taskq.services.store.memory import InMemoryQueueStore
from taskq.services.store.redis_store import RedisQueueStore


StoreFactory = Callable[[Settings], QueueStore]


def _make_redis_store(settings: Settings) -> QueueStore:
    return RedisQueueStore.from_url(settings.REDIS_URL, queue_key=settings.QUEUE_KEY)


def _make_memory_store(settings: Settings) -> QueueStore:
    _ = settings
    return InMemoryQueueStore()


STORE_REGISTRY: Dict[str, StoreFactory] = {
    "redis": _make_redis_store,
    "memory": _make_memory_store,
}


def build_queue_store(settings: Settings) -> QueueStore:
    try:
        factory = STORE_REGISTRY[settings.STORE_BACKEND]
    except KeyError as exc:
        raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND}") from exc
    return factory(settings)
