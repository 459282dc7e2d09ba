"""
队列存储模块

- base: QueueStore 协议
- memory: 进程内实现
- redis_store: Redis 实现
- registry: 按配置选择实现
"""
from __future__ import annotations

from taskq.services.store.base import QueueStore
from taskq.services.store.memory import InMemoryQueueStore
from taskq.services.store.redis_store import RedisQueueStore
from taskq.services.store.registry import build_queue_store

__all__ = [
    "QueueStore",
    "InMemoryQueueStore",
    "RedisQueueStore",
    "build_queue_store",
]
