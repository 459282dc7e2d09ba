"""
Redis 队列存储

- 队列：LPUSH 入队，LPOP 出队（同一端，LIFO）
- 锁：SET key value NX EX ttl，DEL 释放
"""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from taskq.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisQueueStore:
    """
    基于 redis.asyncio 的 QueueStore 实现。
    """

    def __init__(self, client: aioredis.Redis, *, queue_key: str) -> None:
        self._redis = client
        self._queue_key = queue_key

    @classmethod
    def from_url(cls, url: str, *, queue_key: str) -> "RedisQueueStore":
        client = aioredis.from_url(url, decode_responses=True)
        return cls(client, queue_key=queue_key)

    async def enqueue(self, task: Mapping[str, Any]) -> None:
        payload = json.dumps(dict(task), ensure_ascii=False)
        try:
            size = await self._redis.lpush(self._queue_key, payload)
        except RedisError as exc:
            logger.error("LPUSH %s failed: %s", self._queue_key, exc)
            raise StoreUnavailableError(f"Failed to push onto {self._queue_key}", exc) from exc
        logger.debug("LPUSH %s -> length=%s", self._queue_key, size)

    async def dequeue(self) -> Optional[str]:
        try:
            raw = await self._redis.lpop(self._queue_key)
        except RedisError as exc:
            logger.error("LPOP %s failed: %s", self._queue_key, exc)
            raise StoreUnavailableError(f"Failed to pop from {self._queue_key}", exc) from exc
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return raw

    async def try_acquire_lock(self, name: str, ttl_s: int) -> bool:
        try:
            acquired = await self._redis.set(name, "locked", nx=True, ex=ttl_s)
        except RedisError as exc:
            logger.error("SET NX %s failed: %s", name, exc)
            raise StoreUnavailableError(f"Failed to acquire lock {name}", exc) from exc
        return bool(acquired)

    async def release_lock(self, name: str) -> None:
        try:
            await self._redis.delete(name)
        except RedisError as exc:
            logger.error("DEL %s failed: %s", name, exc)
            raise StoreUnavailableError(f"Failed to release lock {name}", exc) from exc

    async def length(self) -> int:
        try:
            return int(await self._redis.llen(self._queue_key))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to read length of {self._queue_key}", exc) from exc

    async def is_locked(self, name: str) -> bool:
        try:
            return bool(await self._redis.exists(name))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to check lock {name}", exc) from exc

    async def close(self) -> None:
        await self._redis.aclose()
