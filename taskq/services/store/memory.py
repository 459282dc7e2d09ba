"""
InMemoryQueueStore：基于 asyncio.Lock 的进程内实现，用于测试和本地调试。

单事件循环内的多个协程并发安全；跨进程 / 跨线程不安全。
"""
from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional


class InMemoryQueueStore:
    """
    进程内队列。

    参数:
        initial_entries: 预置的原始文本条目（按入队顺序），便于构造测试场景
        clock: 单调时钟，测试中可替换以模拟锁过期
    """

    def __init__(
        self,
        initial_entries: Iterable[str] = (),
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: List[str] = []
        self._locks: Dict[str, float] = {}
        self._clock = clock
        self._mutex = asyncio.Lock()
        for raw in initial_entries:
            self._entries.insert(0, raw)

    async def enqueue(self, task: Mapping[str, Any]) -> None:
        payload = json.dumps(dict(task), ensure_ascii=False)
        async with self._mutex:
            self._entries.insert(0, payload)

    async def dequeue(self) -> Optional[str]:
        async with self._mutex:
            if not self._entries:
                return None
            return self._entries.pop(0)

    async def try_acquire_lock(self, name: str, ttl_s: int) -> bool:
        async with self._mutex:
            now = self._clock()
            expires_at = self._locks.get(name)
            if expires_at is not None and expires_at > now:
                return False
            self._locks[name] = now + ttl_s
            return True

    async def release_lock(self, name: str) -> None:
        async with self._mutex:
            self._locks.pop(name, None)

    async def length(self) -> int:
        async with self._mutex:
            return len(self._entries)

    async def is_locked(self, name: str) -> bool:
        async with self._mutex:
            expires_at = self._locks.get(name)
            return expires_at is not None and expires_at > self._clock()

    async def close(self) -> None:
        return None

    def snapshot(self) -> List[str]:
        """当前队列内容（按出队顺序），仅用于测试断言。"""
        return list(self._entries)
