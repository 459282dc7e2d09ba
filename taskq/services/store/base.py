"""
队列存储端口

drain 循环只依赖两类原语：
- 列表的 push / pop（任务队列）
- 带过期时间的 set-if-absent（互斥锁）

任何满足 QueueStore 协议的对象都可以作为后端，无需继承。
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class QueueStore(Protocol):
    """
    队列 + 锁的最小接口。

    内置实现：
    - RedisQueueStore     生产环境（redis.asyncio）
    - InMemoryQueueStore  测试 / 本地调试

    出队顺序为 LIFO：后入队的任务先被取出。
    所有方法在后端故障时抛出 StoreUnavailableError。
    """

    async def enqueue(self, task: Mapping[str, Any]) -> None:
        """序列化任务并压入队列头部。"""
        ...

    async def dequeue(self) -> Optional[str]:
        """弹出一条原始文本；队列为空时返回 None。"""
        ...

    async def try_acquire_lock(self, name: str, ttl_s: int) -> bool:
        """仅当锁不存在时设置，带自动过期；返回是否抢到。"""
        ...

    async def release_lock(self, name: str) -> None:
        """无条件删除锁。"""
        ...

    async def length(self) -> int:
        ...

    async def is_locked(self, name: str) -> bool:
        ...

    async def close(self) -> None:
        ...
