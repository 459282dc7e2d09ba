from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping

from taskq.core.errors import (
    MalformedTaskError,
    StoreUnavailableError,
    TaskValidationError,
)
from taskq.core.models import DrainReport, ItemOutcome
from taskq.services.handlers.base import BaseTaskHandler
from taskq.services.store.base import QueueStore

logger = logging.getLogger(__name__)


def parse_entry(raw: str) -> Dict[str, Any]:
    """
    把队列中的原始文本解析为任务 dict，失败抛出 MalformedTaskError。
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedTaskError(str(raw), str(exc)) from exc
    if not isinstance(payload, dict):
        raise MalformedTaskError(raw, f"expected object, got {type(payload).__name__}")
    return payload


class QueueDrainer:
    """
    持锁清空队列：抢锁 -> 循环出队并分发 -> 队列为空后释放锁。

    - 锁被占用时直接返回 skipped，不触碰队列
    - 单条任务的解析/校验/处理错误只影响该条
    - StoreUnavailableError 等意外错误会中断 drain，但锁总会被释放
    """

    def __init__(
        self,
        *,
        store: QueueStore,
        handlers: Mapping[str, BaseTaskHandler],
        lock_name: str,
        lock_ttl_s: int = 60,
    ) -> None:
        self._store = store
        self._handlers = handlers
        self._lock_name = lock_name
        self._lock_ttl_s = lock_ttl_s

    async def drain(self) -> DrainReport:
        if not await self._store.try_acquire_lock(self._lock_name, self._lock_ttl_s):
            logger.info("Drain skipped: lock %s is held by another worker", self._lock_name)
            return DrainReport.skipped()

        logger.info("🔒 Acquired lock %s (ttl=%ss), draining queue", self._lock_name, self._lock_ttl_s)
        outcomes: List[ItemOutcome] = []
        try:
            while True:
                raw = await self._store.dequeue()
                if raw is None:
                    break
                outcomes.append(await self._process_entry(raw))
        finally:
            await self._release()
            logger.info(
                "Drain finished: popped=%s, processed=%s",
                len(outcomes),
                sum(1 for o in outcomes if o is ItemOutcome.PROCESSED),
            )

        return DrainReport(status="completed", outcomes=tuple(outcomes))

    async def _process_entry(self, raw: str) -> ItemOutcome:
        try:
            payload = parse_entry(raw)
        except MalformedTaskError as exc:
            logger.error("❌ Skipping malformed queue entry: %s", exc)
            return ItemOutcome.MALFORMED

        task_type = payload.get("type")
        handler = self._handlers.get(task_type) if isinstance(task_type, str) else None
        if handler is None:
            logger.warning("⚠️ Unknown task type %r, skipped", task_type)
            return ItemOutcome.UNKNOWN_TYPE

        logger.info("🟡 Processing task type=%s", task_type)
        try:
            await handler.handle(payload)
        except TaskValidationError as exc:
            logger.error("❌ %s", exc)
            return ItemOutcome.INVALID
        except StoreUnavailableError:
            raise
        except Exception:  # noqa: BLE001
            logger.exception("❌ Task handler failed: type=%s", task_type)
            return ItemOutcome.FAILED
        return ItemOutcome.PROCESSED

    async def _release(self) -> None:
        try:
            await self._store.release_lock(self._lock_name)
        except StoreUnavailableError:
            # 锁会在 TTL 到期后自动消失
            logger.exception("Failed to release lock %s", self._lock_name)
            return
        logger.info("🔓 Released lock %s", self._lock_name)
