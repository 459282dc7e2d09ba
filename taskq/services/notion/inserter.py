"""
批量写入 Notion 数据库

逐条写入，遇到 429 按 Retry-After 退避重试；单条终态失败立即推送企业微信告警，
全部处理完后再推送一条汇总通知。
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from taskq.core.models import InsertResult
from taskq.services.notion.client import NotionClient
from taskq.services.notion.errors import NotionAPIError, NotionRateLimitError
from taskq.services.wechat.notifier import WechatNotifier

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]

UNNAMED_TITLE = "未命名"


def extract_title(item: Dict[str, Any]) -> str:
    """
    读取 properties.Company.title[0].text.content，任一层缺失返回占位标题。
    """
    try:
        title = item["properties"]["Company"]["title"][0]["text"]["content"]
    except (KeyError, IndexError, TypeError):
        return UNNAMED_TITLE
    return str(title) if title else UNNAMED_TITLE


def build_summary_text(name: str, message: str, results: Sequence[InsertResult]) -> str:
    succeeded = sum(1 for r in results if r.ok)
    failed = len(results) - succeeded
    if failed == 0:
        head = f"✅ [{name}] Notion 写入全部成功，共 {succeeded} 条"
    else:
        head = f"⚠️ [{name}] Notion 写入完成：成功 {succeeded} 条 / 失败 {failed} 条"
    return f"{head}\n{message}" if message else head


class BatchInserter:
    """
    逐条调用 NotionClient.create_page，顺序处理，不做并发。
    """

    def __init__(
        self,
        *,
        notion_client: NotionClient,
        notifier: WechatNotifier,
        max_attempts: int = 3,
        default_retry_after_s: float = 2.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._notion = notion_client
        self._notifier = notifier
        self._max_attempts = max_attempts
        self._default_delay = default_retry_after_s
        self._sleep = sleep

    async def insert_batch(
        self,
        items: Sequence[Dict[str, Any]],
        *,
        api_key: str,
        database_id: str,
        failure_webhook: str,
        name: str,
        message: str,
    ) -> List[InsertResult]:
        results: List[InsertResult] = []
        for index, item in enumerate(items):
            title = extract_title(item)
            result = await self._insert_one(
                item,
                title=title,
                api_key=api_key,
                database_id=database_id,
            )
            if not result.ok:
                await self._notifier.notify(
                    failure_webhook,
                    f"❌ [{name}] Notion 写入失败：{title}\n原因：{result.error}",
                )
            logger.info(
                "Insert item %s/%s title=%s -> %s",
                index + 1,
                len(items),
                title,
                result.status,
            )
            results.append(result)

        summary = build_summary_text(name, message, results)
        await self._notifier.notify(failure_webhook, summary)
        return results

    async def _insert_one(
        self,
        item: Dict[str, Any],
        *,
        title: str,
        api_key: str,
        database_id: str,
    ) -> InsertResult:
        properties = item.get("properties") if isinstance(item, dict) else None
        if properties is None:
            properties = {}
        if not isinstance(properties, dict):
            logger.error(
                "Notion insert skipped: title=%s, properties is %s",
                title,
                type(properties).__name__,
            )
            return InsertResult.failure(
                title, f"properties must be an object, got {type(properties).__name__}"
            )
        last_error: Optional[str] = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                page = await self._notion.create_page(
                    api_key=api_key,
                    database_id=database_id,
                    properties=properties,
                )
            except NotionRateLimitError as exc:
                delay = exc.retry_after if exc.retry_after is not None else self._default_delay
                last_error = str(exc)
                logger.warning(
                    "Notion rate limited: title=%s, attempt=%s/%s, retry_after=%ss",
                    title,
                    attempt,
                    self._max_attempts,
                    delay,
                )
                if attempt < self._max_attempts:
                    await self._sleep(delay)
                continue
            except NotionAPIError as exc:
                logger.error("Notion insert failed: title=%s, error=%s", title, exc)
                return InsertResult.failure(title, str(exc))
            except httpx.HTTPError as exc:
                logger.error("Notion request error: title=%s, error=%s", title, exc)
                return InsertResult.failure(title, str(exc))

            return InsertResult.success(title, page_id=page.get("id"), url=page.get("url"))

        logger.error(
            "Notion insert gave up after %s rate-limited attempts: title=%s",
            self._max_attempts,
            title,
        )
        return InsertResult.failure(
            title,
            f"rate limited after {self._max_attempts} attempts ({last_error})",
        )
