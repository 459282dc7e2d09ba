from __future__ import annotations

import logging
from typing import Any, Dict

from taskq.core.models import NotionInsertTask
from taskq.services.handlers.base import BaseTaskHandler
from taskq.services.notion.inserter import BatchInserter

logger = logging.getLogger(__name__)


class NotionInsertTaskHandler(BaseTaskHandler):
    """
    notion_insert 任务：批量写入 Notion，失败与汇总通过企业微信通知。
    """

    task_type = "notion_insert"

    def __init__(self, inserter: BatchInserter) -> None:
        self._inserter = inserter

    async def handle(self, payload: Dict[str, Any]) -> None:
        task = self.parse(NotionInsertTask, payload)
        results = await self._inserter.insert_batch(
            task.array,
            api_key=task.notion_api_key,
            database_id=task.database_id,
            failure_webhook=task.wechat_webhook_url,
            name=task.name,
            message=task.message,
        )
        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "notion_insert finished: name=%s, total=%s, failed=%s",
            task.name,
            len(results),
            failed,
        )
