from __future__ import annotations

import logging
from typing import Any, Dict

from taskq.core.models import WechatTask
from taskq.services.handlers.base import BaseTaskHandler
from taskq.services.wechat.notifier import WechatNotifier

logger = logging.getLogger(__name__)


class WechatTaskHandler(BaseTaskHandler):
    """
    wechat 任务：把 text 推送到 webhookUrl。

    通知是尽力而为的，发送结果不影响“已处理”的计数。
    """

    task_type = "wechat"

    def __init__(self, notifier: WechatNotifier) -> None:
        self._notifier = notifier

    async def handle(self, payload: Dict[str, Any]) -> None:
        task = self.parse(WechatTask, payload)
        result = await self._notifier.notify(task.webhook_url, task.text)
        if not result.ok:
            logger.warning("Wechat task delivered with failure: %s", result.error)
