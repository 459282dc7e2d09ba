from __future__ import annotations

from typing import Dict

from taskq.services.handlers.base import BaseTaskHandler
from taskq.services.handlers.notion_insert import NotionInsertTaskHandler
from taskq.services.handlers.wechat import WechatTaskHandler
from taskq.services.notion.inserter import BatchInserter
from taskq.services.wechat.notifier import WechatNotifier


def build_handler_registry(
    *, notifier: WechatNotifier, inserter: BatchInserter
) -> Dict[str, BaseTaskHandler]:
    """
    任务类型 -> 处理器。新增任务类型时在这里注册。
    """
    handlers: list[BaseTaskHandler] = [
        WechatTaskHandler(notifier),
        NotionInsertTaskHandler(inserter),
    ]
    return {h.task_type: h for h in handlers}
