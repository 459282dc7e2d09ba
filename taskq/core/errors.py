"""
队列服务异常定义

TaskQueueError
├── StoreUnavailableError   队列/锁后端不可用（包装原始异常）
├── MalformedTaskError      队列中的条目不是合法 JSON 对象
└── TaskValidationError     已知类型的任务缺少必填字段
"""
from __future__ import annotations

from typing import Optional


class TaskQueueError(Exception):
    """
    队列服务异常基类。
    """


class StoreUnavailableError(TaskQueueError):
    """
    底层存储（Redis 等）访问失败。

    只有这一类错误会中断 drain，其余错误都在单条任务范围内消化。
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class MalformedTaskError(TaskQueueError):
    """
    队列条目无法解析为任务对象。
    """

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        super().__init__(f"Malformed task entry ({reason}): {raw[:200]!r}")


class TaskValidationError(TaskQueueError):
    """
    任务缺少必填字段或字段类型不对。
    """

    def __init__(self, task_type: str, message: str) -> None:
        self.task_type = task_type
        super().__init__(f"Invalid {task_type} task: {message}")
