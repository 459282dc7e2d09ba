"""
Notion 写入模块

- client: 页面创建 HTTP 调用
- inserter: 带限流重试的批量写入
"""
from __future__ import annotations

from taskq.services.notion.client import NotionClient
from taskq.services.notion.errors import NotionAPIError, NotionRateLimitError
from taskq.services.notion.inserter import BatchInserter, extract_title

__all__ = [
    "BatchInserter",
    "NotionAPIError",
    "NotionClient",
    "NotionRateLimitError",
    "extract_title",
]
