from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class WechatTask(BaseModel):
    """
    企业微信通知任务。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: Literal["wechat"] = "wechat"
    webhook_url: str = Field(..., alias="webhookUrl", min_length=1)
    text: str = Field(..., min_length=1)


class NotionInsertTask(BaseModel):
    """
    批量写入 Notion 数据库的任务。

    array 中每一项的 properties 原样透传给 Notion，不做解析。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: Literal["notion_insert"] = "notion_insert"
    name: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    array: List[Dict[str, Any]]
    notion_api_key: str = Field(..., alias="notionApiKey", min_length=1)
    database_id: str = Field(..., alias="databaseId", min_length=1)
    wechat_webhook_url: str = Field(..., alias="wechatWebhookUrl", min_length=1)


@dataclass
class InsertResult:
    """
    单条记录的写入结果。
    """

    status: Literal["success", "error"]
    title: str
    page_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, title: str, *, page_id: Optional[str], url: Optional[str]) -> "InsertResult":
        return cls(status="success", title=title, page_id=page_id, url=url)

    @classmethod
    def failure(cls, title: str, error: str) -> "InsertResult":
        return cls(status="error", title=title, error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass
class NotifyResult:
    """
    一次 Webhook 通知的结果，调用方可以直接丢弃。
    """

    ok: bool
    status_code: Optional[int] = None
    body: Any = None
    error: Optional[str] = None


class ItemOutcome(str, Enum):
    """drain 过程中单条队列条目的处理结果。"""

    PROCESSED = "processed"
    MALFORMED = "malformed"
    INVALID = "invalid"
    UNKNOWN_TYPE = "unknown_type"
    FAILED = "failed"


@dataclass
class DrainReport:
    """
    一次 drain 的汇总。

    - skipped：锁被占用，未访问队列
    - completed：队列已清空
    """

    status: Literal["skipped", "completed"]
    outcomes: Tuple[ItemOutcome, ...] = field(default_factory=tuple)

    @classmethod
    def skipped(cls) -> "DrainReport":
        return cls(status="skipped")

    @property
    def processed(self) -> int:
        return sum(1 for o in self.outcomes if o is ItemOutcome.PROCESSED)

    @property
    def message(self) -> str:
        if self.status == "skipped":
            return "⏳ Drain already in progress, skipped"
        return f"✅ Processed {self.processed} tasks"
