"""
Notion API 异常定义
"""
from typing import Optional


class NotionAPIError(Exception):
    """
    Notion 返回非成功响应。
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class NotionRateLimitError(NotionAPIError):
    """
    HTTP 429：应在 retry_after 秒后重试，本身不算失败。
    """
