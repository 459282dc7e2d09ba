"""
Notion 页面创建客户端

API: POST /v1/pages
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from taskq.services.notion.errors import NotionAPIError, NotionRateLimitError

logger = logging.getLogger(__name__)


class NotionClient:
    """
    只封装“在数据库下创建一页”这一个调用。

    - 429 抛出 NotionRateLimitError（携带 Retry-After 秒数）
    - 其他非 2xx / 非 JSON 响应抛出 NotionAPIError
    - 网络层错误（httpx.HTTPError）原样向上抛出
    """

    NOTION_HOST = "https://api.notion.com"

    def __init__(
        self,
        *,
        base_url: str = NOTION_HOST,
        notion_version: str = "2022-06-28",
        timeout_s: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._notion_version = notion_version
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)

    async def create_page(
        self,
        *,
        api_key: str,
        database_id: str,
        properties: Dict[str, Any],
    ) -> Dict[str, Any]:
        masked_key = f"{api_key[:4]}...{api_key[-4:]}" if len(api_key) > 8 else "***"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Notion-Version": self._notion_version,
        }
        payload = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }
        logger.info(
            "Notion API Request: POST /v1/pages database_id=%s, api_key=%s, property_keys=%s",
            database_id,
            masked_key,
            list(properties.keys()),
        )

        resp = await self._client.post("/v1/pages", json=payload, headers=headers)
        logger.info("Notion API Response: POST /v1/pages -> status=%s", resp.status_code)

        if resp.status_code == 429:
            retry_after = _parse_retry_after(resp.headers.get("Retry-After"))
            raise NotionRateLimitError(
                f"Notion rate limited, retry_after={retry_after}",
                status_code=429,
                retry_after=retry_after,
            )

        try:
            data = resp.json()
        except ValueError:
            logger.error(
                "Notion API non-JSON response: status=%s, body=%s",
                resp.status_code,
                resp.text[:200],
            )
            raise NotionAPIError(
                f"Notion API returned non-JSON response. Status: {resp.status_code}, Body: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        if not resp.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error(
                "Notion API error: status=%s, code=%s, message=%s",
                resp.status_code,
                data.get("code") if isinstance(data, dict) else None,
                message,
            )
            raise NotionAPIError(
                message or f"Notion API error status={resp.status_code}, data={data}",
                status_code=resp.status_code,
            )

        if not isinstance(data, dict):
            raise NotionAPIError(
                f"Notion API returned unexpected body type: {type(data).__name__}",
                status_code=resp.status_code,
            )
        return data

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
