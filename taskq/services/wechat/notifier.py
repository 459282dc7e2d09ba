"""
企业微信群机器人 Webhook 通知

尽力而为：任何失败都只记录日志并返回 NotifyResult，绝不向调用方抛出异常，
保证通知失败不会打断任务处理或锁释放。
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from taskq.core.models import NotifyResult

logger = logging.getLogger(__name__)


class WechatNotifier:
    """
    发送企业微信文本消息。

    - client: 可注入共享的 httpx.AsyncClient（测试中配合 MockTransport 使用）；
      不传时每次调用临时创建
    """

    def __init__(
        self,
        *,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = timeout_s
        self._client = client

    async def notify(self, webhook_url: str, text: str) -> NotifyResult:
        payload: Dict[str, Any] = {
            "msgtype": "text",
            "text": {"content": text},
        }
        try:
            if self._client is not None:
                resp = await self._post(self._client, webhook_url, payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await self._post(client, webhook_url, payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("❌ Wechat notify failed: url=%s, error=%s", _mask_url(webhook_url), exc)
            return NotifyResult(ok=False, error=str(exc))

        try:
            body: Any = resp.json()
        except ValueError:
            # 非 JSON 或非 UTF-8 的响应体
            body = resp.text[:200]

        if not resp.is_success:
            logger.error(
                "❌ Wechat notify rejected: url=%s, status=%s, body=%s",
                _mask_url(webhook_url),
                resp.status_code,
                body,
            )
            return NotifyResult(
                ok=False,
                status_code=resp.status_code,
                body=body,
                error=f"HTTP {resp.status_code}",
            )

        logger.info("📨 Wechat notify response: status=%s, body=%s", resp.status_code, body)
        return NotifyResult(ok=True, status_code=resp.status_code, body=body)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    @staticmethod
    async def _post(
        client: httpx.AsyncClient, url: str, payload: Dict[str, Any]
    ) -> httpx.Response:
        return await client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )


def _mask_url(url: str) -> str:
    # webhook 的 key 在 query 中，日志里只保留前缀
    head, sep, _ = url.partition("?")
    return f"{head}?***" if sep else head
