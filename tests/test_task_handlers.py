from __future__ import annotations

import unittest
from unittest.mock import AsyncMock, Mock

from taskq.core.errors import TaskValidationError
from taskq.core.models import InsertResult, NotifyResult
from taskq.services.handlers.notion_insert import NotionInsertTaskHandler
from taskq.services.handlers.registry import build_handler_registry
from taskq.services.handlers.wechat import WechatTaskHandler


def _notion_task(**overrides) -> dict:
    task = {
        "type": "notion_insert",
        "name": "daily-import",
        "message": "nightly run",
        "array": [{"properties": {"Company": {"title": [{"text": {"content": "Acme"}}]}}}],
        "notionApiKey": "secret",
        "databaseId": "db-1",
        "wechatWebhookUrl": "https://hook.example/fail",
    }
    task.update(overrides)
    return task


class TestWechatTaskHandler(unittest.IsolatedAsyncioTestCase):
    async def test_sends_notification(self) -> None:
        notifier = Mock()
        notifier.notify = AsyncMock(return_value=NotifyResult(ok=True))

        await WechatTaskHandler(notifier).handle(
            {"type": "wechat", "webhookUrl": "https://x", "text": "hi"}
        )

        notifier.notify.assert_awaited_once_with("https://x", "hi")

    async def test_missing_fields_raise_validation_error(self) -> None:
        notifier = Mock()
        notifier.notify = AsyncMock()
        handler = WechatTaskHandler(notifier)

        for payload in (
            {"type": "wechat", "text": "hi"},
            {"type": "wechat", "webhookUrl": "https://x"},
            {"type": "wechat", "webhookUrl": "https://x", "text": ""},
        ):
            with self.assertRaises(TaskValidationError):
                await handler.handle(payload)
        notifier.notify.assert_not_awaited()


class TestNotionInsertTaskHandler(unittest.IsolatedAsyncioTestCase):
    async def test_forwards_batch_to_inserter(self) -> None:
        inserter = Mock()
        inserter.insert_batch = AsyncMock(
            return_value=[InsertResult.success("Acme", page_id="p1", url="u1")]
        )
        task = _notion_task()

        await NotionInsertTaskHandler(inserter).handle(task)

        inserter.insert_batch.assert_awaited_once_with(
            task["array"],
            api_key="secret",
            database_id="db-1",
            failure_webhook="https://hook.example/fail",
            name="daily-import",
            message="nightly run",
        )

    async def test_empty_array_is_accepted(self) -> None:
        inserter = Mock()
        inserter.insert_batch = AsyncMock(return_value=[])

        await NotionInsertTaskHandler(inserter).handle(_notion_task(array=[]))

        inserter.insert_batch.assert_awaited_once()

    async def test_missing_or_wrong_fields_raise_validation_error(self) -> None:
        inserter = Mock()
        inserter.insert_batch = AsyncMock()
        handler = NotionInsertTaskHandler(inserter)

        for field in ("name", "message", "array", "notionApiKey", "databaseId", "wechatWebhookUrl"):
            task = _notion_task()
            del task[field]
            with self.assertRaises(TaskValidationError) as ctx:
                await handler.handle(task)
            self.assertIn(field, str(ctx.exception))

        with self.assertRaises(TaskValidationError):
            await handler.handle(_notion_task(array="not-a-list"))
        inserter.insert_batch.assert_not_awaited()


class TestHandlerRegistry(unittest.TestCase):
    def test_registers_known_kinds(self) -> None:
        registry = build_handler_registry(notifier=Mock(), inserter=Mock())
        self.assertEqual(set(registry), {"wechat", "notion_insert"})


if __name__ == "__main__":
    unittest.main()
