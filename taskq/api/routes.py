from __future__ import annotations

import logging
from json import JSONDecodeError
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from taskq.config import get_settings
from taskq.core.drainer import QueueDrainer
from taskq.services.handlers.registry import build_handler_registry
from taskq.services.notion.client import NotionClient
from taskq.services.notion.inserter import BatchInserter
from taskq.services.store.registry import build_queue_store
from taskq.services.wechat.notifier import WechatNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


class EnqueueAccepted(BaseModel):
    status: str = "Task enqueued"
    task: Dict[str, Any]


class ProcessResponse(BaseModel):
    status: str
    processed: int


class QueueStatusResponse(BaseModel):
    length: int
    draining: bool


settings = get_settings()
queue_store = build_queue_store(settings)
notifier = WechatNotifier(timeout_s=settings.NOTIFY_TIMEOUT_S)
notion_client = NotionClient(
    base_url=settings.NOTION_API_BASE,
    notion_version=settings.NOTION_VERSION,
    timeout_s=settings.NOTION_TIMEOUT_S,
)
inserter = BatchInserter(
    notion_client=notion_client,
    notifier=notifier,
    max_attempts=settings.INSERT_MAX_ATTEMPTS,
    default_retry_after_s=settings.RATE_LIMIT_DEFAULT_DELAY_S,
)
drainer = QueueDrainer(
    store=queue_store,
    handlers=build_handler_registry(notifier=notifier, inserter=inserter),
    lock_name=settings.LOCK_KEY,
    lock_ttl_s=settings.LOCK_TTL_S,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/ping", summary="简单连通性测试")
async def ping() -> Dict[str, str]:
    return {"message": "pong"}


@router.post("/enqueue", summary="任务入队", response_model=EnqueueAccepted)
async def enqueue(request: Request):
    try:
        task = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Missing task type or data")

    if not isinstance(task, dict) or not task.get("type"):
        return _error(400, "Missing task type or data")

    try:
        await queue_store.enqueue(task)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Enqueue failed: type=%s", task.get("type"))
        return _error(500, str(exc))

    logger.info("✅ Enqueued task type=%s", task["type"])
    return EnqueueAccepted(task=task)


@router.post("/process", summary="清空队列并分发任务", response_model=ProcessResponse)
async def process():
    try:
        report = await drainer.drain()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Drain failed")
        return _error(500, str(exc))
    return ProcessResponse(status=report.message, processed=report.processed)


@router.get("/queue/status", summary="队列状态", response_model=QueueStatusResponse)
async def queue_status():
    try:
        length = await queue_store.length()
        draining = await queue_store.is_locked(settings.LOCK_KEY)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Queue status failed")
        return _error(500, str(exc))
    return QueueStatusResponse(length=length, draining=draining)


async def shutdown() -> None:
    await queue_store.close()
    await notion_client.aclose()
