from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from taskq.core.errors import TaskValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseTaskHandler(ABC):
    """
    任务处理器抽象。

    - 输入：从队列解析出的任务 dict
    - 校验失败抛出 TaskValidationError，由 drain 循环记为单条无效任务
    """

    task_type: str = ""

    @abstractmethod
    async def handle(self, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def parse(self, model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            missing = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
            raise TaskValidationError(self.task_type, f"invalid fields: {missing}") from exc
