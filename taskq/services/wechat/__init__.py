from __future__ import annotations

from taskq.services.wechat.notifier import WechatNotifier

__all__ = ["WechatNotifier"]
