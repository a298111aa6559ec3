"""Session 生命周期适配 - 把宿主事件规范化为 created / deleted 调用

负责：
- 规范化事件类型（下划线 / 大小写变体 → 标准格式）
- 只转发子 session（带 parentID）的创建事件
- session.deleted 与 session.idle 同样视为结束
"""

from collections.abc import Awaitable, Callable
from typing import Any

from ..suppression import SessionInfo
from ..telemetry import get_logger

logger = get_logger(__name__)

SESSION_CREATED = "session.created"
SESSION_DELETED = "session.deleted"
SESSION_IDLE = "session.idle"

# 事件类型映射表（在 watcher 中规范化，而非 manager）
_EVENT_TYPE_MAP = {
    "session.created": SESSION_CREATED,
    "session_created": SESSION_CREATED,
    "session.deleted": SESSION_DELETED,
    "session_deleted": SESSION_DELETED,
    "session.idle": SESSION_IDLE,
    "session_idle": SESSION_IDLE,
}

OnSessionCreated = Callable[[SessionInfo], Awaitable[None]]
OnSessionDeleted = Callable[[str], Awaitable[None]]


def normalize_event_type(event_type: str) -> str:
    """规范化事件类型

    Args:
        event_type: 原始事件类型

    Returns:
        规范化后的事件类型（未知类型原样返回）
    """
    return _EVENT_TYPE_MAP.get(event_type.lower(), event_type)


def _ended_session_id(properties: dict[str, Any]) -> str | None:
    info = properties.get("info")
    if isinstance(info, dict) and info.get("id"):
        return str(info["id"])
    session_id = properties.get("sessionID")
    return str(session_id) if session_id else None


class SessionWatcher:
    """宿主事件 → 生命周期调用"""

    def __init__(
        self,
        on_session_created: OnSessionCreated,
        on_session_deleted: OnSessionDeleted | None = None,
    ):
        self._on_session_created = on_session_created
        self._on_session_deleted = on_session_deleted

    async def handle_event(self, event: dict[str, Any]) -> None:
        """处理一个原始事件

        Args:
            event: {"type": ..., "properties": {...}}
        """
        event_type = normalize_event_type(str(event.get("type", "")))
        properties = event.get("properties") or {}

        if event_type == SESSION_CREATED:
            info = properties.get("info") or {}
            # 只有子 session 才有 parentID
            if not info.get("id") or not info.get("parentID"):
                return

            await self._on_session_created(
                SessionInfo(
                    id=str(info["id"]),
                    parent_id=str(info["parentID"]),
                    title=info.get("title"),
                    metadata=info.get("metadata") or {},
                )
            )
            return

        if event_type in (SESSION_DELETED, SESSION_IDLE) and self._on_session_deleted:
            session_id = _ended_session_id(properties)
            if session_id:
                await self._on_session_deleted(session_id)
            return

        logger.debug(f"[SessionWatcher] ignored event: {event_type}")
