"""HTTP 事件接收器 - 接收宿主进程的 session 生命周期事件"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..telemetry import metrics

if TYPE_CHECKING:
    from fastapi import FastAPI

    from ..manager import TmuxPaneManager
    from .session_watcher import SessionWatcher

logger = logging.getLogger(__name__)


class LifecycleEventRequest(BaseModel):
    """生命周期事件请求体"""

    type: str  # 事件类型: "session.created", "session.deleted", "session.idle"
    properties: dict[str, Any] = {}


class LifecycleEventResponse(BaseModel):
    """生命周期事件响应"""

    success: bool
    message: str


class EventReceiver:
    """HTTP 事件接收器

    提供 `/api/event` 端点，把事件交给 SessionWatcher。
    """

    def __init__(self, watcher: "SessionWatcher", manager: "TmuxPaneManager"):
        self.watcher = watcher
        self.manager = manager

    def setup_routes(self, app: "FastAPI") -> None:
        """设置 API 路由"""

        @app.post("/api/event", response_model=LifecycleEventResponse)
        async def receive_event(request: LifecycleEventRequest):
            """接收生命周期事件"""
            logger.debug(f"[EventReceiver] received: {request.type}")

            try:
                await self.watcher.handle_event(request.model_dump())
                return LifecycleEventResponse(success=True, message="Event processed")
            except Exception as e:
                logger.error(f"[EventReceiver] failed to process {request.type}: {e}")
                return LifecycleEventResponse(success=False, message=str(e))

        @app.get("/api/status")
        async def status():
            """获取 pane 管理状态"""
            return {
                "enabled": self.manager.is_enabled(),
                "source_pane_id": self.manager.source_pane_id,
                "sessions": {
                    session_id: self.manager.get_session(session_id).pane_id
                    for session_id in self.manager.get_tracked_sessions()
                },
                "metrics": metrics.snapshot(),
            }
