"""Hooks 模块 - 宿主事件接入"""

from .receiver import EventReceiver, LifecycleEventRequest, LifecycleEventResponse
from .session_watcher import SessionWatcher, normalize_event_type

__all__ = [
    "EventReceiver",
    "LifecycleEventRequest",
    "LifecycleEventResponse",
    "SessionWatcher",
    "normalize_event_type",
]
