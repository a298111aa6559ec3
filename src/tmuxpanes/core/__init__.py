"""Core 模块 - 容量模型、决策引擎、动作执行器"""

from .capacity import calculate_capacity
from .decision import SpawnDecision, decide_close_action, decide_spawn_actions
from .executor import (
    ActionOutcome,
    ActionResult,
    ExecuteActionsResult,
    ExecuteContext,
    execute_action,
    execute_actions,
)
from .types import (
    CapacityConfig,
    CloseAction,
    PaneAction,
    PaneInfo,
    ReplaceAction,
    SessionMapping,
    SpawnAction,
    TmuxConfig,
    TrackedSession,
    WindowState,
)

__all__ = [
    "calculate_capacity",
    "SpawnDecision",
    "decide_spawn_actions",
    "decide_close_action",
    "ActionOutcome",
    "ActionResult",
    "ExecuteActionsResult",
    "ExecuteContext",
    "execute_action",
    "execute_actions",
    "CapacityConfig",
    "CloseAction",
    "PaneAction",
    "PaneInfo",
    "ReplaceAction",
    "SessionMapping",
    "SpawnAction",
    "TmuxConfig",
    "TrackedSession",
    "WindowState",
]
