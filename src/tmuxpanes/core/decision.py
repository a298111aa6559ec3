"""Decision Engine - 纯函数布局决策

输入为最新的 WindowState 与当前缓存的 SessionMapping 列表，输出最小的
PaneAction 列表。不访问 tmux，不持有状态。

占用数总是取自实时观测的 agent pane 数，而非缓存大小，
这样手动关闭的 pane 或上一个实例遗留的 pane 都能被正确计入。
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from .capacity import calculate_capacity
from .types import (
    CapacityConfig,
    CloseAction,
    PaneAction,
    ReplaceAction,
    SessionMapping,
    SpawnAction,
    WindowState,
)

REASON_SOURCE_PANE_LOST = "source pane lost"
REASON_NO_CAPACITY = "no capacity and no evictable session"


@dataclass(frozen=True)
class SpawnDecision:
    """准入决策结果

    Attributes:
        can_spawn: 是否可以为新 session 开 pane
        reason: 决策原因（用于诊断日志）
        actions: 需要按顺序执行的动作
    """

    can_spawn: bool
    reason: str
    actions: list[PaneAction] = field(default_factory=list)


def find_eviction_candidate(
    state: WindowState, mappings: Sequence[SessionMapping]
) -> SessionMapping | None:
    """选出最早创建且 pane 仍存活的 session

    创建时间相同时按 session_id 排序，保证结果确定。
    """
    live = [m for m in mappings if state.has_agent_pane(m.pane_id)]
    if not live:
        return None
    return min(live, key=lambda m: (m.created_at, m.session_id))


def decide_spawn_actions(
    state: WindowState,
    session_id: str,
    title: str,
    config: CapacityConfig,
    mappings: Sequence[SessionMapping],
) -> SpawnDecision:
    """决定如何为新 session 腾出 pane

    Args:
        state: 最新窗口观测
        session_id: 新 session ID
        title: 显示标题
        config: 宽度下限
        mappings: 当前缓存的 session 映射

    Returns:
        SpawnDecision
    """
    if state.main_pane is None:
        return SpawnDecision(can_spawn=False, reason=REASON_SOURCE_PANE_LOST)

    capacity = calculate_capacity(state.window_width, config)
    occupied = len(state.agent_panes)

    if occupied < capacity:
        return SpawnDecision(
            can_spawn=True,
            reason=f"capacity available ({occupied}/{capacity})",
            actions=[SpawnAction(title=title, session_id=session_id)],
        )

    # 容量为 0 时驱逐也无法让新 pane 满足宽度下限
    if capacity == 0:
        return SpawnDecision(can_spawn=False, reason=REASON_NO_CAPACITY)

    candidate = find_eviction_candidate(state, mappings)
    if candidate is None:
        return SpawnDecision(can_spawn=False, reason=REASON_NO_CAPACITY)

    return SpawnDecision(
        can_spawn=True,
        reason=f"at capacity ({occupied}/{capacity}), evicting {candidate.session_id}",
        actions=[
            ReplaceAction(
                pane_id=candidate.pane_id,
                old_session_id=candidate.session_id,
                new_session_id=session_id,
                title=title,
            )
        ],
    )


def decide_close_action(
    state: WindowState, session_id: str, mappings: Sequence[SessionMapping]
) -> CloseAction | None:
    """决定是否需要关闭 session 的 pane

    pane 已不在实时观测中时返回 None（无需操作）。
    """
    mapping = next((m for m in mappings if m.session_id == session_id), None)
    if mapping is None:
        return None
    if not state.has_agent_pane(mapping.pane_id):
        return None
    return CloseAction(pane_id=mapping.pane_id, session_id=session_id)
