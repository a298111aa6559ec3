"""Decision Engine 测试"""

from datetime import datetime, timedelta

from tmuxpanes.core.decision import (
    REASON_NO_CAPACITY,
    REASON_SOURCE_PANE_LOST,
    decide_close_action,
    decide_spawn_actions,
    find_eviction_candidate,
)
from tmuxpanes.core.types import (
    CapacityConfig,
    CloseAction,
    PaneInfo,
    ReplaceAction,
    SessionMapping,
    SpawnAction,
    WindowState,
)

CFG = CapacityConfig(main_pane_min_width=120, agent_pane_min_width=40)
T0 = datetime(2026, 1, 1, 12, 0, 0)


def pane(pane_id: str, title: str = "") -> PaneInfo:
    return PaneInfo(pane_id=pane_id, width=40, height=50, left=0, top=0, title=title)


def window(width: int, agent_ids: list[str], main: bool = True) -> WindowState:
    return WindowState(
        window_width=width,
        window_height=50,
        main_pane=pane("%0") if main else None,
        agent_panes=[pane(p) for p in agent_ids],
    )


def mapping(session_id: str, pane_id: str, minutes: int) -> SessionMapping:
    return SessionMapping(session_id=session_id, pane_id=pane_id, created_at=T0 + timedelta(minutes=minutes))


class TestDecideSpawnActions:
    """准入决策"""

    def test_source_pane_lost(self):
        decision = decide_spawn_actions(window(200, [], main=False), "s1", "t", CFG, [])

        assert decision.can_spawn is False
        assert decision.reason == REASON_SOURCE_PANE_LOST
        assert decision.actions == []

    def test_spawn_when_capacity_available(self):
        decision = decide_spawn_actions(window(200, ["%1"]), "s2", "Explore", CFG, [])

        assert decision.can_spawn is True
        assert decision.actions == [SpawnAction(title="Explore", session_id="s2")]

    def test_narrow_window_refuses_with_no_agents(self):
        """窗口窄于 main + agent 下限时总是拒绝"""
        decision = decide_spawn_actions(window(159, []), "s1", "t", CFG, [])

        assert decision.can_spawn is False
        assert decision.reason == REASON_NO_CAPACITY

    def test_narrow_window_refuses_even_with_live_mapped_pane(self):
        """窗口被缩到 main + agent 下限以下，已有 pane 也不能被驱逐替换"""
        decision = decide_spawn_actions(window(159, ["%1"]), "s2", "t", CFG, [mapping("s1", "%1", 1)])

        assert decision.can_spawn is False
        assert decision.reason == REASON_NO_CAPACITY
        assert decision.actions == []

    def test_evicts_oldest_when_full(self):
        """容量 3 已满（t=1,2,3），第 4 个驱逐 t=1"""
        state = window(240, ["%1", "%2", "%3"])
        mappings = [mapping("s2", "%2", 2), mapping("s1", "%1", 1), mapping("s3", "%3", 3)]

        decision = decide_spawn_actions(state, "s4", "New", CFG, mappings)

        assert decision.can_spawn is True
        assert decision.actions == [
            ReplaceAction(pane_id="%1", old_session_id="s1", new_session_id="s4", title="New")
        ]
        assert "s1" in decision.reason

    def test_eviction_skips_sessions_whose_pane_is_gone(self):
        state = window(200, ["%2", "%9"])
        mappings = [mapping("s1", "%1", 1), mapping("s2", "%2", 2)]

        decision = decide_spawn_actions(state, "s3", "t", CFG, mappings)

        assert decision.actions[0].old_session_id == "s2"

    def test_full_of_foreign_panes_refuses(self):
        """占满容量的 pane 都不是本实例创建的 → 无法驱逐"""
        decision = decide_spawn_actions(window(200, ["%7", "%8"]), "s1", "t", CFG, [])

        assert decision.can_spawn is False
        assert decision.reason == REASON_NO_CAPACITY

    def test_occupancy_from_live_state_not_cache(self):
        """缓存里有 2 个 session 但 pane 已被手动关闭 → 仍可直接 spawn"""
        mappings = [mapping("s1", "%1", 1), mapping("s2", "%2", 2)]

        decision = decide_spawn_actions(window(200, []), "s3", "t", CFG, mappings)

        assert decision.actions == [SpawnAction(title="t", session_id="s3")]

    def test_deterministic(self):
        state = window(200, ["%1", "%2"])
        mappings = [mapping("s1", "%1", 1), mapping("s2", "%2", 2)]

        first = decide_spawn_actions(state, "s3", "t", CFG, mappings)
        second = decide_spawn_actions(state, "s3", "t", CFG, mappings)

        assert first == second


class TestFindEvictionCandidate:
    def test_tie_broken_by_session_id(self):
        state = window(200, ["%1", "%2"])
        mappings = [mapping("b", "%1", 0), mapping("a", "%2", 0)]

        candidate = find_eviction_candidate(state, mappings)

        assert candidate.session_id == "a"

    def test_none_when_no_live_mapping(self):
        assert find_eviction_candidate(window(200, ["%5"]), [mapping("s1", "%1", 0)]) is None


class TestDecideCloseAction:
    """回收决策"""

    def test_close_live_pane(self):
        action = decide_close_action(window(200, ["%1"]), "s1", [mapping("s1", "%1", 0)])

        assert action == CloseAction(pane_id="%1", session_id="s1")

    def test_pane_already_gone(self):
        assert decide_close_action(window(200, []), "s1", [mapping("s1", "%1", 0)]) is None

    def test_unknown_session(self):
        assert decide_close_action(window(200, ["%1"]), "nope", [mapping("s1", "%1", 0)]) is None
