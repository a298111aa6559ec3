"""TmuxPaneManager - agent pane 编排器

每个生命周期事件走同一条流程：
1. QUERY: 查询 tmux 实时窗口状态（唯一可信来源）
2. DECIDE: 纯函数根据状态计算动作
3. EXECUTE: 执行动作并校验
4. UPDATE: 只根据已确认的结果更新 session 缓存

Session 状态: unknown → pending → tracked → (removed)
"""

import asyncio
import subprocess
from collections.abc import Callable
from datetime import datetime

from .adapters.tmux import TmuxAdapter, get_cached_tmux_path, is_inside_tmux
from .config import (
    DEFAULT_SESSION_TITLE,
    EMERGENCY_KILL_TIMEOUT_SECONDS,
    SPAWN_TITLE_PREFIX,
    TmuxPanesConfig,
)
from .core.decision import decide_close_action, decide_spawn_actions
from .core.executor import ExecuteContext, execute_action, execute_actions
from .core.types import (
    CapacityConfig,
    CloseAction,
    ReplaceAction,
    SessionMapping,
    TmuxConfig,
    TrackedSession,
    WindowState,
)
from .suppression import SessionInfo
from .telemetry import format_session_log, get_logger, metrics

logger = get_logger(__name__)


class TmuxPaneManager:
    """Agent pane 编排器

    持有 session → pane 缓存，缓存只记录已确认的结果，
    所有决策都基于最新的 tmux 观测。

    Attributes:
        config: 用户配置
        server_url: 宿主进程地址（注入到 agent pane）
        source_pane_id: 主 pane ID
    """

    def __init__(
        self,
        config: TmuxPanesConfig,
        server_url: str,
        source_pane_id: str | None = None,
        adapter: TmuxAdapter | None = None,
        inside_tmux: Callable[[], bool] = is_inside_tmux,
    ):
        self.config = config
        self.server_url = server_url
        self.source_pane_id = source_pane_id
        self._adapter = adapter or TmuxAdapter()
        self._inside_tmux = inside_tmux

        self._sessions: dict[str, TrackedSession] = {}
        self._pending: set[str] = set()
        # 串行化读取窗口并改变布局的流程，避免两个决策基于同一份观测
        self._layout_lock = asyncio.Lock()

        logger.info(
            f"[PaneManager] initialized (server_url={server_url}, source_pane={source_pane_id})"
        )

    # === 查询 ===

    def is_enabled(self) -> bool:
        return self._inside_tmux() and bool(self.source_pane_id)

    def get_tracked_sessions(self) -> list[str]:
        return list(self._sessions.keys())

    def get_session(self, session_id: str) -> TrackedSession | None:
        return self._sessions.get(session_id)

    def is_pending(self, session_id: str) -> bool:
        return session_id in self._pending

    # === 内部辅助 ===

    def _tmux_config(self) -> TmuxConfig:
        return TmuxConfig(
            layout=self.config.layout,
            main_pane_size=self.config.main_pane_size,
            main_pane_min_width=self.config.main_pane_min_width,
            agent_pane_min_width=self.config.agent_pane_min_width,
        )

    def _capacity_config(self) -> CapacityConfig:
        return CapacityConfig(
            main_pane_min_width=self.config.main_pane_min_width,
            agent_pane_min_width=self.config.agent_pane_min_width,
        )

    def _session_mappings(self) -> list[SessionMapping]:
        return [s.to_mapping() for s in self._sessions.values()]

    def _context(self, state: WindowState) -> ExecuteContext:
        return ExecuteContext(
            config=self._tmux_config(),
            server_url=self.server_url,
            window_state=state,
            client=self._adapter.client,
        )

    def _drop(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            metrics.set_tracked(len(self._sessions))

    async def _query(self) -> WindowState | None:
        """查询窗口状态，未绑定主 pane 时与查询失败同样返回 None"""
        if not self.source_pane_id:
            return None
        return await self._adapter.query_window_state(self.source_pane_id)

    # === 生命周期入口 ===

    async def on_session_created(self, info: SessionInfo) -> None:
        """为新的 worker session 准入一个 pane

        已 tracked 或 pending 的 session 会被忽略，保证并发重复事件只生成一个 pane。
        """
        if not self.is_enabled():
            return

        session_id = info.id
        title = info.title or DEFAULT_SESSION_TITLE

        if not info.parent_id:
            logger.debug(format_session_log("PaneManager", session_id, "not a child session, skipped"))
            return

        if session_id in self._sessions or session_id in self._pending:
            logger.debug(format_session_log("PaneManager", session_id, "already tracked or pending"))
            return

        self._pending.add(session_id)
        try:
            async with self._layout_lock:
                await self._admit(session_id, title)
        finally:
            self._pending.discard(session_id)

    async def _admit(self, session_id: str, title: str) -> None:
        """QUERY → DECIDE → EXECUTE → UPDATE，调用方需持有 _layout_lock"""
        state = await self._query()
        if state is None:
            logger.warning(format_session_log("PaneManager", session_id, "window state query failed"))
            return

        decision = decide_spawn_actions(
            state, session_id, title, self._capacity_config(), self._session_mappings()
        )
        logger.info(
            format_session_log(
                "PaneManager",
                session_id,
                f"decision can_spawn={decision.can_spawn} reason={decision.reason!r} "
                f"(width={state.window_width}, agents={len(state.agent_panes)})",
            )
        )
        if not decision.can_spawn:
            metrics.record_refusal()
            return

        result = await execute_actions(decision.actions, self._context(state))

        for outcome in result.results:
            action, action_result = outcome.action, outcome.result
            if isinstance(action, CloseAction) and action_result.success:
                self._drop(action.session_id)
            if isinstance(action, ReplaceAction) and action_result.closed:
                self._drop(action.old_session_id)
                metrics.record_eviction()
                logger.info(format_session_log("PaneManager", action.old_session_id, "evicted"))

        if result.success and result.spawned_pane_id:
            now = datetime.now()
            self._sessions[session_id] = TrackedSession(
                session_id=session_id,
                pane_id=result.spawned_pane_id,
                description=title,
                created_at=now,
                last_seen_at=now,
            )
            metrics.set_tracked(len(self._sessions))
            logger.info(
                format_session_log("PaneManager", session_id, f"tracked in {result.spawned_pane_id}")
            )
        else:
            logger.warning(format_session_log("PaneManager", session_id, "spawn failed"))

    async def on_session_deleted(self, session_id: str) -> None:
        """回收 session 的 pane

        未跟踪的 session 直接忽略；无论执行结果如何都会移除缓存记录。
        """
        if not self.is_enabled():
            return

        if session_id not in self._sessions:
            return

        logger.info(format_session_log("PaneManager", session_id, "session deleted"))

        async with self._layout_lock:
            state = await self._query()
            if state is None:
                logger.warning(format_session_log("PaneManager", session_id, "query failed, dropping entry"))
                self._drop(session_id)
                return

            close_action = decide_close_action(state, session_id, self._session_mappings())
            if close_action is not None:
                result = await execute_action(close_action, self._context(state))
                if not result.success:
                    logger.warning(
                        format_session_log("PaneManager", session_id, f"close failed: {result.error}")
                    )
            else:
                logger.debug(format_session_log("PaneManager", session_id, "pane already gone"))

            self._drop(session_id)

    # === 清理 ===

    async def cleanup(self) -> None:
        """正常退出时并发关闭所有已跟踪 pane"""
        if not self._sessions or not self.source_pane_id:
            return

        logger.info(f"[PaneManager] cleanup ({len(self._sessions)} sessions)")

        state = await self._query()
        if state is None:
            state = WindowState(window_width=0, window_height=0, main_pane=None)
        ctx = self._context(state)

        async def close_one(session: TrackedSession) -> None:
            try:
                result = await execute_action(
                    CloseAction(pane_id=session.pane_id, session_id=session.session_id), ctx
                )
                if not result.success:
                    metrics.record_cleanup_error()
                    logger.warning(f"[PaneManager] cleanup failed for {session.pane_id}: {result.error}")
            except Exception as e:
                metrics.record_cleanup_error()
                logger.error(f"[PaneManager] cleanup error for {session.pane_id}: {e}")

        await asyncio.gather(*(close_one(s) for s in list(self._sessions.values())))
        self._sessions.clear()
        metrics.set_tracked(0)

    def cleanup_sync(self) -> None:
        """同步清理（用于进程退出路径，异步操作不可靠）

        每个 pane 独立 kill，带超时，失败只记录日志。
        """
        if not self._sessions:
            return

        tmux = get_cached_tmux_path()
        if not tmux:
            logger.warning("[PaneManager] cleanup_sync: no cached tmux path")
            return

        logger.info(f"[PaneManager] cleanup_sync ({len(self._sessions)} sessions)")

        for session in list(self._sessions.values()):
            try:
                subprocess.run(
                    [tmux, "kill-pane", "-t", session.pane_id],
                    capture_output=True,
                    timeout=EMERGENCY_KILL_TIMEOUT_SECONDS,
                )
                logger.info(f"[PaneManager] cleanup_sync killed {session.pane_id}")
            except (subprocess.SubprocessError, OSError) as e:
                logger.error(f"[PaneManager] cleanup_sync error for {session.pane_id}: {e}")

        self._sessions.clear()

    async def cleanup_orphaned_panes(self) -> None:
        """关闭上一个实例遗留的 agent pane（按标题前缀识别）"""
        if not self.source_pane_id:
            return

        state = await self._query()
        if state is None:
            return

        tracked_panes = {s.pane_id for s in self._sessions.values()}
        orphans = [
            p
            for p in state.agent_panes
            if p.title.startswith(SPAWN_TITLE_PREFIX) and p.pane_id not in tracked_panes
        ]
        if not orphans:
            return

        logger.info(f"[PaneManager] closing {len(orphans)} orphaned panes")
        ctx = self._context(state)

        for pane in orphans:
            try:
                result = await execute_action(CloseAction(pane_id=pane.pane_id, session_id="orphan"), ctx)
                if result.success:
                    logger.info(f"[PaneManager] orphaned pane closed: {pane.pane_id} ({pane.title})")
                else:
                    logger.warning(f"[PaneManager] failed to close orphan {pane.pane_id}: {result.error}")
            except Exception as e:
                logger.error(f"[PaneManager] failed to close orphan {pane.pane_id}: {e}")
