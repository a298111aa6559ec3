"""Action Executor - 执行并校验布局变更

职责：
- 按顺序执行 PaneAction（spawn / close / replace）
- 每个动作都通过后续观测校验，而不是只看命令退出码
- 单个动作失败不会中止批次，结果逐条上报供调用方对账
"""

import shlex
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import ATTACH_COMMAND, SERVER_URL_ENV_VAR, SPAWN_TITLE_PREFIX
from ..telemetry import get_logger, metrics
from .types import CloseAction, PaneAction, ReplaceAction, SpawnAction, TmuxConfig, WindowState

if TYPE_CHECKING:
    from ..adapters.tmux.client import TmuxClient

logger = get_logger(__name__)

# 按布局划分的 split 方向与主 pane 尺寸选项
_VERTICAL_SPLIT_LAYOUTS = {"main-horizontal", "even-vertical"}
_MAIN_PANE_SIZE_OPTIONS = {
    "main-vertical": "main-pane-width",
    "main-horizontal": "main-pane-height",
}


@dataclass
class ExecuteContext:
    """执行上下文

    Attributes:
        config: 布局配置
        server_url: 宿主进程的服务地址（注入到新 pane 中）
        window_state: 决策所依据的窗口观测
        client: tmux 客户端
    """

    config: TmuxConfig
    server_url: str
    window_state: WindowState
    client: "TmuxClient"


@dataclass
class ActionResult:
    """单个动作的执行结果

    Attributes:
        success: 动作是否经校验确认成功
        pane_id: 新建 pane 的 ID（spawn / replace）
        closed: replace 的关闭步骤是否已成功（即使后续 spawn 失败）
        error: 失败原因
    """

    success: bool
    pane_id: str | None = None
    closed: bool = False
    error: str | None = None


@dataclass
class ActionOutcome:
    action: PaneAction
    result: ActionResult


@dataclass
class ExecuteActionsResult:
    """批量执行结果

    Attributes:
        success: 所有动作是否都成功
        spawned_pane_id: 本批次新建的 pane（如有）
        results: 每个动作的结果，与输入顺序一致
    """

    success: bool
    spawned_pane_id: str | None = None
    results: list[ActionOutcome] = field(default_factory=list)


def build_attach_command(server_url: str, session_id: str) -> str:
    """构造新 pane 中运行的 attach 命令"""
    return ATTACH_COMMAND.format(
        server_url=shlex.quote(server_url),
        session_id=shlex.quote(session_id),
    )


async def apply_layout(ctx: ExecuteContext) -> bool:
    """对整个窗口应用布局与主 pane 比例（尽力而为）"""
    main_pane = ctx.window_state.main_pane
    if main_pane is None:
        return False

    client = ctx.client
    size_option = _MAIN_PANE_SIZE_OPTIONS.get(ctx.config.layout)
    if size_option:
        if not await client.set_window_option(
            main_pane.pane_id, size_option, f"{ctx.config.main_pane_size}%"
        ):
            logger.warning(f"[Executor] failed to set {size_option}")

    applied = await client.select_layout(main_pane.pane_id, ctx.config.layout)
    if not applied:
        logger.warning(f"[Executor] failed to apply layout {ctx.config.layout}")
    return applied


async def _spawn(title: str, session_id: str, ctx: ExecuteContext) -> ActionResult:
    main_pane = ctx.window_state.main_pane
    if main_pane is None:
        return ActionResult(success=False, error="source pane lost")

    client = ctx.client
    pane_id = await client.split_window(
        main_pane.pane_id,
        command=build_attach_command(ctx.server_url, session_id),
        env={SERVER_URL_ENV_VAR: ctx.server_url},
        horizontal=ctx.config.layout not in _VERTICAL_SPLIT_LAYOUTS,
    )
    if pane_id is None:
        metrics.record_spawn(ok=False)
        return ActionResult(success=False, error="split-window failed")

    await apply_layout(ctx)

    if not await client.rename_pane(pane_id, f"{SPAWN_TITLE_PREFIX}{title}"):
        logger.warning(f"[Executor] failed to set title on {pane_id}")

    if not await client.pane_exists(pane_id):
        metrics.record_spawn(ok=False)
        return ActionResult(success=False, pane_id=pane_id, error="spawned pane not found")

    metrics.record_spawn(ok=True)
    logger.info(f"[Executor] spawned {pane_id} for session {session_id}")
    return ActionResult(success=True, pane_id=pane_id)


async def _close(pane_id: str, ctx: ExecuteContext) -> ActionResult:
    client = ctx.client
    if not await client.kill_pane(pane_id):
        if await client.pane_exists(pane_id):
            metrics.record_close(ok=False)
            return ActionResult(success=False, error=f"kill-pane failed for {pane_id}")
        logger.debug(f"[Executor] pane {pane_id} already gone")

    await apply_layout(ctx)
    metrics.record_close(ok=True)
    return ActionResult(success=True)


async def execute_action(action: PaneAction, ctx: ExecuteContext) -> ActionResult:
    """执行单个动作

    Args:
        action: 要执行的动作
        ctx: 执行上下文

    Returns:
        ActionResult
    """
    if isinstance(action, SpawnAction):
        return await _spawn(action.title, action.session_id, ctx)

    if isinstance(action, CloseAction):
        return await _close(action.pane_id, ctx)

    if isinstance(action, ReplaceAction):
        closed = await _close(action.pane_id, ctx)
        if not closed.success:
            return ActionResult(success=False, error=f"replace close step: {closed.error}")

        spawned = await _spawn(action.title, action.new_session_id, ctx)
        return ActionResult(
            success=spawned.success,
            pane_id=spawned.pane_id if spawned.success else None,
            closed=True,
            error=None if spawned.success else f"replace spawn step: {spawned.error}",
        )

    raise ValueError(f"Unknown action: {action!r}")


async def execute_actions(actions: list[PaneAction], ctx: ExecuteContext) -> ExecuteActionsResult:
    """按顺序执行动作列表

    单个动作失败（包括抛出异常）不会中止后续动作。
    """
    results: list[ActionOutcome] = []
    spawned_pane_id: str | None = None

    for action in actions:
        try:
            result = await execute_action(action, ctx)
        except Exception as e:
            logger.error(f"[Executor] {action.type} raised: {e}")
            result = ActionResult(success=False, error=str(e))

        if not result.success:
            logger.warning(f"[Executor] {action.type} failed: {result.error}")
        if result.success and result.pane_id:
            spawned_pane_id = result.pane_id
        results.append(ActionOutcome(action=action, result=result))

    return ExecuteActionsResult(
        success=all(outcome.result.success for outcome in results),
        spawned_pane_id=spawned_pane_id,
        results=results,
    )
