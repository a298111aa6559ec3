"""Bootstrap - 集中构造系统组件

职责：
- 创建 TmuxPaneManager
- 创建带排除规则的 SessionWatcher
- 创建 EventReceiver
- 返回 RuntimeComponents 供调用方使用

不负责：
- 启动/停止生命周期（由调用方管理）
- 信号 / atexit 注册
"""

from dataclasses import dataclass

from ..adapters.tmux import TmuxAdapter
from ..config import TmuxPanesConfig
from ..hooks.receiver import EventReceiver
from ..hooks.session_watcher import SessionWatcher
from ..manager import TmuxPaneManager
from ..suppression import SessionInfo, should_suppress
from ..telemetry import get_logger

logger = get_logger(__name__)


@dataclass
class RuntimeComponents:
    """Bootstrap 返回的运行时组件集合"""

    manager: TmuxPaneManager
    watcher: SessionWatcher
    receiver: EventReceiver

    async def start(self) -> None:
        """启动：清理上一个实例遗留的 pane"""
        await self.manager.cleanup_orphaned_panes()
        logger.info("[Bootstrap] orphan sweep finished")

    async def stop(self) -> None:
        """停止：关闭所有已跟踪 pane"""
        await self.manager.cleanup()
        logger.info("[Bootstrap] panes cleaned up")


def bootstrap(
    config: TmuxPanesConfig,
    server_url: str,
    source_pane_id: str | None,
    adapter: TmuxAdapter | None = None,
) -> RuntimeComponents:
    """构造运行时组件

    Args:
        config: 用户配置
        server_url: 宿主进程地址
        source_pane_id: 主 pane ID
        adapter: 可选 TmuxAdapter（测试注入）

    Returns:
        RuntimeComponents
    """
    manager = TmuxPaneManager(
        config=config,
        server_url=server_url,
        source_pane_id=source_pane_id,
        adapter=adapter,
    )

    async def on_session_created(info: SessionInfo) -> None:
        # 排除规则在准入流程之前判断
        if should_suppress(info, config):
            logger.info(f"[Bootstrap] session suppressed: {info.id} ({info.title})")
            return
        await manager.on_session_created(info)

    watcher = SessionWatcher(
        on_session_created=on_session_created,
        on_session_deleted=manager.on_session_deleted,
    )
    receiver = EventReceiver(watcher, manager)

    logger.info("[Bootstrap] Components created")
    return RuntimeComponents(manager=manager, watcher=watcher, receiver=receiver)
