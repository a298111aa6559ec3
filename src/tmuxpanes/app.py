"""FastAPI 应用与入口"""

import asyncio
import atexit
import logging
import signal
import sys

import uvicorn
from fastapi import FastAPI

from tmuxpanes import config
from tmuxpanes.adapters.tmux import get_cached_tmux_path, get_current_pane_id, is_inside_tmux
from tmuxpanes.manager import TmuxPaneManager
from tmuxpanes.runtime import RuntimeComponents, bootstrap
from tmuxpanes.telemetry import configure_logging

logger = logging.getLogger(__name__)


def create_app(components: RuntimeComponents) -> FastAPI:
    """创建 Web 应用"""
    app = FastAPI(title="tmux-panes")
    components.receiver.setup_routes(app)
    return app


async def start_server(components: RuntimeComponents) -> None:
    """启动服务器

    启动前清理遗留 pane；uvicorn 退出（SIGINT/SIGTERM）后关闭所有已跟踪 pane。
    """
    await components.start()

    app = create_app(components)
    uvicorn_config = uvicorn.Config(
        app, host=config.RECEIVER_HOST, port=config.RECEIVER_PORT, log_level="info"
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)

    logger.info(f"tmux-panes receiver at http://{config.RECEIVER_HOST}:{config.RECEIVER_PORT}")

    try:
        await uvicorn_server.serve()
    finally:
        await components.stop()


def install_signal_handlers(manager: TmuxPaneManager) -> None:
    """SIGTERM/SIGINT 时同步关闭已跟踪 pane 后退出

    atexit 不覆盖 SIGTERM；uvicorn serve 期间会暂时接管这两个信号，
    其余阶段（如启动时的遗留 pane 清理）由这里兜底。
    """

    def handle_signal(signum: int, _frame: object) -> None:
        logger.info(f"{signal.Signals(signum).name} received, cleaning up panes")
        manager.cleanup_sync()
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)


def main():
    """入口函数"""
    configure_logging()
    panes_config = config.load_config()

    if not is_inside_tmux():
        logger.info("not inside tmux, staying dormant")
        return

    source_pane_id = get_current_pane_id()
    if not source_pane_id:
        logger.info("no TMUX_PANE, staying dormant")
        return

    # 提前解析 tmux 路径，退出时的同步清理依赖它
    get_cached_tmux_path()

    components = bootstrap(
        config=panes_config,
        server_url=config.DEFAULT_SERVER_URL,
        source_pane_id=source_pane_id,
    )
    atexit.register(components.manager.cleanup_sync)
    install_signal_handlers(components.manager)

    try:
        asyncio.run(start_server(components))
    except KeyboardInterrupt:
        print("\nServer stopped")


if __name__ == "__main__":
    main()
