"""Terminal Adapters 模块

提供 tmux 适配器：
- TmuxAdapter: 窗口状态查询
- TmuxClient: tmux 子进程封装
"""

from .tmux import TmuxAdapter, TmuxClient

__all__ = [
    "TmuxAdapter",
    "TmuxClient",
]
