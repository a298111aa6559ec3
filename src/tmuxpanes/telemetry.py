"""Telemetry - 日志工厂与 pane 生命周期计数

日志格式: [module:session[:8]] msg
计数器: pane.spawn.ok/fail, pane.close.ok/fail, pane.evicted,
decision.refused, cleanup.errors；另记录当前 tracked session 数。
"""

import logging

from .config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """配置根 logger（入口处调用一次）"""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=_LOG_FORMAT)


def format_session_log(module: str, session_id: str, msg: str) -> str:
    """格式化带 session_id 的日志消息: [module:session_id[:8]] msg"""
    session_short = session_id[:8] if session_id else "unknown"
    return f"[{module}:{session_short}] {msg}"


class PaneMetrics:
    """pane 编排计数（进程内存，经 /api/status 暴露）"""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self.tracked = 0

    def _inc(self, name: str) -> None:
        self._counters[name] = self._counters.get(name, 0) + 1

    # === 记录 ===

    def record_spawn(self, ok: bool) -> None:
        self._inc("pane.spawn.ok" if ok else "pane.spawn.fail")

    def record_close(self, ok: bool) -> None:
        self._inc("pane.close.ok" if ok else "pane.close.fail")

    def record_eviction(self) -> None:
        self._inc("pane.evicted")

    def record_refusal(self) -> None:
        self._inc("decision.refused")

    def record_cleanup_error(self) -> None:
        self._inc("cleanup.errors")

    def set_tracked(self, count: int) -> None:
        self.tracked = count

    # === 读取 ===

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        """计数器与 tracked 数的快照（用于 /api/status）"""
        data = dict(self._counters)
        data["sessions.tracked"] = self.tracked
        return data

    def reset(self) -> None:
        """清零（用于测试）"""
        self._counters.clear()
        self.tracked = 0


# 全局实例
metrics = PaneMetrics()
