"""Pytest 配置"""

import asyncio

import pytest

from tmuxpanes.adapters.tmux import TmuxAdapter
from tmuxpanes.config import TmuxPanesConfig
from tmuxpanes.manager import TmuxPaneManager
from tmuxpanes.telemetry import metrics


class FakeTmuxClient:
    """内存中的 tmux 窗口，实现 TmuxClient 用到的接口

    记录所有变更调用，便于断言。
    """

    def __init__(self, width: int = 200, height: int = 50, main_pane_id: str = "%0"):
        self.width = width
        self.height = height
        self.main_pane_id = main_pane_id
        self.panes: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.reachable = True
        self.fail_split = False
        self.fail_kill: set[str] = set()
        self.vanish_after_split = False
        self._next_id = 1
        self.add_pane(main_pane_id, title="main", active=True)

    def add_pane(self, pane_id: str, title: str = "", active: bool = False) -> None:
        self.panes[pane_id] = {
            "pane_id": pane_id,
            "title": title,
            "left": 0,
            "top": 0,
            "width": self.width,
            "height": self.height,
            "active": active,
        }

    def killed(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "kill"]

    def splits(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "split"]

    async def get_window_info(self, target: str) -> dict | None:
        # 让出控制权，模拟真实子进程调用
        await asyncio.sleep(0)
        if not self.reachable or target not in self.panes:
            return None
        return {"window_id": "@1", "width": self.width, "height": self.height}

    async def list_panes(self, target: str) -> list[dict] | None:
        if not self.reachable:
            return None
        return [dict(p) for p in self.panes.values()]

    async def split_window(self, target, command=None, env=None, horizontal=True) -> str | None:
        self.calls.append(("split", target, command, env, horizontal))
        if self.fail_split:
            return None
        pane_id = f"%{self._next_id}"
        self._next_id += 1
        if not self.vanish_after_split:
            self.add_pane(pane_id)
        return pane_id

    async def kill_pane(self, pane_id: str) -> bool:
        self.calls.append(("kill", pane_id))
        if pane_id in self.fail_kill or pane_id not in self.panes:
            return False
        del self.panes[pane_id]
        return True

    async def pane_exists(self, pane_id: str) -> bool:
        return pane_id in self.panes

    async def select_layout(self, target: str, layout: str) -> bool:
        self.calls.append(("layout", target, layout))
        return True

    async def set_window_option(self, target: str, option: str, value: str) -> bool:
        self.calls.append(("option", target, option, value))
        return True

    async def rename_pane(self, pane_id: str, name: str) -> bool:
        self.calls.append(("rename", pane_id, name))
        if pane_id not in self.panes:
            return False
        self.panes[pane_id]["title"] = name
        return True


@pytest.fixture
def anyio_backend():
    """指定 anyio 只使用 asyncio backend"""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def fake_tmux():
    return FakeTmuxClient()


@pytest.fixture
def panes_config():
    return TmuxPanesConfig(main_pane_min_width=120, agent_pane_min_width=40)


@pytest.fixture
def manager(fake_tmux, panes_config):
    """指向 FakeTmuxClient 的 TmuxPaneManager"""
    return TmuxPaneManager(
        config=panes_config,
        server_url="http://localhost:4096",
        source_pane_id="%0",
        adapter=TmuxAdapter(client=fake_tmux),
        inside_tmux=lambda: True,
    )
