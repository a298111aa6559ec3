"""Core 数据模型

- PaneInfo / WindowState: tmux 窗口的一次观测快照（每次查询重建）
- CapacityConfig / TmuxConfig: 容量与布局配置
- SessionMapping / TrackedSession: session → pane 的缓存记录
- SpawnAction / CloseAction / ReplaceAction: 布局变更请求
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

from ..config import TmuxLayout


@dataclass(frozen=True)
class PaneInfo:
    """Pane 观测快照

    Attributes:
        pane_id: tmux 分配的稳定 ID（如 "%3"）
        width, height: 尺寸（字符）
        left, top: 在窗口中的位置（字符）
        title: pane 标题
        is_active: 是否为活跃 pane
    """

    pane_id: str
    width: int
    height: int
    left: int
    top: int
    title: str = ""
    is_active: bool = False


@dataclass(frozen=True)
class WindowState:
    """窗口观测快照

    Attributes:
        window_width, window_height: 窗口尺寸
        main_pane: 源 pane（None 表示源 pane 已无法解析）
        agent_panes: 其余 pane，按 tmux 返回顺序
    """

    window_width: int
    window_height: int
    main_pane: PaneInfo | None
    agent_panes: list[PaneInfo] = field(default_factory=list)

    def get_agent_pane(self, pane_id: str) -> PaneInfo | None:
        for pane in self.agent_panes:
            if pane.pane_id == pane_id:
                return pane
        return None

    def has_agent_pane(self, pane_id: str) -> bool:
        return self.get_agent_pane(pane_id) is not None


@dataclass(frozen=True)
class CapacityConfig:
    main_pane_min_width: int
    agent_pane_min_width: int


@dataclass(frozen=True)
class TmuxConfig:
    """执行布局变更时使用的配置"""

    layout: TmuxLayout
    main_pane_size: int
    main_pane_min_width: int
    agent_pane_min_width: int


@dataclass(frozen=True)
class SessionMapping:
    session_id: str
    pane_id: str
    created_at: datetime


@dataclass
class TrackedSession:
    """缓存中的 session 记录

    只在 executor 确认 spawn/replace 成功后创建。
    """

    session_id: str
    pane_id: str
    description: str
    created_at: datetime
    last_seen_at: datetime

    def to_mapping(self) -> SessionMapping:
        return SessionMapping(
            session_id=self.session_id,
            pane_id=self.pane_id,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class SpawnAction:
    title: str
    session_id: str
    type: Literal["spawn"] = field(default="spawn", init=False)


@dataclass(frozen=True)
class CloseAction:
    pane_id: str
    session_id: str
    type: Literal["close"] = field(default="close", init=False)


@dataclass(frozen=True)
class ReplaceAction:
    """关闭旧 session 的 pane，为新 session 开新 pane（容量已满时）"""

    pane_id: str
    old_session_id: str
    new_session_id: str
    title: str
    type: Literal["replace"] = field(default="replace", init=False)


PaneAction = Union[SpawnAction, CloseAction, ReplaceAction]
