"""tmux-panes 配置

配置分为以下几类：
- 布局配置：tmux 布局模式、主 pane 比例、宽度下限
- 排除配置：不需要 pane 的 session 标题模式
- Pane 配置：标题前缀、attach 命令
- 清理配置：同步清理超时
- 接收器配置：HTTP 事件接收地址
"""

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

# === 布局配置 ===
TmuxLayout = Literal[
    "main-vertical",
    "main-horizontal",
    "tiled",
    "even-horizontal",
    "even-vertical",
]
DEFAULT_LAYOUT: TmuxLayout = "main-vertical"
DEFAULT_MAIN_PANE_SIZE = 60  # 主 pane 占窗口百分比
DEFAULT_MAIN_PANE_MIN_WIDTH = 120  # 主 pane 最小列数
DEFAULT_AGENT_PANE_MIN_WIDTH = 40  # agent pane 最小列数

# === Pane 配置 ===
SPAWN_TITLE_PREFIX = "omo-subagent-"  # agent pane 标题前缀（用于孤儿检测）
DEFAULT_SESSION_TITLE = "Subagent"
ATTACH_COMMAND = "opencode attach {server_url} --session {session_id}"
SERVER_URL_ENV_VAR = "TMUXPANES_SERVER_URL"  # 注入到新 pane 环境中

# === 清理配置 ===
EMERGENCY_KILL_TIMEOUT_SECONDS = 2.0  # 退出时每个 pane 的 kill 超时

# === 服务配置 ===
DEFAULT_SERVER_URL = f"http://localhost:{os.environ.get('OPENCODE_PORT', '4096')}"
RECEIVER_HOST = os.environ.get("TMUXPANES_HOST", "127.0.0.1")
RECEIVER_PORT = int(os.environ.get("TMUXPANES_PORT", "8766"))

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TMUXPANES_LOG_LEVEL", "INFO")  # 日志级别

_ENV_PREFIX = "TMUXPANES_"


class TmuxPanesConfig(BaseModel):
    """用户可配置项（带校验）"""

    layout: TmuxLayout = DEFAULT_LAYOUT
    main_pane_size: int = Field(default=DEFAULT_MAIN_PANE_SIZE, ge=20, le=80)
    main_pane_min_width: int = Field(default=DEFAULT_MAIN_PANE_MIN_WIDTH, ge=40)
    agent_pane_min_width: int = Field(default=DEFAULT_AGENT_PANE_MIN_WIDTH, ge=20)
    exclude: list[str] = Field(default_factory=list)


def load_config(env: Mapping[str, str] | None = None) -> TmuxPanesConfig:
    """从环境变量加载配置

    Args:
        env: 环境变量映射，默认 os.environ

    Returns:
        校验后的 TmuxPanesConfig

    Raises:
        pydantic.ValidationError: 配置值不合法
    """
    if env is None:
        env = os.environ

    values: dict[str, object] = {}
    for key in ("layout", "main_pane_size", "main_pane_min_width", "agent_pane_min_width"):
        raw = env.get(_ENV_PREFIX + key.upper())
        if raw is not None and raw.strip():
            values[key] = raw.strip()

    raw_exclude = env.get(_ENV_PREFIX + "EXCLUDE")
    if raw_exclude:
        values["exclude"] = [p.strip() for p in raw_exclude.split(",") if p.strip()]

    return TmuxPanesConfig.model_validate(values)
