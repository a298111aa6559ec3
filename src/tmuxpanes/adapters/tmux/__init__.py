"""Tmux adapter for tmux-panes."""

from .adapter import TmuxAdapter
from .client import TmuxClient
from .environment import get_cached_tmux_path, get_current_pane_id, is_inside_tmux
from .layout import WindowStateBuilder

__all__ = [
    "TmuxAdapter",
    "TmuxClient",
    "WindowStateBuilder",
    "get_cached_tmux_path",
    "get_current_pane_id",
    "is_inside_tmux",
]
