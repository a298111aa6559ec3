"""tmux-panes: keep a tmux window's agent panes in sync with worker sessions."""

from .config import TmuxPanesConfig, load_config
from .manager import TmuxPaneManager
from .suppression import SessionInfo, should_suppress

__version__ = "0.1.0"

__all__ = [
    "TmuxPanesConfig",
    "load_config",
    "TmuxPaneManager",
    "SessionInfo",
    "should_suppress",
]
