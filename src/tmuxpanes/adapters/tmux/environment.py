"""Process environment helpers for tmux.

- is_inside_tmux: whether this process runs under tmux
- get_current_pane_id: the pane this process occupies
- get_cached_tmux_path: tmux executable, resolved once per process
"""

import logging
import os
import shutil

logger = logging.getLogger(__name__)

_UNRESOLVED = object()
_tmux_path: "str | None | object" = _UNRESOLVED


def is_inside_tmux() -> bool:
    """Detect whether the process runs inside tmux.

    Returns:
        True if $TMUX is set.
    """
    return bool(os.environ.get("TMUX"))


def get_current_pane_id() -> str | None:
    """Get the pane ID of the controlling process.

    Returns:
        $TMUX_PANE (e.g., "%0"), or None outside tmux.
    """
    return os.environ.get("TMUX_PANE") or None


def get_cached_tmux_path() -> str | None:
    """Resolve the tmux executable once and reuse it.

    The synchronous exit-time cleanup relies on this, since it cannot
    afford a PATH lookup while the process is terminating.

    Returns:
        Absolute path to tmux, or None if it is not installed.
    """
    global _tmux_path

    if _tmux_path is _UNRESOLVED:
        _tmux_path = shutil.which("tmux")
        if _tmux_path is None:
            logger.warning("tmux executable not found on PATH")
    return _tmux_path  # type: ignore[return-value]


def reset_tmux_path_cache() -> None:
    """Forget the cached tmux path (for tests)."""
    global _tmux_path
    _tmux_path = _UNRESOLVED
