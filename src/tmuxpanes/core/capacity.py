"""Capacity model for agent panes beside the main pane."""

from .types import CapacityConfig


def calculate_capacity(window_width: int, config: CapacityConfig) -> int:
    """Maximum number of agent panes that fit beside the main pane.

    The main pane is assumed to sit at its minimum width; whatever remains is
    split into agent panes no narrower than ``agent_pane_min_width``. Partially
    fitting panes are never counted, whatever the tmux layout mode.

    Args:
        window_width: Window width in columns.
        config: Width floors for main and agent panes.

    Returns:
        Capacity, always >= 0.
    """
    usable_width = window_width - config.main_pane_min_width
    if usable_width < config.agent_pane_min_width:
        return 0
    return usable_width // config.agent_pane_min_width
