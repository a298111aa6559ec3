"""Tmux window state builder.

Converts tmux window/pane data into WindowState snapshots.
"""

import logging

from tmuxpanes.core.types import PaneInfo, WindowState

logger = logging.getLogger(__name__)


class WindowStateBuilder:
    """Builds a WindowState from tmux window and pane information.

    Mapping:
    - the pane hosting the controlling process -> WindowState.main_pane
    - every other pane of the window -> WindowState.agent_panes
    """

    def build(self, window: dict, panes: list[dict], source_pane_id: str) -> WindowState:
        """Build a WindowState from tmux data.

        Args:
            window: Window dict from TmuxClient.get_window_info()
            panes: Pane dicts from TmuxClient.list_panes()
            source_pane_id: Pane of the controlling process

        Returns:
            WindowState; main_pane is None when source_pane_id is not in panes.
        """
        main_pane: PaneInfo | None = None
        agent_panes: list[PaneInfo] = []

        for pane in panes:
            try:
                pane_info = PaneInfo(
                    pane_id=pane["pane_id"],
                    width=int(pane.get("width", 0)),
                    height=int(pane.get("height", 0)),
                    left=int(pane.get("left", 0)),
                    top=int(pane.get("top", 0)),
                    title=pane.get("title", ""),
                    is_active=bool(pane.get("active", False)),
                )
            except (KeyError, ValueError, TypeError):
                # Skip malformed pane data
                logger.debug(f"Skipping malformed pane data: {pane!r}")
                continue

            if pane_info.pane_id == source_pane_id:
                main_pane = pane_info
            else:
                agent_panes.append(pane_info)

        return WindowState(
            window_width=int(window.get("width", 0)),
            window_height=int(window.get("height", 0)),
            main_pane=main_pane,
            agent_panes=agent_panes,
        )
