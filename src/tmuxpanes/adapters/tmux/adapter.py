"""Tmux adapter: read-only window state queries."""

import logging

from tmuxpanes.core.types import WindowState

from .client import TmuxClient
from .layout import WindowStateBuilder

logger = logging.getLogger(__name__)


class TmuxAdapter:
    """Tmux adapter for observing the managed window.

    Wraps TmuxClient; every call is a fresh observation, nothing is cached.
    """

    name: str = "tmux"

    def __init__(self, socket_path: str | None = None, client: TmuxClient | None = None):
        """Initialize TmuxAdapter.

        Args:
            socket_path: Optional tmux socket path.
            client: Optional pre-built TmuxClient (takes precedence over socket_path).
        """
        self._client = client or TmuxClient(socket_path=socket_path)
        self._builder = WindowStateBuilder()

    @property
    def client(self) -> TmuxClient:
        """Access underlying TmuxClient."""
        return self._client

    async def query_window_state(self, source_pane_id: str) -> WindowState | None:
        """Observe the window containing source_pane_id.

        Args:
            source_pane_id: Pane of the controlling process (e.g., "%0")

        Returns:
            WindowState, or None when tmux cannot be queried.
        """
        try:
            window = await self._client.get_window_info(source_pane_id)
            if window is None:
                return None
            panes = await self._client.list_panes(window["window_id"])
            if panes is None:
                return None
            return self._builder.build(window=window, panes=panes, source_pane_id=source_pane_id)
        except Exception as e:
            logger.error(f"Failed to query tmux window state: {e}")
            return None
