"""Tmux client for subprocess-based tmux interaction."""

import asyncio
import logging

from .environment import get_cached_tmux_path

logger = logging.getLogger(__name__)

# Use tab as delimiter to avoid conflicts with colons in data (titles, commands)
_FIELD_SEP = "\t"


class TmuxClient:
    """Client for interacting with tmux via subprocess commands.

    Provides async methods for:
    - Reading window geometry and the panes of a window
    - Splitting, killing and titling panes
    - Applying layouts and window options
    """

    def __init__(self, socket_path: str | None = None, tmux_path: str | None = None):
        """Initialize TmuxClient.

        Args:
            socket_path: Optional tmux socket path. If None, uses default socket.
            tmux_path: Optional tmux executable. If None, uses the cached lookup.
        """
        self._socket_path = socket_path
        self._tmux_path = tmux_path

    @property
    def tmux_path(self) -> str:
        return self._tmux_path or get_cached_tmux_path() or "tmux"

    async def run(self, *args: str) -> str | None:
        """Execute a tmux command.

        Args:
            *args: Command arguments (e.g., "list-panes", "-t", "%0", "-F", "...")

        Returns:
            Command stdout on success, None on failure.
        """
        cmd = [self.tmux_path]
        if self._socket_path:
            cmd.extend(["-S", self._socket_path])
        cmd.extend(args)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()

            if proc.returncode != 0:
                logger.warning(f"tmux command failed: {' '.join(cmd)}: {stderr.decode().strip()}")
                return None

            return stdout.decode()

        except Exception as e:
            logger.error(f"tmux subprocess error: {e}")
            return None

    async def get_window_info(self, target: str) -> dict | None:
        """Get geometry of the window containing a pane.

        Args:
            target: Pane identifier (e.g., "%0")

        Returns:
            Dict with window_id, width, height, or None on failure.
        """
        fmt = _FIELD_SEP.join(["#{window_id}", "#{window_width}", "#{window_height}"])
        output = await self.run("display-message", "-t", target, "-p", fmt)

        if not output:
            return None

        parts = output.strip().split(_FIELD_SEP)
        if len(parts) < 3:
            logger.warning(f"Failed to parse window line: {output!r}")
            return None

        try:
            return {
                "window_id": parts[0],
                "width": int(parts[1]),
                "height": int(parts[2]),
            }
        except ValueError as e:
            logger.warning(f"Failed to parse window line: {output!r}: {e}")
            return None

    async def list_panes(self, target: str) -> list[dict] | None:
        """List the panes of one window.

        Args:
            target: Window or pane identifier (e.g., "@1" or "%0")

        Returns:
            List of pane dicts with keys:
            - pane_id: str (e.g., "%0")
            - title: str
            - left: int (character position)
            - top: int (character position)
            - width: int
            - height: int
            - active: bool
            None when tmux could not be queried.
        """
        fmt = _FIELD_SEP.join([
            "#{pane_id}", "#{pane_title}",
            "#{pane_left}", "#{pane_top}", "#{pane_width}", "#{pane_height}",
            "#{pane_active}",
        ])
        output = await self.run("list-panes", "-t", target, "-F", fmt)

        if output is None:
            return None

        panes = []
        for line in output.strip().split("\n"):
            if not line:
                continue
            parts = line.split(_FIELD_SEP)
            if len(parts) >= 7:
                try:
                    panes.append(
                        {
                            "pane_id": parts[0],
                            "title": parts[1],
                            "left": int(parts[2]),
                            "top": int(parts[3]),
                            "width": int(parts[4]),
                            "height": int(parts[5]),
                            "active": parts[6] == "1",
                        }
                    )
                except (ValueError, IndexError) as e:
                    logger.warning(f"Failed to parse pane line: {line!r}: {e}")

        return panes

    async def split_window(
        self,
        target: str,
        command: str | None = None,
        env: dict[str, str] | None = None,
        horizontal: bool = True,
    ) -> str | None:
        """Create a new pane by splitting an existing one.

        The new pane is created detached so focus stays on the main pane.

        Args:
            target: Pane to split (e.g., "%0")
            command: Shell command to run in the new pane
            env: Environment variables for the new pane
            horizontal: Split side by side (-h) instead of stacked (-v)

        Returns:
            New pane ID, or None on failure.
        """
        args = ["split-window", "-h" if horizontal else "-v", "-d", "-P", "-F", "#{pane_id}", "-t", target]
        for key, value in (env or {}).items():
            args.extend(["-e", f"{key}={value}"])
        if command:
            args.append(command)

        output = await self.run(*args)
        if not output or not output.strip():
            return None
        return output.strip()

    async def kill_pane(self, pane_id: str) -> bool:
        """Destroy a pane.

        Returns:
            True on success, False on failure.
        """
        result = await self.run("kill-pane", "-t", pane_id)
        return result is not None

    async def pane_exists(self, pane_id: str) -> bool:
        """Check whether a pane is still present."""
        output = await self.run("display-message", "-t", pane_id, "-p", "#{pane_id}")
        return output is not None and output.strip() == pane_id

    async def select_layout(self, target: str, layout: str) -> bool:
        """Apply a layout to the window containing target.

        Args:
            target: Pane or window identifier
            layout: tmux layout name (e.g., "main-vertical")

        Returns:
            True on success, False on failure.
        """
        result = await self.run("select-layout", "-t", target, layout)
        return result is not None

    async def set_window_option(self, target: str, option: str, value: str) -> bool:
        """Set a window option (e.g., main-pane-width).

        Returns:
            True on success, False on failure.
        """
        result = await self.run("set-window-option", "-t", target, option, value)
        return result is not None

    async def rename_pane(self, pane_id: str, name: str) -> bool:
        """Rename a pane (set its title).

        Args:
            pane_id: The pane identifier
            name: New name/title for the pane

        Returns:
            True on success, False on failure.
        """
        # select-pane -t pane_id -T title
        result = await self.run("select-pane", "-t", pane_id, "-T", name)
        return result is not None
