"""Suppression rules: sessions that should not get a pane."""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from .config import TmuxPanesConfig


@dataclass
class SessionInfo:
    """Normalized "session created" payload.

    Attributes:
        id: Worker session ID
        title: Display title (optional)
        parent_id: Parent session ID; only child sessions are workers
        metadata: Free-form metadata from the host
    """

    id: str
    title: str | None = None
    parent_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@lru_cache(maxsize=128)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a path-style glob.

    ``*`` and ``?`` stay within one ``/``-separated segment, ``**`` spans
    segments, ``[...]`` is a character class (``[!...]`` negates).
    """
    parts = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            start = i + 1
            if pattern.startswith("!", start):
                start += 1
            # a ] right after [ or [! is a member of the set
            if pattern.startswith("]", start):
                start += 1
            end = pattern.find("]", start)
            if end == -1:
                parts.append(re.escape(c))
            else:
                body = pattern[i + 1 : end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = end + 1
                continue
        else:
            parts.append(re.escape(c))
        i += 1
    return re.compile("".join(parts), re.DOTALL)


def glob_match(title: str, pattern: str) -> bool:
    return _compile_glob(pattern).fullmatch(title) is not None


def should_suppress(info: SessionInfo, config: TmuxPanesConfig) -> bool:
    """Decide whether a session is excluded from pane management.

    Rules, in order:
    1. metadata["tmux"] is exactly False -> suppress
    2. title matches any exclude glob (case-sensitive, see ``_compile_glob``) -> suppress
    3. otherwise keep
    """
    if info.metadata.get("tmux") is False:
        return True

    title = info.title or ""
    return any(glob_match(title, pattern) for pattern in config.exclude)
