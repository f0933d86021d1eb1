"""Reasoning-trace handling for model output.

Some models emit their chain of thought inline, delimited by a tag such as
``<think>...</think>``. The trace must be removed before the answer is
parsed, and can be kept separately for logging.
"""

from __future__ import annotations

import functools
import re

DEFAULT_REASONING_TAG = "think"


@functools.lru_cache(maxsize=8)
def _trace_re(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}>(.*?)</{name}>", re.DOTALL)


def strip_reasoning(text: str, tag: str = DEFAULT_REASONING_TAG) -> str:
    """Remove every ``<tag>...</tag>`` segment from *text*."""
    return _trace_re(tag).sub("", text)


def extract_reasoning(text: str, tag: str = DEFAULT_REASONING_TAG) -> str | None:
    """Return the reasoning trace in *text*, or None if there is none.

    Multiple segments are joined with blank lines.
    """
    parts = [m.strip() for m in _trace_re(tag).findall(text)]
    parts = [p for p in parts if p]
    if not parts:
        return None
    return "\n\n".join(parts)
