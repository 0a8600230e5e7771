"""Title mutation for carried-forward work items."""

from __future__ import annotations

import re

from .classification import SPRINT_NUMBER_RE

GENERATION_RE = re.compile(r"\((\d+)\)")


def next_title(old_title: str, destination_name: str | None) -> str:
    """Derive the title of the next generation of a carried-forward item.

    Rules, in priority order:

    1. A parenthesized counter ``(N)`` is stripped and ``(N+1)`` appended.
    2. A trailing sprint number ``X.Y`` is replaced by the destination
       iteration's trailing sprint number, when the destination has one.
    3. Otherwise ``" (1)"`` is appended to the right-trimmed title.

    Examples
    --------
    >>> next_title("Story A (3)", "Sprint 9")
    'Story A (4)'
    >>> next_title("Feature 2.1", "Sprint 2.2")
    'Feature 2.2'
    >>> next_title("Story A", "Sprint 5.2")
    'Story A (1)'
    """
    title = old_title or ""
    generation = GENERATION_RE.search(title)
    if generation:
        counter = int(generation.group(1)) + 1
        stripped = title[: generation.start()] + title[generation.end() :]
        return f"{stripped}({counter})"

    old_sprint = SPRINT_NUMBER_RE.match(title)
    new_sprint = SPRINT_NUMBER_RE.match(destination_name or "")
    if old_sprint and new_sprint:
        return title[: old_sprint.start(1)] + new_sprint.group(1)

    return f"{title.rstrip()} (1)"
