"""Strip markdown fencing and surrounding prose from raw model output."""

from __future__ import annotations

import re
from typing import Optional

from ..logging import excerpt, get_logger
from ..scanner import JsonScanner

_OPENING_FENCE = re.compile(r"^`{3,}[\w+.-]*[^\S\n]*\n?")
_CLOSING_FENCE = re.compile(r"\n?`{3,}\s*$")
_INNER_FENCE = re.compile(r"`{3,}[\w+.-]*[^\S\n]*\n")

logger = get_logger("recovery.envelope")


def strip_envelope(text: str) -> str:
    """Return the JSON payload embedded in *text*.

    A single leading fence line (with optional language tag) and a single
    trailing fence are removed. Prose before a fenced block or before the
    first ``{`` is dropped, as is anything after a balanced root object.
    """
    stripped = text.strip()
    opening = _OPENING_FENCE.match(stripped)
    if opening:
        logger.debug("Removing leading code fence %r", opening.group(0).strip())
        stripped = _CLOSING_FENCE.sub("", stripped[opening.end() :], count=1)
    else:
        brace = stripped.find("{")
        prefix = stripped if brace == -1 else stripped[:brace]
        fence = _INNER_FENCE.search(prefix)
        if fence:
            logger.debug("Dropping prose before fenced block: %r", excerpt(prefix[: fence.start()]))
            stripped = _CLOSING_FENCE.sub("", stripped[fence.end() :], count=1)

    brace = stripped.find("{")
    if brace > 0:
        stripped = stripped[brace:]

    end = _root_end(stripped)
    if end is not None and stripped[end:].strip():
        logger.debug("Dropping trailer after root object: %r", excerpt(stripped[end:]))
        stripped = stripped[:end]
    return stripped.strip()


def _root_end(text: str) -> Optional[int]:
    """Return the offset just past the balanced root object, if it closes."""
    if not text.startswith("{"):
        return None
    depth = 0
    for index, char, inside, _ in JsonScanner(text):
        if inside:
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


__all__ = ["strip_envelope"]
