"""Locate the markup expression a page component renders."""

from __future__ import annotations

import re
from typing import Iterator, Optional, Tuple

from ..scanner import skip_element, skip_expression, skip_group

_DEFAULT_EXPORT_FUNCTION = re.compile(r"\bexport\s+default\s+(?:async\s+)?function\b")
_DEFAULT_EXPORT_NAME = re.compile(r"\bexport\s+default\s+([A-Za-z_$][\w$]*)\s*(?:;|$)", re.M)
_COMPONENT_CANDIDATE = re.compile(
    r"(?:\bfunction\s+[A-Z][\w$]*\s*\("
    r"|\b(?:const|let|var)\s+[A-Z][\w$]*\s*(?::[^=\n]+)?=\s*(?:async\s*)?(?:\(|[\w$]+\s*=>))"
)
_RETURN_OR_ARROW = re.compile(r"\breturn\b|=>")


def find_entry_point(source: str) -> int:
    """Return the offset where the page's entry component starts.

    Preference order: a ``export default function``; the definition named by
    ``export default Name``; the last component-like function in the file;
    otherwise the start of the source. This is a best-effort heuristic.
    """
    match = _DEFAULT_EXPORT_FUNCTION.search(source)
    if match:
        return match.start()

    named = _DEFAULT_EXPORT_NAME.search(source)
    if named:
        name = re.escape(named.group(1))
        definition = re.search(
            rf"\bfunction\s+{name}\s*\(|\b(?:const|let|var)\s+{name}\b", source
        )
        if definition:
            return definition.start()

    candidates = list(_COMPONENT_CANDIDATE.finditer(source))
    if candidates:
        return candidates[-1].start()
    return 0


def entry_bounds(source: str, start: int) -> Tuple[int, int]:
    """Return ``(start, end)`` of the entry component's body, or to end of source."""
    length = len(source)
    paren = source.find("(", start)
    if paren == -1:
        return start, length
    params_end = skip_group(source, paren)
    if params_end is None:
        return start, length
    brace = source.find("{", params_end)
    arrow = source.find("=>", params_end)
    if arrow != -1 and (brace == -1 or arrow < brace):
        body = _skip_whitespace(source, arrow + 2)
        if body >= length or source[body] != "{":
            return start, length
        brace = body
    if brace == -1:
        return start, length
    body_end = skip_expression(source, brace)
    return start, body_end if body_end is not None else length


def _skip_whitespace(source: str, index: int) -> int:
    length = len(source)
    while index < length and source[index].isspace():
        index += 1
    return index


def _markup_after(source: str, index: int) -> Optional[str]:
    index = _skip_whitespace(source, index)
    if index >= len(source):
        return None
    char = source[index]
    if char == "(":
        end = skip_group(source, index)
        if end is None:
            return None
        inner = source[index + 1 : end - 1].strip()
        return inner if inner.startswith("<") else None
    following = source[index + 1 : index + 2]
    if char == "<" and (following.isalpha() or following == ">"):
        end = skip_element(source, index)
        if end is None:
            return None
        return source[index:end]
    return None


def iter_returned_markup(source: str, start: int, end: int) -> Iterator[str]:
    """Yield every markup span returned (explicitly or by an arrow) in ``[start, end)``."""
    for match in _RETURN_OR_ARROW.finditer(source, start, end):
        span = _markup_after(source, match.end())
        if span:
            yield span


def locate_markup(source: str) -> Optional[str]:
    """Return the markup expression the page component renders, if one is found.

    Among all returns inside the entry component the longest markup span is
    chosen, so short early returns (loading or empty states) and list-item
    callbacks lose to the main render.
    """
    start, end = entry_bounds(source, find_entry_point(source))
    best: Optional[str] = None
    for span in iter_returned_markup(source, start, end):
        if best is None or len(span) > len(best):
            best = span
    return best


__all__ = ["entry_bounds", "find_entry_point", "iter_returned_markup", "locate_markup"]
