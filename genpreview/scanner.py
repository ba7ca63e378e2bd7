"""String-context-aware scanning primitives.

Two families live here. ``JsonScanner`` and the masking helpers walk recovered
envelope text and know when a character sits inside a JSON string literal.
The ``skip_*`` helpers walk component source and return the end offset of a
balanced span (string, brace expression, parenthesised group or markup
element) while treating string contents, comments and embedded markup as
opaque. All of them run in a single forward pass and are bounded by
``MAX_NESTING_DEPTH`` so malformed input can never recurse without limit.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from .constants import MAX_NESTING_DEPTH


class ScanError(RuntimeError):
    """Raised when a scan exceeds its nesting bound."""


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_TAG_NAME_PATTERN = re.compile(r"[A-Za-z][\w.:-]*")
_MASK_TOKEN_PATTERN = re.compile(r'"(\d+)"')
_MARKUP_PRECEDERS = frozenset("(,=:?&|{[>")
_JS_QUOTES = "'\"`"


# ----------------------------------------------------------------------
# JSON text


class JsonScanner:
    """Iterate JSON-ish text while tracking string context.

    A double quote toggles the string state only when it is preceded by an
    even number of backslashes. Each step yields ``(index, char, inside,
    delimiter)``; delimiting quotes are reported as inside the string. After
    iteration ``in_string`` holds the state at end of input.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.in_string = False

    def __iter__(self) -> Iterator[Tuple[int, str, bool, bool]]:
        self.in_string = False
        backslashes = 0
        for index, char in enumerate(self.text):
            if char == '"' and backslashes % 2 == 0:
                self.in_string = not self.in_string
                backslashes = 0
                yield index, char, True, True
                continue
            backslashes = backslashes + 1 if char == "\\" else 0
            yield index, char, self.in_string, False


def mask_json_strings(text: str) -> Tuple[str, List[str]]:
    """Replace every complete string literal with a numbered ``"N"`` token.

    Returns the skeleton and the literals (quotes included) so callers can
    run structural regexes without touching string contents.
    """
    literals: List[str] = []
    pieces: List[str] = []
    start: Optional[int] = None
    last = 0
    scanner = JsonScanner(text)
    for index, _char, _inside, delimiter in scanner:
        if not delimiter:
            continue
        if start is None:
            start = index
            continue
        pieces.append(text[last:start])
        pieces.append(f'"{len(literals)}"')
        literals.append(text[start : index + 1])
        last = index + 1
        start = None
    pieces.append(text[last:])
    return "".join(pieces), literals


def unmask_json_strings(skeleton: str, literals: List[str]) -> str:
    """Inverse of :func:`mask_json_strings`."""

    def _restore(match: re.Match[str]) -> str:
        position = int(match.group(1))
        if position < len(literals):
            return literals[position]
        return match.group(0)

    return _MASK_TOKEN_PATTERN.sub(_restore, skeleton)


# ----------------------------------------------------------------------
# Component source


def _check_depth(depth: int) -> None:
    if depth > MAX_NESTING_DEPTH:
        raise ScanError(f"nesting deeper than {MAX_NESTING_DEPTH}")


def previous_significant(source: str, index: int) -> int:
    """Return the index of the last non-whitespace character before *index*, or -1."""
    cursor = index - 1
    while cursor >= 0 and source[cursor].isspace():
        cursor -= 1
    return cursor


def starts_markup(source: str, index: int) -> bool:
    """Return True when ``<`` at *index* opens a markup element in expression position."""
    if index >= len(source) or source[index] != "<":
        return False
    following = source[index + 1 : index + 2]
    if not (following.isalpha() or following == ">"):
        return False
    before = previous_significant(source, index)
    if before < 0:
        return True
    if source[before] in _MARKUP_PRECEDERS:
        return True
    return source[max(0, before - 5) : before + 1] == "return" and (
        before - 6 < 0 or not (source[before - 6].isalnum() or source[before - 6] == "_")
    )


def skip_comment(source: str, index: int) -> Optional[int]:
    """Return the index after a ``//`` or ``/* */`` comment starting at *index*, else None."""
    if source.startswith("//", index):
        newline = source.find("\n", index)
        return len(source) if newline == -1 else newline + 1
    if source.startswith("/*", index):
        close = source.find("*/", index + 2)
        return len(source) if close == -1 else close + 2
    return None


def skip_js_string(source: str, start: int, depth: int = 0) -> Optional[int]:
    """Return the index just past the string or template literal opening at *start*.

    Template interpolations are skipped as balanced brace expressions. A
    quoted (non-template) string that hits a newline is treated as ending
    there, since JavaScript strings cannot span lines.
    """
    _check_depth(depth)
    quote = source[start]
    index = start + 1
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if quote == "`" and char == "$" and source.startswith("{", index + 1):
            end = skip_expression(source, index + 1, depth + 1)
            if end is None:
                return None
            index = end
            continue
        if char == "\n" and quote != "`":
            return index
        index += 1
    return None


def _skip_balanced(
    source: str, start: int, opener: str, closer: str, depth: int
) -> Optional[int]:
    _check_depth(depth)
    level = 0
    index = start
    length = len(source)
    while index < length:
        char = source[index]
        if char in _JS_QUOTES:
            end = skip_js_string(source, index, depth + 1)
            if end is None:
                return None
            index = end
            continue
        if char == "/":
            end = skip_comment(source, index)
            if end is not None:
                index = end
                continue
        if char == "<" and starts_markup(source, index):
            end = skip_element(source, index, depth + 1)
            if end is None:
                return None
            index = end
            continue
        if char == opener:
            level += 1
        elif char == closer:
            level -= 1
            if level == 0:
                return index + 1
        index += 1
    return None


def skip_expression(source: str, start: int, depth: int = 0) -> Optional[int]:
    """*start* points at ``{``; return the index after its matching ``}``."""
    return _skip_balanced(source, start, "{", "}", depth)


def skip_group(source: str, start: int, depth: int = 0) -> Optional[int]:
    """*start* points at ``(``; return the index after its matching ``)``."""
    return _skip_balanced(source, start, "(", ")", depth)


def read_tag_name(source: str, index: int) -> str:
    """Return the tag name beginning at *index* (just after ``<`` or ``</``)."""
    match = _TAG_NAME_PATTERN.match(source, index)
    return match.group(0) if match else ""


def skip_tag(source: str, start: int, depth: int = 0) -> Tuple[Optional[int], bool]:
    """Skip one opening tag starting at ``<``.

    Returns ``(end, self_closing)``; ``end`` is None when the tag never
    closes. Void elements written without a slash count as self-closing.
    """
    _check_depth(depth)
    if source.startswith("<>", start):
        return start + 2, False
    name = read_tag_name(source, start + 1)
    index = start + 1 + len(name)
    length = len(source)
    while index < length:
        char = source[index]
        if char in "\"'":
            close = source.find(char, index + 1)
            if close == -1:
                return None, False
            index = close + 1
            continue
        if char == "{":
            end = skip_expression(source, index, depth + 1)
            if end is None:
                return None, False
            index = end
            continue
        if char == ">":
            before = previous_significant(source, index)
            self_closing = source[before] == "/" or name.lower() in VOID_ELEMENTS
            return index + 1, self_closing
        index += 1
    return None, False


def skip_element(source: str, start: int, depth: int = 0) -> Optional[int]:
    """*start* points at ``<``; return the index after the element's closing tag.

    Text children are plain text, so apostrophes or parentheses in copy never
    affect nesting. Embedded ``{}`` expressions are skipped as opaque spans.
    """
    _check_depth(depth)
    level = 0
    index = start
    length = len(source)
    while index < length:
        char = source[index]
        if char == "{":
            end = skip_expression(source, index, depth + 1)
            if end is None:
                return None
            index = end
            continue
        if char == "<":
            if source.startswith("<!--", index):
                close = source.find("-->", index + 4)
                if close == -1:
                    return None
                index = close + 3
                continue
            following = source[index + 1 : index + 2]
            if following == "/":
                close = source.find(">", index)
                if close == -1:
                    return None
                level -= 1
                index = close + 1
                if level <= 0:
                    return index
                continue
            if following.isalpha() or following == ">":
                end, self_closing = skip_tag(source, index, depth + 1)
                if end is None:
                    return None
                index = end
                if not self_closing:
                    level += 1
                elif level == 0:
                    return index
                continue
        index += 1
    return None


__all__ = [
    "JsonScanner",
    "ScanError",
    "VOID_ELEMENTS",
    "mask_json_strings",
    "previous_significant",
    "read_tag_name",
    "skip_comment",
    "skip_element",
    "skip_expression",
    "skip_group",
    "skip_js_string",
    "skip_tag",
    "starts_markup",
    "unmask_json_strings",
]
