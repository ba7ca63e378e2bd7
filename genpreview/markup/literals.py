"""Pull literal values and user-facing copy out of component source.

``read_string_literal`` resolves embedded expressions during conversion and
``extract_user_copy`` feeds the fallback document; both share the same
literal reader so the two paths agree on what a plain string is.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from ..constants import MAX_COPY_CHARS, MIN_COPY_CHARS
from ..scanner import ScanError, skip_js_string

_ESCAPE_PATTERN = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.S)
_SURROGATE_PATTERN = re.compile("([\ud800-\udbff])([\udc00-\udfff])?|[\udc00-\udfff]")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "", "b": "", "f": "", "v": "", "0": ""}

_TEXT_NODE_PATTERN = re.compile(r">([^<>{}]+)<")
_LITERAL_PATTERN = re.compile(r"""(["'`])((?:(?!\1)[^\\\n]|\\.)*)\1""")

_SKIPPED_LINE_PREFIXES = (
    "import ",
    "export {",
    "export *",
    "//",
    "/*",
    "*",
    "'use ",
    '"use ',
    "require(",
)
_CODE_MARKERS = ("=>", "={", "===", "!==", "&&", "||", "${", "{", "}", ";", "console.", "()", "</", "/>")
_KEYWORD_PREFIXES = (
    "import ",
    "export ",
    "const ",
    "let ",
    "var ",
    "function ",
    "return ",
    "await ",
    "async ",
    "new ",
    "typeof ",
)
_IDENTIFIER_PATTERN = re.compile(r"^[a-z_$][\w$]*$")
_CLASS_TOKEN_PATTERN = re.compile(r"^[a-z0-9:/\[\]#().%!_-]+$")
_HEX_OR_NUMBER_PATTERN = re.compile(r"^#?[0-9a-fA-F]{3,8}$|^[\d\s.,:%$+-]+$")
_PATH_PREFIXES = ("./", "../", "/", "@", "http://", "https://", "mailto:", "tel:", "#")
_DIRECTIVES = frozenset({"use client", "use server", "use strict"})


def read_string_literal(expression: str) -> Optional[str]:
    """Return the value of a plain string or uninterpolated template literal."""
    text = expression.strip()
    if len(text) < 2 or text[0] not in "'\"`" or text[-1] != text[0]:
        return None
    try:
        end = skip_js_string(text, 0)
    except ScanError:
        return None
    if end != len(text):
        return None
    body = text[1:-1]
    if text[0] == "`" and "${" in body:
        return None
    return _unescape(body)


def _unescape(body: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token.startswith("u{"):
            return _code_point(token[2:-1])
        if token[0] in "ux" and len(token) > 1:
            return _code_point(token[1:])
        return _SIMPLE_ESCAPES.get(token, token)

    return _join_surrogates(_ESCAPE_PATTERN.sub(_replace, body))


def _code_point(digits: str) -> str:
    try:
        return chr(int(digits, 16))
    except (ValueError, OverflowError):
        return ""


def _join_surrogates(text: str) -> str:
    """Combine UTF-16 surrogate pairs and drop unpaired halves."""

    def _replace(match: re.Match[str]) -> str:
        high, low = match.group(1), match.group(2)
        if high and low:
            return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))
        return ""

    return _SURROGATE_PATTERN.sub(_replace, text)


def looks_like_copy(text: str) -> bool:
    """Heuristically decide whether *text* reads as user-facing copy."""
    cleaned = " ".join(text.split())
    if not (MIN_COPY_CHARS <= len(cleaned) <= MAX_COPY_CHARS):
        return False
    if not any(char.isalpha() for char in cleaned):
        return False
    lowered = cleaned.lower()
    if lowered in _DIRECTIVES:
        return False
    if any(marker in cleaned for marker in _CODE_MARKERS):
        return False
    if lowered.startswith(_KEYWORD_PREFIXES):
        return False
    if cleaned.startswith(_PATH_PREFIXES):
        return False
    if _HEX_OR_NUMBER_PATTERN.match(cleaned):
        return False
    tokens = cleaned.split(" ")
    if len(tokens) == 1:
        if _IDENTIFIER_PATTERN.match(cleaned):
            return False
        if "/" in cleaned or ("." in cleaned.rstrip(".!?") and not cleaned.endswith(".")):
            return False
    if all(_CLASS_TOKEN_PATTERN.match(token) for token in tokens) and any(
        "-" in token or ":" in token for token in tokens
    ):
        return False
    return True


def _iter_candidates(source: str) -> Iterator[str]:
    for line in source.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(_SKIPPED_LINE_PREFIXES):
            continue
        if " from " in stripped and stripped.startswith(("import", "export")):
            continue
        found = []
        text_spans = []
        for match in _TEXT_NODE_PATTERN.finditer(stripped):
            found.append((match.start(1), match.group(1)))
            text_spans.append(match.span(1))
        for match in _LITERAL_PATTERN.finditer(stripped):
            # Apostrophes inside text nodes are prose, not string delimiters.
            if any(start <= match.start() < end for start, end in text_spans):
                continue
            value = read_string_literal(match.group(0))
            if value is not None:
                found.append((match.start(), value))
        for _, value in sorted(found, key=lambda item: item[0]):
            yield value


def extract_user_copy(source: str, *, limit: Optional[int] = None) -> List[str]:
    """Return distinct user-facing strings from markup-like *source*, in source order."""
    copy: List[str] = []
    seen = set()
    for candidate in _iter_candidates(source):
        cleaned = " ".join(candidate.split())
        key = cleaned.casefold()
        if key in seen or not looks_like_copy(cleaned):
            continue
        seen.add(key)
        copy.append(cleaned)
        if limit is not None and len(copy) >= limit:
            break
    return copy


__all__ = ["extract_user_copy", "looks_like_copy", "read_string_literal"]
