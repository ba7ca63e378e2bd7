"""Targeted repairs for malformed or truncated envelope JSON.

Every function here is total and leaves well-formed input unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..logging import get_logger
from ..scanner import JsonScanner, mask_json_strings, unmask_json_strings

logger = get_logger("recovery.repairs")

FILES_KEY = "files"

_VALID_ESCAPES = frozenset('"\\/bfnrt')
_DROPPABLE_ESCAPES = frozenset("'`")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}
_CLOSERS = {"{": "}", "[": "]"}

_RECORD_FOLLOWER = re.compile(r"\s*([,\]])")

# Patterns below run on a skeleton where every string literal is a ``"N"`` token.
_DOUBLE_COLON = re.compile(r'"\d+"\s*:\s*("\d+"\s*:)')
_MISSING_COMMA_AFTER_CLOSER = re.compile(r'([}\]])(\s*)([{\["])')
_MISSING_COMMA_BEFORE_KEY = re.compile(r'("\d+"|\btrue|\bfalse|\bnull|\d)([^\S\n]*\n\s*)("\d+"\s*:)')
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def repair_escapes(text: str) -> str:
    """Fix invalid backslash escapes and raw control characters inside strings.

    Valid escapes are copied as a consumed pair so neither character is
    examined twice. An invalid escape before ``'`` or a backtick loses its
    backslash; any other invalid escape keeps a literal, doubled backslash.
    """
    out: List[str] = []
    in_string = False
    index = 0
    length = len(text)
    fixes = 0
    while index < length:
        char = text[index]
        if char == '"':
            in_string = not in_string
            out.append(char)
            index += 1
            continue
        if not in_string:
            out.append(char)
            index += 1
            continue
        if char == "\\":
            following = text[index + 1] if index + 1 < length else ""
            if following == "u" and _is_unicode_escape(text, index):
                out.append(text[index : index + 6])
                index += 6
                continue
            if following and following != "u" and following in _VALID_ESCAPES:
                out.append(char + following)
                index += 2
                continue
            fixes += 1
            if following and following in _DROPPABLE_ESCAPES:
                out.append(following)
                index += 2
                continue
            out.append("\\\\")
            index += 1
            continue
        if char in _CONTROL_ESCAPES:
            fixes += 1
            out.append(_CONTROL_ESCAPES[char])
            index += 1
            continue
        out.append(char)
        index += 1
    if fixes:
        logger.debug("Repaired %d invalid escapes or control characters", fixes)
    return "".join(out)


def _is_unicode_escape(text: str, index: int) -> bool:
    digits = text[index + 2 : index + 6]
    return len(digits) == 4 and all(char in _HEX_DIGITS for char in digits)


@dataclass
class StructureReport:
    """Outcome of a structural scan over envelope text."""

    stack: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    in_string: bool = False
    files_array_start: Optional[int] = None
    last_record_end: Optional[int] = None
    last_separator: Optional[int] = None

    @property
    def truncated(self) -> bool:
        return self.in_string or bool(self.stack)

    @property
    def files_open(self) -> bool:
        return len(self.stack) >= 2 and self.stack[0][0] == "{" and self.stack[1] == ("[", FILES_KEY)

    def closers(self, limit: Optional[int] = None) -> str:
        frames = self.stack if limit is None else self.stack[:limit]
        return "".join(_CLOSERS[opener] for opener, _ in reversed(frames))


def scan_structure(text: str) -> StructureReport:
    """Track open containers, the files array and the last complete file record."""
    report = StructureReport()
    last_string: Optional[Tuple[int, int]] = None
    string_start = 0
    pending_key: Optional[str] = None
    scanner = JsonScanner(text)
    for index, char, inside, delimiter in scanner:
        if delimiter:
            if scanner.in_string:
                string_start = index
            else:
                last_string = (string_start + 1, index)
            continue
        if inside:
            continue
        if char == ":":
            if report.stack and report.stack[-1][0] == "{" and last_string is not None:
                pending_key = text[last_string[0] : last_string[1]]
        elif char in "{[":
            parent_is_object = bool(report.stack) and report.stack[-1][0] == "{"
            report.stack.append((char, pending_key if parent_is_object else None))
            pending_key = None
            if report.files_open and len(report.stack) == 2:
                report.files_array_start = index + 1
        elif char in "}]":
            if report.stack:
                report.stack.pop()
            pending_key = None
            if char == "}" and report.files_open and len(report.stack) == 2:
                follower = _RECORD_FOLLOWER.match(text, index + 1)
                if follower:
                    # Keep the separating comma; the trailing-comma repair removes it later.
                    report.last_record_end = (
                        follower.end() if follower.group(1) == "," else index + 1
                    )
        elif char == ",":
            report.last_separator = index
            pending_key = None
    report.in_string = scanner.in_string
    return report


def close_truncated(text: str) -> str:
    """Re-close a document whose containers or strings were left open.

    While the files array is still open the text is cut after the latest
    complete file record (or just after the ``[`` when none completed) and
    the array and root object are closed, so a half-written file never
    survives. Otherwise any open string is closed and the missing closers are
    appended in stack order.
    """
    report = scan_structure(text)
    if not report.truncated:
        return text
    if report.files_open:
        cut = report.last_record_end or report.files_array_start
        if cut is not None:
            logger.info(
                "Document truncated inside files array; keeping first %d characters", cut
            )
            return text[:cut] + report.closers(limit=2)
    logger.info("Document truncated; closing %d open containers", len(report.stack))
    suffix = '"' if report.in_string else ""
    return text + suffix + report.closers()


def close_at_last_separator(text: str) -> str:
    """Cut at the last comma outside strings and close whatever is still open."""
    report = scan_structure(text)
    if report.last_separator is None:
        return text
    prefix = text[: report.last_separator]
    prefix_report = scan_structure(prefix)
    suffix = '"' if prefix_report.in_string else ""
    return prefix + suffix + prefix_report.closers()


def apply_substitutions(text: str) -> str:
    """Apply structural regex repairs outside of string literals."""
    skeleton, literals = mask_json_strings(text)
    repaired = _DOUBLE_COLON.sub(r"\1", skeleton)
    repaired = _MISSING_COMMA_AFTER_CLOSER.sub(r"\1,\2\3", repaired)
    repaired = _MISSING_COMMA_BEFORE_KEY.sub(r"\1,\2\3", repaired)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    if repaired == skeleton:
        return text
    logger.debug("Applied structural substitutions")
    return unmask_json_strings(repaired, literals)


def repair_document(text: str) -> str:
    """Run the escape, truncation and substitution repairs in order."""
    return apply_substitutions(close_truncated(repair_escapes(text)))


__all__ = [
    "StructureReport",
    "apply_substitutions",
    "close_at_last_separator",
    "close_truncated",
    "repair_document",
    "repair_escapes",
    "scan_structure",
]
