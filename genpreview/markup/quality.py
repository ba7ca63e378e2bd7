"""Quality gate for converted page bodies."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Optional

from ..config import ExtractionConfig
from ..constants import DYNAMIC_PLACEHOLDER

_JSON_FRAGMENT = re.compile(r'"[\w$@./-]+"\s*:\s*(?:"|\{|\[|\d|true\b|false\b|null\b)')
_ESCAPE_SEQUENCES = ("\\n", "\\t", '\\"')
_COMMENT = re.compile(r"<!--.*?-->", re.S)
_TAG = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class QualityReport:
    """Outcome of assessing one converted body."""

    accepted: bool
    reason: Optional[str]
    body_chars: int
    visible_chars: int
    placeholder_ratio: float


def visible_text(body: str) -> str:
    """Return the human-visible text of *body* with tags and comments removed."""
    without_markup = _TAG.sub(" ", _COMMENT.sub(" ", body))
    return " ".join(html.unescape(without_markup).split())


def assess_body(body: str, settings: Optional[ExtractionConfig] = None) -> QualityReport:
    """Decide whether *body* is trustworthy enough to show instead of a fallback."""
    settings = settings or ExtractionConfig()
    collapsed = " ".join(body.split())
    text = visible_text(collapsed)
    placeholders = collapsed.count(DYNAMIC_PLACEHOLDER)
    ratio = (placeholders * len(DYNAMIC_PLACEHOLDER)) / len(collapsed) if collapsed else 0.0

    def _report(reason: Optional[str]) -> QualityReport:
        return QualityReport(
            accepted=reason is None,
            reason=reason,
            body_chars=len(collapsed),
            visible_chars=len(text),
            placeholder_ratio=ratio,
        )

    if len(collapsed) < settings.min_body_chars:
        return _report("too_short")
    if _JSON_FRAGMENT.search(collapsed):
        return _report("json_fragment")
    if any(sequence in text for sequence in _ESCAPE_SEQUENCES):
        return _report("escape_sequences")
    if ratio > settings.max_placeholder_ratio:
        return _report("placeholder_heavy")
    if len(text) < settings.min_visible_text_chars:
        return _report("only_placeholders" if placeholders else "no_visible_text")
    return _report(None)


__all__ = ["QualityReport", "assess_body", "visible_text"]
