"""Convert one page component into a complete static document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import ExtractionConfig
from ..logging import get_logger
from ..scanner import ScanError
from .document import render_document
from .fallback import build_fallback_body
from .locate import locate_markup
from .quality import assess_body
from .rewrite import to_static_html

logger = get_logger("markup.extractor")


@dataclass(frozen=True)
class ExtractionResult:
    """A rendered document plus how it was produced."""

    document: str
    used_fallback: bool
    reason: Optional[str] = None


def _primary_body(source: str, settings: ExtractionConfig) -> Tuple[Optional[str], Optional[str]]:
    markup = locate_markup(source)
    if markup is None:
        return None, "no_markup"
    body = to_static_html(markup)
    report = assess_body(body, settings)
    if not report.accepted:
        logger.debug(
            "Rejected converted body (%s): %d chars, %d visible, %.2f placeholder ratio",
            report.reason,
            report.body_chars,
            report.visible_chars,
            report.placeholder_ratio,
        )
        return None, report.reason
    return body, None


def extract_page(
    source: str,
    title: str,
    project_name: str,
    shared_styles: Optional[str] = None,
    *,
    settings: Optional[ExtractionConfig] = None,
) -> ExtractionResult:
    """Convert *source* to a static document, substituting a fallback when needed."""
    settings = settings or ExtractionConfig()
    source = source or ""
    try:
        body, reason = _primary_body(source, settings)
    except ScanError as exc:
        logger.warning("Markup for %r exceeded scan limits: %s", title, exc)
        body, reason = None, "scan_limit"

    used_fallback = body is None
    if body is None:
        logger.info("Using fallback document for %r (%s)", title, reason)
        body = build_fallback_body(source, title, project_name, settings=settings)

    document = render_document(
        body,
        title,
        project_name,
        shared_styles=shared_styles,
        description=f"{title} preview of {project_name}" if project_name else None,
        stylesheet_url=settings.stylesheet_url,
    )
    return ExtractionResult(document=document, used_fallback=used_fallback, reason=reason)


def extract_document(
    source: str,
    title: str,
    project_name: str,
    shared_styles: Optional[str] = None,
    *,
    settings: Optional[ExtractionConfig] = None,
) -> str:
    """Return a complete static document for *source*; never raises on content."""
    return extract_page(
        source, title, project_name, shared_styles, settings=settings
    ).document


__all__ = ["ExtractionResult", "extract_document", "extract_page"]
