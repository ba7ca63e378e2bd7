"""Turn a recovered project into an ordered list of static preview pages."""

from __future__ import annotations

import html
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional, Tuple

from ..config import ExtractionConfig, PreviewConfig, RoutingConfig
from ..logging import get_logger
from ..markup import extract_page
from ..markup.document import render_document
from ..markup.quality import visible_text
from ..models import FileEntry, PageRecord, ProjectDescriptor
from .routes import RouteMatch, find_shared_stylesheet, iter_page_routes

logger = get_logger("pages.assembler")

_DESCRIPTION_LIMIT = 160


def _first_text(document: str, tag: str) -> Optional[str]:
    body_start = max(document.find("<body"), 0)
    match = re.search(rf"<{tag}\b[^>]*>(.*?)</{tag}>", document[body_start:], re.S)
    if not match:
        return None
    return visible_text(match.group(1)) or None


def _trim(text: Optional[str], limit: int) -> Optional[str]:
    if text is None or len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def _sort_key(page: PageRecord) -> Tuple[int, str, str]:
    return (0 if page.is_homepage else 1, page.title.casefold(), page.slug)


def assemble_pages(
    project: ProjectDescriptor,
    *,
    settings: Optional[PreviewConfig] = None,
    workers: Optional[int] = None,
) -> List[PageRecord]:
    """Extract every static route of *project*, homepage first then by title.

    Dynamic routes are omitted. Pages may be extracted on a thread pool;
    the result does not depend on scheduling.
    """
    extraction = settings.extraction if settings else ExtractionConfig()
    routing = settings.routing if settings else RoutingConfig()
    if workers is None and settings is not None:
        workers = settings.workers

    routes = list(iter_page_routes(project.files, routing))
    if not routes:
        logger.info("Project %r has no static page routes", project.name)
        return []

    stylesheet = find_shared_stylesheet(project.files, routing)
    shared_styles = stylesheet.content if stylesheet is not None else None
    if stylesheet is not None:
        logger.debug("Using shared stylesheet %s", stylesheet.path)

    def _build(item: Tuple[FileEntry, RouteMatch]) -> PageRecord:
        entry, route = item
        result = extract_page(
            entry.content, route.title, project.name, shared_styles, settings=extraction
        )
        return PageRecord(
            slug=route.slug,
            title=route.title,
            html_document=result.document,
            is_homepage=route.is_homepage,
            order=0,
            source_path=entry.path,
            used_fallback=result.used_fallback,
            description=_trim(_first_text(result.document, "p"), _DESCRIPTION_LIMIT),
            meta_title=_first_text(result.document, "h1") or route.title,
        )

    if workers and workers > 1 and len(routes) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            pages = list(executor.map(_build, routes))
    else:
        pages = [_build(item) for item in routes]

    ordered = [replace(page, order=index) for index, page in enumerate(sorted(pages, key=_sort_key))]
    fallbacks = sum(1 for page in ordered if page.used_fallback)
    logger.info(
        "Assembled %d pages for %r (%d fallback documents)", len(ordered), project.name, fallbacks
    )
    return ordered


def project_overview_document(
    project: ProjectDescriptor, *, settings: Optional[PreviewConfig] = None
) -> str:
    """Return a static summary document for projects without a previewable page."""
    extraction = settings.extraction if settings else ExtractionConfig()
    lines = [
        '<main class="min-h-screen bg-gray-50 text-gray-900">',
        '<section class="max-w-3xl mx-auto px-6 py-16">',
        f'<h1 class="text-4xl font-bold mb-4">{html.escape(project.name)}</h1>',
    ]
    if project.description:
        lines.append(f'<p class="text-lg text-gray-600 mb-8">{html.escape(project.description)}</p>')
    lines.append('<h2 class="text-2xl font-semibold mb-3">Files</h2>')
    lines.append('<ul class="font-mono text-sm space-y-1 mb-8">')
    for path in project.file_tree().splitlines():
        lines.append(f"<li>{html.escape(path)}</li>")
    lines.append("</ul>")
    if project.setup_steps:
        lines.append('<h2 class="text-2xl font-semibold mb-3">Setup</h2>')
        lines.append('<ol class="list-decimal pl-6 space-y-1">')
        for step in project.setup_steps:
            lines.append(f"<li>{html.escape(step)}</li>")
        lines.append("</ol>")
    lines.extend(["</section>", "</main>"])

    return render_document(
        "\n".join(lines),
        "Overview",
        project.name,
        description=project.description or None,
        stylesheet_url=extraction.stylesheet_url,
    )


__all__ = ["assemble_pages", "project_overview_document"]
