"""Directory-routing convention: map file paths to preview routes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ..config import RoutingConfig
from ..constants import HOMEPAGE_SLUG, HOMEPAGE_TITLE, SHARED_STYLESHEET_DIRS
from ..logging import get_logger
from ..models import FileEntry

logger = get_logger("pages.routes")

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_WORD_SEPARATORS = re.compile(r"[-_\s]+")


@dataclass(frozen=True)
class RouteMatch:
    """A file that the routing convention turns into a static page."""

    path: str
    segments: Tuple[str, ...]
    slug: str
    title: str
    is_homepage: bool


def is_dynamic_segment(segment: str) -> bool:
    """Return True for parameterised segments such as ``[id]`` or ``[[...all]]``."""
    return segment.startswith("[") and segment.endswith("]")


def _is_group(segment: str) -> bool:
    return segment.startswith("(") and segment.endswith(")")


def _split_route(path: str, routing: RoutingConfig) -> Optional[List[str]]:
    """Return the directory segments between the route root and the entry file."""
    for root in sorted(routing.roots, key=len, reverse=True):
        prefix = f"{root}/" if root else ""
        if not path.startswith(prefix):
            continue
        parts = path[len(prefix) :].split("/")
        if parts[-1] not in routing.entry_filenames:
            return None
        return parts[:-1]
    return None


def slug_for(segments: Iterable[str]) -> str:
    pieces = [_SLUG_SEPARATORS.sub("-", segment.lower()).strip("-") for segment in segments]
    return "-".join(piece for piece in pieces if piece)


def title_for(segments: Iterable[str]) -> str:
    words = [word.capitalize() for segment in segments for word in _WORD_SEPARATORS.split(segment)]
    return " ".join(word for word in words if word)


def match_route(path: str, routing: Optional[RoutingConfig] = None) -> Optional[RouteMatch]:
    """Return the static route for *path*, or None when it is not a previewable page.

    Route groups ``(name)`` and parallel-route slots ``@name`` contribute no
    segment; private folders ``_name`` and dynamic segments are not routable.
    """
    routing = routing or RoutingConfig()
    directories = _split_route(path, routing)
    if directories is None:
        return None

    segments: List[str] = []
    for directory in directories:
        if not directory or directory.startswith("_") or is_dynamic_segment(directory):
            return None
        if _is_group(directory) or directory.startswith("@"):
            continue
        segments.append(directory)

    if not segments:
        return RouteMatch(path, (), HOMEPAGE_SLUG, HOMEPAGE_TITLE, True)
    slug = slug_for(segments)
    if not slug:
        return None
    if slug == HOMEPAGE_SLUG:
        # The homepage slug belongs to the root route only.
        slug = f"{slug}-page"
    return RouteMatch(path, tuple(segments), slug, title_for(segments) or slug, False)


def iter_page_routes(
    files: Iterable[FileEntry], routing: Optional[RoutingConfig] = None
) -> Iterator[Tuple[FileEntry, RouteMatch]]:
    """Yield ``(entry, route)`` for each previewable page, first slug occurrence wins."""
    routing = routing or RoutingConfig()
    seen = set()
    for entry in files:
        route = match_route(entry.path, routing)
        if route is None:
            if _split_route(entry.path, routing) is not None:
                logger.debug("Skipping non-static route %s", entry.path)
            continue
        if route.slug in seen:
            logger.info("Skipping %s: slug %r already taken", entry.path, route.slug)
            continue
        seen.add(route.slug)
        yield entry, route


def find_shared_stylesheet(
    files: Iterable[FileEntry], routing: Optional[RoutingConfig] = None
) -> Optional[FileEntry]:
    """Return the project-wide stylesheet, searched by directory then by name."""
    routing = routing or RoutingConfig()
    by_path = {entry.path: entry for entry in files}
    for directory in SHARED_STYLESHEET_DIRS:
        for name in routing.shared_stylesheets:
            entry = by_path.get(f"{directory}/{name}")
            if entry is not None:
                return entry
    return None


__all__ = [
    "RouteMatch",
    "find_shared_stylesheet",
    "is_dynamic_segment",
    "iter_page_routes",
    "match_route",
    "slug_for",
    "title_for",
]
