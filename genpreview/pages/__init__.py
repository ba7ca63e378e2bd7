"""Page discovery and assembly for recovered projects."""

from .assembler import assemble_pages, project_overview_document
from .routes import RouteMatch, find_shared_stylesheet, match_route

__all__ = [
    "RouteMatch",
    "assemble_pages",
    "find_shared_stylesheet",
    "match_route",
    "project_overview_document",
]
