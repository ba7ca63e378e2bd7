"""Tunable policy constants for extraction and routing.

The quality thresholds were tuned against real model output; they are
heuristics and can be overridden from ``.genpreview.yml``.
"""

from __future__ import annotations

# Quality gate
MIN_BODY_CHARS: int = 20
MAX_PLACEHOLDER_RATIO: float = 0.5
MIN_VISIBLE_TEXT_CHARS: int = 2

# Fallback synthesis
MAX_FALLBACK_COPY: int = 24
MAX_FALLBACK_LINKS: int = 12
MIN_COPY_CHARS: int = 3
MAX_COPY_CHARS: int = 400

# Document shell
UTILITY_STYLESHEET_URL: str = "https://cdn.tailwindcss.com"
DYNAMIC_PLACEHOLDER: str = "<!-- dynamic content -->"

# Scanner bounds
MAX_NESTING_DEPTH: int = 200

# Routing
ROUTE_ROOTS: tuple[str, ...] = ("app", "src/app")
ENTRY_FILENAMES: tuple[str, ...] = ("page.tsx", "page.jsx", "page.js")
SHARED_STYLESHEET_NAMES: tuple[str, ...] = ("globals.css", "global.css", "styles.css")
SHARED_STYLESHEET_DIRS: tuple[str, ...] = ("app", "src/app", "styles", "src/styles", "src")
HOMEPAGE_SLUG: str = "home"
HOMEPAGE_TITLE: str = "Home"


__all__ = [
    "DYNAMIC_PLACEHOLDER",
    "ENTRY_FILENAMES",
    "HOMEPAGE_SLUG",
    "HOMEPAGE_TITLE",
    "MAX_FALLBACK_COPY",
    "MAX_FALLBACK_LINKS",
    "MAX_COPY_CHARS",
    "MAX_NESTING_DEPTH",
    "MAX_PLACEHOLDER_RATIO",
    "MIN_BODY_CHARS",
    "MIN_COPY_CHARS",
    "MIN_VISIBLE_TEXT_CHARS",
    "ROUTE_ROOTS",
    "SHARED_STYLESHEET_DIRS",
    "SHARED_STYLESHEET_NAMES",
    "UTILITY_STYLESHEET_URL",
]
