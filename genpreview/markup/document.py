"""Complete HTML document shell around an extracted or fallback body."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..constants import UTILITY_STYLESHEET_URL

TEMPLATES_DIR = Path(__file__).with_name("templates")
DOCUMENT_TEMPLATE = "document.html.j2"

_BUILD_DIRECTIVE = re.compile(r"^[^\S\n]*@(?:tailwind|import|config|plugin)\b[^\n]*\n?", re.M)
_STYLE_CLOSE = re.compile(r"</(style)", re.I)

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def clean_shared_styles(css: str) -> str:
    """Drop build-time directives and keep the CSS from closing its ``<style>``."""
    cleaned = _BUILD_DIRECTIVE.sub("", css)
    cleaned = _STYLE_CLOSE.sub(r"<\\/\1", cleaned)
    return cleaned.strip()


def document_title(title: str, project_name: str) -> str:
    if project_name and project_name != title:
        return f"{title} | {project_name}"
    return title


def render_document(
    body: str,
    title: str,
    project_name: str,
    *,
    shared_styles: Optional[str] = None,
    description: Optional[str] = None,
    stylesheet_url: str = UTILITY_STYLESHEET_URL,
) -> str:
    """Wrap *body* in a full static document.

    The body is inserted verbatim; title, description and stylesheet URL are
    escaped by the template.
    """
    template = _env.get_template(DOCUMENT_TEMPLATE)
    return template.render(
        title=document_title(title, project_name),
        description=description,
        stylesheet_url=stylesheet_url,
        styles=clean_shared_styles(shared_styles) if shared_styles else "",
        body=body,
    )


__all__ = ["TEMPLATES_DIR", "clean_shared_styles", "document_title", "render_document"]
