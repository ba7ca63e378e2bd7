"""Fallback bodies for pages whose primary conversion was rejected."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import ExtractionConfig
from ..constants import MAX_FALLBACK_LINKS
from .literals import extract_user_copy, looks_like_copy, read_string_literal

# Attribute runs may contain ``{...}`` handlers whose arrows include ``>``.
_ATTRS = r"""((?:\{[^{}]*\}|"[^"]*"|'[^']*'|[^>{}"'])*)"""
_LINK_PATTERN = re.compile(rf"<(?:a|Link)\b{_ATTRS}>\s*([^<>{{}}]+?)\s*</(?:a|Link)>")
_BUTTON_PATTERN = re.compile(rf"<button\b{_ATTRS}>\s*([^<>{{}}]+?)\s*</button>")
_IMAGE_PATTERN = re.compile(rf"<(?:img|Image)\b{_ATTRS}/?>")
_ATTRIBUTE_VALUE = r"""\s*=\s*(?:"([^"]*)"|'([^']*)'|\{\s*(["'`][^{}]*?["'`])\s*\})"""
_UNSAFE_SCHEMES = ("javascript:", "data:", "vbscript:")


@dataclass
class FallbackContent:
    """User-facing pieces salvaged from a component's source."""

    copy: List[str] = field(default_factory=list)
    links: List[Tuple[str, str]] = field(default_factory=list)
    buttons: List[str] = field(default_factory=list)
    images: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.copy or self.links or self.buttons or self.images)


def _attribute(attrs: str, name: str) -> Optional[str]:
    match = re.search(rf"\b{name}{_ATTRIBUTE_VALUE}", attrs)
    if not match:
        return None
    quoted = match.group(1) if match.group(1) is not None else match.group(2)
    if quoted is not None:
        return quoted
    return read_string_literal(match.group(3))


def _safe_url(url: Optional[str]) -> Optional[str]:
    if url is None:
        return None
    cleaned = url.strip()
    if not cleaned or cleaned.lower().startswith(_UNSAFE_SCHEMES):
        return None
    return cleaned


def collect_fallback_content(source: str, *, copy_limit: int) -> FallbackContent:
    """Gather copy, links, buttons and images that can be shown statically."""
    content = FallbackContent()
    labels = set()

    for match in _LINK_PATTERN.finditer(source):
        href = _safe_url(_attribute(match.group(1), "href"))
        label = " ".join(match.group(2).split())
        if href is None or not looks_like_copy(label) or label.casefold() in labels:
            continue
        labels.add(label.casefold())
        content.links.append((href, label))
        if len(content.links) >= MAX_FALLBACK_LINKS:
            break

    for match in _BUTTON_PATTERN.finditer(source):
        label = " ".join(match.group(2).split())
        if not looks_like_copy(label) or label.casefold() in labels:
            continue
        labels.add(label.casefold())
        content.buttons.append(label)
        if len(content.buttons) >= MAX_FALLBACK_LINKS:
            break

    for match in _IMAGE_PATTERN.finditer(source):
        src = _safe_url(_attribute(match.group(1), "src"))
        if src is None:
            continue
        content.images.append((src, _attribute(match.group(1), "alt") or ""))

    content.copy = [
        text for text in extract_user_copy(source, limit=copy_limit) if text.casefold() not in labels
    ]
    return content


def _render_content(title: str, content: FallbackContent) -> str:
    lines = [
        '<main class="min-h-screen bg-gray-50 text-gray-900">',
        '<section class="max-w-4xl mx-auto px-6 py-16">',
        f'<h1 class="text-4xl font-bold tracking-tight mb-6">{html.escape(title)}</h1>',
    ]
    for text in content.copy:
        if text.casefold() == title.casefold():
            continue
        lines.append(f'<p class="text-lg text-gray-600 mb-4">{html.escape(text)}</p>')
    if content.links:
        lines.append('<nav class="flex flex-wrap gap-3 mt-8">')
        for href, label in content.links:
            lines.append(
                f'<a class="px-4 py-2 rounded-lg bg-white shadow text-blue-600" '
                f'href="{html.escape(href)}">{html.escape(label)}</a>'
            )
        lines.append("</nav>")
    if content.buttons:
        lines.append('<div class="flex flex-wrap gap-3 mt-6">')
        for label in content.buttons:
            lines.append(
                '<button type="button" class="px-5 py-2 rounded-lg bg-blue-600 text-white">'
                f"{html.escape(label)}</button>"
            )
        lines.append("</div>")
    if content.images:
        lines.append('<div class="grid grid-cols-2 gap-4 mt-8">')
        for src, alt in content.images:
            lines.append(
                f'<img class="rounded-lg w-full" src="{html.escape(src)}" alt="{html.escape(alt)}">'
            )
        lines.append("</div>")
    lines.extend(["</section>", "</main>"])
    return "\n".join(lines)


def placeholder_body(title: str, project_name: str) -> str:
    """Return the static explanation shown when nothing could be salvaged."""
    return "\n".join(
        [
            '<main class="min-h-screen flex items-center justify-center bg-gray-50">',
            '<div class="max-w-xl text-center px-6">',
            f'<h1 class="text-3xl font-bold mb-4">{html.escape(title)}</h1>',
            '<p class="text-gray-600">This page renders its content dynamically. '
            f"Run {html.escape(project_name)} locally to see the full experience.</p>",
            "</div>",
            "</main>",
        ]
    )


def build_fallback_body(
    source: str,
    title: str,
    project_name: str,
    *,
    settings: Optional[ExtractionConfig] = None,
) -> str:
    """Return a generic styled body built from copy salvaged out of *source*."""
    settings = settings or ExtractionConfig()
    content = collect_fallback_content(source, copy_limit=settings.max_fallback_copy)
    if content.empty:
        return placeholder_body(title, project_name)
    return _render_content(title, content)


__all__ = [
    "FallbackContent",
    "build_fallback_body",
    "collect_fallback_content",
    "placeholder_body",
]
