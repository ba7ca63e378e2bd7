"""Core data models shared across genpreview components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class ProjectKind(str, Enum):
    """Shape of the generated project as declared in the envelope."""

    STATIC = "website"
    FULL_STACK = "fullstack"


class FileKind(str, Enum):
    """Coarse file category derived from the path extension."""

    MARKUP = "markup"
    STYLES = "styles"
    SCRIPT = "script"
    DATA = "data"
    DOC = "doc"
    OTHER = "other"


_KIND_BY_EXTENSION: Dict[str, FileKind] = {
    "tsx": FileKind.MARKUP,
    "jsx": FileKind.MARKUP,
    "html": FileKind.MARKUP,
    "htm": FileKind.MARKUP,
    "vue": FileKind.MARKUP,
    "svelte": FileKind.MARKUP,
    "css": FileKind.STYLES,
    "scss": FileKind.STYLES,
    "sass": FileKind.STYLES,
    "less": FileKind.STYLES,
    "ts": FileKind.SCRIPT,
    "js": FileKind.SCRIPT,
    "mjs": FileKind.SCRIPT,
    "cjs": FileKind.SCRIPT,
    "py": FileKind.SCRIPT,
    "sh": FileKind.SCRIPT,
    "json": FileKind.DATA,
    "yaml": FileKind.DATA,
    "yml": FileKind.DATA,
    "toml": FileKind.DATA,
    "env": FileKind.DATA,
    "prisma": FileKind.DATA,
    "sql": FileKind.DATA,
    "md": FileKind.DOC,
    "mdx": FileKind.DOC,
    "txt": FileKind.DOC,
}

_LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "json": "json",
    "css": "css",
    "scss": "scss",
    "md": "markdown",
    "html": "html",
    "prisma": "prisma",
    "env": "bash",
}


def _extension(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def infer_kind(path: str) -> FileKind:
    """Return the file category for *path* based purely on its extension."""
    return _KIND_BY_EXTENSION.get(_extension(path), FileKind.OTHER)


@dataclass(frozen=True)
class FileEntry:
    """A single recovered project file."""

    path: str
    content: str
    inferred_kind: FileKind = FileKind.OTHER

    @property
    def language(self) -> str:
        return _LANGUAGE_BY_EXTENSION.get(_extension(self.path), "text")


@dataclass(frozen=True)
class EnvVar:
    """Environment variable the generated project expects."""

    key: str
    description: str = ""
    example: Optional[str] = None
    required: bool = False


_ENTRY_PRIORITIES = ("app/page.tsx", "pages/index.tsx", "index.html", "src/index.tsx")


@dataclass(frozen=True)
class ProjectDescriptor:
    """Root artifact returned by the recovery parser."""

    name: str
    files: Tuple[FileEntry, ...]
    description: str = ""
    kind: ProjectKind = ProjectKind.STATIC
    dependencies: Tuple[Tuple[str, str], ...] = ()
    dev_dependencies: Tuple[Tuple[str, str], ...] = ()
    env_vars: Tuple[EnvVar, ...] = ()
    setup_steps: Tuple[str, ...] = ()

    def file_tree(self) -> str:
        """Return the sorted list of file paths, one per line."""
        return "\n".join(sorted(entry.path for entry in self.files))

    def entry_file(self) -> Optional[FileEntry]:
        """Return the most likely application entry file."""
        by_path = {entry.path: entry for entry in self.files}
        for candidate in _ENTRY_PRIORITIES:
            if candidate in by_path:
                return by_path[candidate]
        return self.files[0] if self.files else None


@dataclass(frozen=True)
class PageRecord:
    """Static preview document for one navigable route."""

    slug: str
    title: str
    html_document: str
    is_homepage: bool
    order: int
    source_path: str = ""
    used_fallback: bool = False
    description: Optional[str] = None
    meta_title: Optional[str] = None
