"""Recover generated web projects and render static page previews."""

from .markup import ExtractionResult, extract_document, extract_page
from .models import EnvVar, FileEntry, FileKind, PageRecord, ProjectDescriptor, ProjectKind
from .pages import assemble_pages, project_overview_document
from .recovery import (
    EmptyDocumentError,
    MalformedDocumentError,
    NoValidFilesError,
    RecoveryError,
    recover,
    render_project,
)

__all__ = [
    "EmptyDocumentError",
    "EnvVar",
    "ExtractionResult",
    "FileEntry",
    "FileKind",
    "MalformedDocumentError",
    "NoValidFilesError",
    "PageRecord",
    "ProjectDescriptor",
    "ProjectKind",
    "RecoveryError",
    "assemble_pages",
    "extract_document",
    "extract_page",
    "project_overview_document",
    "recover",
    "render_project",
]
