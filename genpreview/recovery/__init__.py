"""Structured-text recovery for generated project envelopes."""

from .envelope import strip_envelope
from .parser import (
    EmptyDocumentError,
    MalformedDocumentError,
    NoValidFilesError,
    RecoveryError,
    recover,
    render_project,
)
from .repairs import repair_document

__all__ = [
    "EmptyDocumentError",
    "MalformedDocumentError",
    "NoValidFilesError",
    "RecoveryError",
    "recover",
    "render_project",
    "repair_document",
    "strip_envelope",
]
