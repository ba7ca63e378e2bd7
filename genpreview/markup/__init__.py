"""Static HTML extraction from component markup."""

from .extractor import ExtractionResult, extract_document, extract_page
from .literals import extract_user_copy
from .rewrite import to_static_html

__all__ = [
    "ExtractionResult",
    "extract_document",
    "extract_page",
    "extract_user_copy",
    "to_static_html",
]
