"""
Extractors — Pure functions for text extraction.

No Google API calls, no logging. Just transform bytes/text → text.
Easily testable with fixtures. The registry maps MIME types to them.
"""

from .pdf import extract_pdf_text
from .sheets import flatten_csv
from .text import passthrough_text
from .word import extract_docx_text
from .registry import (
    FormatExtractor,
    get_extractor,
    is_supported,
    register,
    supported_mime_types,
    unregister,
)

__all__ = [
    "extract_pdf_text",
    "flatten_csv",
    "passthrough_text",
    "extract_docx_text",
    "FormatExtractor",
    "get_extractor",
    "is_supported",
    "register",
    "supported_mime_types",
    "unregister",
]
