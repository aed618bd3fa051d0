"""
Extractor registry — MIME type → extractor.

Each supported MIME type has exactly one FormatExtractor, which says how to
fetch the file (export target or media download), whether the decoder
takes bytes or text, and where the output goes. New formats are added with
register(), no central conditional to edit.
"""

from dataclasses import dataclass
from typing import Callable

from models import Category, FetchEncoding, UnsupportedFormat

from .pdf import extract_pdf_text
from .sheets import flatten_csv
from .text import passthrough_text
from .word import extract_docx_text

PDF_MIME = "application/pdf"
GOOGLE_DOC_MIME = "application/vnd.google-apps.document"
GOOGLE_SHEET_MIME = "application/vnd.google-apps.spreadsheet"
GOOGLE_SLIDES_MIME = "application/vnd.google-apps.presentation"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PLAIN_TEXT_MIME = "text/plain"


@dataclass(frozen=True)
class FormatExtractor:
    """
    How one MIME type is fetched and decoded.

    extract takes bytes when encoding is MEDIA_BINARY, str otherwise.
    export_mime is the files.export target for native editor formats,
    None for media downloads.
    """
    mime_type: str
    category: Category
    encoding: FetchEncoding
    extract: Callable[..., str]
    export_mime: str | None = None

    def __post_init__(self) -> None:
        is_export = self.encoding in (FetchEncoding.EXPORT_TEXT, FetchEncoding.EXPORT_STRUCTURED)
        if is_export != (self.export_mime is not None):
            raise ValueError(
                f"{self.mime_type}: export_mime must be set exactly for export encodings"
            )

    @property
    def takes_bytes(self) -> bool:
        return self.encoding.is_binary


_REGISTRY: dict[str, FormatExtractor] = {}


def register(extractor: FormatExtractor) -> FormatExtractor:
    """
    Add an extractor.

    Raises:
        ValueError: If the MIME type already has one
    """
    if extractor.mime_type in _REGISTRY:
        raise ValueError(f"Extractor already registered for {extractor.mime_type}")
    _REGISTRY[extractor.mime_type] = extractor
    return extractor


def unregister(mime_type: str) -> None:
    """Remove an extractor if present."""
    _REGISTRY.pop(mime_type, None)


def is_supported(mime_type: str) -> bool:
    return mime_type in _REGISTRY


def supported_mime_types() -> frozenset[str]:
    return frozenset(_REGISTRY)


def get_extractor(mime_type: str) -> FormatExtractor:
    """
    Look up the extractor for a MIME type.

    Raises:
        UnsupportedFormat: If none is registered
    """
    try:
        return _REGISTRY[mime_type]
    except KeyError:
        raise UnsupportedFormat(
            f"Unsupported file type: {mime_type or '(none)'}",
            details={"mime_type": mime_type},
        ) from None


register(FormatExtractor(
    mime_type=PDF_MIME,
    category=Category.PDF,
    encoding=FetchEncoding.MEDIA_BINARY,
    extract=extract_pdf_text,
))
register(FormatExtractor(
    mime_type=GOOGLE_DOC_MIME,
    category=Category.DOCUMENT,
    encoding=FetchEncoding.EXPORT_TEXT,
    extract=passthrough_text,
    export_mime="text/plain",
))
register(FormatExtractor(
    mime_type=GOOGLE_SHEET_MIME,
    category=Category.SPREADSHEET,
    encoding=FetchEncoding.EXPORT_STRUCTURED,
    extract=flatten_csv,
    export_mime="text/csv",
))
register(FormatExtractor(
    mime_type=GOOGLE_SLIDES_MIME,
    category=Category.PRESENTATION,
    encoding=FetchEncoding.EXPORT_TEXT,
    extract=passthrough_text,
    export_mime="text/plain",
))
register(FormatExtractor(
    mime_type=DOCX_MIME,
    category=Category.WORD_LEGACY,
    encoding=FetchEncoding.MEDIA_BINARY,
    extract=extract_docx_text,
))
register(FormatExtractor(
    mime_type=PLAIN_TEXT_MIME,
    category=Category.PLAIN_TEXT,
    encoding=FetchEncoding.MEDIA_TEXT,
    extract=passthrough_text,
))
