"""
PDF Extractor — text layout extraction over raw PDF bytes.

markitdown runs pdfminer underneath. No API calls.
"""

from .convert import convert_with_markitdown

# The header may be preceded by junk; readers look within the first 1024 bytes
_PDF_MAGIC = b"%PDF-"
_HEADER_WINDOW = 1024


def extract_pdf_text(data: bytes) -> str:
    """
    Extract concatenated page text from a PDF.

    Raises:
        ValueError: If the bytes aren't a PDF
        Exception: Whatever the PDF parser raises on a damaged file
    """
    if _PDF_MAGIC not in data[:_HEADER_WINDOW]:
        raise ValueError("Not a PDF: missing %PDF- header")
    return convert_with_markitdown(data, ".pdf")
