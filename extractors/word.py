"""
Word Extractor — .docx (OpenXML word-processing) bytes to text.

mammoth's raw-text mode: each paragraph (table cells included) followed by
a blank line, no markup. Formatting, images and styles are dropped.
"""

import io
import zipfile

import mammoth

_MAIN_PART = "word/document.xml"


def extract_docx_text(data: bytes) -> str:
    """
    Extract the body text of a .docx file.

    Raises:
        ValueError: If the bytes aren't a word-processing OpenXML package
        Exception: Whatever the parser raises on a damaged document
    """
    buffer = io.BytesIO(data)
    if not zipfile.is_zipfile(buffer):
        raise ValueError("Not a .docx: payload is not a zip package")
    with zipfile.ZipFile(buffer) as package:
        if _MAIN_PART not in package.namelist():
            raise ValueError(f"Not a .docx: {_MAIN_PART} missing from package")

    buffer.seek(0)
    return mammoth.extract_raw_text(buffer).value
