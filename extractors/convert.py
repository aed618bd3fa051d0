"""
markitdown bridge shared by the binary extractors.

markitdown wants a file path, so bytes go through a temp file.
"""

import tempfile
from pathlib import Path

from markitdown import MarkItDown


def convert_with_markitdown(data: bytes, suffix: str) -> str:
    """
    Convert a binary document to text with markitdown.

    Writes to temp file (markitdown requires file path), extracts, cleans up.
    The suffix steers markitdown's converter choice.
    """
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        tmp.write(data)
        tmp_path = Path(tmp.name)

    try:
        md = MarkItDown()
        result = md.convert_local(str(tmp_path))
        return result.text_content or ""
    finally:
        tmp_path.unlink(missing_ok=True)
