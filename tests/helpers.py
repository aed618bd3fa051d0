"""
Shared test helpers for drivetext.

Centralizes mock wiring patterns that repeat across test files.
"""

from __future__ import annotations

import io
import threading
import time
import zipfile
from typing import Any
from unittest.mock import MagicMock, seal
from xml.sax.saxutils import escape as xml_escape

from googleapiclient.errors import HttpError
from httplib2 import Response

from extractors.registry import (
    DOCX_MIME,
    GOOGLE_DOC_MIME,
    GOOGLE_SHEET_MIME,
    GOOGLE_SLIDES_MIME,
    PDF_MIME,
    PLAIN_TEXT_MIME,
)


ALL_SUPPORTED_MIMES = [
    PDF_MIME,
    GOOGLE_DOC_MIME,
    GOOGLE_SHEET_MIME,
    GOOGLE_SLIDES_MIME,
    DOCX_MIME,
    PLAIN_TEXT_MIME,
]


def mock_api_chain(
    mock_service: MagicMock,
    chain: str,
    response: Any = None,
    *,
    side_effect: Any = None,
) -> MagicMock:
    """Set up a mock Google API response for a chained call.

    Navigates the MagicMock attribute chain and sets return_value (or side_effect)
    on the final method. Returns the final mock method for adding assertions.

    Args:
        mock_service: The mocked service object
        chain: Dot-separated chain. Each part except the last is treated as
               a callable method (traversed via .return_value).
               Examples: "files.get.execute", "files.export.execute"
        response: The return value for the final method
        side_effect: Alternative to response — sets side_effect instead

    Examples:
        mock_api_chain(service, "files.get.execute", {"id": "f1"})
        # equivalent to: service.files().get().execute.return_value = {"id": "f1"}
    """
    parts = chain.split(".")
    obj = mock_service
    for part in parts[:-1]:
        obj = getattr(obj, part).return_value
    final = getattr(obj, parts[-1])
    if side_effect is not None:
        final.side_effect = side_effect
    elif response is not None:
        final.return_value = response
    return final


def seal_service(mock_service: MagicMock) -> None:
    """Seal a mock service after all mock_api_chain() calls.

    Without seal, a test passes even if the adapter calls files().get_media()
    but the mock only set up files().export() — MagicMock returns a new
    MagicMock instead of raising.
    """
    seal(mock_service)


def make_http_error(status: int, message: str = "Error") -> HttpError:
    """
    Create an HttpError for testing error handling.

    Example:
        mock_service.files().get().execute.side_effect = make_http_error(404, "Not found")
    """
    resp = Response({"status": status})
    return HttpError(resp, message.encode())


# ============================================================================
# Real document payloads
# ============================================================================

_W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

_DOCX_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

_DOCX_PACKAGE_RELS = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="word/document.xml"/>'
    "</Relationships>"
)


def docx_paragraph(text: str, style: str | None = None) -> str:
    """One w:p block, optionally with a paragraph style (e.g. "Heading1")."""
    props = f'<w:pPr><w:pStyle w:val="{style}"/></w:pPr>' if style else ""
    return f'<w:p>{props}<w:r><w:t xml:space="preserve">{xml_escape(text)}</w:t></w:r></w:p>'


def docx_table(rows: list[list[str]]) -> str:
    """A w:tbl with one paragraph per cell."""
    body = "".join(
        "<w:tr>" + "".join(f"<w:tc>{docx_paragraph(cell)}</w:tc>" for cell in row) + "</w:tr>"
        for row in rows
    )
    return f"<w:tbl>{body}</w:tbl>"


def make_docx_bytes(*blocks: str) -> bytes:
    """Minimal valid .docx package whose body holds the given blocks.

    Example:
        make_docx_bytes(docx_paragraph("Title", "Heading1"), docx_table([["a", "b"]]))
    """
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{_W_NS}"><w:body>{"".join(blocks)}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as package:
        package.writestr("[Content_Types].xml", _DOCX_CONTENT_TYPES)
        package.writestr("_rels/.rels", _DOCX_PACKAGE_RELS)
        package.writestr("word/document.xml", document)
    return buffer.getvalue()


def make_pdf_bytes(*lines: str) -> bytes:
    """Single-page PDF with one Helvetica text line per argument.

    Object offsets and the xref table are computed, so strict parsers
    accept it. Lines must be latin-1.
    """
    ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({escaped}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


# ============================================================================
# In-memory Drive
# ============================================================================


class _Request:
    def __init__(self, action):
        self._action = action

    def execute(self) -> Any:
        return self._action()


class FakeDriveService:
    """In-memory stand-in for the Drive v3 service.

    files: file_id -> {"name": ..., "mimeType": ...}
    contents: file_id -> body returned by export()/get_media(), or an
        Exception instance to raise instead.

    Records every call in self.calls as (method, file_id, extra) and tracks
    how many content calls overlap (max_in_flight), so tests can check the
    concurrency bound. Safe to share across worker threads.
    """

    def __init__(
        self,
        files: dict[str, dict[str, str]] | None = None,
        contents: dict[str, Any] | None = None,
        *,
        content_delay: float = 0.0,
    ):
        self.file_table = files or {}
        self.contents = contents or {}
        self.content_delay = content_delay
        self.calls: list[tuple[str, str | None, Any]] = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    def files(self) -> "FakeDriveService":
        return self

    def _record(self, method: str, file_id: str | None, extra: Any = None) -> None:
        with self._lock:
            self.calls.append((method, file_id, extra))

    def _content(self, file_id: str) -> Any:
        with self._lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.content_delay:
                time.sleep(self.content_delay)
            body = self.contents[file_id]
            if isinstance(body, Exception):
                raise body
            return body
        finally:
            with self._lock:
                self._in_flight -= 1

    def get(self, fileId: str, fields: str | None = None, supportsAllDrives: bool = False) -> _Request:
        def action() -> dict[str, str]:
            self._record("get", fileId, fields)
            if fileId not in self.file_table:
                raise make_http_error(404, "File not found")
            return {"id": fileId, **self.file_table[fileId]}
        return _Request(action)

    def export(self, fileId: str, mimeType: str) -> _Request:
        def action() -> Any:
            self._record("export", fileId, mimeType)
            return self._content(fileId)
        return _Request(action)

    def get_media(self, fileId: str, supportsAllDrives: bool = False) -> _Request:
        def action() -> Any:
            self._record("get_media", fileId)
            return self._content(fileId)
        return _Request(action)

    def list(self, **kwargs: Any) -> _Request:
        def action() -> dict[str, Any]:
            self._record("list", None, kwargs)
            return {
                "files": [
                    {"id": file_id, **meta} for file_id, meta in self.file_table.items()
                ]
            }
        return _Request(action)

    def content_calls(self) -> list[tuple[str, str | None, Any]]:
        return [c for c in self.calls if c[0] in ("export", "get_media")]
