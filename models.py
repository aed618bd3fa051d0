"""
Type definitions for drivetext.

Dataclasses defining the contracts between layers:
- Adapters produce FileReference / FetchResult / NormalizedContent
- Extractors consume bytes or text and return text
- The pipeline records an ExtractionOutcome per file

These types make the adapter→extractor contract explicit and IDE-checkable.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    UNSUPPORTED_FORMAT = "unsupported_format"  # MIME type not in the registry
    FETCH_FAILED = "fetch_failed"              # Drive call failed, cause unknown
    AUTH_REQUIRED = "auth_required"            # No usable token, run the OAuth flow
    AUTH_EXPIRED = "auth_expired"              # Token needs refresh
    PERMISSION_DENIED = "permission_denied"    # No access to resource
    NOT_FOUND = "not_found"                    # Resource doesn't exist
    RATE_LIMITED = "rate_limited"              # Hit API quota
    NETWORK_ERROR = "network_error"            # Connection failed or 5xx
    DECODE_FAILED = "decode_failed"            # Payload couldn't be parsed
    WRITE_FAILED = "write_failed"              # Filesystem error
    UNKNOWN = "unknown"


class DriveTextError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters and the writer raise (or return) these.
    The pipeline catches them per file and records them on the outcome.
    """

    default_kind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.kind = kind or self.default_kind
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for the JSON report."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.details,
        }


class UnsupportedFormat(DriveTextError):
    """MIME type has no registered extractor. Non-fatal: the file is skipped."""
    default_kind = ErrorKind.UNSUPPORTED_FORMAT


class FetchFailure(DriveTextError):
    """Network, auth or API error while talking to Drive."""
    default_kind = ErrorKind.FETCH_FAILED


class DecodeFailure(DriveTextError):
    """Payload is malformed or unparseable for the selected extractor."""
    default_kind = ErrorKind.DECODE_FAILED


class WriteFailure(DriveTextError):
    """Output artifact couldn't be written."""
    default_kind = ErrorKind.WRITE_FAILED


# ============================================================================
# FILE + FETCH TYPES
# ============================================================================

@dataclass(frozen=True)
class FileReference:
    """
    A Drive file as seen by the listing.

    name is the Drive display name: it may lack an extension, contain
    slashes, or be empty.
    """
    id: str
    name: str
    mime_type: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FileReference":
        """Build from a files.list / files.get resource dict."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            mime_type=data.get("mimeType", ""),
        )


class FetchEncoding(Enum):
    """How the content call returned its body."""
    EXPORT_TEXT = "export-text"              # files.export → plain text
    EXPORT_STRUCTURED = "export-structured"  # files.export → CSV rows
    MEDIA_BINARY = "media-binary"            # files.get_media → binary file
    MEDIA_TEXT = "media-text"                # files.get_media → text file

    @property
    def is_binary(self) -> bool:
        return self is FetchEncoding.MEDIA_BINARY


@dataclass
class FetchResult:
    """Raw response of one content fetch. Never persisted."""
    encoding: FetchEncoding
    payload: Any  # bytes, a stream, or whatever the client handed back
    export_mime: str | None = None


class ResponseShape(Enum):
    """Which branch of the normalizer produced the bytes."""
    BINARY = "binary"  # bytes / bytearray / memoryview
    STREAM = "stream"  # object with aread() or read()
    RAW = "raw"        # coerced from a plain value


@dataclass
class NormalizedContent:
    """
    Canonical byte sequence for one response body.

    lossy is True when the bytes were coerced from a value that was neither
    bytes, a stream, nor a str. Binary parsers failing on such content
    should say so.
    """
    data: bytes
    shape: ResponseShape
    lossy: bool = False

    def text(self) -> str:
        """Decode as UTF-8. Drive prefixes text/plain exports with a BOM."""
        return self.data.decode("utf-8-sig", errors="replace")


# ============================================================================
# EXTRACTION TYPES
# ============================================================================

class Category(Enum):
    """Extraction category: decides the decoder and the output directory."""
    PDF = "pdf"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    WORD_LEGACY = "word-legacy"
    PLAIN_TEXT = "plain-text"

    @property
    def output_dir(self) -> str:
        # Word files land in word-doc/, everything else matches the value
        if self is Category.WORD_LEGACY:
            return "word-doc"
        return self.value


class OutcomeStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped-unsupported"
    FAILED = "failed"


class Stage(Enum):
    """Pipeline stage where a failure happened."""
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    EXTRACTING = "extracting"
    WRITING = "writing"


@dataclass
class OutputArtifact:
    """
    A written (or attempted) output file.

    path is <base>/<category-dir>/<base-name>-converted.txt. error is set
    instead of raising when the write fails.
    """
    path: Path
    bytes_written: int = 0
    error: WriteFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ExtractionOutcome:
    """Terminal state of one file in a run."""
    source: FileReference
    status: OutcomeStatus
    category: Category | None = None
    text: str = ""
    artifact: OutputArtifact | None = None
    stage: Stage | None = None
    error: DriveTextError | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.source.id,
            "name": self.source.name,
            "mimeType": self.source.mime_type,
            "status": self.status.value,
        }
        if self.category is not None:
            result["category"] = self.category.value
        if self.artifact is not None and self.artifact.ok:
            result["path"] = str(self.artifact.path)
            result["bytes_written"] = self.artifact.bytes_written
        if self.stage is not None:
            result["stage"] = self.stage.value
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


@dataclass
class BatchReport:
    """All outcomes of one run, in the order files were listed."""
    outcomes: list[ExtractionOutcome] = field(default_factory=list)

    def _with_status(self, status: OutcomeStatus) -> list[ExtractionOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def succeeded(self) -> list[ExtractionOutcome]:
        return self._with_status(OutcomeStatus.SUCCESS)

    @property
    def skipped(self) -> list[ExtractionOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> list[ExtractionOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "files": [o.to_dict() for o in self.outcomes],
        }
