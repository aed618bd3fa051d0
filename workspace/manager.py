"""
Workspace Manager — Writes extracted text to disk.

Layout under the base directory (default ./saved-outputs):
    {category-dir}/{base-name}-converted.txt

One file per source document, overwritten on every run. Paths depend only
on (category, source name), never on time or file ID.
"""

import re
from pathlib import Path

from logging_config import logger
from models import OutputArtifact, WriteFailure

OUTPUT_SUFFIX = "-converted.txt"

# UTF-8 bytes; leaves room for the suffix within the usual 255-byte filename limit
MAX_BASE_NAME_BYTES = 200

# Path separators, NUL, and characters Windows refuses in filenames
_UNSAFE_CHARS = re.compile(r'[\x00-\x1f/\\<>:"|?*]')


def safe_base_name(name: str) -> str:
    """
    Derive a filesystem-safe base name from a Drive display name.

    - Replaces path separators and reserved characters with "_"
    - Strips the last extension ("Report.docx" -> "Report")
    - Trims trailing dots and spaces
    - Truncates to MAX_BASE_NAME_BYTES of UTF-8, never splitting a character

    Never raises. Names that end up empty, "." or ".." become "untitled".

    Examples:
        "Report.docx" -> "Report"
        "Q1/Q2 plan.pdf" -> "Q1_Q2 plan"
        "archive.tar.gz" -> "archive.tar"
        ".bashrc" -> ".bashrc"
    """
    cleaned = _UNSAFE_CHARS.sub("_", name or "")

    # Leading-dot names (".bashrc") have no extension to strip
    stem, dot, _ = cleaned.rpartition(".")
    if dot and stem.strip("."):
        cleaned = stem

    cleaned = cleaned.strip()
    cleaned = cleaned.encode("utf-8")[:MAX_BASE_NAME_BYTES].decode("utf-8", errors="ignore")
    cleaned = cleaned.rstrip(". ")

    if cleaned in ("", ".", ".."):
        return "untitled"
    return cleaned


class OutputWriter:
    """
    Writes artifacts under an explicit base directory.

    Two writers with different base directories never touch each other's
    files, so runs can be sandboxed (tests use tmp_path).
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def output_path(self, source_name: str, category_dir: str) -> Path:
        """Destination path for a source file. Pure: creates nothing."""
        return self.base_dir / category_dir / f"{safe_base_name(source_name)}{OUTPUT_SUFFIX}"

    def write(self, text: str, source_name: str, category_dir: str) -> OutputArtifact:
        """
        Write text to its artifact path, replacing any previous version.

        Creates the category directory if needed. Writes UTF-8 bytes as-is
        (no newline translation), so reading the file back yields text
        exactly.

        Returns:
            OutputArtifact. On failure its error is a WriteFailure; nothing
            is raised.
        """
        path = self.output_path(source_name, category_dir)
        try:
            data = text.encode("utf-8")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, UnicodeError) as e:
            logger.debug(f"Write to {path} failed: {e}")
            return OutputArtifact(
                path=path,
                error=WriteFailure(
                    f"Could not write {path}: {e}",
                    details={"path": str(path)},
                ),
            )

        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return OutputArtifact(path=path, bytes_written=len(data))
