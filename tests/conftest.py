"""
Shared pytest fixtures for drivetext tests.

Nothing here talks to Google: Drive is a MagicMock or a FakeDriveService,
output goes to tmp_path.
"""

from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from extractors.registry import (
    FormatExtractor,
    register,
    unregister,
)
from models import Category, FetchEncoding
from workspace import OutputWriter


@pytest.fixture
def mock_service() -> MagicMock:
    """Bare MagicMock Drive service, wire it with mock_api_chain()."""
    return MagicMock()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "saved-outputs"


@pytest.fixture
def writer(output_dir: Path) -> OutputWriter:
    return OutputWriter(output_dir)


@pytest.fixture
def temporary_extractor() -> Generator[list[FormatExtractor], None, None]:
    """Register throwaway extractors for the duration of a test.

    Usage:
        temporary_extractor.append(register(FormatExtractor(...)))
    """
    registered: list[FormatExtractor] = []
    yield registered
    for extractor in registered:
        unregister(extractor.mime_type)


@pytest.fixture
def upper_case_extractor(temporary_extractor: list[FormatExtractor]) -> FormatExtractor:
    """A text/x-shout media-text extractor that upper-cases its input."""
    extractor = register(FormatExtractor(
        mime_type="text/x-shout",
        category=Category.PLAIN_TEXT,
        encoding=FetchEncoding.MEDIA_TEXT,
        extract=str.upper,
    ))
    temporary_extractor.append(extractor)
    return extractor
