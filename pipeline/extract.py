"""
Extraction pipeline — classify, fetch, normalize, extract, write.

Per file:
    Pending → Classified → Skipped
                         → Fetching → Normalizing → Extracting → Writing → Done
    any stage            → Failed (stage recorded)

Every file ends in an ExtractionOutcome; nothing a single file does can
abort the batch. The Drive client is synchronous, so API calls and disk
writes run in worker threads; decoding runs inline.
"""

import asyncio
from typing import Any, Callable, Iterable

from googleapiclient.discovery import Resource

from adapters.buffers import normalize
from adapters.drive import fetch_content, fetch_metadata, list_files
from adapters.errors import to_fetch_failure
from adapters.services import get_drive_service
from config import Settings
from extractors.registry import FormatExtractor, get_extractor
from logging_config import log_batch_summary, log_outcome, logger
from models import (
    BatchReport,
    Category,
    DecodeFailure,
    DriveTextError,
    ExtractionOutcome,
    FileReference,
    NormalizedContent,
    OutcomeStatus,
    Stage,
    UnsupportedFormat,
    WriteFailure,
)
from workspace import OutputWriter

ServiceFactory = Callable[[], Resource]


def _to_stage_error(
    stage: Stage,
    exception: Exception,
    file_id: str,
    content: NormalizedContent | None = None,
) -> DriveTextError:
    """Convert whatever a stage raised into the error kind for that stage."""
    if isinstance(exception, DriveTextError):
        return exception

    if stage is Stage.FETCHING:
        return to_fetch_failure(exception, file_id)

    message = f"{type(exception).__name__}: {exception}"
    details: dict[str, Any] = {"file_id": file_id}

    if stage is Stage.WRITING:
        return WriteFailure(message, details=details)

    if content is not None and content.lossy:
        message += " (payload was coerced from a non-binary response)"
        details["lossy"] = True
    return DecodeFailure(message, details=details)


class ExtractionOrchestrator:
    """
    Runs files through the pipeline.

    Args:
        writer: Where artifacts go
        service_factory: Returns a Drive service for the calling thread.
            Called inside worker threads, once per API call.
        max_concurrency: Files in flight at once
    """

    def __init__(
        self,
        writer: OutputWriter,
        service_factory: ServiceFactory = get_drive_service,
        max_concurrency: int = 4,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.writer = writer
        self.service_factory = service_factory
        self.max_concurrency = max_concurrency

    def _call_drive(self, func: Callable[..., Any], *args: Any) -> Any:
        return func(self.service_factory(), *args)

    def _failed(
        self,
        ref: FileReference,
        stage: Stage,
        exception: Exception,
        category: Category | None = None,
        content: NormalizedContent | None = None,
    ) -> ExtractionOutcome:
        return ExtractionOutcome(
            source=ref,
            status=OutcomeStatus.FAILED,
            category=category,
            stage=stage,
            error=_to_stage_error(stage, exception, ref.id, content),
        )

    def _decode(self, extractor: FormatExtractor, content: NormalizedContent) -> str:
        value = content.data if extractor.takes_bytes else content.text()
        text = extractor.extract(value)
        if not isinstance(text, str):
            raise TypeError(f"{extractor.category.value} extractor returned {type(text).__name__}")
        return text

    async def extract_file(self, ref: FileReference) -> ExtractionOutcome:
        """Take one file from Pending to a terminal state. Never raises Exception."""
        outcome = await self._extract(ref)
        log_outcome(outcome)
        return outcome

    async def _extract(self, ref: FileReference) -> ExtractionOutcome:
        if not ref.name or not ref.mime_type:
            try:
                ref = await asyncio.to_thread(self._call_drive, fetch_metadata, ref.id)
            except Exception as e:
                return self._failed(ref, Stage.FETCHING, e)

        try:
            extractor = get_extractor(ref.mime_type)
        except UnsupportedFormat as e:
            return ExtractionOutcome(source=ref, status=OutcomeStatus.SKIPPED, error=e)

        category = extractor.category
        logger.debug(f"Extracting text from file {ref.name}...")

        stage = Stage.FETCHING
        content: NormalizedContent | None = None
        try:
            fetched = await asyncio.to_thread(
                self._call_drive, fetch_content, ref.id, ref.mime_type
            )

            stage = Stage.NORMALIZING
            content = await normalize(fetched.payload)

            stage = Stage.EXTRACTING
            text = self._decode(extractor, content)

            stage = Stage.WRITING
            artifact = await asyncio.to_thread(
                self.writer.write, text, ref.name, category.output_dir
            )
            if artifact.error is not None:
                raise artifact.error
        except Exception as e:
            return self._failed(ref, stage, e, category, content)

        return ExtractionOutcome(
            source=ref,
            status=OutcomeStatus.SUCCESS,
            category=category,
            text=text,
            artifact=artifact,
        )

    async def extract_by_id(self, file_id: str) -> ExtractionOutcome:
        """Extract a single file known only by ID (metadata is fetched first)."""
        return await self.extract_file(FileReference(id=file_id, name="", mime_type=""))

    async def run(self, files: Iterable[FileReference]) -> BatchReport:
        """
        Extract every file, at most max_concurrency at a time.

        Returns only once every file has reached a terminal state. Outcomes
        keep the input order. Cancelling the run cancels pending files;
        artifacts already written stay.
        """
        refs = list(files)
        if not refs:
            logger.info("No files found")
            return BatchReport()

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(ref: FileReference) -> ExtractionOutcome:
            async with semaphore:
                return await self.extract_file(ref)

        outcomes = await asyncio.gather(*(bounded(ref) for ref in refs))
        report = BatchReport(outcomes=list(outcomes))
        log_batch_summary(report)
        return report


async def run_extraction(
    settings: Settings,
    service_factory: ServiceFactory | None = None,
) -> BatchReport:
    """
    List the account and extract everything.

    Raises:
        FetchFailure: If the listing itself fails (the only batch-fatal error)
    """
    factory = service_factory or get_drive_service

    def _list() -> list[FileReference]:
        try:
            service = factory()
        except Exception as e:
            raise to_fetch_failure(e) from e
        return list_files(
            service,
            page_size=settings.page_size,
            folder_id=settings.folder_id,
            max_pages=settings.max_pages,
        )

    files = await asyncio.to_thread(_list)
    logger.info(f"Found {len(files)} files")

    orchestrator = ExtractionOrchestrator(
        OutputWriter(settings.output_dir),
        service_factory=factory,
        max_concurrency=settings.max_concurrency,
    )
    return await orchestrator.run(files)
