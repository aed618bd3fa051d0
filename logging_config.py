"""
Logging for drivetext.

One package logger, "drivetext", writing to stderr (stdout carries the JSON
report). Nothing is configured on import; cli.py calls configure_logging().

Each file produces exactly one outcome line, emitted by log_outcome():
    INFO     Saved <name> to <path>
    WARNING  Skipping file <name> because it is not a supported file type (<mime>)
    ERROR    Error extracting text from <name> (<stage>): <message>

Drive calls are traced at DEBUG. Extractors never log.
"""

import logging
import sys
from typing import TextIO

from models import BatchReport, ExtractionOutcome, OutcomeStatus

logger = logging.getLogger("drivetext")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """
    Set the package log level and attach a handler (once).

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        stream: Where to write. Defaults to stderr.
    """
    logger.setLevel(getattr(logging, level.upper()))

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)


def log_api_call(service: str, method: str, **params: object) -> None:
    """Trace a Drive call with its non-None parameters."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.debug(f"API: {service}.{method}({param_str})")


def log_api_result(service: str, method: str, result_count: int | None = None) -> None:
    if result_count is not None:
        logger.debug(f"API: {service}.{method} returned {result_count} results")
    else:
        logger.debug(f"API: {service}.{method} completed")


def log_outcome(outcome: ExtractionOutcome) -> None:
    """Emit the single line for a file that reached a terminal state."""
    source = outcome.source
    name = source.name or source.id

    if outcome.status is OutcomeStatus.SUCCESS:
        path = outcome.artifact.path if outcome.artifact is not None else "?"
        logger.info(f"Saved {name} to {path}")
    elif outcome.status is OutcomeStatus.SKIPPED:
        logger.warning(
            f"Skipping file {name} because it is not a supported file type ({source.mime_type})"
        )
    else:
        stage = outcome.stage.value if outcome.stage is not None else "unknown"
        message = outcome.error.message if outcome.error is not None else "no details"
        logger.error(f"Error extracting text from {name} ({stage}): {message}")


def log_batch_summary(report: BatchReport) -> None:
    logger.info(
        f"Finished {len(report.outcomes)} files: {len(report.succeeded)} saved, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )
