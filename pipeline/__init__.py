"""
Pipeline — runs Drive files through fetch → normalize → extract → write.

cli.py provides the command-line entry point that calls into this.
"""

from .extract import ExtractionOrchestrator, run_extraction

__all__ = ["ExtractionOrchestrator", "run_extraction"]
