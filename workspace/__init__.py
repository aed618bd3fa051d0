"""
Workspace — Output artifact management.

Writes extracted text to {base}/{category}/{name}-converted.txt.
"""

from .manager import (
    OUTPUT_SUFFIX,
    OutputWriter,
    safe_base_name,
)

__all__ = [
    "OUTPUT_SUFFIX",
    "OutputWriter",
    "safe_base_name",
]
