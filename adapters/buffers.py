"""
Response body normalization.

A Drive response body can arrive as bytes (googleapiclient's execute()),
as a stream (an httpx response, a MediaIoBaseDownload target, a file), or
as some other value. Everything downstream wants plain bytes.

The check order is fixed and each branch is reachable on its own:
    1. binary sequence (bytes, bytearray, memoryview)
    2. stream with a collect-all operation (aread(), then read())
    3. anything else, coerced
"""

import asyncio
import inspect
from typing import Any

from models import NormalizedContent, ResponseShape

BINARY_TYPES = (bytes, bytearray, memoryview)


def _stream_reader(payload: Any) -> Any:
    """Return the payload's collect-all method, or None."""
    for name in ("aread", "read"):
        reader = getattr(payload, name, None)
        if callable(reader):
            return reader
    return None


def detect_shape(payload: Any) -> ResponseShape:
    """Classify a response body without consuming it."""
    if isinstance(payload, BINARY_TYPES):
        return ResponseShape.BINARY
    # str has no read(), but guard anyway: text is a raw value, not a stream
    if not isinstance(payload, str) and _stream_reader(payload) is not None:
        return ResponseShape.STREAM
    return ResponseShape.RAW


async def _collect_stream(payload: Any) -> bytes:
    reader = _stream_reader(payload)
    if inspect.iscoroutinefunction(reader):
        result = await reader()
    else:
        # Blocking read() (files, sockets) stays off the event loop
        result = await asyncio.to_thread(reader)
        if inspect.isawaitable(result):
            result = await result
    if isinstance(result, str):
        return result.encode("utf-8")
    if not isinstance(result, BINARY_TYPES):
        raise TypeError(f"Stream read() returned {type(result).__name__}, expected bytes")
    return bytes(result)


async def normalize(payload: Any) -> NormalizedContent:
    """
    Collapse a response body into canonical bytes.

    str is encoded as UTF-8 (exact). Other raw values go through str(), which
    is lossy for binary content: the result is flagged so a later parse
    failure can say so.

    Raises:
        TypeError: If a stream yields something other than bytes or str
    """
    shape = detect_shape(payload)

    if shape is ResponseShape.BINARY:
        return NormalizedContent(data=bytes(payload), shape=shape)

    if shape is ResponseShape.STREAM:
        return NormalizedContent(data=await _collect_stream(payload), shape=shape)

    if isinstance(payload, str):
        return NormalizedContent(data=payload.encode("utf-8"), shape=shape)

    if payload is None:
        return NormalizedContent(data=b"", shape=shape, lossy=True)

    return NormalizedContent(data=str(payload).encode("utf-8"), shape=shape, lossy=True)
