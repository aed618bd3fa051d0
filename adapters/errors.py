"""
Drive error conversion.

Turns googleapiclient / httplib2 / socket exceptions into FetchFailure with
a kind derived from the HTTP status. No retries: a failed call fails the file.
"""

from functools import wraps
from typing import TypeVar, Callable, ParamSpec

from models import DriveTextError, ErrorKind, FetchFailure

T = TypeVar("T")
P = ParamSpec("P")


# Statuses worth retrying by a caller that chooses to (we only flag them)
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({
    429,  # Rate limited
    500,  # Internal server error
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})


def _get_http_status(exception: Exception) -> int | None:
    """
    Extract HTTP status code from exception if available.

    Works with googleapiclient.errors.HttpError and similar.
    """
    # Check for resp.status attribute (googleapiclient.errors.HttpError)
    if hasattr(exception, "resp") and hasattr(exception.resp, "status"):
        status = exception.resp.status
        if isinstance(status, int):
            return status

    # Check for status_code attribute (requests-style)
    if hasattr(exception, "status_code"):
        status = exception.status_code
        if isinstance(status, int):
            return status

    return None


def to_fetch_failure(exception: Exception, file_id: str | None = None) -> DriveTextError:
    """Convert an exception to a FetchFailure. DriveTextErrors pass through."""
    if isinstance(exception, DriveTextError):
        return exception

    details = {"file_id": file_id} if file_id else {}
    message = str(exception) or type(exception).__name__

    status = _get_http_status(exception)
    if status is not None:
        details["status"] = status
        retryable = status in RETRYABLE_STATUS_CODES
        if status == 401:
            kind = ErrorKind.AUTH_EXPIRED
        elif status == 403:
            kind = ErrorKind.PERMISSION_DENIED
        elif status == 404:
            kind = ErrorKind.NOT_FOUND
        elif status == 429:
            kind = ErrorKind.RATE_LIMITED
        elif status >= 500:
            kind = ErrorKind.NETWORK_ERROR
        else:
            kind = ErrorKind.FETCH_FAILED
        return FetchFailure(message, kind, details=details, retryable=retryable)

    # Missing token.json, from the service factory
    if isinstance(exception, FileNotFoundError):
        return FetchFailure(message, ErrorKind.AUTH_REQUIRED, details=details)

    # Fall back to exception type (httplib2 errors subclass these or OSError)
    if isinstance(exception, (ConnectionError, TimeoutError, OSError)):
        return FetchFailure(message, ErrorKind.NETWORK_ERROR, details=details, retryable=True)

    return FetchFailure(message, details=details)


def raises_fetch_failure(func: Callable[P, T]) -> Callable[P, T]:
    """
    Decorator: re-raise anything the wrapped Drive call throws as FetchFailure.

    The wrapped function must take file_id as a keyword or second positional
    argument for it to be attached to the error details.

    Example:
        @raises_fetch_failure
        def fetch_metadata(service, file_id: str):
            return service.files().get(fileId=file_id).execute()
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except DriveTextError:
            raise
        except Exception as e:
            file_id = kwargs.get("file_id")
            if file_id is None and len(args) > 1 and isinstance(args[1], str):
                file_id = args[1]
            raise to_fetch_failure(e, file_id) from e

    return wrapper
