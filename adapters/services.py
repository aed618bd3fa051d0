"""
Google API service initialization.

Loads token.json, builds the Drive v3 service object.

httplib2 connections are not thread-safe (shared connections corrupt SSL
state under concurrency), and the pipeline calls Drive from worker threads.
So the cached service is per thread, not per process.

All services use a 60-second timeout to prevent indefinite hangs
when Google APIs are slow or network connections stall.
"""

import threading

import google_auth_httplib2
import httplib2

__all__ = [
    "get_drive_service",
    "build_drive_service",
    "clear_service_cache",
]

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build, Resource

from auth import load_credentials
from oauth_config import TOKEN_FILE

# Default timeout for all Google API calls (seconds)
API_TIMEOUT = 60

_local = threading.local()


def _get_credentials() -> Credentials:
    """Load OAuth credentials from token.json."""
    creds = load_credentials()
    if creds is None:
        raise FileNotFoundError(
            f"{TOKEN_FILE} not found or invalid. Run: python -m auth"
        )
    return creds


def _get_authorized_http(creds: Credentials) -> google_auth_httplib2.AuthorizedHttp:
    """Create authorized HTTP client with timeout."""
    http = httplib2.Http(timeout=API_TIMEOUT)
    return google_auth_httplib2.AuthorizedHttp(creds, http=http)


def build_drive_service() -> Resource:
    """Build a fresh Drive service with its own HTTP connection. NOT cached."""
    creds = _get_credentials()
    return build("drive", "v3", http=_get_authorized_http(creds), cache_discovery=False)


def get_drive_service() -> Resource:
    """Get authenticated Google Drive API service (cached per thread)."""
    service = getattr(_local, "drive", None)
    if service is None:
        service = build_drive_service()
        _local.drive = service
    return service


def clear_service_cache() -> None:
    """Drop the calling thread's cached service. Useful for testing or after re-auth."""
    _local.__dict__.pop("drive", None)
