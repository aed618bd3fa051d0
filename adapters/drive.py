"""
Drive adapter — Google Drive API wrapper.

Provides file metadata, content (export or media download) and listing.
Functions take the service explicitly so the pipeline can hand each worker
thread its own connection.
"""

import re
from typing import Any, cast

from googleapiclient.discovery import Resource

from extractors.registry import get_extractor
from logging_config import log_api_call, log_api_result
from models import ErrorKind, FetchResult, FileReference, FetchFailure
from .errors import raises_fetch_failure


# Fields for file metadata — only what routing needs
FILE_METADATA_FIELDS = "id,name,mimeType,size"

# Fields for listing
LIST_FIELDS = "nextPageToken,files(id,name,mimeType)"

GOOGLE_FOLDER_MIME = "application/vnd.google-apps.folder"


def is_google_workspace_file(mime_type: str) -> bool:
    """Check if MIME type is a Google Workspace native format."""
    return mime_type.startswith("application/vnd.google-apps.")


@raises_fetch_failure
def fetch_metadata(service: Resource, file_id: str) -> FileReference:
    """
    Get name and MIME type for a file.

    Raises:
        FetchFailure: On API failure
    """
    log_api_call("drive", "files.get", fileId=file_id, fields=FILE_METADATA_FIELDS)
    result = (
        service.files()
        .get(fileId=file_id, fields=FILE_METADATA_FIELDS, supportsAllDrives=True)
        .execute()
    )
    log_api_result("drive", "files.get")
    return FileReference.from_api(cast(dict[str, Any], result))


@raises_fetch_failure
def fetch_content(service: Resource, file_id: str, mime_type: str) -> FetchResult:
    """
    Fetch a file's content in the shape its extractor expects.

    Native Docs/Sheets/Slides are exported server-side (text/plain or
    text/csv). Everything else is a raw media download.

    Raises:
        UnsupportedFormat: If no extractor is registered for mime_type
        FetchFailure: On API failure
    """
    extractor = get_extractor(mime_type)

    if extractor.export_mime is not None:
        log_api_call("drive", "files.export", fileId=file_id, mimeType=extractor.export_mime)
        payload = (
            service.files()
            .export(fileId=file_id, mimeType=extractor.export_mime)
            .execute()
        )
    else:
        log_api_call("drive", "files.get_media", fileId=file_id)
        payload = (
            service.files()
            .get_media(fileId=file_id, supportsAllDrives=True)
            .execute()
        )

    log_api_result("drive", "files.export" if extractor.export_mime else "files.get_media")
    return FetchResult(
        encoding=extractor.encoding,
        payload=payload,
        export_mime=extractor.export_mime,
    )


_DRIVE_ID_RE = re.compile(r'^[A-Za-z0-9_\-]+$')


def _validate_drive_id(drive_id: str, param_name: str = "folder_id") -> None:
    """Raise FetchFailure if drive_id contains characters outside the Drive ID alphabet."""
    if not _DRIVE_ID_RE.match(drive_id):
        raise FetchFailure(
            f"Invalid {param_name}: must contain only alphanumeric characters, hyphens, and underscores",
            ErrorKind.FETCH_FAILED,
            details={param_name: drive_id},
        )


@raises_fetch_failure
def list_files(
    service: Resource,
    page_size: int = 100,
    folder_id: str | None = None,
    max_pages: int | None = None,
) -> list[FileReference]:
    """
    List files in the account (or directly inside one folder).

    Follows nextPageToken until exhausted or max_pages is reached. Trashed
    items and folders are left out. Does not recurse into folders.

    Raises:
        FetchFailure: On API failure or invalid folder_id
    """
    query = "trashed = false"
    if folder_id is not None:
        _validate_drive_id(folder_id)
        query = f"'{folder_id}' in parents and {query}"

    files: list[FileReference] = []
    page_token: str | None = None
    pages_fetched = 0

    while max_pages is None or pages_fetched < max_pages:
        kwargs: dict[str, Any] = dict(
            q=query,
            pageSize=page_size,
            fields=LIST_FIELDS,
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )
        if page_token:
            kwargs["pageToken"] = page_token

        log_api_call("drive", "files.list", q=query, pageToken=page_token)
        response = service.files().list(**kwargs).execute()
        pages_fetched += 1

        for item in response.get("files", []):
            if item.get("mimeType") == GOOGLE_FOLDER_MIME:
                continue
            files.append(FileReference.from_api(item))

        page_token = response.get("nextPageToken")
        if not page_token:
            break

    log_api_result("drive", "files.list", len(files))
    return files
