#!/usr/bin/env python3
"""
OAuth Authentication for drivetext.

Reads OAuth client secrets from credentials.json in the repo root and stores
the user's token in token.json next to it.

Usage:
    python -m auth                    # Auto mode (opens browser)
    python -m auth --manual           # Manual mode (copy-paste URL)
    python -m auth --code CODE        # Non-interactive, code or redirect URL

Prerequisites:
    - credentials.json in repo root (from GCP Console, "Desktop app" client)
"""

import argparse
import os
import sys
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from logging_config import logger
from oauth_config import (
    TOKEN_FILE,
    SCOPES,
    OAUTH_PORT,
    LOCAL_CREDENTIALS_FILE,
)


def load_credentials(
    token_path: Path = TOKEN_FILE,
    scopes: list[str] | None = None,
) -> Credentials | None:
    """
    Load stored credentials, refreshing them if expired.

    Returns None if there is no token, or it can't be used or refreshed.
    A refreshed token is written back to token_path.
    """
    if not token_path.exists():
        return None

    try:
        creds = Credentials.from_authorized_user_file(str(token_path), scopes or SCOPES)
    except ValueError as e:
        logger.warning(f"Ignoring unreadable token file {token_path}: {e}")
        return None

    if creds.valid:
        return creds

    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as e:
            logger.warning(f"Token refresh failed: {e}")
            return None
        token_path.write_text(creds.to_json())
        logger.info("Refreshed expired token")
        return creds

    return None


def _extract_code(code_or_url: str) -> str:
    """Accept either a bare authorization code or the full redirect URL."""
    code_or_url = code_or_url.strip()
    if code_or_url.startswith("http"):
        query = parse_qs(urlparse(code_or_url).query)
        if "code" not in query:
            raise ValueError("Redirect URL has no 'code' parameter")
        return query["code"][0]
    return code_or_url


def authenticate(
    credentials_path: Path = LOCAL_CREDENTIALS_FILE,
    token_path: Path = TOKEN_FILE,
    manual_mode: bool = False,
    code: str | None = None,
    port: int = OAUTH_PORT,
) -> Credentials:
    """
    Run the installed-app OAuth flow and store the token.

    Auto mode starts a localhost receiver and opens the browser.
    Manual mode prints the URL and reads the code (or redirect URL) from
    stdin, or from `code` when given.
    """
    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), SCOPES)

    if manual_mode:
        flow.redirect_uri = f"http://localhost:{port}/"
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        if code is None:
            print("Authorize this app by visiting this url:")
            print(auth_url)
            code = input("Enter code (or the full redirect URL): ")
        flow.fetch_token(code=_extract_code(code))
        creds = flow.credentials
    else:
        creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")

    token_path.write_text(creds.to_json())
    return creds


def _is_interactive() -> bool:
    """Check if we're running in an interactive terminal."""
    return sys.stdin.isatty() and bool(os.environ.get("DISPLAY", os.environ.get("WAYLAND_DISPLAY", "")))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="OAuth authentication for drivetext"
    )
    parser.add_argument(
        '--manual',
        action='store_true',
        help='Manual mode: copy-paste OAuth flow (for remote/SSH)'
    )
    parser.add_argument(
        '--code',
        type=str,
        help='Authorization code or redirect URL (non-interactive)'
    )

    args = parser.parse_args()

    if not LOCAL_CREDENTIALS_FILE.exists():
        print(f"Error: {LOCAL_CREDENTIALS_FILE} not found")
        print("Download an OAuth client (Desktop app) from the GCP Console.")
        sys.exit(1)

    # Default to manual mode if no display available
    manual = args.manual or bool(args.code)
    if not manual and not _is_interactive():
        print("No display detected — using manual mode.")
        manual = True

    try:
        authenticate(manual_mode=manual, code=args.code)
        print()
        print(f"Authentication complete. {TOKEN_FILE} created.")
    except KeyboardInterrupt:
        print("\n\nAuthentication cancelled")
        sys.exit(1)
    except Exception as e:
        print(f"\nAuthentication failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
