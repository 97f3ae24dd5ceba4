"""
Helpers for building an authenticated SheetsClient.

gspread takes care of the credentials: its authorized session refreshes the
access token before each request.
"""

from typing import Any, Mapping, Optional, Sequence

import gspread

from sheetstore.sheets.client import SheetsClient


GOOGLE_SHEETS_READ_ONLY = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
GOOGLE_SHEETS_READ_WRITE = ["https://www.googleapis.com/auth/spreadsheets"]


def service_account_client(
    filename: Optional[str] = None,
    scopes: Sequence[str] = GOOGLE_SHEETS_READ_WRITE,
) -> SheetsClient:
    """Authenticate with a service account key file.

    Args:
        filename: Path to the key file; gspread's default location is used when None
        scopes: OAuth scopes to request

    Returns:
        A SheetsClient using the service account
    """
    kwargs: dict = {"scopes": list(scopes)}
    if filename is not None:
        kwargs["filename"] = filename
    return SheetsClient(gspread.service_account(**kwargs))


def service_account_client_from_info(
    info: Mapping[str, Any],
    scopes: Sequence[str] = GOOGLE_SHEETS_READ_WRITE,
) -> SheetsClient:
    """Authenticate with the parsed contents of a service account key file."""
    return SheetsClient(gspread.service_account_from_dict(dict(info), scopes=list(scopes)))


def oauth_client(
    secret_filename: str,
    creds_filename: str,
    scopes: Sequence[str] = GOOGLE_SHEETS_READ_WRITE,
) -> SheetsClient:
    """Authenticate as a user through the OAuth2 installed-app flow.

    The first call opens a browser for consent and stores the authorized
    user credentials in ``creds_filename``; later calls reuse them.

    Args:
        secret_filename: OAuth client secret downloaded from Google Cloud Console
        creds_filename: Where the authorized user credentials are cached
        scopes: OAuth scopes to request
    """
    gc = gspread.oauth(
        scopes=list(scopes),
        credentials_filename=secret_filename,
        authorized_user_filename=creds_filename,
    )
    return SheetsClient(gc)
