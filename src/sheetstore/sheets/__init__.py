"""
Google Sheets transport module.

This module wraps the Google Sheets API (via gspread) with the operations
the row store needs, and the value objects those operations exchange.
"""

from sheetstore.sheets.client import SheetsClient
from sheetstore.sheets.model import (
    A1Range,
    AppendMode,
    BatchUpdateRowsRequest,
    InsertRowsResult,
    QueryRowsResult,
    UpdateRowsResult,
)

__all__ = [
    "SheetsClient",
    "A1Range",
    "AppendMode",
    "BatchUpdateRowsRequest",
    "InsertRowsResult",
    "QueryRowsResult",
    "UpdateRowsResult",
]
