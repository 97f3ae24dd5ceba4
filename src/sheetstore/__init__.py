"""
sheetstore - Use a Google Sheet as a lightweight table or key-value store.

Statements written against logical column names are translated into Google
Visualization API queries and Sheets API range writes.

Usage:
    >>> import sheetstore
    >>> client = sheetstore.service_account_client("service_account.json")
    >>> config = sheetstore.RowStoreConfig(columns=["name", "age"])
    >>> store = sheetstore.RowStore.create(client, spreadsheet_id, "people", config)
    >>> store.insert({"name": "Alice", "age": 30}).exec()
    >>> store.select("name").where("age > ?", 18).exec()
    [{'name': 'Alice'}]

Key components:
- RowStore: SQL-like Select/Insert/Update/Delete/Count statements over a sheet
- KVStore: get/set/delete over a two-column sheet, with overwrite or append-only history
- SheetsClient: gspread-based wrapper around the Sheets API and the query endpoint
"""

from .auth import (
    GOOGLE_SHEETS_READ_ONLY,
    GOOGLE_SHEETS_READ_WRITE,
    oauth_client,
    service_account_client,
    service_account_client_from_info,
)
from .codec import BasicCodec, Codec
from .exceptions import *
from .sheets import SheetsClient
from .store import (
    ColumnOrderBy,
    KVMode,
    KVStore,
    KVStoreConfig,
    OrderBy,
    RowStore,
    RowStoreConfig,
)

# Version
__version__ = "0.1.0"

__all__ = [
    "RowStore",
    "RowStoreConfig",
    "KVStore",
    "KVStoreConfig",
    "KVMode",
    "OrderBy",
    "ColumnOrderBy",
    "SheetsClient",
    "Codec",
    "BasicCodec",
    "GOOGLE_SHEETS_READ_ONLY",
    "GOOGLE_SHEETS_READ_WRITE",
    "service_account_client",
    "service_account_client_from_info",
    "oauth_client",
    "ConfigurationError",
    "QueryBindingError",
    "UnsafeIntegerError",
    "UnexpectedResultError",
    "SheetsAPIError",
    "KeyNotFoundError",
]
