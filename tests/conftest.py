"""Shared pytest configuration and fixtures for sheetstore tests."""

from unittest.mock import Mock

import pytest
from gspread.exceptions import APIError

from sheetstore.sheets.client import SheetsClient
from sheetstore.sheets.model import QueryRowsResult
from sheetstore.store.row import RowStore, RowStoreConfig, inject_row_index_col


SPREADSHEET_ID = "sheet_id"
SHEET_NAME = "sheet_name"


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. live Google Sheets)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test: pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def make_api_error():
    """Build a gspread APIError carrying the given code and message."""
    def _make(code: int, message: str, status: str = "INVALID_ARGUMENT") -> APIError:
        mock_response = Mock()
        mock_response.json.return_value = {
            "error": {"code": code, "message": message, "status": status}
        }
        return APIError(mock_response)
    return _make


@pytest.fixture
def sheets_client() -> Mock:
    client = Mock(spec=SheetsClient)
    client.query_rows.return_value = QueryRowsResult()
    return client


@pytest.fixture
def make_store(sheets_client):
    """Build a RowStore over a mocked client, without any setup calls.

    With the default columns the mapping is ``_rid -> A, col1 -> B, col2 -> C``.
    """
    def _make(columns=("col1", "col2"), columns_with_formula=()) -> RowStore:
        config = inject_row_index_col(
            RowStoreConfig(columns=list(columns), columns_with_formula=list(columns_with_formula))
        )
        return RowStore(sheets_client, SPREADSHEET_ID, SHEET_NAME, config)
    return _make
