"""
Row store: a sheet used as a table of records.

The first row of the sheet holds the column names. Row 2 onwards holds one
record per row. Column A is reserved for the row index column, a ``=ROW()``
formula written with every record, so configured columns start at B.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from sheetstore.exceptions import ConfigurationError
from sheetstore.sheets.client import SheetsClient
from sheetstore.store.models import ROW_IDX_COL
from sheetstore.store.ranges import (
    DEFAULT_ROW_HEADER_RANGE,
    MAX_COLUMN,
    generate_column_mapping,
    qualify,
)
from sheetstore.store.statements import (
    CountStmt,
    DeleteStmt,
    InsertStmt,
    SelectStmt,
    UpdateStmt,
)

logger = logging.getLogger(__name__)


@dataclass
class RowStoreConfig:
    """Column layout of a row store.

    Attributes:
        columns: Column names, in the order they appear in the sheet.
            Changing the order here without changing the sheet mixes up data.
        columns_with_formula: Columns whose values are Google Sheets formulas.
            Values of these columns must be strings and are written unescaped.
    """
    columns: List[str]
    columns_with_formula: List[str] = field(default_factory=list)

    def validate(self) -> None:
        """Check the column layout.

        Raises:
            ConfigurationError: If there are no columns, too many columns, or duplicates
        """
        if not self.columns:
            raise ConfigurationError("columns must have at least one column")

        # One column is taken by the row index column.
        max_user_columns = MAX_COLUMN - 1
        if len(self.columns) > max_user_columns:
            raise ConfigurationError(f"you can only have up to {max_user_columns} columns")

        if len(set(self.columns)) != len(self.columns):
            raise ConfigurationError(f"column names must be unique: {self.columns}")


def inject_row_index_col(config: RowStoreConfig) -> RowStoreConfig:
    """Return a copy of ``config`` with the row index column prepended."""
    return RowStoreConfig(
        columns=[ROW_IDX_COL, *config.columns],
        columns_with_formula=list(config.columns_with_formula),
    )


class RowStore:
    """A Google Sheet used as a table, queried with SQL-like statements.

    Statements are created by :meth:`select`, :meth:`insert`, :meth:`update`,
    :meth:`delete` and :meth:`count`; nothing is sent until their ``exec()``
    is called.

    Usage::

        config = RowStoreConfig(columns=["name", "age"])
        store = RowStore.create(client, spreadsheet_id, "people", config)
        store.insert({"name": "Alice", "age": 30}).exec()
        adults = store.select("name").where("age >= ?", 18).exec()

    Attributes:
        client: SheetsClient used for every request
        spreadsheet_id: Target spreadsheet
        sheet_name: Target sheet (tab)
        config: Column layout, including the row index column
        cols_mapping: Column name -> column letter and index
        cols_with_formula: Columns holding formulas
    """

    def __init__(
        self,
        client: SheetsClient,
        spreadsheet_id: str,
        sheet_name: str,
        config: RowStoreConfig
    ) -> None:
        """Initialize a RowStore without touching the sheet.

        ``config`` must already contain the row index column; use
        :meth:`create` to build a store from a user configuration.
        """
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.config = config
        self.cols_mapping = generate_column_mapping(config.columns)
        self.cols_with_formula = frozenset(config.columns_with_formula)

    @classmethod
    def create(
        cls,
        client: SheetsClient,
        spreadsheet_id: str,
        sheet_name: str,
        config: RowStoreConfig
    ) -> "RowStore":
        """Create a row store, creating the sheet if needed and writing its header row.

        Args:
            client: Authenticated SheetsClient
            spreadsheet_id: ID of an existing spreadsheet
            sheet_name: Sheet (tab) to store rows in
            config: Column layout

        Returns:
            The ready-to-use RowStore

        Raises:
            ConfigurationError: If the configuration is invalid
            SheetsAPIError: If an API call fails
        """
        config.validate()
        config = inject_row_index_col(config)

        if sheet_name not in client.get_sheet_name_to_id(spreadsheet_id):
            client.create_sheet(spreadsheet_id, sheet_name)

        store = cls(client, spreadsheet_id, sheet_name, config)
        store.ensure_headers()
        return store

    @property
    def columns(self) -> List[str]:
        return self.config.columns

    def ensure_headers(self) -> None:
        """Clear the header row and write the configured column names into it."""
        header_range = qualify(self.sheet_name, DEFAULT_ROW_HEADER_RANGE)
        self.client.clear(self.spreadsheet_id, [header_range])
        self.client.update_rows(self.spreadsheet_id, header_range, [list(self.config.columns)])
        logger.debug("Wrote header row of %s: %s", self.sheet_name, self.config.columns)

    def select(self, *columns: str) -> SelectStmt:
        """Prepare a select; with no columns, all configured columns are returned."""
        return SelectStmt(self, columns)

    def insert(self, *rows: Any) -> InsertStmt:
        """Prepare an insert of one or more records (mappings, dataclasses or objects)."""
        return InsertStmt(self, rows)

    def update(self, col_to_value: Mapping[str, Any]) -> UpdateStmt:
        """Prepare an update setting each column in ``col_to_value`` to its value.

        An empty ``col_to_value`` is rejected when ``exec()`` is called.
        """
        return UpdateStmt(self, col_to_value)

    def delete(self) -> DeleteStmt:
        return DeleteStmt(self)

    def count(self) -> CountStmt:
        return CountStmt(self)

    def __repr__(self) -> str:
        return (
            f"RowStore(spreadsheet_id={self.spreadsheet_id!r}, "
            f"sheet_name={self.sheet_name!r}, columns={self.config.columns!r})"
        )
