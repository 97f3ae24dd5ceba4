"""
Google Sheets transport model classes.

This module provides the value objects exchanged with the Sheets API wrapper:
- A1Range: A parsed A1 notation range, optionally qualified by a sheet name
- InsertRowsResult / UpdateRowsResult: Summaries returned by write calls
- BatchUpdateRowsRequest: One range/values pair of a batched write
- QueryRowsResult: Typed rows returned by a visualization query
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


MAJOR_DIMENSION_ROWS = "ROWS"
VALUE_INPUT_USER_ENTERED = "USER_ENTERED"
RESPONSE_VALUE_RENDER_FORMATTED = "FORMATTED_VALUE"
QUERY_ROWS_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{}/gviz/tq"


class AppendMode(Enum):
    """How ``values:append`` places new rows after the detected table."""
    INSERT = "INSERT_ROWS"
    OVERWRITE = "OVERWRITE"


class A1Range:
    """Represents an A1 notation range such as ``Sheet1!A1:B2``.

    The sheet qualifier is split off at the first ``!`` and the cells at the
    first ``:``. A range without a qualifier has an empty ``sheet_name``; a
    single cell has ``from_cell == to_cell``.

    Attributes:
        original: The unparsed notation, returned by ``str()``
        sheet_name: Sheet qualifier, or "" when absent
        from_cell: First cell of the range
        to_cell: Last cell of the range
    """

    def __init__(self, notation: str) -> None:
        self.original = notation

        qualifier, sep, cells = notation.partition("!")
        if not sep:
            qualifier, cells = "", notation

        from_cell, sep, to_cell = cells.partition(":")
        if not sep:
            to_cell = from_cell

        self.sheet_name = qualifier
        self.from_cell = from_cell
        self.to_cell = to_cell

    def __str__(self) -> str:
        return self.original

    def __repr__(self) -> str:
        return f"A1Range({self.original!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, A1Range):
            return NotImplemented
        return self.original == other.original


@dataclass
class InsertRowsResult:
    """Summary of a ``values:append`` call.

    Attributes:
        updated_range: The range the new rows landed in
        updated_rows: Number of rows written
        updated_columns: Number of columns written
        updated_cells: Number of cells written
        inserted_values: Values as rendered by the sheet after the write
    """
    updated_range: A1Range
    updated_rows: int = 0
    updated_columns: int = 0
    updated_cells: int = 0
    inserted_values: List[List[Any]] = field(default_factory=list)


@dataclass
class UpdateRowsResult:
    """Summary of a ``values:update`` call or one response of a batch update."""
    updated_range: A1Range
    updated_rows: int = 0
    updated_columns: int = 0
    updated_cells: int = 0
    updated_values: List[List[Any]] = field(default_factory=list)


@dataclass
class BatchUpdateRowsRequest:
    """One target of a batched write.

    Attributes:
        a1_range: Sheet-qualified A1 range (e.g., "Sheet1!B2")
        values: 2D list of values to write into the range
    """
    a1_range: str
    values: List[List[Any]]


@dataclass
class QueryRowsResult:
    """Rows returned by a visualization query, one inner list per row."""
    rows: List[List[Any]] = field(default_factory=list)
