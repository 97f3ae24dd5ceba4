"""
Row store statements: Select, Insert, Update, Delete and Count.

Each statement is a one-shot builder: configure it with chained setters,
then call ``exec()``. Every statement that reads rows restricts itself to
rows whose row index column is non-empty, so rows that were never written
(or were deleted) inside the fixed table range are never matched.

Update and Delete first look up the matching row indices with a query and
then issue a single batched write or clear call. The two steps are not
atomic with respect to other writers.
"""

import dataclasses
import logging
import math
from typing import (
    AbstractSet,
    Any,
    Collection,
    Dict,
    List,
    Mapping,
    Protocol,
    Sequence,
    Tuple,
)

import pandas as pd

from sheetstore.exceptions import ConfigurationError, UnexpectedResultError
from sheetstore.sheets.client import SheetsClient
from sheetstore.sheets.model import BatchUpdateRowsRequest
from sheetstore.store.models import (
    ROW_IDX_COL,
    ROW_IDX_FORMULA,
    ROW_WHERE_EMPTY_CONDITION,
    ColumnOrderBy,
    row_where_non_empty_condition,
)
from sheetstore.store.query import QueryBuilder
from sheetstore.store.ranges import (
    DEFAULT_ROW_FULL_TABLE_RANGE,
    ColumnMapping,
    qualify,
    row_range,
)
from sheetstore.store.values import check_safe_integer, escape_column_value

logger = logging.getLogger(__name__)


class RowStore(Protocol):
    """What a statement needs from the store it runs against."""

    cols_mapping: ColumnMapping
    cols_with_formula: Collection[str]
    client: SheetsClient
    spreadsheet_id: str
    sheet_name: str

    @property
    def columns(self) -> List[str]:
        """Configured columns, including the row index column."""
        ...


def rid_where_interceptor(where: str) -> str:
    """Restrict a where condition to rows that have been written."""
    if where:
        return row_where_non_empty_condition(where)
    return ROW_WHERE_EMPTY_CONDITION


class SelectStmt:
    """Selects rows, like a SQL ``SELECT``.

    Usage::

        rows = store.select("name", "age").where("age > ?", 18).limit(10).exec()
    """

    def __init__(self, store: RowStore, columns: Sequence[str]) -> None:
        if not columns:
            columns = store.columns
        self.store = store
        self.columns = list(columns)
        self.query_builder = QueryBuilder(
            store.cols_mapping.name_map(),
            rid_where_interceptor,
            self.columns,
        )

    def where(self, condition: str, *args: Any) -> "SelectStmt":
        """Filter rows; ``?`` placeholders are bound to ``args`` in order."""
        self.query_builder.where(condition, *args)
        return self

    def order_by(self, ordering: Sequence[ColumnOrderBy]) -> "SelectStmt":
        self.query_builder.order_by(ordering)
        return self

    def limit(self, limit: int) -> "SelectStmt":
        self.query_builder.limit(limit)
        return self

    def offset(self, offset: int) -> "SelectStmt":
        self.query_builder.offset(offset)
        return self

    def exec(self) -> List[Dict[str, Any]]:
        """Run the query.

        Returns:
            One dict per row, keyed by the selected column names. The row
            index column is never included.

        Raises:
            QueryBindingError: If the where arguments cannot be bound
            SheetsAPIError: If the query request fails
        """
        query = self.query_builder.generate()
        result = self.store.client.query_rows(
            self.store.spreadsheet_id,
            self.store.sheet_name,
            query,
            True,
        )
        return [self._to_record(row) for row in result.rows]

    def exec_dataframe(self) -> pd.DataFrame:
        """Run the query and return the rows as a DataFrame."""
        visible = [col for col in self.columns if col != ROW_IDX_COL]
        return pd.DataFrame(self.exec(), columns=visible)

    def _to_record(self, row: List[Any]) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for idx, col in enumerate(self.columns):
            if col == ROW_IDX_COL:
                continue
            record[col] = row[idx] if idx < len(row) else None
        return record


class InsertStmt:
    """Appends rows, like a SQL ``INSERT``.

    Rows can be mappings, dataclass instances or plain objects. Fields that
    are not configured columns are ignored; columns without a field are left
    empty.
    """

    def __init__(self, store: RowStore, rows: Sequence[Any]) -> None:
        self.store = store
        self.rows = list(rows)

    def exec(self) -> None:
        """Write all rows with a single append call; no-op for an empty row list.

        Raises:
            TypeError: If a row is not a record, or a formula column gets a non-string
            UnsafeIntegerError: If a number would lose precision
            SheetsAPIError: If the append request fails
        """
        if not self.rows:
            return

        converted = [self._convert_row(row) for row in self.rows]
        self.store.client.overwrite_rows(
            self.store.spreadsheet_id,
            qualify(self.store.sheet_name, DEFAULT_ROW_FULL_TABLE_RANGE),
            converted,
        )
        logger.debug("Inserted %d row(s) into %s", len(converted), self.store.sheet_name)

    def _convert_row(self, row: Any) -> List[Any]:
        mapping = self.store.cols_mapping
        result: List[Any] = [None] * len(mapping)
        result[0] = ROW_IDX_FORMULA

        for col, value in record_fields(row).items():
            if col == ROW_IDX_COL or not mapping.has_col(col):
                continue

            escaped = escape_column_value(col, value, self.store.cols_with_formula)
            check_safe_integer(escaped)
            result[mapping.col_idx(col).idx] = escaped

        return result


def record_fields(row: Any) -> Dict[str, Any]:
    """Extract field name -> value from a record-shaped value.

    Mappings are copied. Dataclass and namedtuple instances contribute their fields. Other
    objects contribute their instance attributes (including assigned
    ``__slots__``), then non-callable public class attributes along the
    MRO; a name found in a more specific scope is not overwritten.

    Raises:
        TypeError: If ``row`` is None, a class, a scalar, a string, a sequence or a set
    """
    if row is None:
        raise TypeError("row type must not be None")
    if isinstance(row, Mapping):
        return dict(row)
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        return {f.name: getattr(row, f.name) for f in dataclasses.fields(row)}
    if isinstance(row, tuple) and hasattr(row, "_asdict"):
        return dict(row._asdict())

    slot_names = _slot_names(type(row))
    if (
        isinstance(row, (type, str, bytes, bytearray, Sequence, AbstractSet))
        or not (hasattr(row, "__dict__") or slot_names)
    ):
        raise TypeError(f"row type must be a mapping or an object, got {type(row).__name__}")

    fields: Dict[str, Any] = {}
    for name, value in getattr(row, "__dict__", {}).items():
        if not callable(value):
            fields[name] = value

    for name in slot_names:
        # Unassigned slots raise AttributeError on access.
        if name in fields or not hasattr(row, name):
            continue
        value = getattr(row, name)
        if not callable(value):
            fields[name] = value

    for klass in type(row).__mro__:
        if klass is object:
            continue
        for name in vars(klass):
            if name in fields or name in slot_names or name.startswith("__"):
                continue
            value = getattr(row, name)
            if not callable(value):
                fields[name] = value

    return fields


def _slot_names(cls: type) -> List[str]:
    """Names declared in ``__slots__`` along the MRO, most specific first."""
    names: List[str] = []
    for klass in cls.__mro__:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not name.startswith("__") and name not in names:
                names.append(name)
    return names


class UpdateStmt:
    """Updates column values of matching rows, like a SQL ``UPDATE``.

    Without a where condition every written row is updated.
    """

    def __init__(self, store: RowStore, col_to_value: Mapping[str, Any]) -> None:
        self.store = store
        self.col_to_value = dict(col_to_value)
        self.query_builder = QueryBuilder(
            store.cols_mapping.name_map(),
            rid_where_interceptor,
            [ROW_IDX_COL],
        )

    def where(self, condition: str, *args: Any) -> "UpdateStmt":
        self.query_builder.where(condition, *args)
        return self

    def exec(self) -> None:
        """Look up matching rows and write the new values in one batch call.

        Raises:
            ConfigurationError: If no column is updated or a column is unknown
            UnexpectedResultError: If the row index lookup returns an unexpected shape
            SheetsAPIError: If a request fails
        """
        if not self.col_to_value:
            raise ConfigurationError("empty col_to_value, at least one column must be updated")

        # The payload is fully validated before the row lookup is sent.
        cells = self._escaped_cells()

        indices = get_row_indices(self.store, self.query_builder.generate())
        if not indices:
            return

        requests = self._batch_update_requests(cells, indices)
        self.store.client.batch_update_rows(self.store.spreadsheet_id, requests)
        logger.debug("Updated %d row(s) in %s", len(indices), self.store.sheet_name)

    def _escaped_cells(self) -> List[Tuple[str, Any]]:
        """Return (column letter, escaped value) pairs in payload order.

        Raises:
            ConfigurationError: If a column is unknown
            TypeError: If a formula column gets a non-string value
            UnsafeIntegerError: If a number would lose precision
        """
        mapping = self.store.cols_mapping
        cells: List[Tuple[str, Any]] = []

        for col, value in self.col_to_value.items():
            if col == ROW_IDX_COL or not mapping.has_col(col):
                raise ConfigurationError(f"failed to update, unknown column name provided: {col}")

            escaped = escape_column_value(col, value, self.store.cols_with_formula)
            check_safe_integer(escaped)
            cells.append((mapping.col_idx(col).name, escaped))

        return cells

    def _batch_update_requests(
        self,
        cells: List[Tuple[str, Any]],
        row_indices: List[int]
    ) -> List[BatchUpdateRowsRequest]:
        return [
            BatchUpdateRowsRequest(
                a1_range=qualify(self.store.sheet_name, f"{col_name}{row_idx}"),
                values=[[escaped]],
            )
            for col_name, escaped in cells
            for row_idx in row_indices
        ]


class DeleteStmt:
    """Clears matching rows, like a SQL ``DELETE``.

    Deleted rows are cleared, not removed: later rows keep their positions
    and the cleared rows can be filled again by inserts.
    """

    def __init__(self, store: RowStore) -> None:
        self.store = store
        self.query_builder = QueryBuilder(
            store.cols_mapping.name_map(),
            rid_where_interceptor,
            [ROW_IDX_COL],
        )

    def where(self, condition: str, *args: Any) -> "DeleteStmt":
        self.query_builder.where(condition, *args)
        return self

    def exec(self) -> None:
        indices = get_row_indices(self.store, self.query_builder.generate())
        if not indices:
            return

        ranges = [qualify(self.store.sheet_name, row_range(idx, idx)) for idx in indices]
        self.store.client.clear(self.store.spreadsheet_id, ranges)
        logger.debug("Deleted %d row(s) from %s", len(indices), self.store.sheet_name)


class CountStmt:
    """Counts matching rows, like a SQL ``SELECT COUNT(*)``."""

    def __init__(self, store: RowStore) -> None:
        self.store = store
        self.query_builder = QueryBuilder(
            store.cols_mapping.name_map(),
            rid_where_interceptor,
            [f"COUNT({ROW_IDX_COL})"],
        )

    def where(self, condition: str, *args: Any) -> "CountStmt":
        self.query_builder.where(condition, *args)
        return self

    def exec(self) -> int:
        """Run the count query.

        Returns:
            Number of matching rows

        Raises:
            UnexpectedResultError: If the result is not a single numeric cell
            SheetsAPIError: If the query request fails
        """
        result = self.store.client.query_rows(
            self.store.spreadsheet_id,
            self.store.sheet_name,
            self.query_builder.generate(),
            True,
        )

        # The endpoint returns no rows at all when nothing matches.
        if not result.rows or not result.rows[0]:
            return 0
        if len(result.rows) != 1 or len(result.rows[0]) != 1:
            raise UnexpectedResultError(f"unexpected result for count: {result.rows!r}")

        raw = result.rows[0][0]
        if not _is_number(raw):
            raise UnexpectedResultError(f"invalid count type: {type(raw).__name__}")
        return math.trunc(raw)


def get_row_indices(store: RowStore, query: str) -> List[int]:
    """Run a query selecting only the row index column and return the indices.

    Raises:
        UnexpectedResultError: If a row has more than one cell or a non-numeric index
    """
    result = store.client.query_rows(store.spreadsheet_id, store.sheet_name, query, True)

    indices: List[int] = []
    for row in result.rows:
        if len(row) != 1:
            raise UnexpectedResultError(f"error retrieving row indices: {result.rows!r}")

        value = row[0]
        if not _is_number(value):
            raise UnexpectedResultError(f"error converting row index, value: {value!r}")
        indices.append(math.trunc(value))

    return indices


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
