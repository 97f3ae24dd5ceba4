"""
Column mapping and A1 range helpers for the row store.

Logical column names are assigned spreadsheet column letters in definition
order (first column -> A). Ranges are qualified with a sheet name using
``Sheet!Range`` notation.
"""

from typing import Dict, Iterable, Iterator, NamedTuple


ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Maximum number of columns (including the row index column) a row store spans.
MAX_COLUMN = 26


def column_name(n: int) -> str:
    """Convert a zero-based column index to its A1 notation letter(s).

    This is not a plain base-26 conversion: every digit after the last one
    can start from "A" again (26 -> AA, not BA), so 1 is subtracted before
    each further division.

    Args:
        n: Column index (0 = A, 25 = Z, 26 = AA, 27 = AB, 52 = BA, ...)

    Returns:
        Column letter(s) in A1 notation
    """
    col = ALPHABET[n % 26]
    n //= 26

    while n > 0:
        n -= 1
        col = ALPHABET[n % 26] + col
        n //= 26

    return col


LAST_COLUMN = column_name(MAX_COLUMN - 1)

DEFAULT_ROW_HEADER_RANGE = f"A1:{LAST_COLUMN}1"
DEFAULT_ROW_FULL_TABLE_RANGE = f"A2:{LAST_COLUMN}"


class ColIdx(NamedTuple):
    """A column letter together with its zero-based index."""
    name: str
    idx: int


class ColumnMapping:
    """Read-only mapping from logical column names to :class:`ColIdx`.

    Iteration follows the order the columns were defined in.
    """

    def __init__(self, mapping: Dict[str, ColIdx]) -> None:
        self._mapping = dict(mapping)

    def name_map(self) -> Dict[str, str]:
        """Return column name -> column letter."""
        return {col: col_idx.name for col, col_idx in self._mapping.items()}

    def has_col(self, col: str) -> bool:
        return col in self._mapping

    def col_idx(self, col: str) -> ColIdx:
        return self._mapping[col]

    def __len__(self) -> int:
        return len(self._mapping)

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __repr__(self) -> str:
        return f"ColumnMapping({self.name_map()!r})"


def generate_column_mapping(columns: Iterable[str]) -> ColumnMapping:
    """Assign A1 column letters to column names in definition order."""
    return ColumnMapping({
        col: ColIdx(name=column_name(idx), idx=idx)
        for idx, col in enumerate(columns)
    })


def qualify(sheet_name: str, a1_range: str) -> str:
    """Combine a sheet name and a bare range into ``Sheet!Range``.

    Sheet names are used as-is; names with spaces or ``!`` are not quoted.
    """
    return f"{sheet_name}!{a1_range}"


def row_range(from_row: int, to_row: int) -> str:
    """Return the full-width range covering rows ``from_row`` to ``to_row`` (1-indexed)."""
    return f"A{from_row}:{LAST_COLUMN}{to_row}"
