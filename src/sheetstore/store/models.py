"""
Shared constants and small value types of the row store.
"""

import re
from dataclasses import dataclass
from enum import Enum


# Hidden leading column holding =ROW(). A written row keeps a non-empty
# row index even when all user columns are blank; a row that was never
# written (or was deleted) has none.
ROW_IDX_COL = "_rid"
ROW_IDX_FORMULA = "=ROW()"

ROW_WHERE_EMPTY_CONDITION = f"{ROW_IDX_COL} is not null"

# Query language literals that must not be quoted, e.g. date "2024-01-31".
QUERY_STRING_KEYWORD = re.compile(r"^(date|datetime|timeofday)")


def row_where_non_empty_condition(where: str) -> str:
    return f"{ROW_IDX_COL} is not null AND {where}"


class OrderBy(Enum):
    """Sort direction of a column in an ``order by`` clause."""
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class ColumnOrderBy:
    """Ordering requirement for one column when selecting rows.

    Attributes:
        column: Logical column name
        order_by: Sort direction
    """
    column: str
    order_by: OrderBy = OrderBy.ASC
