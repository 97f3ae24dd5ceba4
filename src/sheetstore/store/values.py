"""
Value escaping and numeric safety checks.

Two different conversions happen before data leaves the process:
- Cell values written to the sheet are escaped so Google Sheets does not
  reinterpret strings (e.g. "0012" as a number or "=A1" as a formula).
- Where-clause arguments are converted to query language literals.
"""

import json
import math
from typing import Any, Collection

from sheetstore.exceptions import QueryBindingError, UnsafeIntegerError
from sheetstore.store.models import QUERY_STRING_KEYWORD


MAX_SAFE_INTEGER = 2 ** 53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER


def escape_value(value: Any) -> Any:
    """Prefix strings with a single quote so the sheet stores them verbatim.

    Non-string values are returned unchanged.
    """
    if isinstance(value, str):
        return f"'{value}"
    return value


def escape_column_value(col: str, value: Any, cols_with_formula: Collection[str]) -> Any:
    """Escape a cell value for a column, leaving formula columns untouched.

    Args:
        col: Logical column name the value is written to
        value: The value to write
        cols_with_formula: Columns whose values are raw formulas

    Returns:
        The value to send to the API

    Raises:
        TypeError: If a formula column receives a non-string value
    """
    if col not in cols_with_formula:
        return escape_value(value)
    if not isinstance(value, str):
        raise TypeError(
            f"value of column {col} is not a string, but expected to contain formula"
        )
    return value


def check_safe_integer(value: Any) -> None:
    """Reject numbers that lose precision as IEEE 754 doubles.

    Integers (and integral floats) must lie in ``[-(2**53 - 1), 2**53 - 1]``.
    NaN and infinities are rejected as well. Booleans, non-integral floats
    and non-numeric values are ignored.

    Raises:
        UnsafeIntegerError: If the value is outside the safe integer range
    """
    if isinstance(value, bool):
        return

    if isinstance(value, int):
        if not MIN_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            raise UnsafeIntegerError(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise UnsafeIntegerError(value)
        if value.is_integer() and not MIN_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            raise UnsafeIntegerError(value)


def convert_query_arg(arg: Any) -> str:
    """Convert a where-clause argument into a query language literal.

    Args:
        arg: A str, bytes, bytearray, int, float or bool

    Returns:
        The literal text to substitute for a ``?`` placeholder

    Raises:
        QueryBindingError: If the argument type is not supported
        UnsafeIntegerError: If a numeric argument is outside the safe integer range
    """
    # bool first: it is a subclass of int
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, (int, float)):
        check_safe_integer(arg)
        if isinstance(arg, float) and arg.is_integer():
            return str(int(arg))
        return str(arg)
    if isinstance(arg, (bytes, bytearray)):
        return json.dumps(bytes(arg).decode("utf-8"), ensure_ascii=False)
    if isinstance(arg, str):
        if QUERY_STRING_KEYWORD.match(arg.strip().lower()):
            return arg
        return json.dumps(arg, ensure_ascii=False)
    raise QueryBindingError(f"Unsupported argument type: {type(arg).__name__}")
