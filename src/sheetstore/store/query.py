"""
Query builder for the Google Visualization API Query Language.

Builds statements of the form::

    select <cols> [where <cond>] [order by <col dir, ...>] [offset <n>] [limit <n>]

Logical column names are rewritten to their sheet column letters. Column
names are matched as whole identifiers only, and never inside quoted
literals, so a column ``id`` does not clobber part of ``user_id``.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from sheetstore.exceptions import QueryBindingError
from sheetstore.store.models import ColumnOrderBy
from sheetstore.store.values import convert_query_arg

logger = logging.getLogger(__name__)

WhereInterceptor = Callable[[str], str]

_QUOTED_LITERAL = r"\"[^\"]*\"|'[^']*'"


class QueryBuilder:
    """Builds a query string from column-mapped clauses.

    Setters return the builder so calls can be chained. ``generate()`` does
    not modify the builder and returns the same string on every call.

    Attributes:
        columns: Logical columns (or expressions such as ``COUNT(_rid)``) to select
    """

    def __init__(
        self,
        replacements: Dict[str, str],
        where_interceptor: Optional[WhereInterceptor],
        columns: Sequence[str]
    ) -> None:
        """Initialize a QueryBuilder.

        Args:
            replacements: Column name -> column letter
            where_interceptor: Optional function applied to the raw where
                condition before arguments are bound
            columns: Columns or expressions to select
        """
        self.columns = list(columns)
        self._replacements = dict(replacements)
        self._where_interceptor = where_interceptor
        self._pattern = _compile_identifier_pattern(self._replacements)
        self._where = ""
        self._where_args: List[Any] = []
        self._order_by: List[str] = []
        self._limit = 0
        self._offset = 0

    def where(self, condition: str, *args: Any) -> "QueryBuilder":
        """Set the where condition; each ``?`` is bound to the next argument."""
        self._where = condition
        self._where_args = list(args)
        return self

    def order_by(self, ordering: Sequence[ColumnOrderBy]) -> "QueryBuilder":
        self._order_by = [f"{o.column} {o.order_by.value}" for o in ordering]
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        self._limit = limit
        return self

    def offset(self, offset: int) -> "QueryBuilder":
        self._offset = offset
        return self

    def generate(self) -> str:
        """Generate the query string.

        Returns:
            The query, e.g. ``select B, C where A is not null limit 1``

        Raises:
            QueryBindingError: If the number of placeholders and arguments
                differ, or an argument type is unsupported
        """
        stmt = ["select", ", ".join(self._replace_columns(col) for col in self.columns)]

        where = self._build_where()
        if where:
            stmt.extend(["where", where])

        if self._order_by:
            stmt.extend(["order by", ", ".join(self._replace_columns(o) for o in self._order_by)])

        if self._offset:
            stmt.extend(["offset", str(self._offset)])

        if self._limit:
            stmt.extend(["limit", str(self._limit)])

        query = " ".join(stmt)
        logger.debug("Generated query: %s", query)
        return query

    def _build_where(self) -> str:
        clause = self._where
        if self._where_interceptor is not None:
            clause = self._where_interceptor(clause)

        n_placeholders = clause.count("?")
        if n_placeholders != len(self._where_args):
            raise QueryBindingError(
                f"Number of arguments required in the 'where' clause ({n_placeholders}) "
                f"is not the same as the number of provided arguments ({len(self._where_args)})"
            )

        tokens = self._replace_columns(clause).split("?")
        parts = [tokens[0].strip()]
        for arg, token in zip(self._where_args, tokens[1:]):
            parts.append(convert_query_arg(arg))
            parts.append(token.strip())

        return " ".join(part for part in parts if part)

    def _replace_columns(self, text: str) -> str:
        if self._pattern is None:
            return text

        def _replace(match: "re.Match[str]") -> str:
            if match.group("literal") is not None:
                return match.group("literal")
            return self._replacements[match.group("name")]

        return self._pattern.sub(_replace, text)


def _compile_identifier_pattern(replacements: Dict[str, str]) -> Optional["re.Pattern[str]"]:
    if not replacements:
        return None

    # Longest names first so "value_old" wins over "value".
    names = sorted(replacements, key=len, reverse=True)
    alternation = "|".join(re.escape(name) for name in names)
    return re.compile(
        rf"(?P<literal>{_QUOTED_LITERAL})|(?<!\w)(?P<name>{alternation})(?!\w)"
    )
