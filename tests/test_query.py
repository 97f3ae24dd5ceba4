"""
Unit tests for QueryBuilder.

Tests cover:
- Column selection and column name resolution
- Where clause binding, including the row index guard
- Order by, limit and offset clauses
"""

import pytest

from sheetstore.exceptions import QueryBindingError, UnsafeIntegerError
from sheetstore.store.models import ColumnOrderBy, OrderBy
from sheetstore.store.query import QueryBuilder
from sheetstore.store.statements import rid_where_interceptor


REPLACEMENTS = {"_rid": "A", "col1": "B", "col2": "C"}


def make_builder(columns=("col1", "col2"), interceptor=rid_where_interceptor):
    return QueryBuilder(REPLACEMENTS, interceptor, list(columns))


class TestBasicGeneration:
    """Test suite for select lists."""

    def test_basic_select(self):
        """The row index guard is applied even without a where condition."""
        assert make_builder().generate() == "select B, C where A is not null"

    def test_unknown_columns_pass_through(self):
        builder = make_builder(["col1", "col2", "col3"])
        assert builder.generate() == "select B, C, col3 where A is not null"

    def test_aggregate_expression(self):
        builder = make_builder(["COUNT(_rid)"])
        assert builder.generate() == "select COUNT(A) where A is not null"

    def test_without_interceptor_no_where(self):
        builder = make_builder(interceptor=None)
        assert builder.generate() == "select B, C"

    def test_generate_is_idempotent(self):
        builder = make_builder().where("col1 = ?", "x").limit(3)
        assert builder.generate() == builder.generate()


class TestWhereClause:
    """Test suite for where clause binding."""

    def test_where_with_args(self):
        """Arguments are substituted in order with their literal forms."""
        builder = make_builder()
        builder.where("(col1 > ? AND col2 <= ?) OR (col1 != ? AND col2 == ?)", 100, True, "value", 3.14)
        assert builder.generate() == (
            'select B, C where A is not null AND '
            '(B > 100 AND C <= true ) OR (B != "value" AND C == 3.14 )'
        )

    def test_trailing_placeholder(self):
        builder = make_builder().where("col1 = ?", "k1")
        assert builder.generate() == 'select B, C where A is not null AND B = "k1"'

    def test_date_keyword_argument_is_not_quoted(self):
        builder = make_builder().where("col2 > ?", 'date "2024-01-31"')
        assert builder.generate() == 'select B, C where A is not null AND C > date "2024-01-31"'

    def test_too_few_args(self):
        """Two placeholders and one argument is a binding error."""
        builder = make_builder().where("col1 > ? AND col2 <= ?", 100)
        with pytest.raises(QueryBindingError, match=r"\(2\).*\(1\)"):
            builder.generate()

    def test_too_many_args(self):
        builder = make_builder().where("col1 > ?", 1, 2)
        with pytest.raises(QueryBindingError):
            builder.generate()

    def test_unsupported_arg_type(self):
        builder = make_builder().where("col1 > ? AND col2 <= ?", 100, None)
        with pytest.raises(QueryBindingError, match="Unsupported argument type"):
            builder.generate()

    @pytest.mark.parametrize("arg", [2 ** 53 + 1, float("nan"), float("inf")])
    def test_unsafe_numeric_arg(self, arg):
        """Numbers that would lose precision are rejected before a query is produced."""
        builder = make_builder().where("col2 = ?", arg)
        with pytest.raises(UnsafeIntegerError):
            builder.generate()

    def test_integral_float_arg(self):
        builder = make_builder().where("col2 = ?", 1e15)
        assert builder.generate() == "select B, C where A is not null AND C = 1000000000000000"

    def test_string_args_are_not_column_resolved(self):
        """Argument values that look like column names stay literal."""
        builder = make_builder().where("col1 = ?", "col2")
        assert builder.generate() == 'select B, C where A is not null AND B = "col2"'

    def test_where_without_interceptor(self):
        builder = make_builder(interceptor=None).where("col1 = ?", 1)
        assert builder.generate() == "select B, C where B = 1"


class TestColumnResolution:
    """Test suite for identifier-boundary column name resolution."""

    def test_prefix_column_names(self):
        """A column that is a prefix of another is not replaced inside it."""
        builder = QueryBuilder({"_rid": "A", "id": "B", "user_id": "C", "idx": "D"}, None, ["id", "user_id", "idx"])
        builder.where("id = ? AND user_id = ? AND idx > ?", 1, 2, 3)
        assert builder.generate() == "select B, C, D where B = 1 AND C = 2 AND D > 3"

    def test_quoted_literals_are_untouched(self):
        builder = make_builder(interceptor=None).where("col1 = 'col2' AND col2 = \"col1\"")
        assert builder.generate() == "select B, C where B = 'col2' AND C = \"col1\""

    def test_keyword_column_names(self):
        builder = QueryBuilder({"_rid": "A", "key": "B", "value": "C"}, rid_where_interceptor, ["value"])
        builder.where("key = ?", "k1")
        assert builder.generate() == 'select C where A is not null AND B = "k1"'


class TestOrderLimitOffset:
    """Test suite for order by, limit and offset."""

    def test_limit_and_offset(self):
        """Offset is emitted before limit."""
        builder = make_builder().limit(10).offset(100)
        assert builder.generate() == "select B, C where A is not null offset 100 limit 10"

    def test_zero_limit_and_offset_are_omitted(self):
        builder = make_builder().limit(0).offset(0)
        assert builder.generate() == "select B, C where A is not null"

    def test_order_by(self):
        builder = make_builder().order_by([
            ColumnOrderBy("col2", OrderBy.DESC),
            ColumnOrderBy("col1", OrderBy.ASC),
        ])
        assert builder.generate() == "select B, C where A is not null order by C DESC, B ASC"

    def test_order_by_defaults_to_ascending(self):
        builder = make_builder().order_by([ColumnOrderBy("col1")])
        assert builder.generate() == "select B, C where A is not null order by B ASC"

    def test_all_clauses(self):
        builder = (
            make_builder()
            .where("col1 = ?", "x")
            .order_by([ColumnOrderBy("_rid", OrderBy.DESC)])
            .offset(5)
            .limit(1)
        )
        assert builder.generate() == (
            'select B, C where A is not null AND B = "x" order by A DESC offset 5 limit 1'
        )
