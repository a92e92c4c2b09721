"""SELECT statement builder.

Clause order: WITH, SELECT, FROM, JOIN, WHERE, GROUP BY, HAVING, UNION,
ORDER BY, LIMIT/OFFSET.  The count query reuses every clause up to UNION and
swaps the column list for ``count(1) AS cnt``.

Example::

    sql = (
        Select("users")
        .column("id")
        .where("age", Oper.GT, 18)
        .and_("status", Oper.EQ, 1)
        .limit(10)
    )
    sql.get_sql()     # SELECT id FROM users WHERE age > ? AND (status = ?) LIMIT 10
    sql.get_params()  # [18, 1]
"""
from __future__ import annotations

from typing import Any, Self

from chainql.builder.base import Clause, CompiledSQL, Fragment, Statement, aliased, logger, require_text
from chainql.builder.clauses import (
    CountColumnsClause,
    FromClause,
    GroupByClause,
    JoinClause,
    LimitClause,
    OrderByClause,
    SelectColumnsClause,
    UnionClause,
    WithClause,
)
from chainql.builder.conditions import ConditionList, HavingMixin, WhereMixin
from chainql.builder.sources import TableSourceMixin, WithMixin
from chainql.dialect import Dialect
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import NullsOrder, UnionType


def _direction(ascending: bool) -> str:
    return "ASC" if ascending else "DESC"


class Select(TableSourceMixin, WhereMixin, HavingMixin, WithMixin, Statement):
    """Fluent SELECT builder.

    Args:
        table: Optional first FROM table.
        alias: Alias for ``table``.
        dialect: Backend strategy; defaults to PostgreSQL.
    """

    kind = "SELECT"

    def __init__(self, table: str | None = None, alias: str | None = None, *, dialect: Dialect | None = None) -> None:
        super().__init__(dialect)
        self._with = WithClause()
        self._columns = SelectColumnsClause()
        self._from = FromClause()
        self._joins = JoinClause()
        self._where = ConditionList(" WHERE ")
        self._group_by = GroupByClause()
        self._having = ConditionList(" HAVING ")
        self._unions = UnionClause()
        self._order_by = OrderByClause()
        self._limit = LimitClause()
        if table is not None:
            self.from_(table, alias)

    @classmethod
    def of_sub_query(cls, sub: Statement, alias: str, *, dialect: Dialect | None = None) -> Select:
        """``SELECT ... FROM (<sub>) AS alias``, inheriting the subquery's dialect."""
        return cls(dialect=dialect if dialect is not None else sub.dialect).from_sub_query(sub, alias)

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def columns(self, *columns: str) -> Self:
        for column in columns:
            self._columns.add(require_text(column, "column"))
        return self

    def column(self, column: str) -> Self:
        return self.columns(column)

    def column_as(self, column: str, alias: str) -> Self:
        return self.columns(aliased(require_text(column, "column"), alias))

    def select_all(self) -> Self:
        return self.columns("*")

    def distinct(self) -> Self:
        self._columns.distinct = True
        return self

    def column_aggregate(self, func: str, column: str, alias: str | None = None) -> Self:
        """``FUNC(column) [AS alias]``."""
        expr = f"{require_text(func, 'func')}({require_text(column, 'column')})"
        return self.columns(aliased(expr, alias))

    def column_count(self, alias: str = "cnt") -> Self:
        return self.columns(aliased("COUNT(1)", alias))

    def column_count_distinct(self, column: str, alias: str | None = None) -> Self:
        return self.column_aggregate("COUNT", f"DISTINCT {require_text(column, 'column')}", alias)

    def column_sum(self, column: str, alias: str | None = None) -> Self:
        return self.column_aggregate("SUM", column, alias)

    def column_avg(self, column: str, alias: str | None = None) -> Self:
        return self.column_aggregate("AVG", column, alias)

    def column_max(self, column: str, alias: str | None = None) -> Self:
        return self.column_aggregate("MAX", column, alias)

    def column_min(self, column: str, alias: str | None = None) -> Self:
        return self.column_aggregate("MIN", column, alias)

    def column_sub_query(self, sub: Statement, alias: str) -> Self:
        """``(<sub>) AS alias`` as a scalar column."""
        self._columns.add_fragment(Fragment.nested("(", sub, f") AS {require_text(alias, 'alias')}"))
        return self

    # ------------------------------------------------------------------
    # GROUP BY / UNION
    # ------------------------------------------------------------------

    def group_by(self, *exprs: str) -> Self:
        if self._group_by.group_all:
            raise InvalidArgumentError("GROUP BY ALL cannot be combined with explicit groups", argument="exprs")
        for expr in exprs:
            self._group_by.add(require_text(expr, "expr"))
        return self

    def group_by_all(self) -> Self:
        """``GROUP BY ALL`` (PostgreSQL 17+).

        Raises:
            UnsupportedOperationError: If the dialect does not support it.
        """
        if not self.dialect.supports_group_by_all:
            raise self.dialect.unsupported("GROUP BY ALL")
        if not self._group_by.is_empty():
            raise InvalidArgumentError("GROUP BY ALL cannot be combined with explicit groups", argument="exprs")
        self._group_by.group_all = True
        return self

    def union(self, sub: Statement) -> Self:
        self._unions.add_union(sub, UnionType.UNION)
        return self

    def union_all(self, sub: Statement) -> Self:
        self._unions.add_union(sub, UnionType.UNION_ALL)
        return self

    # ------------------------------------------------------------------
    # ORDER BY
    # ------------------------------------------------------------------

    def order_by(self, *exprs: str) -> Self:
        for expr in exprs:
            self._order_by.add(require_text(expr, "expr"))
        return self

    def order_by_asc(self, *columns: str) -> Self:
        return self.order_by(*(f"{require_text(c, 'column')} ASC" for c in columns))

    def order_by_desc(self, *columns: str) -> Self:
        return self.order_by(*(f"{require_text(c, 'column')} DESC" for c in columns))

    def order_by_nulls(self, column: str, ascending: bool = True, nulls: NullsOrder = NullsOrder.NULLS_LAST) -> Self:
        """``column ASC|DESC NULLS FIRST|LAST``; ``NullsOrder.NONE`` is rejected."""
        if NullsOrder(nulls) is NullsOrder.NONE:
            raise InvalidArgumentError("nulls order must be NULLS_FIRST or NULLS_LAST", argument="nulls")
        return self.order_by(f"{require_text(column, 'column')} {_direction(ascending)} {NullsOrder(nulls).value}")

    def order_by_position(self, position: int, ascending: bool = True) -> Self:
        if isinstance(position, bool) or not isinstance(position, int) or position < 1:
            raise InvalidArgumentError(f"position must be >= 1, got {position!r}", argument="position")
        return self.order_by(f"{position} {_direction(ascending)}")

    def order_by_collate(self, column: str, collation: str, ascending: bool = True) -> Self:
        collation = require_text(collation, "collation")
        return self.order_by(f"{require_text(column, 'column')} COLLATE {collation} {_direction(ascending)}")

    # ------------------------------------------------------------------
    # LIMIT / OFFSET
    # ------------------------------------------------------------------

    def limit(self, limit: int) -> Self:
        self._limit.set_limit(limit)
        return self

    def offset(self, offset: int) -> Self:
        self._limit.set_offset(offset)
        return self

    def limit_offset(self, limit: int, offset: int) -> Self:
        self._limit.set_limit(limit)
        self._limit.set_offset(offset)
        return self

    def limit_page(self, page: int, size: int) -> Self:
        """1-based page; pages below 1 are treated as the first page."""
        return self.limit_offset(size, (max(page, 1) - 1) * size)

    def limit_page_zero_based(self, page: int, size: int) -> Self:
        return self.limit_offset(size, max(page, 0) * size)

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def _clauses(self) -> list[Clause]:
        return [
            self._with,
            self._columns,
            self._from,
            self._joins,
            self._where,
            self._group_by,
            self._having,
            self._unions,
            self._order_by,
            self._limit,
        ]

    def _count_clauses(self) -> list[Clause]:
        return [
            self._with,
            CountColumnsClause(),
            self._from,
            self._joins,
            self._where,
            self._group_by,
            self._having,
            self._unions,
        ]

    def get_count_sql(self) -> str:
        """The same query as ``SELECT count(1) AS cnt`` without ORDER BY / LIMIT."""
        return self._assemble(self._count_clauses())[0]

    def get_count_params(self) -> list[Any]:
        return self._assemble(self._count_clauses())[1]

    def build_count(self) -> CompiledSQL:
        sql, params = self._assemble(self._count_clauses())
        logger.debug("Built SELECT count for %s with %d params", self.dialect.name, len(params))
        return CompiledSQL(sql=sql, params=params, dialect=self.dialect.name)
