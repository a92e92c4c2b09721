"""INSERT statement builder: ``[WITH ...] INSERT INTO t (cols) VALUES (exprs)``."""
from __future__ import annotations

from typing import Any, Self

from chainql.builder.assignments import AssignmentMixin
from chainql.builder.base import Clause, Fragment, Statement, require_text
from chainql.builder.clauses import InsertValuesClause, TargetClause, WithClause
from chainql.builder.sources import WithMixin
from chainql.dialect import Dialect
from chainql.schema.expressions import PLACEHOLDER


class Insert(AssignmentMixin, WithMixin, Statement):
    """Fluent single-row INSERT builder.

    Example::

        Insert("users").set("name", "bob").set_now("created_at")
        # INSERT INTO users (name, created_at) VALUES (?, now())
    """

    kind = "INSERT"

    def __init__(self, table: str, *, dialect: Dialect | None = None) -> None:
        super().__init__(dialect)
        self._with = WithClause()
        self._target = TargetClause("INSERT INTO ")
        self._target.add(require_text(table, "table"))
        self._values = InsertValuesClause()

    def _assign(self, column: str, expr: str, *values: Any) -> Self:
        self._values.add_value(column, expr, *values)
        return self

    def set(self, column: str, value: Any) -> Self:
        """Bind ``value`` to ``column``."""
        return self._assign(require_text(column, "column"), PLACEHOLDER, value)

    def set_sub_query(self, column: str, sub: Statement) -> Self:
        """Value computed by a scalar subquery: ``(<sub>)``."""
        self._values.add_nested_value(require_text(column, "column"), Fragment.nested("(", sub, ")"))
        return self

    def _clauses(self) -> list[Clause]:
        return [self._with, self._target, self._values]
