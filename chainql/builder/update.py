"""UPDATE statement builder.

The position of extra tables depends on the dialect:

- ``UpdateStyle.FROM`` (PostgreSQL, SQLite, standard SQL)::

      UPDATE orders AS o SET ... FROM customers AS c JOIN ... WHERE ...

- ``UpdateStyle.JOIN`` (MySQL)::

      UPDATE users AS u, extra JOIN orders AS o ON ... SET ... WHERE ...

Parameters follow the rendered order in both layouts.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, Self

from chainql.builder.assignments import AssignmentMixin
from chainql.builder.base import Clause, Fragment, Statement, aliased, require_text
from chainql.builder.clauses import FromClause, JoinClause, TargetClause, UpdateSetClause, WithClause
from chainql.builder.conditions import ConditionList, WhereMixin
from chainql.builder.json_ops import JsonOperations
from chainql.builder.sources import TableSourceMixin, WithMixin
from chainql.dialect import Dialect, UpdateStyle
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import PLACEHOLDER, JsonType


class Update(AssignmentMixin, TableSourceMixin, WhereMixin, WithMixin, Statement):
    """Fluent UPDATE builder.

    Args:
        table: Target table.
        alias: Alias for the target.
        dialect: Backend strategy; defaults to PostgreSQL.
    """

    kind = "UPDATE"

    def __init__(self, table: str, alias: str | None = None, *, dialect: Dialect | None = None) -> None:
        super().__init__(dialect)
        self._with = WithClause()
        self._target = TargetClause("UPDATE ")
        self._sets = UpdateSetClause()
        self._from = FromClause(", " if self.dialect.update_style is UpdateStyle.JOIN else " FROM ")
        self._joins = JoinClause()
        self._where = ConditionList(" WHERE ")
        self.add_table(table, alias)

    def add_table(self, table: str, alias: str | None = None) -> Self:
        """Add another target table (multi-table UPDATE)."""
        self._target.add(aliased(require_text(table, "table"), alias))
        return self

    # ------------------------------------------------------------------
    # SET
    # ------------------------------------------------------------------

    def _assign(self, column: str, expr: str, *values: Any) -> Self:
        self._sets.add(f"{column} = {expr}", *values)
        return self

    def set(self, expr: str, *values: Any) -> Self:
        """Add a SET item.

        ``set("name", v)`` renders ``name = ?``: a single value is bound with
        ``= ?`` when ``expr`` has no placeholder of its own.  Otherwise the
        expression is used verbatim and ``values`` bind its placeholders,
        e.g. ``set("total = total + ?", 5)`` or ``set("touched = now()")``.
        """
        require_text(expr, "expr")
        if len(values) == 1 and PLACEHOLDER not in expr:
            expr = f"{expr} = {PLACEHOLDER}"
        self._sets.add(expr, *values)
        return self

    def increment(self, column: str, amount: Any = 1) -> Self:
        return self.set_expr(column, f"{column} + ?", amount)

    def decrement(self, column: str, amount: Any = 1) -> Self:
        return self.set_expr(column, f"{column} - ?", amount)

    def multiply(self, column: str, factor: Any) -> Self:
        return self.set_expr(column, f"{column} * ?", factor)

    def divide(self, column: str, divisor: Any) -> Self:
        return self.set_expr(column, f"{column} / ?", divisor)

    def mod(self, column: str, divisor: Any) -> Self:
        return self.set_expr(column, f"{column} % ?", divisor)

    def concat(self, column: str, value: Any) -> Self:
        return self.set_expr(column, f"CONCAT({column}, ?)", value)

    def append(self, column: str, value: Any) -> Self:
        """String append using the dialect's concatenation."""
        return self.set_expr(column, self.dialect.string_append(column), value)

    def prepend(self, column: str, value: Any) -> Self:
        return self.set_expr(column, self.dialect.string_prepend(column), value)

    def set_coalesce(self, column: str, value: Any) -> Self:
        """Fill NULLs only: ``column = COALESCE(column, ?)``."""
        return self.set_expr(column, f"COALESCE({column}, ?)", value)

    def array_append(self, column: str, value: Any) -> Self:
        return self.set_expr(column, self.dialect.array_append(column), value)

    def array_remove(self, column: str, value: Any) -> Self:
        return self.set_expr(column, self.dialect.array_remove(column), value)

    def set_sub_query(self, column: str, sub: Statement) -> Self:
        """``column = (<sub>)`` with the subquery's params spliced in."""
        self._sets.add_fragment(Fragment.nested(f"{require_text(column, 'column')} = (", sub, ")"))
        return self

    def json(self, column: str, operations: Callable[[JsonOperations], Any]) -> Self:
        """Apply JSON operations to ``column``; see :class:`JsonOperations`."""
        return self._apply_json(column, JsonType.JSON, operations)

    def jsonb(self, column: str, operations: Callable[[JsonOperations], Any]) -> Self:
        return self._apply_json(column, JsonType.JSONB, operations)

    def _apply_json(self, column: str, json_type: JsonType, operations: Callable[[JsonOperations], Any]) -> Self:
        ops = JsonOperations(self.dialect.json_dialect, json_type, require_text(column, "column"))
        operations(ops)
        if not ops.is_empty():
            expr, params = ops.render()
            self._assign(column, expr, *params)
        return self

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def _clauses(self) -> list[Clause]:
        if self.dialect.update_style is UpdateStyle.JOIN:
            return [self._with, self._target, self._from, self._joins, self._sets, self._where]
        if self._from.is_empty() and not self._joins.is_empty():
            raise InvalidArgumentError(
                f"{self.dialect.name} UPDATE joins need a FROM table; call from_() first",
                argument="table",
            )
        return [self._with, self._target, self._sets, self._from, self._joins, self._where]
