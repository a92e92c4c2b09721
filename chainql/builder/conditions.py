"""WHERE / HAVING engine.

``ConditionList`` composes predicates with these rules:

1. The first condition is added verbatim, whatever logic was requested.
2. Every later condition is rendered as ``"{LOGIC} ({text})"``.
3. Values are appended in call order.
4. Or-true injection: a blank guard value (``None`` or a whitespace-only
   string) under OR adds the tautology ``1=1`` without parameters, so the
   OR-branch never disappears; under AND the condition is simply dropped.

``WhereMixin`` and ``HavingMixin`` expose the fluent operations on the
statements that own a ``_where`` / ``_having`` list.  All of them reduce to
``ConditionList.add_condition``.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Self

from chainql.builder.base import Clause, Fragment, Statement, is_blank, require_text
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import COLLECTION_OPS, PLACEHOLDER, Logic, Oper, Range

if TYPE_CHECKING:
    from chainql.dialect import Dialect

#: Tautology injected for blank guard values under OR.
TRUE_CONDITION = "1=1"

#: Operators usable in multi-column ``some`` / ``every``.
_SCALAR_OPS: frozenset[Oper] = frozenset(Oper) - COLLECTION_OPS - {Oper.BETWEEN, Oper.EXISTS}


def coerce_logic(logic: Logic | str) -> Logic:
    if isinstance(logic, Logic):
        return logic
    try:
        return Logic(str(logic).upper())
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown logic {logic!r}; expected AND or OR", argument="logic") from exc


def in_condition(column: str, oper: Oper, values: Iterable[Any] | None) -> tuple[str, list[Any]] | None:
    """Render ``IN`` / ``NOT IN``; ``None`` means the collection was empty.

    A single value collapses to ``col = ?`` / ``col <> ?``.

    Raises:
        InvalidArgumentError: If ``values`` is ``None`` or a bare string.
    """
    require_text(column, "column")
    if values is None or isinstance(values, (str, bytes)):
        raise InvalidArgumentError(f"{oper.value} requires a collection of values", argument="values")
    items = list(values)
    if not items:
        return None
    if len(items) == 1:
        single = Oper.EQ if oper is Oper.IN else Oper.NE
        return single.make_expr(column), items
    return oper.make_expr(column, ", ".join([PLACEHOLDER] * len(items))), items


def expand_condition(expr: str, values: Sequence[Any]) -> tuple[str, list[Any]] | None:
    """Resolve the two call forms of ``where`` / ``having``.

    ``(expr, *values)`` is a raw fragment; ``(column, oper, *values)`` renders
    the operator's template against ``column``.
    """
    if values and isinstance(values[0], Oper):
        oper, rest = values[0], list(values[1:])
        column = require_text(expr, "column")
        if oper in COLLECTION_OPS:
            if len(rest) != 1:
                raise InvalidArgumentError(f"{oper.value} takes exactly one collection", argument="values")
            return in_condition(column, oper, rest[0])
        if len(rest) != oper.value_count:
            raise InvalidArgumentError(
                f"{oper.value} takes {oper.value_count} value(s), got {len(rest)}",
                argument="values",
            )
        return oper.make_expr(column), rest
    return require_text(expr, "expression"), list(values)


class ConditionList(Clause):
    """Ordered ``(logic, text)`` predicates plus their parameters."""

    separator = " "

    def __init__(self, keyword: str) -> None:
        super().__init__()
        self.keyword = keyword

    def add_condition(self, logic: Logic | str, text: str, *values: Any) -> None:
        logic = coerce_logic(logic)
        if self._fragments:
            text = f"{logic.value} ({text})"
        self._fragments.append(Fragment(text, values))

    def add_nested(self, logic: Logic | str, prefix: str, sub: Statement, suffix: str = "") -> None:
        """Add a predicate embedding ``sub``; its parameters are spliced in place."""
        logic = coerce_logic(logic)
        if self._fragments:
            prefix, suffix = f"{logic.value} ({prefix}", f"{suffix})"
        self._fragments.append(Fragment.nested(prefix, sub, suffix))

    def add_or_true(self, logic: Logic | str) -> None:
        if coerce_logic(logic) is Logic.OR:
            self.add_condition(Logic.OR, TRUE_CONDITION)


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


class WhereMixin:
    """Fluent WHERE operations for statements owning a ``_where`` list."""

    _where: ConditionList
    dialect: Dialect

    def _condition(self, logic: Logic | str, text: str, *values: Any) -> Self:
        self._where.add_condition(logic, text, *values)
        return self

    def _expanded(self, logic: Logic, expr: str, values: Sequence[Any]) -> Self:
        expanded = expand_condition(expr, values)
        if expanded is not None:
            self._condition(logic, expanded[0], *expanded[1])
        return self

    # ------------------------------------------------------------------
    # Raw and operator forms
    # ------------------------------------------------------------------

    def where(self, expr: str, *values: Any) -> Self:
        """Add a condition with AND logic.

        Args:
            expr: A raw fragment, or a column when followed by an ``Oper``.
            *values: Fragment values, or ``oper, value...``.

        Example::

            select.where("age > ? AND age < ?", 18, 65)
            select.where("age", Oper.GT, 18)
        """
        return self._expanded(Logic.AND, expr, values)

    def and_(self, expr: str, *values: Any) -> Self:
        return self._expanded(Logic.AND, expr, values)

    def or_(self, expr: str, *values: Any) -> Self:
        return self._expanded(Logic.OR, expr, values)

    def eq(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.EQ.make_expr(require_text(column, "column")), value)

    def ne(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.NE.make_expr(require_text(column, "column")), value)

    def gt(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.GT.make_expr(require_text(column, "column")), value)

    def gte(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.GTE.make_expr(require_text(column, "column")), value)

    def lt(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.LT.make_expr(require_text(column, "column")), value)

    def lte(self, column: str, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.LTE.make_expr(require_text(column, "column")), value)

    # ------------------------------------------------------------------
    # Collections and ranges
    # ------------------------------------------------------------------

    def in_(self, column: str, values: Iterable[Any], logic: Logic | str = Logic.AND) -> Self:
        """``col IN (?, ...)``; one value renders ``col = ?``, none is a no-op."""
        rendered = in_condition(column, Oper.IN, values)
        if rendered is not None:
            self._condition(logic, rendered[0], *rendered[1])
        return self

    def not_in(self, column: str, values: Iterable[Any], logic: Logic | str = Logic.AND) -> Self:
        rendered = in_condition(column, Oper.NOT_IN, values)
        if rendered is not None:
            self._condition(logic, rendered[0], *rendered[1])
        return self

    def in_sub_query(self, column: str, sub: Statement, logic: Logic | str = Logic.AND) -> Self:
        self._where.add_nested(logic, f"{require_text(column, 'column')} IN (", sub, ")")
        return self

    def not_in_sub_query(self, column: str, sub: Statement, logic: Logic | str = Logic.AND) -> Self:
        self._where.add_nested(logic, f"{require_text(column, 'column')} NOT IN (", sub, ")")
        return self

    def between(self, column: str, start: Any = None, end: Any = None) -> Self:
        """``col >= ?`` and/or ``col <= ?``; a ``None`` bound is skipped.

        ``start`` may also be a :class:`~chainql.schema.expressions.Range`.
        """
        require_text(column, "column")
        if isinstance(start, Range):
            start, end = start.begin, start.end
        if start is not None:
            self._condition(Logic.AND, Oper.GTE.make_expr(column), start)
        if end is not None:
            self._condition(Logic.AND, Oper.LTE.make_expr(column), end)
        return self

    def is_null(self, column: str, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.IS_NULL.make_expr(require_text(column, "column")))

    def is_not_null(self, column: str, logic: Logic | str = Logic.AND) -> Self:
        return self._condition(logic, Oper.IS_NOT_NULL.make_expr(require_text(column, "column")))

    # ------------------------------------------------------------------
    # Pattern matching
    # ------------------------------------------------------------------

    def _pattern(self, column: str, oper: Oper, value: Any, template: str, logic: Logic | str) -> Self:
        require_text(column, "column")
        if is_blank(value):
            self._where.add_or_true(logic)
            return self
        return self._condition(logic, oper.make_expr(column), template.format(value))

    def like(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        """``col LIKE '%value%'``."""
        return self._pattern(column, Oper.LIKE, value, "%{}%", logic)

    def not_like(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.NOT_LIKE, value, "%{}%", logic)

    def start_with(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.LIKE, value, "{}%", logic)

    def not_start_with(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.NOT_LIKE, value, "{}%", logic)

    def end_with(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.LIKE, value, "%{}", logic)

    def not_end_with(self, column: str, value: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.NOT_LIKE, value, "%{}", logic)

    def like_pattern(self, column: str, pattern: str | None, logic: Logic | str = Logic.AND) -> Self:
        """LIKE with a caller-supplied pattern, wildcards included."""
        return self._pattern(column, Oper.LIKE, pattern, "{}", logic)

    def not_like_pattern(self, column: str, pattern: str | None, logic: Logic | str = Logic.AND) -> Self:
        return self._pattern(column, Oper.NOT_LIKE, pattern, "{}", logic)

    def regexp(self, column: str, pattern: str | None, logic: Logic | str = Logic.AND) -> Self:
        """Regex match using the dialect's operator (``~``, ``REGEXP``)."""
        expr = self.dialect.regexp_expr(require_text(column, "column"))
        if is_blank(pattern):
            self._where.add_or_true(logic)
            return self
        return self._condition(logic, expr, pattern)

    def not_regexp(self, column: str, pattern: str | None, logic: Logic | str = Logic.AND) -> Self:
        expr = self.dialect.not_regexp_expr(require_text(column, "column"))
        if is_blank(pattern):
            self._where.add_or_true(logic)
            return self
        return self._condition(logic, expr, pattern)

    # ------------------------------------------------------------------
    # Multi-column
    # ------------------------------------------------------------------

    def _multi_column(
        self,
        columns: Iterable[str],
        oper: Oper,
        value: Any,
        logic: Logic | str,
        inner: Logic,
    ) -> Self:
        if columns is None or isinstance(columns, str):
            raise InvalidArgumentError("columns must be a collection of column names", argument="columns")
        cols = [require_text(c, "column") for c in columns]
        if not cols:
            raise InvalidArgumentError("at least one column is required", argument="columns")
        if oper not in _SCALAR_OPS:
            raise InvalidArgumentError(f"{oper.value} cannot be applied across columns", argument="oper")
        if value is None and oper in (Oper.EQ, Oper.NE):
            oper = Oper.IS_NULL if oper is Oper.EQ else Oper.IS_NOT_NULL
        elif value is None and oper.has_value:
            self._where.add_or_true(logic)
            return self
        text = "(" + f" {inner.value} ".join(oper.make_expr(c) for c in cols) + ")"
        values = [value] * len(cols) if oper.has_value else []
        return self._condition(logic, text, *values)

    def some(self, columns: Iterable[str], oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        """Match when any column satisfies ``oper``: ``(c1 = ? OR c2 = ?)``.

        A ``None`` value with EQ / NE tests ``IS NULL`` / ``IS NOT NULL``.
        """
        return self._multi_column(columns, oper, value, logic, Logic.OR)

    def every(self, columns: Iterable[str], oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        """Match when all columns satisfy ``oper``: ``(c1 = ? AND c2 = ?)``."""
        return self._multi_column(columns, oper, value, logic, Logic.AND)

    def some_like(self, columns: Iterable[str], value: str | None, logic: Logic | str = Logic.AND) -> Self:
        if is_blank(value):
            self._where.add_or_true(logic)
            return self
        return self._multi_column(columns, Oper.LIKE, f"%{value}%", logic, Logic.OR)

    def some_start_with(self, columns: Iterable[str], value: str | None, logic: Logic | str = Logic.AND) -> Self:
        if is_blank(value):
            self._where.add_or_true(logic)
            return self
        return self._multi_column(columns, Oper.LIKE, f"{value}%", logic, Logic.OR)

    def some_end_with(self, columns: Iterable[str], value: str | None, logic: Logic | str = Logic.AND) -> Self:
        if is_blank(value):
            self._where.add_or_true(logic)
            return self
        return self._multi_column(columns, Oper.LIKE, f"%{value}", logic, Logic.OR)

    # ------------------------------------------------------------------
    # Subqueries
    # ------------------------------------------------------------------

    def any_(self, column: str, sub: Statement, logic: Logic | str = Logic.AND) -> Self:
        """``col = any(<sub>)`` with the subquery's parameters spliced in."""
        self._where.add_nested(logic, f"{require_text(column, 'column')} = any(", sub, ")")
        return self

    def exists(self, sub: Statement | str, logic: Logic | str = Logic.AND) -> Self:
        """``EXISTS (<sub>)``; ``sub`` may be a statement or raw SQL text."""
        if isinstance(sub, Statement):
            self._where.add_nested(logic, "EXISTS (", sub, ")")
            return self
        return self._condition(logic, Oper.EXISTS.make_expr(require_text(sub, "subquery")))

    def not_exists(self, sub: Statement | str, logic: Logic | str = Logic.AND) -> Self:
        if isinstance(sub, Statement):
            self._where.add_nested(logic, "NOT EXISTS (", sub, ")")
            return self
        return self._condition(logic, "NOT " + Oper.EXISTS.make_expr(require_text(sub, "subquery")))


# ---------------------------------------------------------------------------
# HAVING
# ---------------------------------------------------------------------------


class HavingMixin:
    """Fluent HAVING operations; same composition rules as WHERE."""

    _having: ConditionList

    def _having_expanded(self, logic: Logic, expr: str, values: Sequence[Any]) -> Self:
        expanded = expand_condition(expr, values)
        if expanded is not None:
            self._having.add_condition(logic, expanded[0], *expanded[1])
        return self

    def having(self, expr: str, *values: Any) -> Self:
        """Add a HAVING condition: ``having("COUNT(*) > ?", 5)`` or
        ``having("COUNT(*)", Oper.GT, 5)``."""
        return self._having_expanded(Logic.AND, expr, values)

    def and_having(self, expr: str, *values: Any) -> Self:
        return self._having_expanded(Logic.AND, expr, values)

    def or_having(self, expr: str, *values: Any) -> Self:
        return self._having_expanded(Logic.OR, expr, values)

    def having_aggregate(
        self,
        func: str,
        column: str,
        oper: Oper,
        value: Any,
        logic: Logic | str = Logic.AND,
    ) -> Self:
        aggregate = f"{require_text(func, 'func')}({require_text(column, 'column')})"
        return self._having_expanded(coerce_logic(logic), aggregate, (oper, value))

    def having_count(self, oper: Oper, value: Any, column: str = "*", logic: Logic | str = Logic.AND) -> Self:
        return self.having_aggregate("COUNT", column, oper, value, logic)

    def having_sum(self, column: str, oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self.having_aggregate("SUM", column, oper, value, logic)

    def having_avg(self, column: str, oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self.having_aggregate("AVG", column, oper, value, logic)

    def having_max(self, column: str, oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self.having_aggregate("MAX", column, oper, value, logic)

    def having_min(self, column: str, oper: Oper, value: Any, logic: Logic | str = Logic.AND) -> Self:
        return self.having_aggregate("MIN", column, oper, value, logic)
