"""FROM / JOIN / WITH operations shared by the statements that own them."""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Self

from chainql.builder.base import Fragment, Statement, aliased, require_text
from chainql.builder.clauses import FromClause, JoinClause, WithClause
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import JoinType, MaterializationHint

if TYPE_CHECKING:
    from chainql.dialect import Dialect


def _coerce_join_type(join_type: JoinType | str) -> JoinType:
    if isinstance(join_type, JoinType):
        return join_type
    try:
        return JoinType[str(join_type).upper()]
    except KeyError as exc:
        raise InvalidArgumentError(f"Unknown join type {join_type!r}", argument="join_type") from exc


class TableSourceMixin:
    """Tables, subqueries and joins feeding a statement."""

    _from: FromClause
    _joins: JoinClause

    # ------------------------------------------------------------------
    # FROM
    # ------------------------------------------------------------------

    def from_(self, table: str, alias: str | None = None) -> Self:
        self._from.add(aliased(require_text(table, "table"), alias))
        return self

    def from_sub_query(self, sub: Statement, alias: str) -> Self:
        """``FROM (<sub>) AS alias``; the alias is mandatory."""
        require_text(alias, "alias")
        self._from.add_fragment(Fragment.nested("(", sub, f") AS {alias}"))
        return self

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def join(
        self,
        table: str,
        on: str | None = None,
        *,
        join_type: JoinType | str = JoinType.INNER,
        alias: str | None = None,
        params: Sequence[Any] = (),
    ) -> Self:
        """Add ``{JOIN TYPE} table [AS alias] [ON on]``.

        Args:
            table: Joined table.
            on: Join condition; may contain placeholders bound by ``params``.
            join_type: Kind of join.
            alias: Optional table alias.
            params: Values for placeholders in ``on``.

        Raises:
            InvalidArgumentError: If ``table`` is empty or a CROSS JOIN is
                given a condition.
        """
        join_type = _coerce_join_type(join_type)
        text = f" {join_type.value} {aliased(require_text(table, 'table'), alias)}"
        if on:
            if join_type is JoinType.CROSS:
                raise InvalidArgumentError("CROSS JOIN takes no ON condition", argument="on")
            text = f"{text} ON {on}"
        self._joins.add(text, *params)
        return self

    def inner_join(self, table: str, on: str | None = None, *, alias: str | None = None, params: Sequence[Any] = ()) -> Self:
        return self.join(table, on, join_type=JoinType.INNER, alias=alias, params=params)

    def left_join(self, table: str, on: str | None = None, *, alias: str | None = None, params: Sequence[Any] = ()) -> Self:
        return self.join(table, on, join_type=JoinType.LEFT, alias=alias, params=params)

    def right_join(self, table: str, on: str | None = None, *, alias: str | None = None, params: Sequence[Any] = ()) -> Self:
        return self.join(table, on, join_type=JoinType.RIGHT, alias=alias, params=params)

    def full_join(self, table: str, on: str | None = None, *, alias: str | None = None, params: Sequence[Any] = ()) -> Self:
        return self.join(table, on, join_type=JoinType.FULL, alias=alias, params=params)

    def cross_join(self, table: str, alias: str | None = None) -> Self:
        return self.join(table, join_type=JoinType.CROSS, alias=alias)

    def join_using(
        self,
        table: str,
        *columns: str,
        join_type: JoinType | str = JoinType.INNER,
        alias: str | None = None,
    ) -> Self:
        """``JOIN table USING (a, b)``."""
        if not columns:
            raise InvalidArgumentError("USING requires at least one column", argument="columns")
        join_type = _coerce_join_type(join_type)
        text = f" {join_type.value} {aliased(require_text(table, 'table'), alias)} USING ({', '.join(columns)})"
        self._joins.add(text)
        return self

    def natural_join(self, table: str, join_type: JoinType | str = JoinType.INNER) -> Self:
        join_type = _coerce_join_type(join_type)
        self._joins.add(f" NATURAL {join_type.value} {require_text(table, 'table')}")
        return self

    def join_sub_query(
        self,
        sub: Statement,
        alias: str,
        on: str | None = None,
        *,
        join_type: JoinType | str = JoinType.INNER,
        params: Sequence[Any] = (),
    ) -> Self:
        """``JOIN (<sub>) AS alias ON on``; subquery params precede ``params``."""
        require_text(alias, "alias")
        join_type = _coerce_join_type(join_type)
        suffix = f") AS {alias}" + (f" ON {on}" if on else "")
        self._joins.add_fragment(Fragment.nested(f" {join_type.value} (", sub, suffix, params))
        return self


class WithMixin:
    """``WITH`` common table expressions."""

    _with: WithClause
    dialect: Dialect

    def _add_cte(self, name: str, sub: Statement, hint: MaterializationHint | str, recursive: bool) -> Self:
        require_text(name, "name")
        try:
            hint = MaterializationHint(hint)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown materialization hint {hint!r}", argument="hint") from exc
        if hint is not MaterializationHint.NONE and not self.dialect.supports_materialized_cte:
            raise self.dialect.unsupported(f"CTE materialization hint {hint.value}")
        self._with.add_cte(name, sub, hint, recursive)
        return self

    def with_(self, name: str, sub: Statement, hint: MaterializationHint | str = MaterializationHint.NONE) -> Self:
        """Add ``name AS [hint] (<sub>)``.

        Raises:
            UnsupportedOperationError: If a hint is requested and the dialect
                cannot express it.
        """
        return self._add_cte(name, sub, hint, recursive=False)

    def with_recursive(
        self, name: str, sub: Statement, hint: MaterializationHint | str = MaterializationHint.NONE
    ) -> Self:
        return self._add_cte(name, sub, hint, recursive=True)
