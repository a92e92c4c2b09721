"""DELETE statement builder: ``[WITH ...] DELETE FROM t[, t2] [WHERE ...]``."""
from __future__ import annotations

from typing import Self

from chainql.builder.base import Clause, Statement, aliased, require_text
from chainql.builder.clauses import TargetClause, WithClause
from chainql.builder.conditions import ConditionList, WhereMixin
from chainql.builder.sources import WithMixin
from chainql.dialect import Dialect


class Delete(WhereMixin, WithMixin, Statement):
    """Fluent DELETE builder."""

    kind = "DELETE"

    def __init__(self, table: str, alias: str | None = None, *, dialect: Dialect | None = None) -> None:
        super().__init__(dialect)
        self._with = WithClause()
        self._target = TargetClause("DELETE FROM ")
        self._where = ConditionList(" WHERE ")
        self.add_table(table, alias)

    def add_table(self, table: str, alias: str | None = None) -> Self:
        self._target.add(aliased(require_text(table, "table"), alias))
        return self

    def _clauses(self) -> list[Clause]:
        return [self._with, self._target, self._where]
