"""Clause holders, one class per clause kind.

Each holder accumulates :class:`~chainql.builder.base.Fragment` objects and
knows its own keyword and separator.  Holders never see the whole statement;
the assembler in :class:`~chainql.builder.base.Statement` walks them in
grammar order.

Rendering conventions: every clause after the statement head renders its
own leading space (``" FROM ..."``), WITH renders a trailing newline and
UNION a leading one, so the assembler only concatenates.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chainql.builder.base import Clause, Fragment, Statement
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import MaterializationHint, UnionType

if TYPE_CHECKING:
    from chainql.dialect import Dialect


class TargetClause(Clause):
    """Statement head naming the target table(s): ``UPDATE a AS x, b``."""

    def __init__(self, keyword: str) -> None:
        super().__init__()
        self.keyword = keyword


class SelectColumnsClause(Clause):
    """``SELECT [DISTINCT] cols``; renders ``SELECT *`` when no column was added."""

    def __init__(self) -> None:
        super().__init__()
        self.distinct = False

    def is_empty(self) -> bool:
        return False

    def render(self, out: list[str], dialect: Dialect) -> None:
        out.append("SELECT DISTINCT " if self.distinct else "SELECT ")
        out.append(self.separator.join(f.render() for f in self._fragments) or "*")


class CountColumnsClause(Clause):
    """Column list used by the count query."""

    def is_empty(self) -> bool:
        return False

    def render(self, out: list[str], dialect: Dialect) -> None:
        out.append("SELECT count(1) AS cnt")


class FromClause(Clause):
    """``FROM t AS a, (sub) AS b``.

    The keyword is configurable because a MySQL UPDATE lists its extra
    tables as comma-separated targets instead of a FROM clause.
    """

    def __init__(self, keyword: str = " FROM ") -> None:
        super().__init__()
        self.keyword = keyword


class JoinClause(Clause):
    """Joins; every fragment carries its own leading keyword."""

    separator = ""


class GroupByClause(Clause):
    keyword = " GROUP BY "

    def __init__(self) -> None:
        super().__init__()
        self.group_all = False

    def is_empty(self) -> bool:
        return not self.group_all and super().is_empty()

    def render(self, out: list[str], dialect: Dialect) -> None:
        if self.group_all:
            out.append(" GROUP BY ALL")
        else:
            super().render(out, dialect)


class OrderByClause(Clause):
    keyword = " ORDER BY "


class LimitClause(Clause):
    """LIMIT / OFFSET; values are validated when set, rendering is dialect-specific."""

    def __init__(self) -> None:
        super().__init__()
        self.limit: int | None = None
        self.offset = 0

    def set_limit(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}", argument="limit")
        self.limit = limit

    def set_offset(self, offset: int) -> None:
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise InvalidArgumentError(
                f"offset must be a non-negative integer, got {offset!r}", argument="offset"
            )
        self.offset = offset

    def is_empty(self) -> bool:
        return self.limit is None and self.offset == 0

    def render(self, out: list[str], dialect: Dialect) -> None:
        text = dialect.limit_offset(self.limit, self.offset)
        if text:
            out.append(f" {text}")


class WithClause(Clause):
    """Common table expressions, rendered before the statement head."""

    separator = ",\n"

    def __init__(self) -> None:
        super().__init__()
        self.recursive = False

    def add_cte(self, name: str, sub: Statement, hint: MaterializationHint, recursive: bool) -> None:
        hint_text = f"{hint.value} " if hint is not MaterializationHint.NONE else ""
        self.add_fragment(Fragment.nested(f"{name} AS {hint_text}(\n", sub, "\n)"))
        self.recursive = self.recursive or recursive

    def render(self, out: list[str], dialect: Dialect) -> None:
        out.append("WITH RECURSIVE " if self.recursive else "WITH ")
        out.append(self.separator.join(f.render() for f in self._fragments))
        out.append("\n")


class UnionClause(Clause):
    separator = ""

    def add_union(self, sub: Statement, union_type: UnionType) -> None:
        self.add_fragment(Fragment.nested(f"\n{union_type.value}\n", sub))


class InsertValuesClause(Clause):
    """``(c1, c2) VALUES (e1, e2)``; one value expression per column."""

    def __init__(self) -> None:
        super().__init__()
        self._columns: list[str] = []

    def add_value(self, column: str, expr: str, *values: Any) -> None:
        self._columns.append(column)
        self.add(expr, *values)

    def add_nested_value(self, column: str, fragment: Fragment) -> None:
        self._columns.append(column)
        self.add_fragment(fragment)

    def is_empty(self) -> bool:
        return False

    def render(self, out: list[str], dialect: Dialect) -> None:
        if not self._fragments:
            out.append(dialect.empty_insert_values)
            return
        out.append(f" ({', '.join(self._columns)}) VALUES (")
        out.append(self.separator.join(f.render() for f in self._fragments))
        out.append(")")


class UpdateSetClause(Clause):
    keyword = " SET "


__all__ = [
    "Clause",
    "CountColumnsClause",
    "FromClause",
    "GroupByClause",
    "InsertValuesClause",
    "JoinClause",
    "LimitClause",
    "OrderByClause",
    "SelectColumnsClause",
    "TargetClause",
    "UnionClause",
    "UpdateSetClause",
    "WithClause",
]
