"""Enums and small value types shared by the builders and dialects.

Fragments handed to the builders are opaque text.  The only structure the
engine tracks is how many ``?`` placeholders an operator template consumes,
which is why every :class:`Oper` carries its own template.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

#: Positional placeholder used in every rendered fragment.
PLACEHOLDER = "?"

# ---------------------------------------------------------------------------
# Predicate composition
# ---------------------------------------------------------------------------


class Logic(str, Enum):
    """Logical connective placed before every condition except the first."""

    AND = "AND"
    OR = "OR"


class Oper(str, Enum):
    """Comparison operators usable in the ``(column, oper, value)`` forms."""

    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"
    LIKE = "LIKE"
    NOT_LIKE = "NOT_LIKE"
    IN = "IN"
    NOT_IN = "NOT_IN"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"
    BETWEEN = "BETWEEN"
    EXISTS = "EXISTS"

    @property
    def template(self) -> str:
        """The ``str.format`` template rendered by :meth:`make_expr`."""
        return _OPER_TEMPLATES[self]

    @property
    def value_count(self) -> int:
        """Number of placeholders a scalar rendering of this operator consumes."""
        return self.template.count(PLACEHOLDER)

    @property
    def has_value(self) -> bool:
        return self.value_count > 0

    def make_expr(self, column: str, values: str = PLACEHOLDER) -> str:
        """Render the operator against ``column``.

        Args:
            column: Left-hand side expression (or subquery text for EXISTS).
            values: Placeholder list substituted into IN / NOT IN.

        Returns:
            The predicate text.
        """
        return self.template.format(column=column, values=values)


_OPER_TEMPLATES: dict[Oper, str] = {
    Oper.EQ: "{column} = ?",
    Oper.NE: "{column} <> ?",
    Oper.GT: "{column} > ?",
    Oper.GTE: "{column} >= ?",
    Oper.LT: "{column} < ?",
    Oper.LTE: "{column} <= ?",
    Oper.LIKE: "{column} LIKE ?",
    Oper.NOT_LIKE: "{column} NOT LIKE ?",
    Oper.IN: "{column} IN ({values})",
    Oper.NOT_IN: "{column} NOT IN ({values})",
    Oper.IS_NULL: "{column} IS NULL",
    Oper.IS_NOT_NULL: "{column} IS NOT NULL",
    Oper.BETWEEN: "{column} BETWEEN ? AND ?",
    Oper.EXISTS: "EXISTS ({column})",
}

#: Operators whose placeholder count depends on a collection.
COLLECTION_OPS: frozenset[Oper] = frozenset({Oper.IN, Oper.NOT_IN})


@dataclass(frozen=True)
class Range:
    """Closed range used by ``between``; either bound may be ``None``."""

    begin: Any = None
    end: Any = None


# ---------------------------------------------------------------------------
# Clause keywords
# ---------------------------------------------------------------------------


class JoinType(str, Enum):
    """Join kinds; the value is the SQL keyword."""

    INNER = "JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    FULL = "FULL JOIN"
    CROSS = "CROSS JOIN"


class UnionType(str, Enum):
    UNION = "UNION"
    UNION_ALL = "UNION ALL"


class NullsOrder(str, Enum):
    """Placement of NULLs in ORDER BY; ``NONE`` is not a valid request."""

    NONE = ""
    NULLS_FIRST = "NULLS FIRST"
    NULLS_LAST = "NULLS LAST"


class MaterializationHint(str, Enum):
    """CTE materialization directive (PostgreSQL 12+)."""

    NONE = ""
    MATERIALIZED = "MATERIALIZED"
    NOT_MATERIALIZED = "NOT MATERIALIZED"


class JsonType(str, Enum):
    """Textual JSON vs. binary JSONB column type."""

    JSON = "json"
    JSONB = "jsonb"
