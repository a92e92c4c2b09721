"""Statement assembly: fragments, clause holders and the Statement skeleton.

The Template Method pattern (GoF) is used:
- ``Statement`` defines the assembly algorithm: render every clause in
  grammar order, then collect every clause's parameters in the same order.
- ``Select``, ``Insert``, ``Update`` and ``Delete`` only declare which clauses
  they own and in which order (``_clauses``).

Because text and parameters are produced by two passes over the *same*
ordered clause list, and each clause emits its nested-statement parameters
in the order their placeholders appear in its text, the global parameter
sequence always lines up with the ``?`` markers in the SQL.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from chainql.dialect import Dialect, default_dialect
from chainql.errors import InvalidArgumentError

logger = logging.getLogger("chainql")


def is_blank(value: Any) -> bool:
    """``None`` or a whitespace-only string."""
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(value: str | None, argument: str) -> str:
    """Return ``value`` or raise if it is ``None`` or blank."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{argument} must be a non-empty string", argument=argument)
    return value


def aliased(name: str, alias: str | None) -> str:
    return f"{name} AS {alias}" if alias else name


# ---------------------------------------------------------------------------
# Parameters and results
# ---------------------------------------------------------------------------


@dataclass
class ParameterSink:
    """Append-only ordered parameter sequence shared by all clauses."""

    values: list[Any] = field(default_factory=list)

    def add(self, *values: Any) -> None:
        self.values.extend(values)

    def extend(self, values: Iterable[Any]) -> None:
        self.values.extend(values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)


@dataclass
class CompiledSQL:
    """The output of building a statement.

    Attributes:
        sql: SQL text with positional ``?`` placeholders.
        params: Values for the placeholders, in order.
        dialect: Name of the dialect the SQL was rendered for.
    """

    sql: str
    params: list[Any]
    dialect: str

    def __iter__(self) -> Iterator[Any]:
        # Allows ``cursor.execute(*compiled)``.
        yield self.sql
        yield tuple(self.params)


@dataclass(frozen=True)
class Fragment:
    """One immutable piece of clause text and the values it binds.

    A fragment either holds plain ``text`` or wraps a nested statement as
    ``text + sub + suffix``.  ``params`` bind placeholders in the suffix (or
    in ``text`` when there is no nested statement), so a nested statement's
    parameters always come first.
    """

    text: str
    params: tuple[Any, ...] = ()
    sub: Statement | None = None
    suffix: str = ""

    @classmethod
    def nested(cls, prefix: str, sub: Statement, suffix: str = "", params: Sequence[Any] = ()) -> Fragment:
        return cls(prefix, tuple(params), sub, suffix)

    def render(self) -> str:
        if self.sub is None:
            return self.text
        return f"{self.text}{self.sub.get_sql()}{self.suffix}"

    def values(self) -> list[Any]:
        if self.sub is None:
            return list(self.params)
        return [*self.sub.get_params(), *self.params]


# ---------------------------------------------------------------------------
# Clause holder contract
# ---------------------------------------------------------------------------


class Clause:
    """Generic accumulator of fragments for one clause kind.

    Subclasses set ``keyword`` (emitted once, before the first fragment) and
    ``separator`` (between fragments), or override :meth:`render` entirely.
    An empty clause renders nothing and contributes no parameters.
    """

    keyword: str = ""
    separator: str = ", "

    def __init__(self) -> None:
        self._fragments: list[Fragment] = []

    def add(self, text: str, *values: Any) -> None:
        self._fragments.append(Fragment(text, values))

    def add_fragment(self, fragment: Fragment) -> None:
        self._fragments.append(fragment)

    def is_empty(self) -> bool:
        return not self._fragments

    def render(self, out: list[str], dialect: Dialect) -> None:
        out.append(self.keyword)
        out.append(self.separator.join(f.render() for f in self._fragments))

    def append_params(self, sink: ParameterSink) -> None:
        for fragment in self._fragments:
            sink.extend(fragment.values())


# ---------------------------------------------------------------------------
# Statement skeleton
# ---------------------------------------------------------------------------


class Statement(ABC):
    """Abstract base for the four statement builders.

    Args:
        dialect: Backend strategy; defaults to PostgreSQL.
    """

    kind: str = "STATEMENT"

    def __init__(self, dialect: Dialect | None = None) -> None:
        self.dialect: Dialect = dialect if dialect is not None else default_dialect()

    @abstractmethod
    def _clauses(self) -> list[Clause]:
        """Clause holders in grammar order."""

    def _assemble(self, clauses: list[Clause]) -> tuple[str, list[Any]]:
        out: list[str] = []
        for clause in clauses:
            if not clause.is_empty():
                clause.render(out, self.dialect)
        sink = ParameterSink()
        for clause in clauses:
            clause.append_params(sink)
        return "".join(out), sink.values

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_sql(self) -> str:
        return self._assemble(self._clauses())[0]

    def get_params(self) -> list[Any]:
        return self._assemble(self._clauses())[1]

    def build(self) -> CompiledSQL:
        """Render SQL and parameters together."""
        sql, params = self._assemble(self._clauses())
        logger.debug("Built %s for %s with %d params", self.kind, self.dialect.name, len(params))
        return CompiledSQL(sql=sql, params=params, dialect=self.dialect.name)

    def __str__(self) -> str:
        return self.get_sql()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_sql()!r})"
