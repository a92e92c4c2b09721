"""Dialect abstractions: the Dialect model and the JsonDialect strategy.

The Strategy pattern is used:
- ``Dialect`` renders the backend-specific pieces of a statement (quoting,
  LIMIT/OFFSET, UUID and sequence expressions, regex operators, UPDATE
  layout) and gates version-dependent features.
- ``JsonDialect`` renders JSON/JSONB update expressions and native paths.

Dialects are immutable pydantic models, so a single instance can be shared
by any number of statements and threads.  Every expression a dialect returns
uses ``?`` placeholders; the number of placeholders each method introduces is
part of its contract because the builders count them.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from chainql.dialect.naming import NamingConversion, SnakeCaseNaming
from chainql.errors import UnsupportedOperationError
from chainql.schema.expressions import JsonType
from chainql.schema.json_path import JsonPath


class UpdateStyle(str, Enum):
    """Where an UPDATE places its extra tables."""

    #: ``UPDATE t SET ... FROM x JOIN y ... WHERE`` (PostgreSQL, SQLite).
    FROM = "FROM"
    #: ``UPDATE t JOIN y ... SET ... WHERE`` (MySQL).
    JOIN = "JOIN"


def wrap_if_missing(name: str, quote: str) -> str:
    """Wrap ``name`` in ``quote`` unless it already starts / ends with it."""
    prefix = "" if name.startswith(quote) else quote
    suffix = "" if name.endswith(quote) and len(name) > 1 else quote
    return f"{prefix}{name}{suffix}"


def dollar_path(path: JsonPath) -> str:
    """Format a path in SQL/JSON ``$`` syntax: ``$.a.b[0]``."""
    parts = ["$"]
    for segment in path.segments:
        parts.append(f"[{segment}]" if isinstance(segment, int) else f".{segment}")
    return "".join(parts)


def sql_string(text: str) -> str:
    """Render ``text`` as a single-quoted SQL literal."""
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


# ---------------------------------------------------------------------------
# JSON strategy
# ---------------------------------------------------------------------------


class JsonDialect(ABC):
    """Abstract base for JSON/JSONB expression builders.

    Every operation receives the current expression for the column (``column``)
    and returns a new expression wrapping it.  The default implementations
    raise :class:`UnsupportedOperationError`; subclasses override what their
    backend can express.
    """

    #: Dialect name used in error messages.
    name: ClassVar[str] = "generic"

    def unsupported(self, feature: str, json_type: JsonType | None = None) -> UnsupportedOperationError:
        if json_type is not None:
            feature = f"{feature} on {json_type.value.upper()}"
        return UnsupportedOperationError(self.name, feature)

    def type_cast(self, json_type: JsonType) -> str:
        """Placeholder expression binding a JSON value of ``json_type``."""
        return "?"

    @abstractmethod
    def format_path(self, path: JsonPath) -> str:
        """Translate a backend-neutral path into native path syntax."""

    def merge(self, json_type: JsonType, column: str) -> str:
        raise self.unsupported("JSON merge", json_type)

    def set_path(self, json_type: JsonType, column: str, path: JsonPath, create_missing: bool = True) -> str:
        raise self.unsupported("JSON set path", json_type)

    def remove_key(self, json_type: JsonType, column: str, key: str) -> str:
        raise self.unsupported("JSON remove key", json_type)

    def remove_keys(self, json_type: JsonType, column: str, keys: Sequence[str]) -> str:
        raise self.unsupported("JSON remove keys", json_type)

    def remove_path(self, json_type: JsonType, column: str, path: JsonPath) -> str:
        raise self.unsupported("JSON remove path", json_type)

    def array_append(self, json_type: JsonType, column: str) -> str:
        raise self.unsupported("JSON array append", json_type)

    def array_prepend(self, json_type: JsonType, column: str) -> str:
        raise self.unsupported("JSON array prepend", json_type)

    def strip_nulls(self, json_type: JsonType, column: str) -> str:
        raise self.unsupported("JSON strip nulls", json_type)


# ---------------------------------------------------------------------------
# Dialect model
# ---------------------------------------------------------------------------


class Dialect(BaseModel, ABC):
    """Abstract base for database dialects.

    Attributes:
        major_version: Server major version; gates version-dependent
            features.  ``0`` means unknown and enables only the baseline.
        naming: Identifier conversion applied to mapping keys
            (``set_map``).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: ClassVar[str]
    quote_char: ClassVar[str] = '"'
    update_style: ClassVar[UpdateStyle] = UpdateStyle.FROM
    #: Lower-case substrings of a driver's product name identifying this backend.
    product_names: ClassVar[tuple[str, ...]] = ()

    major_version: int = Field(default=0, ge=0)
    naming: NamingConversion = Field(default_factory=SnakeCaseNaming)

    @classmethod
    def matches_product(cls, product_name: str) -> bool:
        lowered = product_name.lower()
        return any(p in lowered for p in cls.product_names)

    def unsupported(self, feature: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(self.name, feature)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def quote_table_name(self, name: str) -> str:
        return wrap_if_missing(name, self.quote_char)

    def quote_column_name(self, name: str) -> str:
        return wrap_if_missing(name, self.quote_char)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    #: Stand-in for "no limit" when only an offset is requested.
    unbounded_limit: ClassVar[str | None] = None

    def limit_offset(self, limit: int | None, offset: int = 0) -> str:
        """Render the pagination tail (``LIMIT n [OFFSET m]`` family).

        Returns an empty string when neither a limit nor a positive offset
        is set.
        """
        if limit is None:
            if offset <= 0:
                return ""
            if self.unbounded_limit is None:
                return f"OFFSET {offset}"
            return f"LIMIT {self.unbounded_limit} OFFSET {offset}"
        if offset > 0:
            return f"LIMIT {limit} OFFSET {offset}"
        return f"LIMIT {limit}"

    # ------------------------------------------------------------------
    # Generated values
    # ------------------------------------------------------------------

    @property
    def supports_uuid(self) -> bool:
        return False

    def uuid_function(self) -> str:
        """SQL expression generating a UUID server-side."""
        raise self.unsupported("UUID generation")

    def select_uuid_sql(self) -> str:
        return f"SELECT {self.uuid_function()}"

    @property
    def supports_sequence(self) -> bool:
        return False

    def sequence_next_value(self, sequence: str) -> str:
        """SQL expression advancing ``sequence``."""
        raise self.unsupported("sequences")

    def select_sequence_next_value_sql(self, sequence: str) -> str:
        return f"SELECT {self.sequence_next_value(sequence)}"

    @abstractmethod
    def current_schema_sql(self) -> str:
        """Query returning the current schema / database name."""

    # ------------------------------------------------------------------
    # Operators and casts
    # ------------------------------------------------------------------

    def regexp_expr(self, column: str) -> str:
        """Regex-match predicate with one placeholder for the pattern."""
        raise self.unsupported("regular expression matching")

    def not_regexp_expr(self, column: str) -> str:
        raise self.unsupported("regular expression matching")

    def binary_type_cast(self) -> str:
        return "?"

    #: Value list of an INSERT without any column.
    empty_insert_values: ClassVar[str] = " DEFAULT VALUES"
    #: Current-timestamp expression.
    now_function: ClassVar[str] = "CURRENT_TIMESTAMP"

    def array_literal(self, size: int) -> str:
        """Array constructor binding ``size`` placeholders."""
        raise self.unsupported("array values")

    def array_append(self, column: str) -> str:
        raise self.unsupported("array values")

    def array_remove(self, column: str) -> str:
        raise self.unsupported("array values")

    def string_append(self, column: str) -> str:
        return f"{column} || ?"

    def string_prepend(self, column: str) -> str:
        return f"? || {column}"

    # ------------------------------------------------------------------
    # Feature gates
    # ------------------------------------------------------------------

    @property
    def supports_group_by_all(self) -> bool:
        return False

    @property
    def supports_materialized_cte(self) -> bool:
        return False

    @property
    @abstractmethod
    def json_dialect(self) -> JsonDialect:
        """The JSON strategy for this backend."""

    def __str__(self) -> str:
        return f"{self.name}:{self.major_version}" if self.major_version else self.name
