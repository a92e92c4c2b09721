"""chainQL – fluent, dialect-aware SQL text generation.

Compose SELECT / INSERT / UPDATE / DELETE statements method by method and
get back SQL text with positional ``?`` placeholders plus the matching
parameter list.  chainQL never executes SQL.

Public API
----------
``Select``, ``Insert``, ``Update``, ``Delete``
    Statement builders.  Every mutator returns the builder; ``get_sql()``,
    ``get_params()`` and ``build()`` render it.

``DialectFactory``
    Resolves a :class:`Dialect` by name, from a driver's product name and
    major version, or from a SQLAlchemy engine.

Re-exported types
-----------------
``Logic``, ``Oper``, ``JoinType``, ``NullsOrder``, ``MaterializationHint``,
``JsonType``, ``JsonPath``, ``Range``, ``CompiledSQL``, the dialects, the
naming strategies, and all error classes.

Example::

    from chainql import Oper, Select

    query = Select("users").column("id").where("age", Oper.GT, 18).limit(10)
    cursor.execute(query.get_sql(), query.get_params())
"""

from __future__ import annotations

from chainql.builder import (
    CompiledSQL,
    Delete,
    Insert,
    JsonOperations,
    Select,
    Statement,
    Update,
)
from chainql.dialect import (
    AnsiDialect,
    CamelCaseNaming,
    Dialect,
    DialectFactory,
    IdentityNaming,
    JsonDialect,
    MySQLDialect,
    NamingConversion,
    PostgreSQLDialect,
    SnakeCaseNaming,
    SQLiteDialect,
    UpdateStyle,
)
from chainql.errors import ChainQLError, InvalidArgumentError, UnsupportedOperationError
from chainql.schema import (
    JoinType,
    JsonPath,
    JsonType,
    Logic,
    MaterializationHint,
    NullsOrder,
    Oper,
    Range,
    UnionType,
)

__all__ = [
    # Builders
    "Select",
    "Insert",
    "Update",
    "Delete",
    "Statement",
    "CompiledSQL",
    "JsonOperations",
    # Dialects
    "Dialect",
    "DialectFactory",
    "JsonDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "SQLiteDialect",
    "AnsiDialect",
    "UpdateStyle",
    # Naming
    "NamingConversion",
    "IdentityNaming",
    "SnakeCaseNaming",
    "CamelCaseNaming",
    # Value types
    "Logic",
    "Oper",
    "JoinType",
    "UnionType",
    "NullsOrder",
    "MaterializationHint",
    "JsonType",
    "JsonPath",
    "Range",
    # Errors
    "ChainQLError",
    "InvalidArgumentError",
    "UnsupportedOperationError",
]
