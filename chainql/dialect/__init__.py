"""Dialect strategies and their registry.

Importing this package registers the built-in dialects with
:class:`~chainql.dialect.registry.DialectFactory`.
"""

from chainql.dialect.ansi import AnsiDialect
from chainql.dialect.base import Dialect, JsonDialect, UpdateStyle
from chainql.dialect.mysql import MySQLDialect
from chainql.dialect.naming import (
    CamelCaseNaming,
    IdentityNaming,
    NamingConversion,
    SnakeCaseNaming,
)
from chainql.dialect.postgres import PostgreSQLDialect
from chainql.dialect.registry import DialectFactory
from chainql.dialect.sqlite import SQLiteDialect

__all__ = [
    "AnsiDialect",
    "CamelCaseNaming",
    "Dialect",
    "DialectFactory",
    "IdentityNaming",
    "JsonDialect",
    "MySQLDialect",
    "NamingConversion",
    "PostgreSQLDialect",
    "SQLiteDialect",
    "SnakeCaseNaming",
    "UpdateStyle",
    "default_dialect",
]

_DEFAULT = PostgreSQLDialect()


def default_dialect() -> Dialect:
    """Dialect used by statements created without an explicit one."""
    return _DEFAULT
