"""Standard SQL dialect (``OFFSET ... FETCH``).

Used for backends that follow SQL:2008 pagination, such as Oracle 12c+,
SQL Server 2012+, DB2 and H2.  No JSON modification functions are assumed.
"""
from __future__ import annotations

from typing import ClassVar

from chainql.dialect.base import Dialect, JsonDialect, dollar_path
from chainql.dialect.registry import DialectFactory
from chainql.schema.json_path import JsonPath


class AnsiJsonDialect(JsonDialect):
    name = "ansi"

    def format_path(self, path: JsonPath) -> str:
        return dollar_path(path)


_JSON = AnsiJsonDialect()


@DialectFactory.register("ansi")
class AnsiDialect(Dialect):
    """SQL-standard rendering: ``OFFSET m ROWS FETCH NEXT n ROWS ONLY``."""

    name: ClassVar[str] = "ansi"
    product_names: ClassVar[tuple[str, ...]] = ("oracle", "sql server", "mssql", "db2", "h2")

    def limit_offset(self, limit: int | None, offset: int = 0) -> str:
        if limit is None:
            return f"OFFSET {offset} ROWS" if offset > 0 else ""
        return f"OFFSET {offset} ROWS FETCH NEXT {limit} ROWS ONLY"

    @property
    def supports_sequence(self) -> bool:
        return True

    def sequence_next_value(self, sequence: str) -> str:
        return f"NEXT VALUE FOR {sequence}"

    def current_schema_sql(self) -> str:
        return "SELECT CURRENT_SCHEMA"

    @property
    def json_dialect(self) -> JsonDialect:
        return _JSON
