"""SQLite dialect."""
from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from chainql.dialect.base import Dialect, JsonDialect, dollar_path, sql_string
from chainql.dialect.registry import DialectFactory
from chainql.schema.expressions import JsonType
from chainql.schema.json_path import JsonPath


class SQLiteJsonDialect(JsonDialect):
    """JSON1 functions for SQLite.

    Note: ``json_insert`` cannot shift array elements, so prepending is
    unsupported, as is stripping nulls.
    """

    name = "sqlite"

    def format_path(self, path: JsonPath) -> str:
        return dollar_path(path)

    def merge(self, json_type: JsonType, column: str) -> str:
        return f"json_patch({column}, ?)"

    def set_path(self, json_type: JsonType, column: str, path: JsonPath, create_missing: bool = True) -> str:
        func = "json_set" if create_missing else "json_replace"
        return f"{func}({column}, {sql_string(self.format_path(path))}, ?)"

    def remove_key(self, json_type: JsonType, column: str, key: str) -> str:
        path = sql_string(f"$.{key}")
        return f"json_remove({column}, {path})"

    def remove_keys(self, json_type: JsonType, column: str, keys: Sequence[str]) -> str:
        paths = ", ".join(sql_string(f"$.{k}") for k in keys)
        return f"json_remove({column}, {paths})"

    def remove_path(self, json_type: JsonType, column: str, path: JsonPath) -> str:
        return f"json_remove({column}, {sql_string(self.format_path(path))})"

    def array_append(self, json_type: JsonType, column: str) -> str:
        return f"json_insert({column}, '$[#]', ?)"


_JSON = SQLiteJsonDialect()


@DialectFactory.register("sqlite")
class SQLiteDialect(Dialect):
    """SQLite: double-quoted identifiers, ``UPDATE ... FROM`` (3.33+).

    ``REGEXP`` requires the application to register a ``regexp()`` function
    on the connection; SQLite itself only defines the operator.
    """

    name: ClassVar[str] = "sqlite"
    product_names: ClassVar[tuple[str, ...]] = ("sqlite",)
    unbounded_limit: ClassVar[str | None] = "-1"

    def current_schema_sql(self) -> str:
        return "SELECT 'main'"

    def regexp_expr(self, column: str) -> str:
        return f"{column} REGEXP ?"

    def not_regexp_expr(self, column: str) -> str:
        return f"{column} NOT REGEXP ?"

    @property
    def json_dialect(self) -> JsonDialect:
        return _JSON
