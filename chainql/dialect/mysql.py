"""MySQL / MariaDB dialect."""
from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from chainql.dialect.base import Dialect, JsonDialect, UpdateStyle, dollar_path, sql_string
from chainql.dialect.registry import DialectFactory
from chainql.schema.expressions import JsonType
from chainql.schema.json_path import JsonPath


class MySQLJsonDialect(JsonDialect):
    """JSON functions for MySQL; JSON and JSONB requests render identically."""

    name = "mysql"

    def format_path(self, path: JsonPath) -> str:
        return dollar_path(path)

    def merge(self, json_type: JsonType, column: str) -> str:
        return f"JSON_MERGE_PATCH({column}, ?)"

    def set_path(self, json_type: JsonType, column: str, path: JsonPath, create_missing: bool = True) -> str:
        func = "JSON_SET" if create_missing else "JSON_REPLACE"
        return f"{func}({column}, {sql_string(self.format_path(path))}, ?)"

    def remove_key(self, json_type: JsonType, column: str, key: str) -> str:
        path = sql_string(f"$.{key}")
        return f"JSON_REMOVE({column}, {path})"

    def remove_keys(self, json_type: JsonType, column: str, keys: Sequence[str]) -> str:
        paths = ", ".join(sql_string(f"$.{k}") for k in keys)
        return f"JSON_REMOVE({column}, {paths})"

    def remove_path(self, json_type: JsonType, column: str, path: JsonPath) -> str:
        return f"JSON_REMOVE({column}, {sql_string(self.format_path(path))})"

    def array_append(self, json_type: JsonType, column: str) -> str:
        return f"JSON_ARRAY_APPEND({column}, '$', ?)"

    def array_prepend(self, json_type: JsonType, column: str) -> str:
        return f"JSON_ARRAY_INSERT({column}, '$[0]', ?)"


_JSON = MySQLJsonDialect()


@DialectFactory.register("mysql")
class MySQLDialect(Dialect):
    """MySQL: backtick identifiers, ``UPDATE ... JOIN ... SET``."""

    name: ClassVar[str] = "mysql"
    quote_char: ClassVar[str] = "`"
    update_style: ClassVar[UpdateStyle] = UpdateStyle.JOIN
    product_names: ClassVar[tuple[str, ...]] = ("mysql", "mariadb")
    unbounded_limit: ClassVar[str | None] = "18446744073709551615"
    empty_insert_values: ClassVar[str] = " () VALUES ()"
    now_function: ClassVar[str] = "NOW()"

    @property
    def supports_uuid(self) -> bool:
        return True

    def uuid_function(self) -> str:
        return "UUID()"

    def current_schema_sql(self) -> str:
        return "SELECT DATABASE()"

    def regexp_expr(self, column: str) -> str:
        return f"{column} REGEXP ?"

    def not_regexp_expr(self, column: str) -> str:
        return f"{column} NOT REGEXP ?"

    def string_append(self, column: str) -> str:
        return f"CONCAT({column}, ?)"

    def string_prepend(self, column: str) -> str:
        return f"CONCAT(?, {column})"

    @property
    def json_dialect(self) -> JsonDialect:
        return _JSON
