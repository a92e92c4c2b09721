"""PostgreSQL dialect."""
from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar

from chainql.dialect.base import Dialect, JsonDialect, sql_string
from chainql.dialect.registry import DialectFactory
from chainql.schema.expressions import JsonType
from chainql.schema.json_path import JsonPath


class PostgresJsonDialect(JsonDialect):
    """JSON expressions for PostgreSQL.

    Only JSONB has modification operators; on plain JSON every operation
    except the cast and ``json_strip_nulls`` is unsupported.
    """

    name = "postgresql"

    def _require_jsonb(self, json_type: JsonType, feature: str) -> None:
        if json_type is not JsonType.JSONB:
            raise self.unsupported(feature, json_type)

    def type_cast(self, json_type: JsonType) -> str:
        return f"?::{json_type.value}"

    def format_path(self, path: JsonPath) -> str:
        return "{" + ",".join(str(s) for s in path.segments) + "}"

    def merge(self, json_type: JsonType, column: str) -> str:
        self._require_jsonb(json_type, "JSON merge")
        return f"{column} || ?::jsonb"

    def set_path(self, json_type: JsonType, column: str, path: JsonPath, create_missing: bool = True) -> str:
        self._require_jsonb(json_type, "JSON set path")
        flag = "true" if create_missing else "false"
        return f"jsonb_set({column}, {sql_string(self.format_path(path))}, ?::jsonb, {flag})"

    def remove_key(self, json_type: JsonType, column: str, key: str) -> str:
        self._require_jsonb(json_type, "JSON remove key")
        return f"{column} - {sql_string(key)}"

    def remove_keys(self, json_type: JsonType, column: str, keys: Sequence[str]) -> str:
        self._require_jsonb(json_type, "JSON remove keys")
        return f"{column} - ARRAY[{', '.join(sql_string(k) for k in keys)}]"

    def remove_path(self, json_type: JsonType, column: str, path: JsonPath) -> str:
        self._require_jsonb(json_type, "JSON remove path")
        return f"{column} #- {sql_string(self.format_path(path))}"

    def array_append(self, json_type: JsonType, column: str) -> str:
        self._require_jsonb(json_type, "JSON array append")
        return f"{column} || ?::jsonb"

    def array_prepend(self, json_type: JsonType, column: str) -> str:
        self._require_jsonb(json_type, "JSON array prepend")
        return f"?::jsonb || {column}"

    def strip_nulls(self, json_type: JsonType, column: str) -> str:
        return f"{json_type.value}_strip_nulls({column})"


_JSON = PostgresJsonDialect()


@DialectFactory.register("postgresql")
class PostgreSQLDialect(Dialect):
    """PostgreSQL: double-quoted identifiers, ``UPDATE ... FROM``, JSONB.

    Version gates: ``gen_random_uuid()`` from 13, ``uuidv7()`` from 18,
    CTE materialization hints from 12, ``GROUP BY ALL`` from 17.
    """

    name: ClassVar[str] = "postgresql"
    product_names: ClassVar[tuple[str, ...]] = ("postgres",)

    @property
    def supports_uuid(self) -> bool:
        return True

    def uuid_function(self) -> str:
        if self.major_version >= 18:
            return "uuidv7()"
        if self.major_version >= 13:
            return "gen_random_uuid()"
        return "uuid_generate_v4()"

    @property
    def supports_sequence(self) -> bool:
        return True

    def sequence_next_value(self, sequence: str) -> str:
        return f"nextval({sql_string(sequence)})"

    def current_schema_sql(self) -> str:
        return "SELECT current_schema()"

    def regexp_expr(self, column: str) -> str:
        return f"{column} ~ ?"

    def not_regexp_expr(self, column: str) -> str:
        return f"{column} !~ ?"

    def binary_type_cast(self) -> str:
        return "?::bytea"

    now_function: ClassVar[str] = "now()"

    def array_literal(self, size: int) -> str:
        return f"ARRAY[{', '.join(['?'] * size)}]"

    def array_append(self, column: str) -> str:
        return f"array_append({column}, ?)"

    def array_remove(self, column: str) -> str:
        return f"array_remove({column}, ?)"

    @property
    def supports_group_by_all(self) -> bool:
        return self.major_version >= 17

    @property
    def supports_materialized_cte(self) -> bool:
        return self.major_version >= 12

    @property
    def json_dialect(self) -> JsonDialect:
        return _JSON
