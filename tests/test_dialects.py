"""Unit tests for the dialect strategies."""

from __future__ import annotations

import pydantic
import pytest

from chainql import Logic, MySQLDialect, PostgreSQLDialect, Select, UnsupportedOperationError, UpdateStyle

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class TestQuoting:
    def test_postgres(self, pg):
        assert pg.quote_table_name("users") == '"users"'
        assert pg.quote_column_name('"id"') == '"id"'

    def test_mysql(self, mysql):
        assert mysql.quote_table_name("users") == "`users`"
        assert mysql.quote_column_name("`id`") == "`id`"

    def test_partially_quoted(self, sqlite):
        assert sqlite.quote_column_name('"id') == '"id"'
        assert sqlite.quote_column_name('id"') == '"id"'


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("fixture", "limit", "offset", "expected"),
    [
        ("pg", 10, 0, "LIMIT 10"),
        ("pg", 10, 5, "LIMIT 10 OFFSET 5"),
        ("pg", None, 0, ""),
        ("mysql", 10, 5, "LIMIT 10 OFFSET 5"),
        ("sqlite", None, 5, "LIMIT -1 OFFSET 5"),
        ("ansi", 10, 0, "OFFSET 0 ROWS FETCH NEXT 10 ROWS ONLY"),
        ("ansi", None, 0, ""),
    ],
)
def test_limit_offset(request, fixture, limit, offset, expected):
    dialect = request.getfixturevalue(fixture)
    assert dialect.limit_offset(limit, offset) == expected


# ---------------------------------------------------------------------------
# Generated values
# ---------------------------------------------------------------------------


class TestGeneratedValues:
    def test_uuid(self, pg, pg11, pg18, mysql):
        assert pg.select_uuid_sql() == "SELECT gen_random_uuid()"
        assert pg11.uuid_function() == "uuid_generate_v4()"
        assert pg18.uuid_function() == "uuidv7()"
        assert mysql.select_uuid_sql() == "SELECT UUID()"
        assert pg.supports_uuid and mysql.supports_uuid

    def test_uuid_unsupported(self, sqlite, ansi):
        assert not sqlite.supports_uuid
        with pytest.raises(UnsupportedOperationError):
            ansi.select_uuid_sql()

    def test_sequences(self, pg, ansi, mysql):
        assert pg.select_sequence_next_value_sql("order_seq") == "SELECT nextval('order_seq')"
        assert ansi.sequence_next_value("order_seq") == "NEXT VALUE FOR order_seq"
        assert not mysql.supports_sequence
        with pytest.raises(UnsupportedOperationError) as exc_info:
            mysql.select_sequence_next_value_sql("order_seq")
        assert str(exc_info.value) == "mysql does not support sequences"

    def test_current_schema(self, pg, mysql, sqlite, ansi):
        assert pg.current_schema_sql() == "SELECT current_schema()"
        assert mysql.current_schema_sql() == "SELECT DATABASE()"
        assert sqlite.current_schema_sql() == "SELECT 'main'"
        assert ansi.current_schema_sql() == "SELECT CURRENT_SCHEMA"


# ---------------------------------------------------------------------------
# Feature gates and configuration
# ---------------------------------------------------------------------------


class TestFeatureGates:
    def test_materialized_cte_from_12(self, pg, pg11, mysql):
        assert pg.supports_materialized_cte
        assert not pg11.supports_materialized_cte
        assert not mysql.supports_materialized_cte

    def test_group_by_all_from_17(self, pg, pg17):
        assert pg17.supports_group_by_all
        assert not pg.supports_group_by_all

    def test_update_style(self, pg, mysql, sqlite):
        assert pg.update_style is UpdateStyle.FROM
        assert sqlite.update_style is UpdateStyle.FROM
        assert mysql.update_style is UpdateStyle.JOIN

    def test_dialect_is_immutable(self, pg):
        with pytest.raises(pydantic.ValidationError):
            pg.major_version = 9

    def test_negative_version_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            MySQLDialect(major_version=-1)

    def test_str(self, pg):
        assert str(pg) == "postgresql:16"
        assert str(PostgreSQLDialect()) == "postgresql"


# ---------------------------------------------------------------------------
# Substitutability
# ---------------------------------------------------------------------------


def _same_calls(dialect):
    return (
        Select("users", "u", dialect=dialect)
        .column("u.id")
        .eq("u.tenant", "acme")
        .like("u.name", "jo")
        .in_("u.role", ["admin", "owner"])
        .start_with("u.email", "", Logic.OR)
        .order_by("u.id")
        .limit_offset(20, 40)
    )


def test_dialects_share_params_and_differ_only_in_syntax(pg, mysql, sqlite, ansi):
    queries = [_same_calls(d) for d in (pg, mysql, sqlite, ansi)]
    params = [q.get_params() for q in queries]
    assert all(p == ["acme", "%jo%", "admin", "owner"] for p in params)
    heads = {q.get_sql().split(" ORDER BY ")[0] for q in queries}
    assert len(heads) == 1
    assert queries[0].get_sql().endswith("ORDER BY u.id LIMIT 20 OFFSET 40")
    assert queries[3].get_sql().endswith("ORDER BY u.id OFFSET 40 ROWS FETCH NEXT 20 ROWS ONLY")
