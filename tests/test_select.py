"""Unit tests for the SELECT builder and its clause holders."""

from __future__ import annotations

import pytest

from chainql import (
    CompiledSQL,
    InvalidArgumentError,
    JoinType,
    MaterializationHint,
    NullsOrder,
    Select,
    UnsupportedOperationError,
)

# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------


class TestColumns:
    def test_defaults_to_star(self):
        assert Select("t").get_sql() == "SELECT * FROM t"

    def test_column_helpers(self):
        q = Select("t").column_as("a", "x").column_sum("b", "s").column_count()
        assert q.get_sql() == "SELECT a AS x, SUM(b) AS s, COUNT(1) AS cnt FROM t"

    def test_aggregates(self):
        q = (
            Select("t")
            .column_avg("a")
            .column_max("b", "hi")
            .column_min("c", "lo")
            .column_count_distinct("d", "n")
            .column_aggregate("STRING_AGG", "e, ','", "names")
        )
        assert q.get_sql() == (
            "SELECT AVG(a), MAX(b) AS hi, MIN(c) AS lo, COUNT(DISTINCT d) AS n, "
            "STRING_AGG(e, ',') AS names FROM t"
        )

    def test_distinct(self):
        assert Select("t").distinct().columns("a", "b").get_sql() == "SELECT DISTINCT a, b FROM t"

    def test_select_all_and_no_table(self):
        assert Select().select_all().get_sql() == "SELECT *"
        assert Select().column("1").get_sql() == "SELECT 1"

    def test_empty_column_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Select("t").column("")

    def test_column_sub_query_params_come_first(self):
        counter = Select("o").column("count(1)").where("o.uid = u.id AND o.kind = ?", "x")
        q = Select("u").column("id").column_sub_query(counter, "n").eq("active", 1)
        assert q.get_sql() == (
            "SELECT id, (SELECT count(1) FROM o WHERE o.uid = u.id AND o.kind = ?) AS n FROM u WHERE active = ?"
        )
        assert q.get_params() == ["x", 1]


# ---------------------------------------------------------------------------
# FROM / JOIN
# ---------------------------------------------------------------------------


class TestSources:
    def test_alias(self):
        assert Select("users", "u").get_sql() == "SELECT * FROM users AS u"

    def test_multiple_tables(self):
        assert Select("a").from_("b", "x").get_sql() == "SELECT * FROM a, b AS x"

    def test_of_sub_query(self):
        sub = Select("t").eq("a", 1)
        q = Select.of_sub_query(sub, "x").eq("x.b", 2)
        assert q.get_sql() == "SELECT * FROM (SELECT * FROM t WHERE a = ?) AS x WHERE x.b = ?"
        assert q.get_params() == [1, 2]

    def test_of_sub_query_inherits_dialect(self, mysql):
        assert Select.of_sub_query(Select("t", dialect=mysql), "x").dialect is mysql

    def test_sub_query_requires_alias(self):
        with pytest.raises(InvalidArgumentError):
            Select().from_sub_query(Select("t"), "")

    def test_empty_table_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Select("")

    def test_join_kinds(self):
        q = (
            Select("users", "u")
            .left_join("orders", "o.user_id = u.id", alias="o")
            .inner_join("items i", "i.order_id = o.id")
            .right_join("r", "r.id = u.id")
            .full_join("f", "f.id = u.id")
            .cross_join("c")
        )
        assert q.get_sql() == (
            "SELECT * FROM users AS u LEFT JOIN orders AS o ON o.user_id = u.id"
            " JOIN items i ON i.order_id = o.id RIGHT JOIN r ON r.id = u.id"
            " FULL JOIN f ON f.id = u.id CROSS JOIN c"
        )

    def test_join_using_and_natural(self):
        q = Select("a").join_using("b", "id", "tenant").natural_join("c", JoinType.LEFT)
        assert q.get_sql() == "SELECT * FROM a JOIN b USING (id, tenant) NATURAL LEFT JOIN c"

    def test_join_type_by_name(self):
        assert "LEFT JOIN b" in Select("a").join("b", "b.id = a.id", join_type="left").get_sql()

    def test_cross_join_rejects_condition(self):
        with pytest.raises(InvalidArgumentError):
            Select("a").join("b", "b.id = a.id", join_type=JoinType.CROSS)

    def test_join_using_requires_columns(self):
        with pytest.raises(InvalidArgumentError):
            Select("a").join_using("b")

    def test_join_params_precede_where(self):
        q = Select("a").eq("a.x", 2).join("b", "b.kind = ?", params=["k"])
        assert q.get_sql() == "SELECT * FROM a JOIN b ON b.kind = ? WHERE a.x = ?"
        assert q.get_params() == ["k", 2]

    def test_join_sub_query(self):
        paid = Select("orders").column("user_id").gt("total", 100)
        q = (
            Select("users", "u")
            .join_sub_query(paid, "o", "o.user_id = u.id AND o.flag = ?", params=[True])
            .eq("u.active", 1)
        )
        assert q.get_sql() == (
            "SELECT * FROM users AS u JOIN (SELECT user_id FROM orders WHERE total > ?) AS o"
            " ON o.user_id = u.id AND o.flag = ? WHERE u.active = ?"
        )
        assert q.get_params() == [100, True, 1]


# ---------------------------------------------------------------------------
# GROUP BY / ORDER BY
# ---------------------------------------------------------------------------


class TestGrouping:
    def test_group_by(self):
        assert Select("t").group_by("a", "b").get_sql() == "SELECT * FROM t GROUP BY a, b"

    def test_group_by_all_gated_by_version(self, pg, pg17, mysql):
        assert Select("t", dialect=pg17).column("a").group_by_all().get_sql() == "SELECT a FROM t GROUP BY ALL"
        for dialect in (pg, mysql):
            with pytest.raises(UnsupportedOperationError) as exc_info:
                Select("t", dialect=dialect).group_by_all()
            assert "GROUP BY ALL" in str(exc_info.value)

    def test_group_by_all_excludes_explicit_groups(self, pg17):
        with pytest.raises(InvalidArgumentError):
            Select("t", dialect=pg17).group_by("a").group_by_all()

    def test_order_by_variants(self):
        q = (
            Select("t")
            .order_by_desc("created_at")
            .order_by_asc("id")
            .order_by_nulls("score", False, NullsOrder.NULLS_FIRST)
            .order_by_position(2)
            .order_by_collate("name", '"C"')
            .order_by("RANDOM()")
        )
        assert q.get_sql() == (
            'SELECT * FROM t ORDER BY created_at DESC, id ASC, score DESC NULLS FIRST, 2 ASC,'
            ' name COLLATE "C" ASC, RANDOM()'
        )

    def test_nulls_none_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Select("t").order_by_nulls("a", True, NullsOrder.NONE)

    def test_position_must_be_positive(self):
        with pytest.raises(InvalidArgumentError):
            Select("t").order_by_position(0)


# ---------------------------------------------------------------------------
# LIMIT / OFFSET
# ---------------------------------------------------------------------------


class TestLimit:
    @pytest.mark.parametrize("bad", [0, -1, True, 2.5, None])
    def test_bad_limit_rejected(self, bad):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Select("t").limit(bad)
        assert exc_info.value.argument == "limit"

    def test_negative_offset_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Select("t").offset(-1)

    def test_limit_offset(self):
        assert Select("t").limit_offset(10, 20).get_sql() == "SELECT * FROM t LIMIT 10 OFFSET 20"

    def test_zero_offset_omitted(self):
        assert Select("t").limit_offset(10, 0).get_sql() == "SELECT * FROM t LIMIT 10"

    def test_pages(self):
        assert Select("t").limit_page(3, 10).get_sql().endswith("LIMIT 10 OFFSET 20")
        assert Select("t").limit_page(0, 10).get_sql().endswith("LIMIT 10")
        assert Select("t").limit_page_zero_based(2, 10).get_sql().endswith("LIMIT 10 OFFSET 20")

    def test_offset_only(self, pg, mysql, sqlite, ansi):
        assert Select("t", dialect=pg).offset(5).get_sql() == "SELECT * FROM t OFFSET 5"
        assert Select("t", dialect=mysql).offset(5).get_sql().endswith("LIMIT 18446744073709551615 OFFSET 5")
        assert Select("t", dialect=sqlite).offset(5).get_sql().endswith("LIMIT -1 OFFSET 5")
        assert Select("t", dialect=ansi).offset(5).get_sql().endswith("OFFSET 5 ROWS")

    def test_standard_fetch(self, ansi):
        q = Select("t", dialect=ansi).order_by("id").limit_offset(10, 20)
        assert q.get_sql() == "SELECT * FROM t ORDER BY id OFFSET 20 ROWS FETCH NEXT 10 ROWS ONLY"


# ---------------------------------------------------------------------------
# WITH / UNION
# ---------------------------------------------------------------------------


class TestWithAndUnion:
    def test_with(self, pg):
        recent = Select("orders", dialect=pg).gt("total", 10)
        q = Select("recent", dialect=pg).with_("recent", recent).eq("user_id", 3)
        assert q.get_sql() == (
            "WITH recent AS (\nSELECT * FROM orders WHERE total > ?\n)\nSELECT * FROM recent WHERE user_id = ?"
        )
        assert q.get_params() == [10, 3]

    def test_several_ctes_and_recursive(self, pg):
        q = (
            Select("b", dialect=pg)
            .with_("a", Select("x").eq("k", 1))
            .with_recursive("b", Select("a").eq("k", 2))
        )
        assert q.get_sql() == (
            "WITH RECURSIVE a AS (\nSELECT * FROM x WHERE k = ?\n),\n"
            "b AS (\nSELECT * FROM a WHERE k = ?\n)\nSELECT * FROM b"
        )
        assert q.get_params() == [1, 2]

    def test_materialization_hint(self, pg):
        q = Select("c", dialect=pg).with_("c", Select("t"), MaterializationHint.NOT_MATERIALIZED)
        assert q.get_sql().startswith("WITH c AS NOT MATERIALIZED (\n")

    def test_materialization_hint_unsupported(self, pg11, mysql):
        for dialect in (pg11, mysql):
            with pytest.raises(UnsupportedOperationError) as exc_info:
                Select("c", dialect=dialect).with_("c", Select("t"), MaterializationHint.MATERIALIZED)
            assert dialect.name in str(exc_info.value)
            assert "MATERIALIZED" in str(exc_info.value)

    def test_cte_name_required(self):
        with pytest.raises(InvalidArgumentError):
            Select("c").with_("", Select("t"))

    def test_union(self):
        q = Select("a").eq("x", 1).union_all(Select("b").eq("y", 2)).union(Select("c")).order_by("x")
        assert q.get_sql() == (
            "SELECT * FROM a WHERE x = ?\nUNION ALL\nSELECT * FROM b WHERE y = ?\nUNION\nSELECT * FROM c ORDER BY x"
        )
        assert q.get_params() == [1, 2]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRendering:
    def test_count_sql(self):
        q = (
            Select("users")
            .columns("id", "name")
            .distinct()
            .eq("status", 1)
            .order_by("id")
            .limit_offset(10, 30)
        )
        assert q.get_count_sql() == "SELECT count(1) AS cnt FROM users WHERE status = ?"
        assert q.get_count_params() == q.get_params() == [1]

    def test_count_keeps_grouping(self):
        q = Select("t").group_by("k").having("COUNT(*) > ?", 1).eq("a", 0).limit(5)
        assert q.get_count_sql() == "SELECT count(1) AS cnt FROM t WHERE a = ? GROUP BY k HAVING COUNT(*) > ?"
        assert q.build_count().params == [0, 1]

    def test_count_drops_column_params(self):
        q = Select("u").column_sub_query(Select("o").eq("k", "x"), "n").eq("a", 1)
        assert q.get_params() == ["x", 1]
        assert q.get_count_params() == [1]

    def test_render_is_idempotent(self):
        q = Select("t").eq("a", 1).in_("b", [2, 3])
        assert q.get_sql() == q.get_sql()
        assert q.get_params() == q.get_params() == [1, 2, 3]

    def test_build(self, mysql):
        compiled = Select("t", dialect=mysql).eq("a", 1).build()
        assert isinstance(compiled, CompiledSQL)
        assert compiled.dialect == "mysql"
        sql, params = compiled
        assert sql == "SELECT * FROM t WHERE a = ?"
        assert params == (1,)

    def test_str(self):
        q = Select("t").eq("a", 1)
        assert str(q) == q.get_sql()
        assert "SELECT * FROM t" in repr(q)
