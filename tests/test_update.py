"""Unit tests for the UPDATE and DELETE builders."""

from __future__ import annotations

import pytest

from chainql import Delete, InvalidArgumentError, Logic, Oper, Select, Update, UnsupportedOperationError

# ---------------------------------------------------------------------------
# SET
# ---------------------------------------------------------------------------


class TestSet:
    def test_single_value_gets_placeholder(self):
        q = Update("users").set("name", "x").eq("id", 1)
        assert q.get_sql() == "UPDATE users SET name = ? WHERE id = ?"
        assert q.get_params() == ["x", 1]

    def test_expression_forms(self):
        q = Update("t").set("a = a + ?", 2).set("touched = now()").set("b = ?, c = ?", 3, 4)
        assert q.get_sql() == "UPDATE t SET a = a + ?, touched = now(), b = ?, c = ?"
        assert q.get_params() == [2, 3, 4]

    def test_none_is_bound(self):
        q = Update("t").set("a", None)
        assert q.get_sql() == "UPDATE t SET a = ?"
        assert q.get_params() == [None]

    def test_arithmetic(self):
        q = Update("t").increment("hits").decrement("left", 2).multiply("p", 3).divide("q", 4).mod("r", 5)
        assert q.get_sql() == (
            "UPDATE t SET hits = hits + ?, left = left - ?, p = p * ?, q = q / ?, r = r % ?"
        )
        assert q.get_params() == [1, 2, 3, 4, 5]

    def test_string_helpers(self, pg, mysql):
        q = Update("t", dialect=pg).append("name", "!").prepend("code", "x-").concat("c", "y")
        assert q.get_sql() == "UPDATE t SET name = name || ?, code = ? || code, c = CONCAT(c, ?)"
        q = Update("t", dialect=mysql).append("name", "!").prepend("code", "x-")
        assert q.get_sql() == "UPDATE t SET name = CONCAT(name, ?), code = CONCAT(?, code)"

    def test_coalesce_now_null(self, pg):
        q = Update("t", dialect=pg).set_coalesce("nick", "anon").set_now("at").set_null("gone")
        assert q.get_sql() == "UPDATE t SET nick = COALESCE(nick, ?), at = now(), gone = NULL"

    def test_arrays(self, pg, mysql):
        q = Update("t", dialect=pg).array_append("tags", "a").array_remove("tags2", "b")
        assert q.get_sql() == "UPDATE t SET tags = array_append(tags, ?), tags2 = array_remove(tags2, ?)"
        with pytest.raises(UnsupportedOperationError):
            Update("t", dialect=mysql).array_append("tags", "a")

    def test_set_map(self):
        q = Update("t").set_map({"firstName": "a", "age": 2})
        assert q.get_sql() == "UPDATE t SET first_name = ?, age = ?"

    def test_sub_query_params_in_text_order(self):
        counter = Select("o").column("count(1)").eq("k", 2)
        q = Update("users").set("a", 1).set_sub_query("n", counter).eq("id", 3)
        assert q.get_sql() == "UPDATE users SET a = ?, n = (SELECT count(1) FROM o WHERE k = ?) WHERE id = ?"
        assert q.get_params() == [1, 2, 3]

    def test_empty_expression_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Update("t").set("")


# ---------------------------------------------------------------------------
# Dialect-dependent layout
# ---------------------------------------------------------------------------


class TestLayout:
    def test_postgres_from(self, pg):
        q = (
            Update("orders", "o", dialect=pg)
            .set("o.customer_name", "x")
            .from_("customers", "c")
            .where("o.customer_id = c.id")
            .and_("c.status", Oper.EQ, "active")
        )
        assert q.get_sql() == (
            "UPDATE orders AS o SET o.customer_name = ? FROM customers AS c"
            " WHERE o.customer_id = c.id AND (c.status = ?)"
        )
        assert q.get_params() == ["x", "active"]

    def test_mysql_join(self, mysql):
        q = (
            Update("users", "u", dialect=mysql)
            .join("orders", "u.id = o.user_id", alias="o")
            .set("u.total_orders", 5)
            .where("o.status", Oper.EQ, "done")
        )
        assert q.get_sql() == (
            "UPDATE users AS u JOIN orders AS o ON u.id = o.user_id SET u.total_orders = ? WHERE o.status = ?"
        )
        assert q.get_params() == [5, "done"]

    def test_join_params_follow_layout(self, pg, mysql):
        def build(dialect):
            return (
                Update("a", dialect=dialect)
                .set("a.x", 1)
                .from_("c")
                .join("b", "b.id = a.id AND b.kind = ?", params=["k"])
                .eq("a.id", 2)
            )

        assert build(mysql).get_sql() == "UPDATE a, c JOIN b ON b.id = a.id AND b.kind = ? SET a.x = ? WHERE a.id = ?"
        assert build(mysql).get_params() == ["k", 1, 2]
        assert build(pg).get_sql() == "UPDATE a SET a.x = ? FROM c JOIN b ON b.id = a.id AND b.kind = ? WHERE a.id = ?"
        assert build(pg).get_params() == [1, "k", 2]

    @pytest.mark.parametrize("dialect_fixture", ["pg", "sqlite", "ansi"])
    def test_join_without_from_rejected(self, dialect_fixture, request):
        dialect = request.getfixturevalue(dialect_fixture)
        q = Update("t", "a", dialect=dialect).join("x", "x.id = a.id").set("n", 1)
        with pytest.raises(InvalidArgumentError):
            q.get_sql()

    def test_join_without_from_allowed_on_mysql(self, mysql):
        q = Update("t", "a", dialect=mysql).join("x", "x.id = a.id").set("n", 1)
        assert q.get_sql() == "UPDATE t AS a JOIN x ON x.id = a.id SET n = ?"
        assert q.get_params() == [1]

    def test_multi_table(self, mysql):
        q = (
            Update("orders", "o", dialect=mysql)
            .add_table("order_items", "oi")
            .set("o.total = oi.sum")
            .where("o.id = oi.order_id")
        )
        assert q.get_sql() == "UPDATE orders AS o, order_items AS oi SET o.total = oi.sum WHERE o.id = oi.order_id"

    def test_from_sub_query(self, pg):
        totals = Select("items", dialect=pg).column("order_id").column_sum("price", "s").group_by("order_id").gt("price", 0)
        q = Update("orders", dialect=pg).set("total = t.s").from_sub_query(totals, "t").where("orders.id = t.order_id")
        assert q.get_sql() == (
            "UPDATE orders SET total = t.s FROM (SELECT order_id, SUM(price) AS s FROM items"
            " WHERE price > ? GROUP BY order_id) AS t WHERE orders.id = t.order_id"
        )
        assert q.get_params() == [0]

    def test_with(self, pg):
        q = Update("t", dialect=pg).with_("x", Select("s").eq("k", 1)).set("v", 2).in_sub_query("id", Select("x").column("id"))
        assert q.get_sql() == (
            "WITH x AS (\nSELECT * FROM s WHERE k = ?\n)\nUPDATE t SET v = ? WHERE id IN (SELECT id FROM x)"
        )
        assert q.get_params() == [1, 2]


# ---------------------------------------------------------------------------
# DELETE
# ---------------------------------------------------------------------------


class TestDelete:
    def test_delete(self):
        q = Delete("sessions").lt("expires_at", "2024-01-01").is_null("user_id", Logic.OR)
        assert q.get_sql() == "DELETE FROM sessions WHERE expires_at < ? OR (user_id IS NULL)"
        assert q.get_params() == ["2024-01-01"]

    def test_delete_all(self):
        assert Delete("t").get_sql() == "DELETE FROM t"

    def test_alias_and_extra_tables(self, mysql):
        q = Delete("a", "x", dialect=mysql).add_table("b").where("x.id = b.id")
        assert q.get_sql() == "DELETE FROM a AS x, b WHERE x.id = b.id"

    def test_with_and_exists(self):
        stale = Select("logins").column("user_id").lt("at", 5)
        q = Delete("users", "u").with_("stale", stale).exists(
            Select("stale", "s").column("1").where("s.user_id = u.id")
        )
        assert q.get_sql() == (
            "WITH stale AS (\nSELECT user_id FROM logins WHERE at < ?\n)\n"
            "DELETE FROM users AS u WHERE EXISTS (SELECT 1 FROM stale AS s WHERE s.user_id = u.id)"
        )
        assert q.get_params() == [5]

    def test_build(self):
        compiled = Delete("t").eq("id", 9).build()
        assert compiled.sql == "DELETE FROM t WHERE id = ?"
        assert compiled.params == [9]
        assert compiled.dialect == "postgresql"
