"""Unit tests for DialectFactory."""

from __future__ import annotations

from typing import ClassVar

import pytest

from chainql import (
    AnsiDialect,
    CamelCaseNaming,
    DialectFactory,
    MySQLDialect,
    PostgreSQLDialect,
    SnakeCaseNaming,
    SQLiteDialect,
    UnsupportedOperationError,
)


class TestCreate:
    def test_by_name(self):
        dialect = DialectFactory.create("mysql", major_version=8)
        assert isinstance(dialect, MySQLDialect)
        assert dialect.major_version == 8

    def test_name_is_case_insensitive(self):
        assert isinstance(DialectFactory.create("PostgreSQL"), PostgreSQLDialect)

    def test_unknown_name(self):
        with pytest.raises(UnsupportedOperationError) as exc_info:
            DialectFactory.create("informix")
        assert exc_info.value.dialect == "informix"
        assert "registered dialects are" in str(exc_info.value)

    def test_registered_names(self):
        assert DialectFactory.registered_names() == ["ansi", "mysql", "postgresql", "sqlite"]


@pytest.mark.parametrize(
    ("product", "expected"),
    [
        ("PostgreSQL", PostgreSQLDialect),
        ("MariaDB", MySQLDialect),
        ("MySQL", MySQLDialect),
        ("SQLite", SQLiteDialect),
        ("Microsoft SQL Server", AnsiDialect),
        ("Oracle", AnsiDialect),
    ],
)
def test_from_metadata(product, expected):
    dialect = DialectFactory.from_metadata(product, 5)
    assert type(dialect) is expected
    assert dialect.major_version == 5


def test_from_metadata_unknown_product():
    with pytest.raises(UnsupportedOperationError, match="unknown database product"):
        DialectFactory.from_metadata("Informix", 14)


def test_naming_is_passed_through():
    assert isinstance(DialectFactory.from_metadata("PostgreSQL").naming, SnakeCaseNaming)
    dialect = DialectFactory.create("sqlite", naming=CamelCaseNaming())
    assert isinstance(dialect.naming, CamelCaseNaming)


def test_custom_registration():
    @DialectFactory.register("cockroach")
    class CockroachDialect(PostgreSQLDialect):
        name: ClassVar[str] = "cockroach"
        product_names: ClassVar[tuple[str, ...]] = ("cockroach",)

    try:
        dialect = DialectFactory.create("cockroach", major_version=23)
        assert isinstance(dialect, CockroachDialect)
        assert DialectFactory.from_metadata("CockroachDB").name == "cockroach"
        assert dialect.limit_offset(5) == "LIMIT 5"
    finally:
        DialectFactory._dialects.pop("cockroach", None)


def test_from_engine():
    sqlalchemy = pytest.importorskip("sqlalchemy")
    engine = sqlalchemy.create_engine("sqlite:///:memory:")
    try:
        dialect = DialectFactory.from_engine(engine)
    finally:
        engine.dispose()
    assert isinstance(dialect, SQLiteDialect)
    assert dialect.major_version == 3
