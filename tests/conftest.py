"""Shared pytest fixtures for chainQL unit and integration tests."""
from __future__ import annotations

import pytest

from chainql import AnsiDialect, MySQLDialect, PostgreSQLDialect, SQLiteDialect


@pytest.fixture(scope="session")
def pg() -> PostgreSQLDialect:
    """PostgreSQL 16: materialized CTEs, gen_random_uuid(), no GROUP BY ALL."""
    return PostgreSQLDialect(major_version=16)


@pytest.fixture(scope="session")
def pg11() -> PostgreSQLDialect:
    return PostgreSQLDialect(major_version=11)


@pytest.fixture(scope="session")
def pg17() -> PostgreSQLDialect:
    return PostgreSQLDialect(major_version=17)


@pytest.fixture(scope="session")
def pg18() -> PostgreSQLDialect:
    return PostgreSQLDialect(major_version=18)


@pytest.fixture(scope="session")
def mysql() -> MySQLDialect:
    return MySQLDialect(major_version=8)


@pytest.fixture(scope="session")
def sqlite() -> SQLiteDialect:
    return SQLiteDialect(major_version=3)


@pytest.fixture(scope="session")
def ansi() -> AnsiDialect:
    return AnsiDialect()
