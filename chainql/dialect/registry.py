"""Dialect registry and resolution from connection metadata.

``DialectFactory``
    Central registry mapping names to :class:`~chainql.dialect.base.Dialect`
    classes.  A dialect is resolved once per statement, either explicitly by
    name or from the product name / major version reported by a live
    connection.

Usage::

    from chainql.dialect.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(AnsiDialect):
        ...

    dialect = DialectFactory.from_metadata("PostgreSQL", 16)

Resolving from a SQLAlchemy engine needs the optional dependency::

    pip install "chainql[sqlalchemy]"
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

from chainql.dialect.base import Dialect
from chainql.dialect.naming import NamingConversion
from chainql.errors import UnsupportedOperationError

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger("chainql")


class DialectFactory:
    """Registry mapping dialect names to :class:`Dialect` classes.

    Example::

        dialect = DialectFactory.create("mysql", major_version=8)
    """

    _dialects: ClassVar[dict[str, type[Dialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[Dialect]], type[Dialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgresql"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[Dialect]) -> type[Dialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def create(
        cls,
        name: str,
        major_version: int = 0,
        naming: NamingConversion | None = None,
    ) -> Dialect:
        """Instantiate the dialect registered for ``name``.

        Raises:
            UnsupportedOperationError: If no dialect is registered under
                ``name``.
        """
        dialect_cls = cls._dialects.get(name.lower())
        if dialect_cls is None:
            raise UnsupportedOperationError(
                name,
                "SQL generation",
                f"registered dialects are {cls.registered_names()}",
            )
        return cls._instantiate(dialect_cls, major_version, naming)

    @classmethod
    def from_metadata(
        cls,
        product_name: str,
        major_version: int = 0,
        naming: NamingConversion | None = None,
    ) -> Dialect:
        """Resolve a dialect from a driver-reported product name.

        Args:
            product_name: Database product name (e.g. ``"PostgreSQL"``,
                ``"MariaDB"``).  Matched case-insensitively.
            major_version: Server major version.
            naming: Identifier conversion; snake_case by default.

        Raises:
            UnsupportedOperationError: If no registered dialect recognises
                the product.
        """
        for dialect_cls in cls._dialects.values():
            if dialect_cls.matches_product(product_name):
                dialect = cls._instantiate(dialect_cls, major_version, naming)
                logger.debug(
                    "Resolved dialect %s for product %r version %s",
                    dialect.name,
                    product_name,
                    major_version,
                )
                return dialect
        raise UnsupportedOperationError(product_name, "SQL generation", "unknown database product")

    @classmethod
    def from_engine(cls, engine: Engine, naming: NamingConversion | None = None) -> Dialect:
        """Resolve a dialect from a SQLAlchemy engine.

        Connects once to read the server version, which SQLAlchemy only
        populates after the first connection.
        """
        with engine.connect() as connection:
            info = connection.dialect.server_version_info or (0,)
        return cls.from_metadata(engine.dialect.name, int(info[0]), naming)

    @classmethod
    def registered_names(cls) -> list[str]:
        return sorted(cls._dialects)

    @staticmethod
    def _instantiate(
        dialect_cls: type[Dialect],
        major_version: int,
        naming: NamingConversion | None,
    ) -> Dialect:
        if naming is None:
            return dialect_cls(major_version=major_version)
        return dialect_cls(major_version=major_version, naming=naming)
