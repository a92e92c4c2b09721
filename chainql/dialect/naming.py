"""Identifier case-conversion strategies.

A :class:`NamingConversion` maps a raw identifier (typically a Python
attribute or dict key) to a column or table name.  Conversions are pure
functions of their input, so results are memoised in a bounded process-wide
cache; concurrent misses on the same key simply compute the same value twice.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache

_UNDERSCORE = "_"

#: Upper bound on cached conversions per direction.
NAMING_CACHE_SIZE = 1024


@lru_cache(maxsize=NAMING_CACHE_SIZE)
def to_snake_case(name: str) -> str:
    """Convert ``camelCase`` / ``PascalCase`` to ``snake_case``.

    A single leading underscore is dropped and runs of capitals collapse
    into one word::

        userName   -> user_name
        USER_NAME  -> user_name
        __user     -> _user
        HTTPUrl    -> httpurl
    """
    out: list[str] = []
    prev_translated = False
    for i, char in enumerate(name):
        if i == 0 and char == _UNDERSCORE:
            continue
        if char.isupper():
            if not prev_translated and out and out[-1] != _UNDERSCORE:
                out.append(_UNDERSCORE)
            char = char.lower()
            prev_translated = True
        else:
            prev_translated = False
        out.append(char)
    return "".join(out) if out else name


@lru_cache(maxsize=NAMING_CACHE_SIZE)
def to_camel_case(name: str) -> str:
    """Convert ``snake_case`` to ``camelCase``; blank input is returned as is."""
    if not name.strip():
        return name
    if len(name) > 1 and name[1] == _UNDERSCORE:
        out = [name[0].upper()]
    else:
        out = [name[0].lower()]
    upper_next = False
    for char in name[1:]:
        if char == _UNDERSCORE:
            upper_next = True
        elif upper_next:
            out.append(char.upper())
            upper_next = False
        else:
            out.append(char.lower())
    return "".join(out)


class NamingConversion(ABC):
    """Strategy converting raw identifiers to column and table names."""

    @abstractmethod
    def convert_column_name(self, name: str) -> str:
        """Return the column name for ``name``."""

    def convert_table_name(self, name: str) -> str:
        return self.convert_column_name(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class IdentityNaming(NamingConversion):
    """Leaves identifiers untouched."""

    def convert_column_name(self, name: str) -> str:
        return name


class SnakeCaseNaming(NamingConversion):
    """camelCase → snake_case."""

    def convert_column_name(self, name: str) -> str:
        if name is None:
            return name
        return to_snake_case(name)


class CamelCaseNaming(NamingConversion):
    """snake_case → camelCase."""

    def convert_column_name(self, name: str) -> str:
        if name is None:
            return name
        return to_camel_case(name)
