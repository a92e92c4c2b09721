"""Value types: operator enums, ranges and JSON paths."""

from chainql.schema.expressions import (
    JoinType,
    JsonType,
    Logic,
    MaterializationHint,
    NullsOrder,
    Oper,
    Range,
    UnionType,
)
from chainql.schema.json_path import JsonPath

__all__ = [
    "JoinType",
    "JsonPath",
    "JsonType",
    "Logic",
    "MaterializationHint",
    "NullsOrder",
    "Oper",
    "Range",
    "UnionType",
]
