"""JSON / JSONB update operations.

Operations nest left to right, each wrapping the expression produced so far
(starting from the bare column)::

    update.jsonb("profile", lambda ops: ops.merge(patch).remove_key("tmp"))
    # profile = profile || ?::jsonb - 'tmp'

Every dialect template is rendered against a marker standing for the current
expression.  Counting the placeholders before the marker tells how the new
operation's values interleave with the values already collected, so a
prepend (``?::jsonb || col``) binds its value before the inner ones.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Self

from chainql.builder.base import require_text
from chainql.dialect.base import JsonDialect
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import PLACEHOLDER, JsonType
from chainql.schema.json_path import JsonPath, PathSegment

_CURRENT = "\x00current\x00"

PathLike = JsonPath | str | Sequence[PathSegment]


class JsonOperations:
    """Accumulates JSON operations for a single column.

    Args:
        json_dialect: The dialect's JSON strategy.
        json_type: Column type; JSONB enables PostgreSQL's operators.
        column: Column being updated.
    """

    def __init__(self, json_dialect: JsonDialect, json_type: JsonType, column: str) -> None:
        self._json = json_dialect
        self._type = json_type
        self._column = column
        self._steps: list[tuple[str, tuple[Any, ...]]] = []

    def _push(self, template: str, *values: Any) -> Self:
        self._steps.append((template, values))
        return self

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def set(self, value: Any) -> Self:
        """Replace the whole document; discards earlier operations' effect."""
        return self._push(self._json.type_cast(self._type), value)

    def merge(self, value: Any) -> Self:
        return self._push(self._json.merge(self._type, _CURRENT), value)

    def set_path(self, path: PathLike, value: Any, create_missing: bool = True) -> Self:
        path = JsonPath.coerce(path)
        return self._push(self._json.set_path(self._type, _CURRENT, path, create_missing), value)

    def remove_key(self, key: str) -> Self:
        return self._push(self._json.remove_key(self._type, _CURRENT, require_text(key, "key")))

    def remove_keys(self, *keys: str) -> Self:
        if not keys:
            raise InvalidArgumentError("at least one key is required", argument="keys")
        checked = [require_text(k, "key") for k in keys]
        return self._push(self._json.remove_keys(self._type, _CURRENT, checked))

    def remove_path(self, path: PathLike) -> Self:
        return self._push(self._json.remove_path(self._type, _CURRENT, JsonPath.coerce(path)))

    def append_array(self, value: Any) -> Self:
        return self._push(self._json.array_append(self._type, _CURRENT), value)

    def prepend_array(self, value: Any) -> Self:
        return self._push(self._json.array_prepend(self._type, _CURRENT), value)

    def set_array_element(self, index: int, value: Any) -> Self:
        return self.set_path(JsonPath.of(index), value)

    def remove_array_element(self, index: int) -> Self:
        return self.remove_path(JsonPath.of(index))

    def strip_nulls(self) -> Self:
        return self._push(self._json.strip_nulls(self._type, _CURRENT))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._steps

    def render(self) -> tuple[str, list[Any]]:
        """Return the nested expression and its values in placeholder order."""
        expr, params = self._column, []
        for template, values in self._steps:
            if _CURRENT not in template:
                expr, params = template, list(values)
                continue
            before = template.split(_CURRENT, 1)[0].count(PLACEHOLDER)
            expr = template.replace(_CURRENT, expr)
            params = [*values[:before], *params, *values[before:]]
        return expr, params
