"""Column assignments shared by INSERT and UPDATE.

INSERT renders an assignment as a column plus a value expression, UPDATE as
``column = expression``; both statements implement ``_assign`` and inherit
the typed helpers below.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Self

from chainql.builder.base import require_text
from chainql.errors import InvalidArgumentError
from chainql.schema.expressions import PLACEHOLDER, JsonType

if TYPE_CHECKING:
    from chainql.dialect import Dialect


class AssignmentMixin(ABC):
    dialect: Dialect

    @abstractmethod
    def _assign(self, column: str, expr: str, *values: Any) -> Self:
        """Record one assignment of ``expr`` to ``column``."""

    def set_expr(self, column: str, expr: str, *values: Any) -> Self:
        """Assign an arbitrary expression; ``values`` bind its placeholders."""
        return self._assign(require_text(column, "column"), require_text(expr, "expr"), *values)

    def set_map(self, values: Mapping[str, Any]) -> Self:
        """Bind one value per key; keys go through the dialect's naming conversion."""
        if values is None:
            raise InvalidArgumentError("values must be a mapping", argument="values")
        for key, value in values.items():
            self._assign(self.dialect.naming.convert_column_name(require_text(key, "column")), PLACEHOLDER, value)
        return self

    def set_now(self, column: str) -> Self:
        return self.set_expr(column, self.dialect.now_function)

    def set_null(self, column: str) -> Self:
        return self.set_expr(column, "NULL")

    def set_default(self, column: str) -> Self:
        return self.set_expr(column, "DEFAULT")

    def set_json(self, column: str, value: Any) -> Self:
        return self.set_expr(column, self.dialect.json_dialect.type_cast(JsonType.JSON), value)

    def set_jsonb(self, column: str, value: Any) -> Self:
        return self.set_expr(column, self.dialect.json_dialect.type_cast(JsonType.JSONB), value)

    def set_bytea(self, column: str, value: bytes) -> Self:
        return self.set_expr(column, self.dialect.binary_type_cast(), value)

    def set_array(self, column: str, values: Sequence[Any]) -> Self:
        """``column = ARRAY[?, ?]`` with one value per element."""
        if values is None or isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise InvalidArgumentError("values must be a sequence", argument="values")
        return self.set_expr(column, self.dialect.array_literal(len(values)), *values)

    def set_gen_uuid(self, column: str) -> Self:
        return self.set_expr(column, self.dialect.uuid_function())

    def set_next_val(self, column: str, sequence: str) -> Self:
        return self.set_expr(column, self.dialect.sequence_next_value(require_text(sequence, "sequence")))
