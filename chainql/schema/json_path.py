"""Backend-neutral JSON path.

A :class:`JsonPath` is an ordered sequence of object keys and array indices.
Dialects translate it into their native syntax, e.g. ``{a,b,0}`` for
PostgreSQL and ``$.a.b[0]`` for MySQL::

    JsonPath.of("user.profile.email")
    JsonPath.of("data", "items", 5)
    JsonPath.of().key("users").index(0)
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from chainql.errors import InvalidArgumentError

PathSegment = Union[str, int]


class JsonPath(BaseModel):
    """Immutable path made of keys (``str``) and indices (``int``).

    Attributes:
        segments: The path segments in order, outermost first.
    """

    model_config = ConfigDict(frozen=True)

    segments: tuple[PathSegment, ...] = ()

    @field_validator("segments", mode="before")
    @classmethod
    def _check_segments(cls, value: Any) -> Any:
        for segment in value:
            if isinstance(segment, bool) or not isinstance(segment, (str, int)):
                raise ValueError(f"path segment must be a key or an index, got {segment!r}")
            if isinstance(segment, int) and segment < 0:
                raise ValueError(f"array index must be >= 0, got {segment}")
            if isinstance(segment, str) and not segment.strip():
                raise ValueError("path key must not be empty")
        return value

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, *parts: PathSegment) -> JsonPath:
        """Build a path; string parts are split on ``.``.

        Raises:
            InvalidArgumentError: On empty keys or negative indices.
        """
        segments: list[PathSegment] = []
        for part in parts:
            if isinstance(part, str):
                segments.extend(part.split("."))
            else:
                segments.append(part)
        return cls._create(tuple(segments))

    @classmethod
    def coerce(cls, path: JsonPath | str | Sequence[PathSegment]) -> JsonPath:
        """Accept a path, a dotted string, or a sequence of segments."""
        if isinstance(path, JsonPath):
            return path
        if isinstance(path, str):
            return cls.of(path)
        return cls.of(*path)

    @classmethod
    def _create(cls, segments: tuple[Any, ...]) -> JsonPath:
        try:
            return cls(segments=segments)
        except ValidationError as exc:
            raise InvalidArgumentError(
                f"Invalid JSON path {segments!r}: {exc.errors()[0]['msg']}",
                argument="path",
            ) from exc

    def key(self, key: str) -> JsonPath:
        """Return a new path extended with an object key."""
        return self._create((*self.segments, key))

    def index(self, index: int) -> JsonPath:
        """Return a new path extended with an array index."""
        return self._create((*self.segments, index))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return ".".join(str(s) for s in self.segments)
