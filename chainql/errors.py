"""Custom exception hierarchy for chainQL.

All public errors inherit from ChainQLError so callers can catch the base
class for any chainQL-specific failure.  Errors are raised at the call that
detected the problem, never deferred to render time.
"""
from __future__ import annotations


class ChainQLError(Exception):
    """Base exception for all chainQL errors."""


class InvalidArgumentError(ChainQLError, ValueError):
    """Raised when a caller passes a structurally invalid value.

    Examples are a ``None`` collection where one is required, a non-positive
    limit, a negative offset or an empty identifier.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument, when known.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class UnsupportedOperationError(ChainQLError):
    """Raised when the active dialect cannot express a requested construct.

    Args:
        dialect: Name of the dialect (e.g. ``'mysql'``).
        feature: The SQL feature that was requested (e.g. ``'GROUP BY ALL'``).
        detail: Optional extra context appended to the message.
    """

    def __init__(self, dialect: str, feature: str, detail: str | None = None) -> None:
        message = f"{dialect} does not support {feature}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.dialect = dialect
        self.feature = feature
