"""Exception hierarchy for the data-access layer."""
from __future__ import annotations


class FinstoreError(Exception):
    """Base class for errors raised by finstore."""


class NotFoundError(FinstoreError):
    """A requested row does not exist."""


class DerivationError(FinstoreError, ValueError):
    """A resolver ran out of rules for an input the closed enums should cover."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Cannot derive {field} from {value!r}")
        self.field = field
        self.value = value


class InvariantViolation(FinstoreError, ValueError):
    """An application-level invariant the schema cannot express was broken."""
