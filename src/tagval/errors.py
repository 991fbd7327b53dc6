"""Error types for tagval validation passes."""

from collections.abc import Iterator
from enum import Enum


class Cause(str, Enum):
    """Why a single field failed validation."""
    INVALID_SYNTAX = "invalid validator syntax"
    UNEXPORTED_FIELD = "validation for unexported field is not allowed"
    LEN_FAILED = "len validation failed"
    IN_FAILED = "in validation failed"
    MIN_FAILED = "min validation failed"
    MAX_FAILED = "max validation failed"
    TYPE_MISMATCH = "type mismatch"


class TagvalError(Exception):
    """Base exception for tagval."""


class NotAStructError(TagvalError, TypeError):
    """Raised when the value given to validate is not a record."""

    def __init__(self, value: object) -> None:
        super().__init__(f"wrong argument given, should be a struct: got {type(value).__name__}")
        self.value = value

    def __reduce__(self):
        return (type(self), (self.value,))


class RuleSyntaxError(TagvalError):
    """Raised by the rule parser when a clause cannot be split into kind and parameter."""

    def __init__(self, field: str, clause: str) -> None:
        super().__init__(f"{field}: malformed rule clause {clause!r}")
        self.field = field
        self.clause = clause

    def __reduce__(self):
        return (type(self), (self.field, self.clause))


class ValidationError(TagvalError):
    """A single violation attributed to one field."""

    def __init__(self, field: str, cause: Cause, detail: str | None = None) -> None:
        self.field = field
        self.cause = cause
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.field}: {self.detail or self.cause.value}"

    def __reduce__(self):
        return (type(self), (self.field, self.cause, self.detail))

    def __repr__(self) -> str:
        return f"ValidationError(field={self.field!r}, cause={self.cause.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (self.field, self.cause, self.detail) == (other.field, other.cause, other.detail)

    def __hash__(self) -> int:
        return hash((self.field, self.cause, self.detail))

    def is_cause(self, cause: Cause) -> bool:
        return self.cause is cause

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "field": self.field,
            "cause": self.cause.name.lower(),
            "message": str(self),
        }


class ValidationErrors(TagvalError):
    """All violations found in one validation pass.

    Raised by ``validate`` when at least one field failed. Individual errors
    keep their cause, so callers can ask whether any of them is a given
    ``Cause`` with ``has``.
    """

    def __init__(self, errors: list[ValidationError]) -> None:
        if not errors:
            raise ValueError("ValidationErrors requires at least one error")
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        return "\n".join(str(error) for error in self.errors)

    def __reduce__(self):
        return (type(self), (self.errors,))

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def has(self, cause: Cause) -> bool:
        """Whether any component error carries the given cause."""
        return any(error.is_cause(cause) for error in self.errors)

    def for_field(self, field: str) -> list[ValidationError]:
        return [error for error in self.errors if error.field == field]

    @property
    def causes(self) -> list[Cause]:
        return [error.cause for error in self.errors]
