"""Structured results for user-facing mutations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Why an operation failed."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass
class OperationResult(Generic[T]):
    """Outcome of a mutation, returned instead of raising."""

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    field_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def invalid(cls, field_errors: dict[str, str]) -> "OperationResult[T]":
        return cls(
            success=False,
            error="Validation failed",
            error_code=ErrorCode.VALIDATION,
            field_errors=field_errors,
        )

    @classmethod
    def not_found(cls, message: str) -> "OperationResult[T]":
        return cls(success=False, error=message, error_code=ErrorCode.NOT_FOUND)

    @classmethod
    def unavailable(cls, message: str) -> "OperationResult[T]":
        return cls(success=False, error=message, error_code=ErrorCode.UNAVAILABLE)
