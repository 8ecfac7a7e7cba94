"""Exception types raised by zlimit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Which argument was rejected and what it looked like."""

    argument: str
    actual_type: str
    actual_value: Any
    min_value: int


@dataclass
class AppError(Exception):
    """Base error for zlimit failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input validation fails."""


class InvalidArgumentError(ValidationAppError, ValueError):
    """Raised when a registry operation receives a malformed argument."""
