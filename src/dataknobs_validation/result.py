"""Validation result types with consistent, predictable behavior.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .exceptions import SchemaConfigurationError, SchemaValidationError


def join_path(prefix: str | None, inner: str | None) -> str | None:
    """Compose a field path from an outer segment and an inner path.

    Args:
        prefix: Outer segment, e.g. ``"address"`` or ``"[2]"``
        inner: Path produced by a nested validator, e.g. ``"postalCode"``

    Returns:
        The combined path: ``"address.postalCode"``, ``"[2].email"``,
        ``"tags[2]"``, or whichever side is present

    Example:
        ```python
        join_path("address", "postalCode")  # "address.postalCode"
        join_path("tags", "[2]")            # "tags[2]"
        join_path("[2]", None)              # "[2]"
        ```
    """
    if not inner:
        return prefix or None
    if not prefix:
        return inner
    if inner.startswith("["):
        return f"{prefix}{inner}"
    return f"{prefix}.{inner}"


@dataclass(frozen=True)
class ValidationError:
    """A single rule violation.

    Attributes:
        message: Human-readable description of the violation
        field_path: Dot/bracket path of the offending value, or None when the
            error concerns the validated value itself
    """

    message: str
    field_path: str | None = None

    def under(self, prefix: str) -> ValidationError:
        """Re-root this error beneath ``prefix``, keeping the message."""
        return ValidationError(self.message, join_path(prefix, self.field_path))

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "field_path": self.field_path}


@dataclass(frozen=True)
class ValidationResult:
    """Unified result object for all validation operations.

    ``valid`` is True exactly when ``errors`` is empty; use :meth:`success` and
    :meth:`failure` to build results.
    """

    valid: bool
    errors: tuple[ValidationError, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.errors, tuple):
            object.__setattr__(self, "errors", tuple(self.errors))
        if self.valid != (len(self.errors) == 0):
            raise SchemaConfigurationError(
                "A result is valid exactly when it has no errors",
                context={"valid": self.valid, "error_count": len(self.errors)},
            )

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    @property
    def field_paths(self) -> list[str | None]:
        return [error.field_path for error in self.errors]

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine results for composite validation.

        Args:
            other: Another ValidationResult to merge with this one

        Returns:
            New ValidationResult with this result's errors followed by the other's
        """
        return ValidationResult.from_errors(self.errors + other.errors)

    def raise_if_invalid(self) -> ValidationResult:
        """Raise SchemaValidationError if this result is a failure.

        Returns:
            Self, when valid
        """
        if not self.valid:
            raise SchemaValidationError(self.errors)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
        }

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(valid=True)

    @classmethod
    def failure(cls, errors: Iterable[ValidationError | str]) -> ValidationResult:
        """Create a failed validation result.

        Args:
            errors: One or more errors; plain strings become path-less errors

        Returns:
            Failed ValidationResult

        Raises:
            SchemaConfigurationError: If no errors are given
        """
        normalized = tuple(
            error if isinstance(error, ValidationError) else ValidationError(error)
            for error in errors
        )
        if not normalized:
            raise SchemaConfigurationError("A failed result requires at least one error")
        return cls(valid=False, errors=normalized)

    @classmethod
    def from_errors(cls, errors: Iterable[ValidationError]) -> ValidationResult:
        """Create a success when ``errors`` is empty and a failure otherwise."""
        errors = tuple(errors)
        return cls.failure(errors) if errors else cls.success()
