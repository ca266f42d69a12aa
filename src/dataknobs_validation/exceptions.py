"""Custom exceptions for the dataknobs_validation package.

Validation failures are returned as data (see :class:`ValidationResult`); the
exceptions here signal programmer misuse while a schema is being configured, or
an explicit request to turn a failed result into an exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dataknobs_common.exceptions import (
    ConfigurationError,
    ValidationError as BaseValidationError,
)

if TYPE_CHECKING:
    from .result import ValidationError


class SchemaConfigurationError(ConfigurationError):
    """Raised when a validator or schema is configured incorrectly."""

    pass


class UnsupportedOperationError(SchemaConfigurationError):
    """Raised when a configuration method is not supported by a validator kind."""

    def __init__(self, operation: str, validator_type: str):
        self.operation = operation
        self.validator_type = validator_type
        super().__init__(
            f"{operation}() is not supported by {validator_type}",
            context={"operation": operation, "validator_type": validator_type},
        )


class SealedValidatorError(SchemaConfigurationError):
    """Raised when a built validator is configured again."""

    def __init__(self, operation: str, validator_type: str):
        self.operation = operation
        self.validator_type = validator_type
        super().__init__(
            f"Cannot call {operation}() on {validator_type} after build()",
            context={"operation": operation, "validator_type": validator_type},
        )


class SchemaValidationError(BaseValidationError):
    """Raised by ``ValidationResult.raise_if_invalid`` for a failed result."""

    def __init__(self, errors: list[ValidationError] | tuple[ValidationError, ...]):
        self.errors = tuple(errors)
        summary = "; ".join(
            f"{error.field_path}: {error.message}" if error.field_path else error.message
            for error in self.errors
        )
        super().__init__(
            f"Validation failed with {len(self.errors)} error(s): {summary}",
            context={"errors": [error.to_dict() for error in self.errors]},
        )
