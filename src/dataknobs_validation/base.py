"""Validator contract shared by every rule in a schema tree.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import Any

from .exceptions import SchemaConfigurationError, SealedValidatorError
from .result import ValidationError, ValidationResult
from .settings import ValidationSettings, get_settings

logger = logging.getLogger(__name__)


class ValueKind(Enum):
    """Runtime value kinds a validator can expect at the coercion boundary."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def article(self) -> str:
        return "an" if self.value[0] in "aeiou" else "a"

    @property
    def type_message(self) -> str:
        """Default message for a value of the wrong type, e.g. 'Value must be a number'."""
        return f"Value must be {self.article} {self.value}"


class Validator(ABC):
    """Base class for all validators.

    A validator is configuration, not per-call state: ``validate`` never
    mutates it, so a built validator can be shared freely. Configuration
    methods return ``self`` for chaining and raise
    :class:`SealedValidatorError` once :meth:`build` has been called.

    Subclasses set ``kind`` to the :class:`ValueKind` they expect, which
    selects the coercion applied when the validator is placed in a schema.
    Composition validators leave it as None.
    """

    kind: ValueKind | None = None

    def __init__(self, settings: ValidationSettings | None = None):
        """Initialize the validator.

        Args:
            settings: Settings to use (defaults to the current process-wide settings)
        """
        self._settings = settings or get_settings()
        self._message: str | None = None
        self._sealed = False

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value against this validator's rules.

        Args:
            value: Value to validate

        Returns:
            ValidationResult with every violation found
        """
        pass

    @property
    def message(self) -> str | None:
        """The custom message overriding this validator's defaults, if any."""
        return self._message

    @property
    def settings(self) -> ValidationSettings:
        return self._settings

    @property
    def sealed(self) -> bool:
        return self._sealed

    def with_message(self, message: str) -> Validator:
        """Override every default message this validator produces.

        Composite validators pass the override on to their children.

        Args:
            message: The custom error message

        Returns:
            Self for chaining
        """
        self._ensure_mutable("with_message")
        if not message:
            raise SchemaConfigurationError("Custom message cannot be empty")
        self._message = message
        for child in self._children():
            child.with_message(message)
        return self

    def build(self) -> Validator:
        """Freeze this validator and every validator nested in it.

        Returns:
            Self, now read-only
        """
        if not self._sealed:
            self._sealed = True
            for child in self._children():
                child.build()
            logger.debug(f"Built {self!r}")
        return self

    def validate_many(
        self,
        values: Iterable[Any],
        stop_on_error: bool = False,
    ) -> list[ValidationResult]:
        """Validate multiple values.

        Args:
            values: Values to validate
            stop_on_error: If True, stop after the first failed result

        Returns:
            List of ValidationResults, one per validated value
        """
        results = []
        for value in values:
            result = self.validate(value)
            results.append(result)
            if not result.valid and stop_on_error:
                break
        return results

    def _children(self) -> list[Validator]:
        """Validators nested in this one."""
        return []

    def _ensure_mutable(self, operation: str) -> None:
        if self._sealed:
            raise SealedValidatorError(operation, type(self).__name__)

    def _error(self, default: str, field_path: str | None = None) -> ValidationError:
        return ValidationError(self._message or default, field_path)

    def _fail(self, default: str, field_path: str | None = None) -> ValidationResult:
        return ValidationResult.failure([self._error(default, field_path)])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value if self.kind else None})"


def require_length(name: str, length: int) -> int:
    """Check a length bound given to a configuration method."""
    if isinstance(length, bool) or not isinstance(length, int):
        raise SchemaConfigurationError(
            f"{name} must be an integer, got {type(length).__name__}",
            context={name: length},
        )
    if length < 0:
        raise SchemaConfigurationError(
            f"{name} cannot be negative: {length}",
            context={name: length},
        )
    return length


def require_name(name: str, value: str | None) -> str:
    """Check a property name or path given to a configuration method."""
    if not isinstance(value, str) or not value.strip():
        raise SchemaConfigurationError(
            f"{name} cannot be null or empty",
            context={name: value},
        )
    return value
