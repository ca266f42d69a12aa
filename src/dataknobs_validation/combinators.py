"""Composition of validators and of numeric constraint records.

Two layers live here:

- Named functions over :class:`NumberBounds` (``merge``, ``intersect``,
  ``union``, ``negate``) that build new constraint records for a
  ``NumberValidator``.
- Validators that combine other validators: ``all_of``, ``any_of`` and
  ``not_``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from numbers import Real
from typing import Any

from .base import Validator
from .coercion import as_schema_validator, is_nan, to_real
from .exceptions import SchemaConfigurationError
from .result import ValidationError, ValidationResult


def require_number(name: str, value: Any) -> Any:
    """Check a numeric bound given to a configuration method."""
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise SchemaConfigurationError(
            f"{name} must be a number, got {type(value).__name__}",
            context={name: value},
        )
    try:
        number = to_real(value)
    except ValueError as e:
        raise SchemaConfigurationError(f"{name} cannot be NaN", context={name: str(value)}) from e
    if is_nan(number):
        raise SchemaConfigurationError(f"{name} cannot be NaN", context={name: value})
    return value


@dataclass(frozen=True)
class NumberBounds:
    """Constraint record of a number validator.

    Attributes:
        min: Inclusive lower bound
        max: Inclusive upper bound
        integer: Value must be integral
        non_negative: Value must be >= 0
        outside: Invert the range: value must lie outside ``[min, max]``
    """

    min: Any = None
    max: Any = None
    integer: bool = False
    non_negative: bool = False
    outside: bool = False

    def __post_init__(self) -> None:
        if self.min is not None:
            require_number("min", self.min)
        if self.max is not None:
            require_number("max", self.max)
        if self.min is not None and self.max is not None and self.min > self.max:
            raise SchemaConfigurationError(
                f"min ({self.min}) cannot be greater than max ({self.max})",
                context={"min": self.min, "max": self.max},
            )
        if self.outside and self.min is None and self.max is None:
            raise SchemaConfigurationError("An inverted range needs at least one bound")

    @property
    def has_range(self) -> bool:
        return self.min is not None or self.max is not None

    def in_range(self, value: float) -> bool:
        """Check ``min <= value <= max`` over whichever bounds are set."""
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


def _reject_inverted(operation: str, *bounds: NumberBounds) -> None:
    if any(b.outside for b in bounds):
        raise SchemaConfigurationError(
            f"{operation}() does not support inverted ranges",
            context={"operation": operation},
        )


def merge(base: NumberBounds, override: NumberBounds) -> NumberBounds:
    """Layer ``override`` on top of ``base``.

    Bounds set in ``override`` replace those in ``base``; flags are kept if
    either record sets them.
    """
    _reject_inverted("merge", base, override)
    return NumberBounds(
        min=override.min if override.min is not None else base.min,
        max=override.max if override.max is not None else base.max,
        integer=base.integer or override.integer,
        non_negative=base.non_negative or override.non_negative,
    )


def intersect(a: NumberBounds, b: NumberBounds) -> NumberBounds:
    """Values accepted by both records.

    Raises:
        SchemaConfigurationError: If the ranges do not overlap
    """
    _reject_inverted("intersect", a, b)
    lows = [bound for bound in (a.min, b.min) if bound is not None]
    highs = [bound for bound in (a.max, b.max) if bound is not None]
    low = max(lows) if lows else None
    high = min(highs) if highs else None
    if low is not None and high is not None and low > high:
        raise SchemaConfigurationError(
            f"Ranges do not overlap: [{a.min}, {a.max}] and [{b.min}, {b.max}]",
            context={"a": (a.min, a.max), "b": (b.min, b.max)},
        )
    return NumberBounds(
        min=low,
        max=high,
        integer=a.integer or b.integer,
        non_negative=a.non_negative or b.non_negative,
    )


def union(a: NumberBounds, b: NumberBounds) -> NumberBounds:
    """The smallest single range covering both records.

    Disjoint ranges are joined across the gap between them. A bound missing
    from either record leaves that side unbounded, and a flag survives only
    when both records set it.
    """
    _reject_inverted("union", a, b)
    low = min(a.min, b.min) if a.min is not None and b.min is not None else None
    high = max(a.max, b.max) if a.max is not None and b.max is not None else None
    return NumberBounds(
        min=low,
        max=high,
        integer=a.integer and b.integer,
        non_negative=a.non_negative and b.non_negative,
    )


def negate(bounds: NumberBounds) -> NumberBounds:
    """Invert a pure range: accept exactly the values it rejected.

    The bounds are kept as they are and the record is marked as ``outside``,
    so ``[10, 20]`` becomes "less than 10 or greater than 20". Negating twice
    restores the input record.

    Raises:
        SchemaConfigurationError: If the record has no bounds, or carries
            integer/non-negative flags whose negation is not a range
    """
    if not bounds.has_range:
        raise SchemaConfigurationError("Cannot negate a record without bounds")
    if bounds.integer or bounds.non_negative:
        raise SchemaConfigurationError(
            "negate() only supports pure ranges",
            context={"integer": bounds.integer, "non_negative": bounds.non_negative},
        )
    return replace(bounds, outside=not bounds.outside)


class AllOf(Validator):
    """Every member validator must pass; all errors are collected."""

    def __init__(self, validators: list[Validator]):
        super().__init__()
        self.validators = _check_members("all_of", validators)

    def validate(self, value: Any) -> ValidationResult:
        errors: list[ValidationError] = []
        for validator in self.validators:
            errors.extend(validator.validate(value).errors)
        return ValidationResult.from_errors(errors)

    def _children(self) -> list[Validator]:
        return list(self.validators)


class AnyOf(Validator):
    """At least one member validator must pass."""

    def __init__(self, validators: list[Validator]):
        super().__init__()
        self.validators = _check_members("any_of", validators)

    def validate(self, value: Any) -> ValidationResult:
        messages: list[str] = []
        for validator in self.validators:
            result = validator.validate(value)
            if result.valid:
                return result
            messages.extend(result.messages)
        return self._fail(f"None of the alternatives passed: {'; '.join(messages)}")

    def with_message(self, message: str) -> AnyOf:
        # Members keep their own messages; only the combined failure is replaced
        self._ensure_mutable("with_message")
        if not message:
            raise SchemaConfigurationError("Custom message cannot be empty")
        self._message = message
        return self

    def _children(self) -> list[Validator]:
        return list(self.validators)


class Not(Validator):
    """Negates a validator."""

    def __init__(self, validator: Validator, message: str | None = None):
        super().__init__()
        self.validator = _check_members("not_", [validator])[0]
        if message:
            self._message = message

    def validate(self, value: Any) -> ValidationResult:
        if self.validator.validate(value).valid:
            return self._fail("Value must not satisfy the rule")
        return ValidationResult.success()

    def _children(self) -> list[Validator]:
        return [self.validator]


def _check_members(operation: str, validators: list[Validator]) -> list[Validator]:
    if not validators:
        raise SchemaConfigurationError(f"{operation}() requires at least one validator")
    return [as_schema_validator(validator) for validator in validators]


def all_of(*validators: Validator) -> AllOf:
    return AllOf(list(validators))


def any_of(*validators: Validator) -> AnyOf:
    return AnyOf(list(validators))


def not_(validator: Validator, message: str | None = None) -> Not:
    return Not(validator, message)
