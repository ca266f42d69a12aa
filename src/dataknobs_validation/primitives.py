"""Primitive validators: string, number, boolean and date.

These validators expect a value of their own runtime type; conversion from
untyped input happens in :mod:`dataknobs_validation.coercion`.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from datetime import date, datetime, time, timezone
from decimal import Decimal
from numbers import Real
from re import Pattern as RegexPattern
from typing import Any

from .base import Validator, ValueKind, require_length
from .coercion import is_nan, parse_datetime, to_real
from .combinators import NumberBounds, require_number
from .exceptions import SchemaConfigurationError
from .result import ValidationError, ValidationResult
from .settings import ValidationSettings


class StringValidator(Validator):
    """Validates strings by length and pattern.

    Rules run in a fixed order (blank handling, minimum length, maximum
    length, pattern) and the first failing rule is the only one reported.

    Blank strings pass unless they are shorter than a configured minimum
    length or a custom message is set; whether a value must be present at
    all is decided by the object validator holding this one.
    """

    kind = ValueKind.STRING

    def __init__(self, settings: ValidationSettings | None = None):
        super().__init__(settings)
        self._min_length: int | None = None
        self._max_length: int | None = None
        self._pattern: RegexPattern[str] | None = None
        self._pattern_message: str | None = None

    def min_length(self, length: int) -> StringValidator:
        """Require at least ``length`` characters (fluent API)."""
        self._ensure_mutable("min_length")
        require_length("min_length", length)
        if self._max_length is not None and length > self._max_length:
            raise SchemaConfigurationError(
                f"min_length ({length}) cannot be greater than max_length ({self._max_length})",
                context={"min_length": length, "max_length": self._max_length},
            )
        self._min_length = length
        return self

    def max_length(self, length: int) -> StringValidator:
        """Allow at most ``length`` characters (fluent API)."""
        self._ensure_mutable("max_length")
        require_length("max_length", length)
        if self._min_length is not None and length < self._min_length:
            raise SchemaConfigurationError(
                f"max_length ({length}) cannot be less than min_length ({self._min_length})",
                context={"min_length": self._min_length, "max_length": length},
            )
        self._max_length = length
        return self

    def pattern(self, pattern: str | RegexPattern[str], message: str | None = None) -> StringValidator:
        """Require the value to contain a match for a regular expression.

        Anchor the pattern (``^...$``) to match the whole value.

        Args:
            pattern: Regex pattern (string or compiled pattern)
            message: Default message when the pattern does not match

        Returns:
            Self for chaining
        """
        self._ensure_mutable("pattern")
        if isinstance(pattern, RegexPattern):
            self._pattern = pattern
        elif isinstance(pattern, str) and pattern:
            try:
                self._pattern = re.compile(pattern)
            except re.error as e:
                raise SchemaConfigurationError(
                    f"Invalid regular expression {pattern!r}: {e}",
                    context={"pattern": pattern},
                ) from e
        else:
            raise SchemaConfigurationError(
                "Pattern cannot be null or empty",
                context={"pattern": pattern},
            )
        self._pattern_message = message
        return self

    def email(self) -> StringValidator:
        return self.pattern(self._settings.email_pattern, "Email format is invalid")

    def phone_number(self) -> StringValidator:
        return self.pattern(
            self._settings.phone_pattern,
            "Phone number format is invalid (expected format: XXX-XXX-XXXX)",
        )

    def postal_code(self) -> StringValidator:
        return self.pattern(self._settings.postal_code_pattern, "Postal code must be exactly 5 digits")

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return self._fail(ValueKind.STRING.type_message)

        if not value.strip():
            if self._min_length is not None and len(value) < self._min_length:
                return self._fail(f"Minimum length is {self._min_length}")
            if self._message is not None:
                return self._fail(self._message)
            return ValidationResult.success()

        if self._min_length is not None and len(value) < self._min_length:
            return self._fail(f"Minimum length is {self._min_length}")

        if self._max_length is not None and len(value) > self._max_length:
            return self._fail(f"Maximum length is {self._max_length}")

        if self._pattern is not None and not self._pattern.search(value):
            return self._fail(self._pattern_message or "Pattern validation failed")

        return ValidationResult.success()


class NumberValidator(Validator):
    """Validates numbers against a :class:`NumberBounds` record.

    Every violated constraint is reported, unlike :class:`StringValidator`.

    Integrality is checked with a tolerance: a finite value counts as an
    integer when its distance to the nearest integer (``|value mod 1|``,
    measured from either side) is at most ``settings.integer_epsilon``. This
    absorbs floating-point representation error such as ``0.1 * 3 * 10``.
    """

    kind = ValueKind.NUMBER

    def __init__(
        self,
        settings: ValidationSettings | None = None,
        bounds: NumberBounds | None = None,
    ):
        super().__init__(settings)
        self._bounds = bounds or NumberBounds()

    @property
    def bounds(self) -> NumberBounds:
        return self._bounds

    def apply(self, bounds: NumberBounds) -> NumberValidator:
        """Replace the constraint record, e.g. with the output of ``intersect``."""
        self._ensure_mutable("apply")
        if not isinstance(bounds, NumberBounds):
            raise SchemaConfigurationError(
                f"Expected NumberBounds, got {type(bounds).__name__}",
                context={"bounds": repr(bounds)},
            )
        self._bounds = bounds
        return self

    def min(self, value: Any) -> NumberValidator:
        self._ensure_mutable("min")
        self._bounds = replace(self._bounds, min=require_number("min", value))
        return self

    def max(self, value: Any) -> NumberValidator:
        self._ensure_mutable("max")
        self._bounds = replace(self._bounds, max=require_number("max", value))
        return self

    def range(self, min: Any, max: Any) -> NumberValidator:
        self._ensure_mutable("range")
        self._bounds = replace(
            self._bounds,
            min=require_number("min", min),
            max=require_number("max", max),
        )
        return self

    def integer(self) -> NumberValidator:
        self._ensure_mutable("integer")
        self._bounds = replace(self._bounds, integer=True)
        return self

    def non_negative(self) -> NumberValidator:
        """Require value >= 0, reported separately from ``min``."""
        self._ensure_mutable("non_negative")
        self._bounds = replace(self._bounds, non_negative=True)
        return self

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
            return self._fail(ValueKind.NUMBER.type_message)
        try:
            number = to_real(value)
        except ValueError:
            return self._fail(ValueKind.NUMBER.type_message)
        if is_nan(number):
            return self._fail(ValueKind.NUMBER.type_message)

        bounds = self._bounds
        errors: list[ValidationError] = []

        if bounds.outside:
            if bounds.in_range(number):
                errors.append(self._error(self._outside_message(bounds)))
        else:
            if bounds.min is not None and number < bounds.min:
                errors.append(self._error(f"Value must be greater than or equal to {bounds.min}"))
            if bounds.max is not None and number > bounds.max:
                errors.append(self._error(f"Value must be less than or equal to {bounds.max}"))

        if bounds.integer and not self._is_integral(number):
            errors.append(self._error("Value must be an integer"))

        if bounds.non_negative and number < 0:
            errors.append(self._error("Value must be non-negative"))

        return ValidationResult.from_errors(errors)

    def _is_integral(self, number: float | int | Decimal) -> bool:
        if isinstance(number, int):
            return True
        if isinstance(number, Decimal):
            return number.is_finite() and number == number.to_integral_value()
        if not math.isfinite(number):
            return False
        return abs(number - round(number)) <= self._settings.integer_epsilon

    @staticmethod
    def _outside_message(bounds: NumberBounds) -> str:
        if bounds.min is not None and bounds.max is not None:
            return f"Value must be outside the range [{bounds.min}, {bounds.max}]"
        if bounds.min is not None:
            return f"Value must be less than {bounds.min}"
        return f"Value must be greater than {bounds.max}"


class BooleanValidator(Validator):
    """Validates booleans; any ``bool`` is valid."""

    kind = ValueKind.BOOLEAN

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult.success()
        return self._fail(ValueKind.BOOLEAN.type_message)


class DateValidator(Validator):
    """Validates dates against inclusive bounds, compared by instant.

    Naive datetimes are treated as UTC so that they can be compared with
    timezone-aware bounds and values.
    """

    kind = ValueKind.DATE

    def __init__(self, settings: ValidationSettings | None = None):
        super().__init__(settings)
        self._min: datetime | None = None
        self._max: datetime | None = None
        self._min_label: str | None = None
        self._max_label: str | None = None

    def min(self, value: date | datetime | str) -> DateValidator:
        """Set the earliest valid date (inclusive)."""
        self._ensure_mutable("min")
        bound = self._to_bound("min", value)
        if self._max is not None and _instant(bound) > _instant(self._max):
            raise SchemaConfigurationError(
                f"min ({value}) cannot be later than max ({self._max_label})",
                context={"min": str(value), "max": self._max_label},
            )
        self._min, self._min_label = bound, _label(value)
        return self

    def max(self, value: date | datetime | str) -> DateValidator:
        """Set the latest valid date (inclusive)."""
        self._ensure_mutable("max")
        bound = self._to_bound("max", value)
        if self._min is not None and _instant(bound) < _instant(self._min):
            raise SchemaConfigurationError(
                f"max ({value}) cannot be earlier than min ({self._min_label})",
                context={"min": self._min_label, "max": str(value)},
            )
        self._max, self._max_label = bound, _label(value)
        return self

    def range(self, min: date | datetime | str, max: date | datetime | str) -> DateValidator:
        """Set both bounds; on error the previous bounds are kept."""
        self._ensure_mutable("range")
        low = self._to_bound("min", min)
        high = self._to_bound("max", max)
        if _instant(low) > _instant(high):
            raise SchemaConfigurationError(
                f"min ({min}) cannot be later than max ({max})",
                context={"min": str(min), "max": str(max)},
            )
        self._min, self._min_label = low, _label(min)
        self._max, self._max_label = high, _label(max)
        return self

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime.combine(value, time())
        else:
            return self._fail(ValueKind.DATE.type_message)

        errors: list[ValidationError] = []
        if self._min is not None and _instant(moment) < _instant(self._min):
            errors.append(self._error(f"Date must be on or after {self._min_label}"))
        if self._max is not None and _instant(moment) > _instant(self._max):
            errors.append(self._error(f"Date must be on or before {self._max_label}"))
        return ValidationResult.from_errors(errors)

    def _to_bound(self, name: str, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, str):
            try:
                return parse_datetime(value, self._settings.date_formats)
            except ValueError as e:
                raise SchemaConfigurationError(
                    f"Cannot parse {name} date {value!r}",
                    context={name: value},
                ) from e
        raise SchemaConfigurationError(
            f"{name} must be a date, datetime or date string, got {type(value).__name__}",
            context={name: repr(value)},
        )


def _instant(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def _label(value: date | datetime | str) -> str:
    return value if isinstance(value, str) else value.isoformat()
