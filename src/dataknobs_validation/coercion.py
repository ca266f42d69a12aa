"""Type coercion boundary between untyped values and typed validators.

Schema slots accept any value, while each primitive validator expects one
runtime type. :class:`Coercer` performs the safe narrowing for a
:class:`ValueKind` and :class:`CoercingValidator` places it in front of a
typed validator, so the primitive validators never deal with coercion.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Real
from typing import TYPE_CHECKING, Any, NamedTuple

from .accessors import is_record
from .base import Validator, ValueKind
from .exceptions import SchemaConfigurationError, UnsupportedOperationError
from .result import ValidationResult
from .settings import ValidationSettings, get_settings

if TYPE_CHECKING:
    from .objects import DependencyBuilder

logger = logging.getLogger(__name__)


class CoercionError(Exception):
    """Raised internally when a value cannot be coerced to a kind."""

    pass


class Coerced(NamedTuple):
    """Outcome of a coercion: the converted value, or an error message."""

    value: Any
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_datetime(value: str, formats: Iterable[str]) -> datetime:
    """Parse a date-like string.

    Args:
        value: String to parse
        formats: ``strptime`` formats tried in order before ISO 8601

    Returns:
        Parsed datetime

    Raises:
        ValueError: If no format matches
    """
    text = value.strip()
    if not text:
        raise ValueError("Empty string cannot be converted to a date")

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # fromisoformat on older interpreters does not accept a trailing Z
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def to_real(value: Real | Decimal) -> float | int | Decimal:
    """Widen a number to float where float can hold it.

    Integers and finite decimals outside the float range are returned as they
    are, so comparisons against bounds stay exact.

    Raises:
        ValueError: For signalling NaN decimals
    """
    try:
        number = float(value)
    except OverflowError:
        return value  # type: ignore[return-value]
    if math.isinf(number) and isinstance(value, Decimal) and value.is_finite():
        return value
    return number


def is_nan(number: float | int | Decimal) -> bool:
    return isinstance(number, (float, Decimal)) and number != number


class Coercer:
    """Type coercion with predictable results.

    Always returns a :class:`Coerced`, never raises. Strings and booleans are
    never converted to numbers, even when they look numeric.
    """

    def __init__(self, settings: ValidationSettings | None = None):
        self._settings = settings or get_settings()
        self._coercion_map: dict[ValueKind, Callable[[Any], Any]] = {
            ValueKind.STRING: self._to_string,
            ValueKind.NUMBER: self._to_number,
            ValueKind.BOOLEAN: self._to_boolean,
            ValueKind.DATE: self._to_date,
            ValueKind.ARRAY: self._to_array,
            ValueKind.OBJECT: self._to_object,
        }

    def coerce(self, value: Any, kind: ValueKind) -> Coerced:
        """Coerce a value to the runtime type of a kind.

        Args:
            value: Value to coerce
            kind: Target value kind

        Returns:
            Coerced value, or the "Value must be a ..." message for the kind
        """
        if value is None:
            return Coerced(None, kind.type_message)

        try:
            return Coerced(self._coercion_map[kind](value))
        except CoercionError as e:
            return Coerced(value, str(e) or kind.type_message)

    def _to_string(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        raise CoercionError(ValueKind.STRING.type_message)

    def _to_number(self, value: Any) -> float | int | Decimal:
        if isinstance(value, (bool, str, bytes)):
            raise CoercionError(ValueKind.NUMBER.type_message)
        if not isinstance(value, (Real, Decimal)):
            raise CoercionError(ValueKind.NUMBER.type_message)
        try:
            number = to_real(value)
        except (ValueError, TypeError) as e:
            raise CoercionError(ValueKind.NUMBER.type_message) from e
        if is_nan(number):
            raise CoercionError(ValueKind.NUMBER.type_message)
        return number

    def _to_boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise CoercionError(ValueKind.BOOLEAN.type_message)

    def _to_date(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, str):
            try:
                return parse_datetime(value, self._settings.date_formats)
            except ValueError as e:
                raise CoercionError(ValueKind.DATE.type_message) from e
        raise CoercionError(ValueKind.DATE.type_message)

    def _to_array(self, value: Any) -> list[Any]:
        if isinstance(value, (str, bytes, bytearray, Mapping)):
            raise CoercionError(ValueKind.ARRAY.type_message)
        if isinstance(value, list):
            return value
        if isinstance(value, Iterable):
            # Buffer one-shot iterables so every check sees the same items
            return list(value)
        raise CoercionError(ValueKind.ARRAY.type_message)

    def _to_object(self, value: Any) -> Any:
        if is_record(value):
            return value
        raise CoercionError(ValueKind.OBJECT.type_message)


class CoercingValidator(Validator):
    """Expose a typed validator as a validator over untyped values.

    The incoming value is coerced to the inner validator's kind first; a value
    that cannot be coerced yields a "Value must be a ..." failure instead of an
    exception. Configuration methods are forwarded to the inner validator so
    a schema can be written as one fluent chain.

    Example:
        ```python
        age = CoercingValidator(NumberValidator()).min(0).max(120)
        age.validate(30).valid     # True
        age.validate("30").valid   # False: "Value must be a number"
        ```
    """

    def __init__(self, inner: Validator, coercer: Coercer | None = None):
        if inner is None:
            raise SchemaConfigurationError("Validator to wrap cannot be null")
        if not isinstance(inner, Validator):
            raise SchemaConfigurationError(
                f"Expected a Validator, got {type(inner).__name__}",
                context={"validator": repr(inner)},
            )
        if inner.kind is None:
            raise SchemaConfigurationError(
                f"{type(inner).__name__} has no value kind to coerce to",
                context={"validator": repr(inner)},
            )
        super().__init__(inner.settings)
        self._inner = inner
        self._coercer = coercer or Coercer(inner.settings)

    @property
    def kind(self) -> ValueKind:  # type: ignore[override]
        return self._inner.kind  # type: ignore[return-value]

    @property
    def inner(self) -> Validator:
        """The wrapped, typed validator."""
        return self._inner

    def validate(self, value: Any) -> ValidationResult:
        coerced = self._coercer.coerce(value, self.kind)
        if not coerced.ok:
            return self._fail(coerced.error)  # type: ignore[arg-type]
        return self._inner.validate(coerced.value)

    def _children(self) -> list[Validator]:
        return [self._inner]

    def _inner_method(self, operation: str) -> Callable[..., Any]:
        self._ensure_mutable(operation)
        method = getattr(self._inner, operation, None)
        if not callable(method):
            raise UnsupportedOperationError(operation, type(self._inner).__name__)
        return method

    def _forward(self, operation: str, *args: Any, **kwargs: Any) -> CoercingValidator:
        self._inner_method(operation)(*args, **kwargs)
        return self

    # String validators
    def min_length(self, length: int) -> CoercingValidator:
        return self._forward("min_length", length)

    def max_length(self, length: int) -> CoercingValidator:
        return self._forward("max_length", length)

    def pattern(self, pattern: Any, message: str | None = None) -> CoercingValidator:
        return self._forward("pattern", pattern, message)

    def email(self) -> CoercingValidator:
        return self._forward("email")

    def phone_number(self) -> CoercingValidator:
        return self._forward("phone_number")

    def postal_code(self) -> CoercingValidator:
        return self._forward("postal_code")

    # Number and date validators
    def min(self, value: Any) -> CoercingValidator:
        return self._forward("min", value)

    def max(self, value: Any) -> CoercingValidator:
        return self._forward("max", value)

    def range(self, min: Any, max: Any) -> CoercingValidator:
        return self._forward("range", min, max)

    def integer(self) -> CoercingValidator:
        return self._forward("integer")

    def non_negative(self) -> CoercingValidator:
        return self._forward("non_negative")

    # Array validators
    def unique(self, equals: Callable[[Any, Any], bool] | None = None) -> CoercingValidator:
        return self._forward("unique", equals)

    def unique_by(self, key: Any, name: str | None = None) -> CoercingValidator:
        return self._forward("unique_by", key, name)

    def items(self, validator: Validator) -> CoercingValidator:
        return self._forward("items", validator)

    # Object validators
    def mark_optional(self, *names: str) -> CoercingValidator:
        return self._forward("mark_optional", *names)

    def strict(self, enabled: bool = True) -> CoercingValidator:
        return self._forward("strict", enabled)

    def add_dependency_rule(
        self,
        property_name: str,
        path_a: str,
        path_b: str,
        predicate: Callable[[Any, Any, Any], bool],
        message: str | None = None,
    ) -> CoercingValidator:
        return self._forward("add_dependency_rule", property_name, path_a, path_b, predicate, message)

    def when(self, property_name: str, condition: Callable[[Any], bool]) -> DependencyBuilder:
        return self._inner_method("when")(property_name, condition)

    def __repr__(self) -> str:
        return f"CoercingValidator({self._inner!r})"


def as_schema_validator(validator: Validator) -> Validator:
    """Put a validator behind the coercion boundary when it needs one.

    Validators of a scalar or array kind are wrapped in a
    :class:`CoercingValidator`; object validators check their own input and
    composition validators have no kind, so both are returned unchanged.

    Args:
        validator: Validator to place in a schema slot

    Returns:
        A validator that accepts untyped values
    """
    if validator is None:
        raise SchemaConfigurationError("Validator cannot be null")
    if not isinstance(validator, Validator):
        raise SchemaConfigurationError(
            f"Expected a Validator, got {type(validator).__name__}",
            context={"validator": repr(validator)},
        )
    if (
        isinstance(validator, CoercingValidator)
        or validator.kind is None
        or validator.kind is ValueKind.OBJECT
    ):
        return validator
    return CoercingValidator(validator)
