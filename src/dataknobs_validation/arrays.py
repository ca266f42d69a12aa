"""Array validation: length, uniqueness and per-item rules.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .accessors import MISSING, get_field
from .base import Validator, ValueKind, require_length, require_name
from .coercion import as_schema_validator
from .exceptions import SchemaConfigurationError
from .result import ValidationError, ValidationResult, join_path
from .settings import ValidationSettings

logger = logging.getLogger(__name__)


class ArrayValidator(Validator):
    """Validates a finite sequence of items.

    The input is buffered into a list first, so one-shot iterables can be
    checked for both length and duplicates. Each configured check adds its
    own errors; nothing short-circuits:

    - ``min_length`` / ``max_length`` on the item count
    - ``unique`` on whole items (equality or a custom equivalence)
    - ``unique_by`` on a key derived from each item, one error per
      duplicated key
    - the item validator, with errors re-rooted at ``[i]``

    Example:
        ```python
        tags = ArrayValidator(StringValidator().min_length(2)).min_length(1).unique()
        result = tags.validate(["ok", "x", "ok"])
        # errors: "Array contains duplicate items at indices: 0, 2"
        #         "[1]: Minimum length is 2"  (field_path "[1]")
        ```
    """

    kind = ValueKind.ARRAY

    def __init__(
        self,
        item_validator: Validator | None = None,
        settings: ValidationSettings | None = None,
    ):
        super().__init__(settings)
        self._item_validator = as_schema_validator(item_validator) if item_validator is not None else None
        self._min_length: int | None = None
        self._max_length: int | None = None
        self._unique = False
        self._equals: Callable[[Any, Any], bool] | None = None
        self._key: Callable[[Any], Any] | None = None
        self._key_name: str | None = None

    @property
    def item_validator(self) -> Validator | None:
        return self._item_validator

    def items(self, validator: Validator) -> ArrayValidator:
        """Validate every item with ``validator`` (fluent API)."""
        self._ensure_mutable("items")
        if validator is None:
            raise SchemaConfigurationError("Item validator cannot be null")
        self._item_validator = as_schema_validator(validator)
        if self._message is not None:
            self._item_validator.with_message(self._message)
        return self

    def min_length(self, length: int) -> ArrayValidator:
        self._ensure_mutable("min_length")
        require_length("min_length", length)
        if self._max_length is not None and length > self._max_length:
            raise SchemaConfigurationError(
                f"min_length ({length}) cannot be greater than max_length ({self._max_length})",
                context={"min_length": length, "max_length": self._max_length},
            )
        self._min_length = length
        return self

    def max_length(self, length: int) -> ArrayValidator:
        self._ensure_mutable("max_length")
        require_length("max_length", length)
        if self._min_length is not None and length < self._min_length:
            raise SchemaConfigurationError(
                f"max_length ({length}) cannot be less than min_length ({self._min_length})",
                context={"min_length": self._min_length, "max_length": length},
            )
        self._max_length = length
        return self

    def unique(self, equals: Callable[[Any, Any], bool] | None = None) -> ArrayValidator:
        """Require all non-null items to be distinct.

        Args:
            equals: Optional equivalence predicate; items are compared with
                ``==`` when omitted

        Returns:
            Self for chaining
        """
        self._ensure_mutable("unique")
        if equals is not None and not callable(equals):
            raise SchemaConfigurationError("Equivalence predicate must be callable")
        self._unique = True
        self._equals = equals
        return self

    def unique_by(self, key: Callable[[Any], Any] | str, name: str | None = None) -> ArrayValidator:
        """Require a key derived from each item to be distinct.

        Args:
            key: Key selector, or the name of a field read from each item
            name: Property name used in messages and as the error's field
                path (defaults to the field name when ``key`` is a string)

        Returns:
            Self for chaining
        """
        self._ensure_mutable("unique_by")
        if isinstance(key, str):
            field = require_name("key", key)
            self._key = lambda item: _field_or_none(item, field)
            self._key_name = name or field
        elif callable(key):
            self._key = key
            self._key_name = name
        else:
            raise SchemaConfigurationError(
                "Key selector must be callable or a field name",
                context={"key": repr(key)},
            )
        return self

    def validate(self, value: Any) -> ValidationResult:
        if value is None or isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Iterable):
            return self._fail(ValueKind.ARRAY.type_message)

        items = value if isinstance(value, list) else list(value)
        errors: list[ValidationError] = []

        if self._min_length is not None and len(items) < self._min_length:
            errors.append(self._error(f"Array must have at least {self._min_length} items"))

        if self._max_length is not None and len(items) > self._max_length:
            errors.append(self._error(f"Array must have at most {self._max_length} items"))

        if self._unique:
            errors.extend(self._check_unique(items))

        if self._key is not None:
            errors.extend(self._check_unique_by(items))

        if self._item_validator is not None:
            errors.extend(self._check_items(items))

        return ValidationResult.from_errors(errors)

    def _check_unique(self, items: list[Any]) -> list[ValidationError]:
        duplicates: list[int] = []
        # Pairwise so unhashable items and custom equivalences both work
        for i, item in enumerate(items):
            if item is None:
                continue
            for j in range(i):
                other = items[j]
                if other is not None and self._same(other, item, j, i):
                    if j not in duplicates:
                        duplicates.append(j)
                    duplicates.append(i)
                    break
        if not duplicates:
            return []
        indices = ", ".join(str(index) for index in sorted(duplicates))
        return [self._error(f"Array contains duplicate items at indices: {indices}")]

    def _same(self, a: Any, b: Any, index_a: int, index_b: int) -> bool:
        if self._equals is None:
            return bool(a == b)
        try:
            return bool(self._equals(a, b))
        except Exception as e:
            logger.debug(f"Equivalence predicate failed for items {index_a} and {index_b}: {e}")
            return False

    def _check_unique_by(self, items: list[Any]) -> list[ValidationError]:
        groups: list[tuple[Any, list[int]]] = []
        for index, item in enumerate(items):
            if item is None:
                continue
            try:
                key = self._key(item)  # type: ignore[misc]
            except Exception as e:
                logger.debug(f"Key selector failed for item {index}: {e}")
                continue
            for group_key, indices in groups:
                if group_key == key:
                    indices.append(index)
                    break
            else:
                groups.append((key, [index]))

        errors = []
        for key, indices in groups:
            if len(indices) < 2:
                continue
            positions = ", ".join(str(index) for index in indices)
            if self._key_name:
                default = f"Duplicate value '{key}' for property '{self._key_name}' at indices: {positions}"
            else:
                default = f"Duplicate key '{key}' at indices: {positions}"
            errors.append(self._error(default, self._key_name))
        return errors

    def _check_items(self, items: list[Any]) -> list[ValidationError]:
        errors = []
        for index, item in enumerate(items):
            position = f"[{index}]"
            if item is None:
                errors.append(self._error(f"Item at index {index} cannot be null", position))
                continue
            result = self._item_validator.validate(item)  # type: ignore[union-attr]
            errors.extend(
                ValidationError(f"{position}: {error.message}", join_path(position, error.field_path))
                for error in result.errors
            )
        return errors

    def _children(self) -> list[Validator]:
        return [self._item_validator] if self._item_validator is not None else []


def _field_or_none(item: Any, name: str) -> Any:
    value = get_field(item, name)
    return None if value is MISSING else value
