"""Object validation: walks a record's properties against an object schema.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .accessors import MISSING, field_names, get_field, is_record, resolve_path
from .base import Validator, ValueKind, require_name
from .exceptions import SchemaConfigurationError
from .result import ValidationError, ValidationResult, join_path
from .schema import ObjectSchema
from .settings import ValidationSettings

logger = logging.getLogger(__name__)

DependencyPredicate = Callable[[Any, Any, Any], bool]


@dataclass(frozen=True)
class DependencyRule:
    """A cross-property rule evaluated against the root object.

    Attributes:
        property_name: Property the rule is reported against
        path_a: Dot-path of the first value passed to the predicate
        path_b: Dot-path of the second value passed to the predicate
        predicate: ``(root, value_a, value_b) -> bool``
        message: Message reported when the predicate does not hold
    """

    property_name: str
    path_a: str
    path_b: str
    predicate: DependencyPredicate
    message: str | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.property_name, self.path_a, self.path_b)

    @property
    def default_message(self) -> str:
        return (
            f"Property '{self.property_name}' failed dependency rule "
            f"on '{self.path_a}' and '{self.path_b}'"
        )

    def holds(self, root: Any) -> bool:
        """Resolve both paths on ``root`` and apply the predicate.

        A path that cannot be read, or a predicate that raises, is treated as
        not holding.
        """
        try:
            value_a = resolve_path(root, self.path_a)
            value_b = resolve_path(root, self.path_b)
            return bool(self.predicate(root, value_a, value_b))
        except Exception as e:
            logger.debug(f"Dependency rule {self.key} raised {type(e).__name__}: {e}")
            return False


class DependencyBuilder:
    """Builds a conditional dependency rule for an object validator.

    Created by :meth:`ObjectValidator.when`; the rule given to
    :meth:`depends_on` only runs when the condition holds for the root object.
    """

    def __init__(
        self,
        validator: ObjectValidator,
        property_name: str,
        condition: Callable[[Any], bool],
    ):
        self._validator = validator
        self._property_name = require_name("property_name", property_name)
        if not callable(condition):
            raise SchemaConfigurationError("Condition must be callable")
        self._condition = condition

    def depends_on(
        self,
        path_a: str,
        path_b: str,
        rule: Callable[[Any, Any], bool],
        message: str | None = None,
    ) -> ObjectValidator:
        """Add a rule over the values at two paths.

        Args:
            path_a: Dot-path of the first value
            path_b: Dot-path of the second value
            rule: ``(value_a, value_b) -> bool``, applied only when the
                condition holds
            message: Message reported when the rule fails

        Returns:
            The object validator, for chaining
        """
        if not callable(rule):
            raise SchemaConfigurationError("Dependency rule must be callable")
        condition = self._condition

        def predicate(root: Any, value_a: Any, value_b: Any) -> bool:
            return not condition(root) or rule(value_a, value_b)

        return self._validator.add_dependency_rule(
            self._property_name, path_a, path_b, predicate, message
        )


class ObjectValidator(Validator):
    """Validates a record against an :class:`ObjectSchema`.

    A single ``validate`` call:

    1. rejects a null or non-record value;
    2. in strict mode, reports every field missing from the schema in one error;
    3. checks each schema property: absent or null values are errors only for
       required properties; present values go to the property's validator
       and its errors are prefixed with the property name and re-rooted under it;
    4. evaluates every dependency rule against the object;
    5. succeeds only if no step produced an error.

    Records are read through :mod:`dataknobs_validation.accessors`, so mappings,
    dataclasses, named tuples and plain objects all work.

    Example:
        ```python
        user = ObjectValidator({
            "name": StringValidator().min_length(2),
            "phone": StringValidator(),
            "address": ObjectValidator({"country": StringValidator()}),
        }).mark_optional("phone")

        user.when("phone", lambda u: resolve_path(u, "address.country") == "USA").depends_on(
            "phone", "address.country",
            lambda phone, country: bool(phone) and phone.startswith("+1-"),
            "US phone numbers must start with +1-",
        )
        ```
    """

    kind = ValueKind.OBJECT

    def __init__(
        self,
        schema: Mapping[str, Validator] | ObjectSchema,
        settings: ValidationSettings | None = None,
    ):
        super().__init__(settings)
        if schema is None:
            raise SchemaConfigurationError("Schema cannot be null")
        self._schema = schema if isinstance(schema, ObjectSchema) else ObjectSchema(schema)
        self._strict = False
        self._rules: dict[tuple[str, str, str], DependencyRule] = {}

    @property
    def schema(self) -> ObjectSchema:
        return self._schema

    @property
    def is_strict(self) -> bool:
        return self._strict

    @property
    def dependency_rules(self) -> list[DependencyRule]:
        return list(self._rules.values())

    def mark_optional(self, *names: str) -> ObjectValidator:
        """Allow properties to be absent or null; present values are still checked."""
        self._ensure_mutable("mark_optional")
        self._schema.mark_optional(*names)
        return self

    def strict(self, enabled: bool = True) -> ObjectValidator:
        """Reject fields that are not defined in the schema."""
        self._ensure_mutable("strict")
        self._strict = enabled
        return self

    def add_dependency_rule(
        self,
        property_name: str,
        path_a: str,
        path_b: str,
        predicate: DependencyPredicate,
        message: str | None = None,
    ) -> ObjectValidator:
        """Add a cross-property rule (fluent API).

        A rule with the same property name and paths replaces the earlier one.

        Args:
            property_name: Property the rule is reported against
            path_a: Dot-path, resolved on the validated object
            path_b: Dot-path, resolved on the validated object
            predicate: ``(root, value_a, value_b) -> bool``
            message: Message reported when the predicate does not hold

        Returns:
            Self for chaining
        """
        self._ensure_mutable("add_dependency_rule")
        require_name("property_name", property_name)
        require_name("path_a", path_a)
        require_name("path_b", path_b)
        if predicate is None or not callable(predicate):
            raise SchemaConfigurationError(
                f"Predicate for property '{property_name}' must be callable",
                context={"property": property_name},
            )
        rule = DependencyRule(property_name, path_a, path_b, predicate, message)
        self._rules[rule.key] = rule
        return self

    def build(self) -> ObjectValidator:
        """Freeze this validator, its schema and every property validator."""
        self._schema.seal()
        super().build()
        return self

    def when(self, property_name: str, condition: Callable[[Any], bool]) -> DependencyBuilder:
        """Start a dependency rule that applies only when ``condition(root)`` holds."""
        self._ensure_mutable("when")
        return DependencyBuilder(self, property_name, condition)

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return self._fail("Object cannot be null")
        if not is_record(value):
            return self._fail(ValueKind.OBJECT.type_message)

        errors: list[ValidationError] = []

        if self._strict:
            unknown = [name for name in field_names(value) if name not in self._schema]
            if unknown:
                errors.append(self._error(f"Unknown properties found: {', '.join(unknown)}"))

        for entry in self._schema:
            errors.extend(self._check_property(value, entry.name, entry.validator, entry.required))

        for rule in self._rules.values():
            if not rule.holds(value):
                errors.append(
                    ValidationError(rule.message or self._message or rule.default_message, rule.property_name)
                )

        if errors:
            logger.debug(f"Object validation failed with {len(errors)} error(s)")
        return ValidationResult.from_errors(errors)

    def _check_property(
        self,
        record: Any,
        name: str,
        validator: Validator,
        required: bool,
    ) -> list[ValidationError]:
        try:
            property_value = get_field(record, name)
        except Exception as e:
            logger.debug(f"Reading property '{name}' raised {type(e).__name__}: {e}")
            return [self._error(f"Property '{name}' could not be read: {e}", name)]
        if property_value is MISSING:
            return [self._error(f"Required property '{name}' is missing", name)] if required else []
        if property_value is None:
            return [self._error(f"Required property '{name}' cannot be null", name)] if required else []

        result = validator.validate(property_value)
        return [
            ValidationError(f"Property '{name}': {error.message}", join_path(name, error.field_path))
            for error in result.errors
        ]

    def _children(self) -> list[Validator]:
        return self._schema.validators
