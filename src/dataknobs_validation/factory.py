"""Factory for building schema validators."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .arrays import ArrayValidator
from .base import Validator
from .coercion import CoercingValidator, as_schema_validator
from .objects import ObjectValidator
from .primitives import BooleanValidator, DateValidator, NumberValidator, StringValidator
from .schema import ObjectSchema
from .settings import ValidationSettings, get_settings

logger = logging.getLogger(__name__)


class SchemaFactory:
    """Factory for validators that can be placed directly in an object schema.

    Primitive and array validators come back behind the coercion boundary,
    so untyped property values are checked for type before the rules run.
    Object validators check their own input and are returned as they are.

    Example:
        ```python
        user = schema_factory.object({
            "name": schema_factory.string().min_length(2).max_length(50),
            "email": schema_factory.string().email(),
            "age": schema_factory.number().integer().range(0, 120),
            "tags": schema_factory.array(schema_factory.string()).unique(),
            "address": schema_factory.object({
                "postalCode": schema_factory.string().postal_code(),
            }),
        }).mark_optional("tags")
        ```
    """

    def __init__(self, settings: ValidationSettings | None = None):
        """Initialize factory.

        Args:
            settings: Settings for the validators it creates; when omitted,
                the process-wide settings at creation time are used
        """
        self._settings = settings

    @property
    def settings(self) -> ValidationSettings:
        return self._settings or get_settings()

    def string(self) -> CoercingValidator:
        return self._wrap(StringValidator(self.settings))

    def number(self) -> CoercingValidator:
        return self._wrap(NumberValidator(self.settings))

    def boolean(self) -> CoercingValidator:
        return self._wrap(BooleanValidator(self.settings))

    def date(self) -> CoercingValidator:
        return self._wrap(DateValidator(self.settings))

    def array(self, item: Validator | None = None) -> CoercingValidator:
        """Create an array validator.

        Args:
            item: Optional validator applied to every item

        Returns:
            Array validator behind the coercion boundary
        """
        return self._wrap(ArrayValidator(item, self.settings))

    def object(self, schema: Mapping[str, Validator] | ObjectSchema) -> ObjectValidator:
        """Create an object validator for a property-name to validator mapping."""
        validator = ObjectValidator(schema, self.settings)
        logger.debug(f"Creating ObjectValidator with {len(validator.schema)} properties")
        return validator

    def object_array(self, schema: Mapping[str, Validator] | ObjectSchema) -> CoercingValidator:
        """Create an array validator whose items are validated as objects."""
        return self.array(self.object(schema))

    def coerce(self, validator: Validator) -> Validator:
        """Place an existing validator behind the coercion boundary."""
        return as_schema_validator(validator)

    def _wrap(self, validator: Validator) -> CoercingValidator:
        logger.debug(f"Creating {type(validator).__name__}")
        return CoercingValidator(validator)


# Singleton instance for convenience
schema_factory = SchemaFactory()
