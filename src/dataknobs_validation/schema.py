"""Object schema definition: property names mapped to validators.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any

from .base import Validator, require_name
from .coercion import as_schema_validator
from .exceptions import SchemaConfigurationError, SealedValidatorError


@dataclass(frozen=True)
class SchemaEntry:
    """One property of an object schema.

    Attributes:
        name: Property name
        validator: Validator applied to a present, non-null value
        required: Whether an absent or null value is an error
    """

    name: str
    validator: Validator
    required: bool = True


class ObjectSchema:
    """Ordered mapping from property name to :class:`SchemaEntry`.

    Properties are required by default. Validators that expect a specific
    runtime type are placed behind the coercion boundary as they are added.

    Example:
        ```python
        schema = ObjectSchema({
            "name": StringValidator().min_length(2),
            "age": NumberValidator().range(0, 120),
        })
        schema.mark_optional("age")
        ```
    """

    def __init__(self, properties: Mapping[str, Validator] | None = None):
        """Initialize schema.

        Args:
            properties: Mapping from property name to validator
        """
        if properties is None:
            raise SchemaConfigurationError("Schema cannot be null")
        if not isinstance(properties, Mapping):
            raise SchemaConfigurationError(
                f"Schema must be a mapping of property names to validators, got {type(properties).__name__}",
                context={"schema": repr(properties)},
            )
        self._entries: dict[str, SchemaEntry] = {}
        self._sealed = False
        for name, validator in properties.items():
            self.add(name, validator)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> ObjectSchema:
        """Make the schema read-only; called when its object validator is built."""
        self._sealed = True
        return self

    def _ensure_mutable(self, operation: str) -> None:
        if self._sealed:
            raise SealedValidatorError(operation, type(self).__name__)

    def add(self, name: str, validator: Validator, required: bool = True) -> ObjectSchema:
        """Add or replace a property (fluent API).

        Args:
            name: Property name
            validator: Validator for the property's value
            required: Whether the property must be present and non-null

        Returns:
            Self for chaining
        """
        self._ensure_mutable("add")
        require_name("property name", name)
        if validator is None:
            raise SchemaConfigurationError(
                f"Validator for property '{name}' cannot be null",
                context={"property": name},
            )
        self._entries[name] = SchemaEntry(name, as_schema_validator(validator), required)
        return self

    def mark_optional(self, *names: str) -> ObjectSchema:
        """Allow properties to be absent or null (fluent API).

        An optional property is still validated when a value is present.

        Raises:
            SchemaConfigurationError: For empty names or names not in the schema
            SealedValidatorError: If the schema has been sealed
        """
        self._ensure_mutable("mark_optional")
        for name in names:
            require_name("property name", name)
            if name not in self._entries:
                raise SchemaConfigurationError(
                    f"Property '{name}' is not defined in the schema",
                    context={"property": name, "defined": list(self._entries)},
                )
            self._entries[name] = replace(self._entries[name], required=False)
        return self

    def entry(self, name: str) -> SchemaEntry:
        return self._entries[name]

    def is_required(self, name: str) -> bool:
        return self._entries[name].required

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    @property
    def validators(self) -> list[Validator]:
        return [entry.validator for entry in self._entries.values()]

    def __contains__(self, name: Any) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[SchemaEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> dict[str, Any]:
        """Summarize the schema for display or debugging."""
        return {
            name: {
                "validator": type(entry.validator).__name__,
                "kind": entry.validator.kind.value if entry.validator.kind else None,
                "required": entry.required,
            }
            for name, entry in self._entries.items()
        }
