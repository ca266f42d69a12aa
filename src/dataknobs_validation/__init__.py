"""DataKnobs Validation package.

Composable runtime validation for loosely-typed data:

- Typed validators (string, number, boolean, date, array) with fluent
  constraint chains
- Object validation against a named schema, with optional properties,
  strict mode and cross-property dependency rules
- A coercion boundary so differently-typed rules share one schema
- Composition of validators (all/any/not) and of numeric bounds
- Results that report every violation with its field path

Example:
    ```python
    from dataknobs_validation import schema_factory as sf

    user = sf.object({
        "name": sf.string().min_length(2),
        "age": sf.number().integer().range(0, 120),
        "address": sf.object({"postalCode": sf.string().postal_code()}),
    }).build()

    result = user.validate({"name": "A", "age": 30, "address": {"postalCode": "123"}})
    for error in result.errors:
        print(error.field_path, error.message)
    # name Property 'name': Minimum length is 2
    # address.postalCode Property 'address': Property 'postalCode': Postal code must be exactly 5 digits
    ```
"""

from .accessors import (
    MISSING,
    RecordAccessor,
    field_names,
    get_field,
    is_record,
    register_accessor,
    resolve_path,
    unregister_accessor,
)
from .arrays import ArrayValidator
from .base import Validator, ValueKind
from .coercion import Coerced, Coercer, CoercingValidator, as_schema_validator
from .combinators import (
    AllOf,
    AnyOf,
    Not,
    NumberBounds,
    all_of,
    any_of,
    intersect,
    merge,
    negate,
    not_,
    union,
)
from .exceptions import (
    SchemaConfigurationError,
    SchemaValidationError,
    SealedValidatorError,
    UnsupportedOperationError,
)
from .factory import SchemaFactory, schema_factory
from .objects import DependencyBuilder, DependencyRule, ObjectValidator
from .primitives import BooleanValidator, DateValidator, NumberValidator, StringValidator
from .result import ValidationError, ValidationResult, join_path
from .schema import ObjectSchema, SchemaEntry
from .settings import ValidationSettings, configure, get_settings, reset_settings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Result types
    "ValidationResult",
    "ValidationError",
    "join_path",
    # Validators
    "Validator",
    "ValueKind",
    "StringValidator",
    "NumberValidator",
    "BooleanValidator",
    "DateValidator",
    "ArrayValidator",
    "ObjectValidator",
    # Objects
    "ObjectSchema",
    "SchemaEntry",
    "DependencyRule",
    "DependencyBuilder",
    # Coercion
    "Coercer",
    "Coerced",
    "CoercingValidator",
    "as_schema_validator",
    # Composition
    "NumberBounds",
    "merge",
    "intersect",
    "union",
    "negate",
    "AllOf",
    "AnyOf",
    "Not",
    "all_of",
    "any_of",
    "not_",
    # Record access
    "MISSING",
    "RecordAccessor",
    "register_accessor",
    "unregister_accessor",
    "is_record",
    "field_names",
    "get_field",
    "resolve_path",
    # Factories
    "SchemaFactory",
    "schema_factory",
    # Settings
    "ValidationSettings",
    "get_settings",
    "configure",
    "reset_settings",
    # Exceptions
    "SchemaConfigurationError",
    "UnsupportedOperationError",
    "SealedValidatorError",
    "SchemaValidationError",
]
