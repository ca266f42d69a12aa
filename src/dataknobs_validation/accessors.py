"""Named field access for the records an object validator walks.

Each record type gets an accessor, resolved once and cached: a pair of
functions listing a record's field names and reading one field by name.
Accessors are derived for mappings, dataclasses, named tuples and plain
objects; other types can register their own.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from numbers import Number
from typing import Any

from .exceptions import SchemaConfigurationError

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for a field that is not present at all (as opposed to None)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

# Values of these types are never treated as records.
_SCALAR_TYPES: tuple[type, ...] = (
    str, bytes, bytearray, bool, Number, Decimal, date, datetime, time,
    list, tuple, set, frozenset, type(None),
)


@dataclass(frozen=True)
class RecordAccessor:
    """Field access functions for one record type.

    Attributes:
        field_names: Returns the names of a record's own fields
        getter: Returns a field's value, or the given default when absent
    """

    field_names: Callable[[Any], list[str]]
    getter: Callable[[Any, str, Any], Any]

    def get(self, record: Any, name: str, default: Any = MISSING) -> Any:
        return self.getter(record, name, default)


def _mapping_names(record: Mapping) -> list[str]:
    return [key for key in record.keys() if isinstance(key, str)]


def _mapping_get(record: Mapping, name: str, default: Any) -> Any:
    return record[name] if name in record else default


def _attribute_get(record: Any, name: str, default: Any) -> Any:
    return getattr(record, name, default)


def _dataclass_accessor(record_type: type) -> RecordAccessor:
    names = [f.name for f in dataclasses.fields(record_type)]
    return RecordAccessor(lambda record: list(names), _attribute_get)


def _namedtuple_accessor(record_type: type) -> RecordAccessor:
    names = list(record_type._fields)  # type: ignore[attr-defined]
    return RecordAccessor(lambda record: list(names), _attribute_get)


def _object_accessor(record_type: type) -> RecordAccessor:
    properties: list[str] = []
    slots: list[str] = []
    for klass in reversed(record_type.__mro__):
        for name, member in vars(klass).items():
            if isinstance(member, property) and not name.startswith("_") and name not in properties:
                properties.append(name)
        klass_slots = vars(klass).get("__slots__", ())
        if isinstance(klass_slots, str):
            klass_slots = (klass_slots,)
        for name in klass_slots:
            if not name.startswith("_") and name not in slots:
                slots.append(name)

    def field_names(record: Any) -> list[str]:
        names = [name for name in getattr(record, "__dict__", {}) if not name.startswith("_")]
        names.extend(name for name in slots if name not in names and hasattr(record, name))
        names.extend(name for name in properties if name not in names)
        return names

    return RecordAccessor(field_names, _attribute_get)


_registered: dict[type, RecordAccessor] = {}
_cache: dict[type, RecordAccessor | None] = {}


def register_accessor(
    record_type: type,
    field_names: Callable[[Any], list[str]] | list[str],
    getter: Callable[[Any, str, Any], Any] | None = None,
) -> None:
    """Register an explicit accessor for a record type and its subclasses.

    Args:
        record_type: Type whose instances the accessor reads
        field_names: Function listing a record's field names, or a fixed list
        getter: Function ``(record, name, default) -> value``; defaults to
            attribute access
    """
    if not isinstance(record_type, type):
        raise SchemaConfigurationError(
            "record_type must be a type",
            context={"record_type": repr(record_type)},
        )
    if field_names is None:
        raise SchemaConfigurationError("field_names cannot be null")
    if not callable(field_names):
        fixed = list(field_names)
        field_names = lambda record: list(fixed)  # noqa: E731

    _registered[record_type] = RecordAccessor(field_names, getter or _attribute_get)
    _cache.clear()
    logger.debug(f"Registered record accessor for {record_type.__name__}")


def unregister_accessor(record_type: type) -> None:
    """Remove an accessor added with :func:`register_accessor`."""
    _registered.pop(record_type, None)
    _cache.clear()


def _derive_accessor(record_type: type) -> RecordAccessor | None:
    for registered_type, accessor in _registered.items():
        if issubclass(record_type, registered_type):
            return accessor
    if issubclass(record_type, Mapping):
        return RecordAccessor(_mapping_names, _mapping_get)
    if dataclasses.is_dataclass(record_type):
        return _dataclass_accessor(record_type)
    if issubclass(record_type, tuple) and hasattr(record_type, "_fields"):
        return _namedtuple_accessor(record_type)
    if issubclass(record_type, _SCALAR_TYPES):
        return None
    has_dict = any("__dict__" in vars(klass) for klass in record_type.__mro__)
    has_slots = any("__slots__" in vars(klass) for klass in record_type.__mro__)
    if not has_dict and (not has_slots or hasattr(record_type, "__iter__")):
        return None
    return _object_accessor(record_type)


def accessor_for(record: Any) -> RecordAccessor | None:
    """Get the accessor for a record, or None if the value is not a record."""
    record_type = type(record)
    if record_type not in _cache:
        _cache[record_type] = _derive_accessor(record_type)
    return _cache[record_type]


def is_record(value: Any) -> bool:
    """Check whether a value exposes named fields."""
    return accessor_for(value) is not None


def field_names(record: Any) -> list[str]:
    """List a record's own field names (empty for non-records)."""
    accessor = accessor_for(record)
    return accessor.field_names(record) if accessor else []


def get_field(record: Any, name: str, default: Any = MISSING) -> Any:
    """Read one field from a record.

    Args:
        record: Record to read from
        name: Field name
        default: Value returned when the field is absent

    Returns:
        The field value, or ``default``

    Raises:
        Exception: Whatever a property getter or registered accessor raises
    """
    accessor = accessor_for(record)
    if accessor is None:
        return default
    return accessor.get(record, name, default)


def resolve_path(root: Any, path: str, default: Any = None) -> Any:
    """Resolve a dot-notation path against a record.

    A missing segment yields ``default`` rather than raising.

    Args:
        root: Record to start from
        path: Dot-notation path, e.g. ``"address.country"``
        default: Value returned when any segment is absent

    Returns:
        The value at the path, or ``default``

    Example:
        ```python
        resolve_path({"address": {"country": "USA"}}, "address.country")  # "USA"
        resolve_path({"address": None}, "address.country")                # None
        ```
    """
    current = root
    for part in path.split("."):
        if current is None:
            return default
        current = get_field(current, part)
        if current is MISSING:
            return default
    return current
