"""Entity value readers and writers.

Value resolution against a bound entity tries a fixed, ordered list of
strategies. The first strategy that applies to the entity wins:

1. Accessor methods: ``get_first_name()`` / ``getFirstName()`` (setters
   ``set_first_name(value)`` / ``setFirstName(value)``)
2. Generic attribute access: ``read_attribute(field)`` / ``write_attribute(field, value)``
3. Public attributes: ``entity.first_name``
"""

import re
from collections.abc import Callable
from typing import Any

# Sentinel returned by a reader that does not apply to the entity
MISSING = object()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SEPARATOR = re.compile(r"[-_]+(.)?")


def camelize(name: str) -> str:
    """Fold dashes and underscores into camel case: ``first_name`` -> ``FirstName``."""
    folded = _SEPARATOR.sub(lambda m: (m.group(1) or "").upper(), name)
    return folded[:1].upper() + folded[1:]


def snake_case(name: str) -> str:
    """Convert a field name to snake case: ``firstName`` / ``first-name`` -> ``first_name``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).replace("-", "_").lower()


def accessor_names(prefix: str, field: str) -> list[str]:
    """Candidate accessor method names for a field, snake case first."""
    names = [f"{prefix}_{snake_case(field)}", f"{prefix}{camelize(field)}"]
    return list(dict.fromkeys(names))


# =============================================================================
# Readers
# =============================================================================


def read_via_accessor(entity: Any, field: str) -> Any:
    for name in accessor_names("get", field):
        method = getattr(entity, name, None)
        if callable(method):
            return method()
    return MISSING


def read_via_attribute_reader(entity: Any, field: str) -> Any:
    reader = getattr(entity, "read_attribute", None)
    if callable(reader):
        return reader(field)
    return MISSING


def read_via_property(entity: Any, field: str) -> Any:
    if field.isidentifier() and hasattr(entity, field):
        return getattr(entity, field)
    return MISSING


ENTITY_READERS: tuple[Callable[[Any, str], Any], ...] = (
    read_via_accessor,
    read_via_attribute_reader,
    read_via_property,
)


def read_entity_value(entity: Any, field: str) -> Any:
    """Read a field from an entity; None when no strategy applies."""
    for reader in ENTITY_READERS:
        value = reader(entity, field)
        if value is not MISSING:
            return value
    return None


# =============================================================================
# Writers
# =============================================================================


def write_via_accessor(entity: Any, field: str, value: Any) -> bool:
    for name in accessor_names("set", field):
        method = getattr(entity, name, None)
        if callable(method):
            method(value)
            return True
    return False


def write_via_attribute_writer(entity: Any, field: str, value: Any) -> bool:
    writer = getattr(entity, "write_attribute", None)
    if callable(writer):
        writer(field, value)
        return True
    return False


def write_via_property(entity: Any, field: str, value: Any) -> bool:
    # Only existing attributes are overwritten, new ones are never created
    if field.isidentifier() and hasattr(entity, field):
        setattr(entity, field, value)
        return True
    return False


ENTITY_WRITERS: tuple[Callable[[Any, str, Any], bool], ...] = (
    write_via_accessor,
    write_via_attribute_writer,
    write_via_property,
)


def write_entity_value(entity: Any, field: str, value: Any) -> bool:
    """Write a field back onto an entity; False when no strategy applies."""
    for writer in ENTITY_WRITERS:
        if writer(entity, field, value):
            return True
    return False
