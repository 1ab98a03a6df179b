"""Canned validators for fieldcheck.

These are ready-to-use validators that ship with the package. Each one is
registered under its type name, which is also the key of its default
message template.

Available validators:
- Alnum: only ASCII letters and digits
- Alpha: only letters
- Between: inclusive numeric range
- Callback: user function decides
- Numericality: valid numeric format
- PresenceOf: value is not None or ""
- Uniqueness: combination of fields does not exist yet
- File: uploaded file checks (see file.py)
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from fieldcheck.validation.errors import InvalidCallbackResultError
from fieldcheck.validation.registry import (
    BaseValidator,
    CombinedFieldsValidator,
    ValidatorRegistry,
)
from fieldcheck.validation.types import ValidatorContract
from fieldcheck.validation.validators.file import File

ALNUM_PATTERN = re.compile(r"[A-Za-z0-9]+")
NUMERIC_PATTERN = re.compile(r"^-?\d+\.?\d*$")


# =============================================================================
# Character class validators
# =============================================================================


class Alnum(BaseValidator):
    """Check for alphanumeric character(s).

    Example:
        validation.add("username", Alnum({"message": ":field must be alphanumeric"}))
    """

    type = "Alnum"

    def validate(self, validation, field):
        value = validation.get_value(field)

        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return self.fail(validation, field, self.type)

        if not ALNUM_PATTERN.fullmatch(str(value)):
            return self.fail(validation, field, self.type)

        return True


class Alpha(BaseValidator):
    """Check that a value contains only letters (any script)."""

    type = "Alpha"

    def validate(self, validation, field):
        value = validation.get_value(field)
        text = "" if value is None else str(value)

        if any(not ch.isalpha() for ch in text):
            return self.fail(validation, field, self.type)

        return True


# =============================================================================
# Numeric validators
# =============================================================================


def _as_number(value: Any) -> Any:
    """Numeric strings compare as numbers; everything else is returned as-is."""
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return value
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class Between(BaseValidator):
    """Validates that a value is within an inclusive range.

    Options:
        minimum: Lowest valid value (per-field map allowed)
        maximum: Highest valid value (per-field map allowed)

    Example:
        validation.add(["price", "amount"], Between({
            "minimum": {"price": 0, "amount": 0},
            "maximum": {"price": 100, "amount": 50},
        }))
    """

    type = "Between"

    def validate(self, validation, field):
        value = validation.get_value(field)
        minimum = self.field_option("minimum", field)
        maximum = self.field_option("maximum", field)

        if not self._in_range(value, minimum, maximum):
            return self.fail(
                validation, field, self.type, {":min": minimum, ":max": maximum}
            )

        return True

    def _in_range(self, value: Any, minimum: Any, maximum: Any) -> bool:
        if value is None:
            return False
        number = _as_number(value)
        try:
            if minimum is not None and number < _as_number(minimum):
                return False
            if maximum is not None and number > _as_number(maximum):
                return False
        except (TypeError, InvalidOperation):
            return False
        return True


class Numericality(BaseValidator):
    """Check for a valid numeric format (optional sign, digits, optional decimals)."""

    type = "Numericality"

    def validate(self, validation, field):
        value = validation.get_value(field)

        if value is None or isinstance(value, bool) or not NUMERIC_PATTERN.match(str(value)):
            return self.fail(validation, field, self.type)

        return True


# =============================================================================
# Presence
# =============================================================================


class PresenceOf(BaseValidator):
    """Validates that a value is not None or the empty string."""

    type = "PresenceOf"

    def validate(self, validation, field):
        value = validation.get_value(field)

        if value is None or value == "":
            return self.fail(validation, field, self.type)

        return True


# =============================================================================
# Callback
# =============================================================================


class Callback(BaseValidator):
    """Calls a user function for validation.

    The callback receives the bound entity, or the data when no entity is
    bound. It returns a bool, or another validator that is then run against
    the same field in its place.

    Example:
        validation.add("amount", Callback({
            "callback": lambda data: Numericality() if data.get("product") else True,
        }))
    """

    type = "Callback"

    def validate(self, validation, field):
        callback = self.get_option("callback")
        if not callable(callback):
            return True

        data = validation.get_entity()
        if data is None:
            data = validation.get_data()

        result = callback(data)

        if isinstance(result, bool):
            if not result:
                return self.fail(validation, field, self.type)
            return True

        if isinstance(result, ValidatorContract):
            return result.validate(validation, field)

        raise InvalidCallbackResultError(
            "Callback must return a bool or a validator object"
        )


# =============================================================================
# Uniqueness (combined fields)
# =============================================================================


class Uniqueness(CombinedFieldsValidator):
    """Validates that a combination of field values does not exist yet.

    Options:
        exists: Callable receiving {field: value} for every field of the rule;
            a truthy result means a duplicate exists.

    Example:
        validation.add(["first_name", "last_name"], Uniqueness({
            "exists": lambda values: repo.exists(**values),
        }))
    """

    type = "Uniqueness"

    def validate(self, validation, field):
        fields = list(field) if isinstance(field, (list, tuple)) else [field]
        exists = self.get_option("exists")
        if not callable(exists):
            return True

        values = {name: validation.get_value(name) for name in fields}

        # Can't check uniqueness on null values
        if any(value is None for value in values.values()):
            return True

        if exists(values):
            return self.fail(validation, field, self.type)

        return True


# =============================================================================
# Registration
# =============================================================================


BUILTIN_VALIDATORS: dict[str, type[BaseValidator]] = {
    "Alnum": Alnum,
    "Alpha": Alpha,
    "Between": Between,
    "Callback": Callback,
    "File": File,
    "Numericality": Numericality,
    "PresenceOf": PresenceOf,
    "Uniqueness": Uniqueness,
}


def register_builtin_validators() -> None:
    """Register all shipped validators with the ValidatorRegistry."""
    for name, validator_class in BUILTIN_VALIDATORS.items():
        ValidatorRegistry.register(name, validator_class)
