"""Core types for the fieldcheck validation engine.

This module defines the values that flow between the engine and its plugins:
- Message: one validation failure
- OptionValue: a validator option that is either a scalar or a per-field map
- ValidationConfig: labels, message templates, filters and hooks for an engine
- Protocols for validators, allow-empty checks and filter services
"""

from collections.abc import Callable, Mapping, Sized
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable


# =============================================================================
# Messages
# =============================================================================


DEFAULT_MESSAGES: dict[str, str] = {
    "Alnum": "Field :field must contain only letters and numbers",
    "Alpha": "Field :field must contain only letters",
    "Between": "Field :field must be within the range of :min to :max",
    "Callback": "Field :field must match the callback function",
    "Confirmation": "Field :field must be the same as :with",
    "Digit": "Field :field must be numeric",
    "Email": "Field :field must be an email address",
    "ExclusionIn": "Field :field must not be a part of list: :domain",
    "FileEmpty": "Field :field must not be empty",
    "FileIniSize": "File :field exceeds the maximum file size",
    "FileMaxResolution": "File :field must not exceed :max resolution",
    "FileMinResolution": "File :field must be at least :min resolution",
    "FileSize": "File :field exceeds the size of :max",
    "FileType": "File :field must be of type: :types",
    "FileValid": "Field :field is not valid",
    "Identical": "Field :field does not have the expected value",
    "InclusionIn": "Field :field must be a part of list: :domain",
    "Numericality": "Field :field does not have a valid numeric format",
    "PresenceOf": "Field :field is required",
    "Regex": "Field :field does not match the required format",
    "TooLong": "Field :field must not exceed :max characters long",
    "TooShort": "Field :field must be at least :min characters long",
    "Uniqueness": "Field :field must be unique",
    "Url": "Field :field must be a url",
    "CreditCard": "Field :field is not valid for a credit card number",
    "Date": "Field :field is not a valid date",
}


@dataclass(frozen=True)
class Message:
    """A single validation failure.

    Attributes:
        message: Human-readable text with placeholders already replaced
        field: Field name (or list of names for combined-field validators)
        type: Validator type that produced the message (e.g. "Between")
        code: Optional numeric code for programmatic matching
    """

    message: str
    field: str | list[str] | None = None
    type: str | None = None
    code: int | None = None

    def __str__(self) -> str:
        return self.message

    def __hash__(self) -> int:
        # Combined-field messages carry a list of names
        field = tuple(self.field) if isinstance(self.field, list) else self.field
        return hash((self.message, field, self.type, self.code))

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "field": self.field,
            "type": self.type,
            "code": self.code,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        """Rebuild a Message from its to_dict() form."""
        return cls(
            message=data["message"],
            field=data.get("field"),
            type=data.get("type"),
            code=data.get("code"),
        )


# =============================================================================
# Option values
# =============================================================================


@dataclass(frozen=True)
class Scalar:
    """Option value shared by every field the validator is attached to."""

    value: Any

    def resolve(self, field_name: str) -> Any:
        return self.value


@dataclass(frozen=True)
class PerField:
    """Option value that differs per field, keyed by field name."""

    values: Mapping[str, Any]

    def resolve(self, field_name: str) -> Any:
        # A field missing from the map resolves to None, never to the map itself
        return self.values.get(field_name)


OptionValue = Scalar | PerField


def option_value(raw: Any) -> OptionValue:
    """Wrap a raw option: mappings become PerField, everything else Scalar."""
    if isinstance(raw, Mapping):
        return PerField(raw)
    return Scalar(raw)


# =============================================================================
# Emptiness
# =============================================================================


def is_empty(value: Any) -> bool:
    """Emptiness predicate used by the allowEmpty skip policy.

    Empty values are: None, False, numeric zero (0, 0.0, Decimal(0)), the
    empty string, empty bytes and any empty sized collection. The string "0"
    and whitespace-only strings are NOT empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class ValidatorContract(Protocol):
    """Protocol every validator plugin implements.

    validate() receives the engine and the field (or field list) it is bound
    to. It resolves values through validation.get_value(), appends a Message
    on failure and returns False, or returns True on success.
    """

    def has_option(self, name: str) -> bool:
        ...

    def get_option(self, name: str, default: Any = None) -> Any:
        ...

    def validate(self, validation: Any, field: Any) -> bool:
        ...


@runtime_checkable
class AllowEmptyAware(Protocol):
    """Validators with their own notion of an empty value (e.g. file uploads)."""

    def is_allow_empty(self, validation: Any, field: str) -> bool:
        ...


@runtime_checkable
class Sanitizer(Protocol):
    """Filter service consumed by value resolution."""

    def sanitize(self, value: Any, filters: Any) -> Any:
        ...


# Hook signatures: (data, entity, messages)
BeforeValidationHook = Callable[[Any, Any, Any], "bool | None"]
AfterValidationHook = Callable[[Any, Any, Any], None]


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class ValidationConfig:
    """Configuration merged into a Validation engine at construction.

    Attributes:
        default_messages: Overrides for DEFAULT_MESSAGES, keyed by validator type
        labels: Field name -> human label used for :field
        filters: Field name -> filter specification
        before_validation: Hook run before any rule; returning False aborts
        after_validation: Hook run after both phases; return value ignored
    """

    default_messages: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    filters: dict[str, Any] = field(default_factory=dict)
    before_validation: BeforeValidationHook | None = None
    after_validation: AfterValidationHook | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValidationConfig":
        """Create ValidationConfig from a YAML/JSON dict (hooks are code-only)."""
        return cls(
            default_messages=dict(data.get("messages") or {}),
            labels=dict(data.get("labels") or {}),
            filters=dict(data.get("filters") or {}),
        )
