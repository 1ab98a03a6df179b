"""Validator base classes and registry for fieldcheck.

Provides:
- BaseValidator: option storage plus the label/message/code helpers every
  concrete validator uses to build its failure message
- CombinedFieldsValidator: marker base for validators that check a list of
  fields as one unit
- ValidatorRegistry: lookup of validator classes by type name, used when
  rules are declared in configuration files
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from fieldcheck.validation.messages import interpolate
from fieldcheck.validation.types import Message, OptionValue, Scalar, option_value

if TYPE_CHECKING:
    from fieldcheck.validation.engine import Validation

logger = logging.getLogger(__name__)


class BaseValidator:
    """Base class for validators with common functionality.

    Options are passed as a mapping. Any option may be given either as a
    single value or as a mapping keyed by field name, so one validator
    instance can serve several fields with different parameters:

        Between({"minimum": {"price": 0, "amount": 0},
                 "maximum": {"price": 100, "amount": 50}})

    Subclasses set ``type`` (the default-message key) and override validate().
    """

    type: str = ""

    def __init__(self, options: Mapping[str, Any] | None = None):
        self._options: dict[str, Any] = dict(options or {})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._options!r})"

    def has_option(self, name: str) -> bool:
        """Check if an option is defined (None counts as undefined)."""
        return self._options.get(name) is not None

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return the raw option value, or default when it is undefined."""
        value = self._options.get(name)
        if value is None:
            return default
        return value

    def set_option(self, name: str, value: Any) -> None:
        self._options[name] = value

    def option(self, name: str) -> OptionValue:
        """Return an option wrapped as Scalar or PerField."""
        return option_value(self._options.get(name))

    def field_option(self, name: str, field: Any, default: Any = None) -> Any:
        """Resolve an option for one field, falling back to default."""
        value = self._resolve_for(self.option(name), field)
        if value is None:
            return default
        return value

    def validate(self, validation: "Validation", field: Any) -> bool:
        """Validate the field. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement validate()")

    # -------------------------------------------------------------------------
    # Message helpers
    # -------------------------------------------------------------------------

    def prepare_label(self, validation: "Validation", field: Any) -> Any:
        """Label option for the field, else the engine's label for it."""
        label = self._resolve_for(self.option("label"), field)
        if not label:
            label = validation.get_label(field)
        return label

    def prepare_message(
        self,
        validation: "Validation",
        field: Any,
        type: str,
        option: str = "message",
    ) -> str:
        """Message option for the field, else the engine's default for the type."""
        message = self._resolve_for(self.option(option), field)
        if not message:
            message = validation.get_default_message(type)
        return message

    def prepare_code(self, field: Any) -> int | None:
        """Code option for the field, or None."""
        return self._resolve_for(self.option("code"), field)

    def fail(
        self,
        validation: "Validation",
        field: Any,
        type: str,
        replacements: Mapping[str, Any] | None = None,
        option: str = "message",
    ) -> bool:
        """Append a failure message for the field and return False."""
        pairs = {":field": self.prepare_label(validation, field)}
        if replacements:
            pairs.update(replacements)

        template = self.prepare_message(validation, field, type, option)
        validation.append_message(
            Message(
                message=interpolate(template, pairs),
                field=field,
                type=type,
                code=self.prepare_code(field),
            )
        )
        return False

    @staticmethod
    def _resolve_for(value: OptionValue, field: Any) -> Any:
        # A field list cannot key a per-field map
        if isinstance(field, (list, tuple)):
            return value.value if isinstance(value, Scalar) else None
        return value.resolve(field)


class CombinedFieldsValidator(BaseValidator):
    """Base class for validators that check several fields as one unit.

    Rules using these validators always run in the combined-fields phase and
    receive the whole field list in validate().
    """
    pass


class ValidatorRegistry:
    """Registry for validator types.

    Validators must be registered before rule files can refer to them by
    type name. register_builtin_validators() registers the shipped set.

    Example:
        ValidatorRegistry.register("Between", Between)

        validator = ValidatorRegistry.create("Between", {"minimum": 1, "maximum": 9})
    """

    _validators: dict[str, type[BaseValidator]] = {}

    @classmethod
    def register(cls, name: str, validator_class: type[BaseValidator]) -> None:
        """Register a validator class by name.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Type name used in rule files (e.g., "PresenceOf", "myapp.Vat")
            validator_class: Class implementing the validator contract
        """
        if name in cls._validators:
            return
        cls._validators[name] = validator_class

    @classmethod
    def get(cls, name: str) -> type[BaseValidator]:
        """Get a registered validator class by name.

        Raises:
            ValueError: If validator is not registered
        """
        if name not in cls._validators:
            raise ValueError(
                f"Validator '{name}' is not registered. "
                "Available types: " + ", ".join(cls.list_registered())
            )
        return cls._validators[name]

    @classmethod
    def create(cls, name: str, options: Mapping[str, Any] | None = None) -> BaseValidator:
        """Instantiate a registered validator with the given options."""
        validator_class = cls.get(name)
        logger.debug("Creating validator %s with options %r", name, options)
        return validator_class(options)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a validator is registered."""
        return name in cls._validators

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered validator names."""
        return sorted(cls._validators.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._validators.clear()
