"""The fieldcheck validation engine.

Validation holds an ordered list of (field, validator) rules and runs them
against a mapping of input values or against a bound entity:

    validation = Validation()
    validation.add("age", Between({"minimum": 18, "maximum": 65}))
    validation.add(["name", "email"], PresenceOf())

    messages = validation.validate({"age": 15, "name": "Ann"})
    for message in messages:
        print(message.field, message)

A run has two phases. Field rules run first, in registration order; combined
rules (validators checking several fields as one unit) run afterwards, in
registration order. A failing validator with the ``cancelOnFail`` option
stops the remaining rules of its own phase only.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Literal

from fieldcheck import filters as filter_services
from fieldcheck.validation.errors import (
    FilterServiceUnavailableError,
    InvalidArgumentError,
    InvalidDataError,
    InvalidEntityError,
    InvalidRuleScopeError,
    InvalidValidatorError,
    NoDataToValidateError,
    NoValidatorsError,
)
from fieldcheck.validation.messages import MessageGroup
from fieldcheck.validation.registry import CombinedFieldsValidator
from fieldcheck.validation.resolvers import read_entity_value, write_entity_value
from fieldcheck.validation.types import (
    DEFAULT_MESSAGES,
    AfterValidationHook,
    AllowEmptyAware,
    BeforeValidationHook,
    Message,
    Sanitizer,
    ValidationConfig,
    ValidatorContract,
    is_empty,
)

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, Decimal)
_COLLECTION_TYPES = (Mapping, list, tuple, set, frozenset)

Rule = tuple[Any, Any]


def _is_object_like(value: Any) -> bool:
    """True for arbitrary objects; False for None, scalars and plain collections."""
    return value is not None and not isinstance(value, _SCALAR_TYPES + _COLLECTION_TYPES)


def _is_data_like(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_object_like(value)


def _is_field_list(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(isinstance(f, str) for f in value)
    )


def _strictly_equal(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


class Validation:
    """Validates a set of data against registered rules.

    Attributes:
        filter_service: Service used to sanitize filtered fields. When None the
            process-wide default from fieldcheck.filters is used.
        before_validation: Optional hook (data, entity, messages); returning
            False aborts the run and validate() returns False.
        after_validation: Optional hook (data, entity, messages) run after
            both phases.
    """

    def __init__(
        self,
        validators: Iterable[Rule] | None = None,
        *,
        config: ValidationConfig | None = None,
        data: Any = None,
        entity: Any = None,
        filter_service: Sanitizer | None = None,
        before_validation: BeforeValidationHook | None = None,
        after_validation: AfterValidationHook | None = None,
    ):
        config = config or ValidationConfig()

        self._validators: list[Any] = []
        self._combined_validators: list[Any] = []
        self._filters: dict[str, Any] = {}
        self._labels: dict[str, str] = dict(config.labels)
        self._default_messages: dict[str, str] = {}
        self._messages: MessageGroup | None = None
        self._values: dict[str, Any] = {}
        self._data: Any = None
        self._entity: Any = None

        self.filter_service = filter_service
        self.before_validation = before_validation or config.before_validation
        self.after_validation = after_validation or config.after_validation

        self.set_default_messages(config.default_messages)
        for field_name, filters in config.filters.items():
            self.set_filters(field_name, filters)

        if data is not None:
            self._set_data(data)
        if entity is not None:
            self.set_entity(entity)

        for scope in validators or []:
            self._store_scope(scope)

    # =========================================================================
    # Rule registration
    # =========================================================================

    def add(self, field: str | list[str], validator: ValidatorContract) -> "Validation":
        """Add a validator to a field or to a list of fields.

        A combined-fields validator is stored once for the whole list (a single
        name becomes a one-element list). Any other validator registered
        against a list is stored once per field, in list order.

        Raises:
            InvalidValidatorError: If validator does not implement the contract
            InvalidArgumentError: If field is neither a name nor a non-empty list of names
        """
        if not isinstance(validator, ValidatorContract):
            raise InvalidValidatorError(f"{validator!r} is not a validator")

        if _is_field_list(field):
            if isinstance(validator, CombinedFieldsValidator):
                self._combined_validators.append((list(field), validator))
            else:
                for single_field in field:
                    self._validators.append((single_field, validator))
        elif isinstance(field, str):
            if isinstance(validator, CombinedFieldsValidator):
                self._combined_validators.append(([field], validator))
            else:
                self._validators.append((field, validator))
        else:
            raise InvalidArgumentError("Field must be passed as a name or a list of names")

        return self

    def rule(self, field: str | list[str], validator: ValidatorContract) -> "Validation":
        """Alias of add()."""
        return self.add(field, validator)

    def rules(self, field: str | list[str], validators: Iterable[Any]) -> "Validation":
        """Add several validators to a field.

        Entries that do not implement the validator contract are skipped
        without raising.
        """
        for validator in validators:
            if isinstance(validator, ValidatorContract):
                self.add(field, validator)
            else:
                logger.debug("Skipping non-validator %r for field %r", validator, field)
        return self

    def get_validators(self) -> list[Any]:
        """Return the per-field rules in registration order."""
        return list(self._validators)

    def get_combined_validators(self) -> list[Any]:
        """Return the combined-fields rules in registration order."""
        return list(self._combined_validators)

    def _store_scope(self, scope: Any) -> None:
        # Well-formed pairs are classified like add(); anything else is kept
        # as-is and rejected when validate() reaches it
        if isinstance(scope, (tuple, list)) and len(scope) == 2:
            field, validator = scope
            if isinstance(validator, ValidatorContract) and (
                isinstance(field, str) or _is_field_list(field)
            ):
                self.add(field, validator)
                return
        self._validators.append(scope)

    # =========================================================================
    # Running
    # =========================================================================

    def validate(self, data: Any = None, entity: Any = None) -> MessageGroup | Literal[False]:
        """Validate a set of data according to the registered rules.

        Args:
            data: Mapping or object holding the values; replaces bound data
            entity: Object to read values from (and write filtered values to)

        Returns:
            The MessageGroup produced by the run, or False when the
            before_validation hook vetoed the run.

        Raises:
            NoValidatorsError: If no rule is registered
            InvalidEntityError: If entity is not an object
            InvalidDataError: If data is neither a mapping nor an object
            InvalidRuleScopeError / InvalidValidatorError: On malformed rules
        """
        if not self._validators and not self._combined_validators:
            raise NoValidatorsError("There are no validators to validate")

        self._values = {}
        messages = MessageGroup()
        self._messages = messages

        if entity is not None:
            self.set_entity(entity)

        if self.before_validation is not None:
            status = self.before_validation(data, entity, messages)
            if status is False:
                logger.debug("before_validation hook aborted the run")
                return False

        if data is not None:
            if not _is_data_like(data):
                raise InvalidDataError("Invalid data to validate")
            self._data = data

        self._run_phase(self._validators, combined=False)
        self._run_phase(self._combined_validators, combined=True)

        if self.after_validation is not None:
            self.after_validation(data, entity, self._messages)

        return self._messages

    def _run_phase(self, scopes: list[Any], *, combined: bool) -> None:
        for scope in scopes:
            if not isinstance(scope, (tuple, list)) or len(scope) != 2:
                raise InvalidRuleScopeError("The validator scope is not valid")

            field, validator = scope
            if combined:
                if not _is_field_list(field):
                    raise InvalidRuleScopeError("The validator scope is not valid")
            elif not isinstance(field, str):
                raise InvalidRuleScopeError("The validator scope is not valid")

            if not isinstance(validator, ValidatorContract):
                raise InvalidValidatorError("One of the validators is not valid")

            if self.pre_checking(field, validator):
                logger.debug("Skipping %r on %r: value allowed to be empty", validator, field)
                continue

            if validator.validate(self, field) is False and validator.get_option("cancelOnFail"):
                logger.debug("Validation cancelled after %r failed on %r", validator, field)
                break

    def pre_checking(self, field: str | list[str], validator: ValidatorContract) -> bool:
        """Decide whether a rule is skipped because its value may be empty.

        Returns True (skip) when the validator's ``allowEmpty`` option is set
        and the field's value counts as empty. ``allowEmpty`` may be a list of
        sentinel values, in which case only a value of the same type and equal
        to one of them counts as empty. Validators implementing
        is_allow_empty() decide for themselves.
        """
        if _is_field_list(field):
            for single_field in field:
                if self.pre_checking(single_field, validator):
                    return True
            return False

        allow_empty = validator.get_option("allowEmpty", False)
        if isinstance(allow_empty, Mapping):
            allow_empty = allow_empty.get(field)

        if not allow_empty:
            return False

        if isinstance(validator, AllowEmptyAware):
            return bool(validator.is_allow_empty(self, field))

        value = self.get_value(field)

        if isinstance(allow_empty, (list, tuple, set, frozenset)):
            return any(_strictly_equal(sentinel, value) for sentinel in allow_empty)

        return is_empty(value)

    # =========================================================================
    # Value resolution
    # =========================================================================

    def get_value(self, field: str) -> Any:
        """Get the value of a field from the bound entity or data.

        Resolution order: entity (accessor, read_attribute, attribute) when an
        entity is bound, otherwise the data mapping or object. Filters
        registered for the field are applied to non-None values, and the
        filtered value is written back to the entity. Unfiltered values read
        from data are cached for the rest of the run.

        Raises:
            NoDataToValidateError: If no entity is bound and data is missing
            FilterServiceUnavailableError: If a filter applies but no service exists
        """
        entity = self._entity

        if entity is not None:
            value = read_entity_value(entity, field)
        else:
            data = self._data
            if not _is_data_like(data):
                raise NoDataToValidateError("There is no data to validate")

            if field in self._values:
                return self._values[field]

            if isinstance(data, Mapping):
                value = data.get(field)
            else:
                value = getattr(data, field, None)

        if value is None:
            return None

        field_filters = self._filters.get(field)
        if field_filters:
            value = self._get_filter_service().sanitize(value, field_filters)
            if entity is not None:
                write_entity_value(entity, field, value)
            return value

        if entity is None:
            self._values[field] = value

        return value

    def _get_filter_service(self) -> Sanitizer:
        service = self.filter_service
        if service is None:
            service = filter_services.get_default_filter_service()
        if service is None:
            raise FilterServiceUnavailableError(
                "A filter service is required to sanitize values"
            )
        if not isinstance(service, Sanitizer):
            raise FilterServiceUnavailableError("The filter service is invalid")
        return service

    # =========================================================================
    # Binding
    # =========================================================================

    def bind(self, entity: Any, data: Any) -> "Validation":
        """Bind an entity and the data to validate.

        Raises:
            InvalidEntityError: If entity is not an object
            InvalidDataError: If data is neither a mapping nor an object
        """
        if not _is_object_like(entity):
            raise InvalidEntityError("Entity must be an object")
        if not _is_data_like(data):
            raise InvalidDataError("Data to validate must be a mapping or an object")

        self._entity = entity
        self._data = data
        return self

    def set_entity(self, entity: Any) -> None:
        if not _is_object_like(entity):
            raise InvalidEntityError("Entity must be an object")
        self._entity = entity

    def get_entity(self) -> Any:
        return self._entity

    def get_data(self) -> Any:
        return self._data

    def _set_data(self, data: Any) -> None:
        if not _is_data_like(data):
            raise InvalidDataError("Invalid data to validate")
        self._data = data

    # =========================================================================
    # Filters, labels and messages
    # =========================================================================

    def set_filters(self, field: str | list[str], filters: Any) -> "Validation":
        """Set the filter specification for a field or a list of fields."""
        if _is_field_list(field):
            for single_field in field:
                self._filters[single_field] = filters
        elif isinstance(field, str):
            self._filters[field] = filters
        else:
            raise InvalidArgumentError("Field must be passed as a name or a list of names")
        return self

    def get_filters(self, field: str | None = None) -> Any:
        """Return all filters, or the specification for one field (None if unset)."""
        if not field:
            return dict(self._filters)
        return self._filters.get(field)

    def set_default_messages(self, messages: Mapping[str, str] | None = None) -> dict[str, str]:
        """Merge message templates over DEFAULT_MESSAGES and return the result."""
        self._default_messages = {**DEFAULT_MESSAGES, **(messages or {})}
        return dict(self._default_messages)

    def get_default_message(self, type: str) -> str:
        """Default message template for a validator type ("" if unknown)."""
        return self._default_messages.get(type, "")

    def set_labels(self, labels: Mapping[str, str]) -> None:
        self._labels = dict(labels)

    def get_label(self, field: str | list[str]) -> str:
        """Label for a field; field lists join their labels with ", "."""
        if isinstance(field, (list, tuple)):
            return ", ".join(self.get_label(f) for f in field)
        return self._labels.get(field, field)

    def get_messages(self) -> MessageGroup | None:
        """Messages of the current or most recent run."""
        return self._messages

    def append_message(self, message: Message) -> "Validation":
        """Append a message to the active message group."""
        if self._messages is None:
            self._messages = MessageGroup()
        self._messages.append_message(message)
        return self
