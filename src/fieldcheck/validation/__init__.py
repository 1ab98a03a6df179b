"""fieldcheck validation engine.

This package provides a rule-driven field validation engine:
- Validation: registers (field, validator) rules and runs them in two phases
- MessageGroup / Message: the structured failures produced by a run
- BaseValidator / CombinedFieldsValidator: base classes for validator plugins
- ValidatorRegistry: validator lookup by type name

Usage:
    from fieldcheck.validation import Validation
    from fieldcheck.validation.validators import Between, PresenceOf

    validation = Validation()
    validation.add("age", Between({"minimum": 18, "maximum": 65}))
    messages = validation.validate({"age": 15})
"""

from fieldcheck.validation.engine import Validation
from fieldcheck.validation.errors import (
    FilterNotFoundError,
    FilterServiceUnavailableError,
    InvalidArgumentError,
    InvalidCallbackResultError,
    InvalidDataError,
    InvalidEntityError,
    InvalidMessageError,
    InvalidOptionError,
    InvalidRuleScopeError,
    InvalidValidatorError,
    NoDataToValidateError,
    NoValidatorsError,
    ValidationException,
)
from fieldcheck.validation.messages import MessageGroup, interpolate
from fieldcheck.validation.registry import (
    BaseValidator,
    CombinedFieldsValidator,
    ValidatorRegistry,
)
from fieldcheck.validation.types import (
    DEFAULT_MESSAGES,
    AllowEmptyAware,
    Message,
    OptionValue,
    PerField,
    Sanitizer,
    Scalar,
    ValidationConfig,
    ValidatorContract,
    is_empty,
    option_value,
)

__all__ = [
    # Engine
    "Validation",
    # Types
    "DEFAULT_MESSAGES",
    "AllowEmptyAware",
    "Message",
    "OptionValue",
    "PerField",
    "Sanitizer",
    "Scalar",
    "ValidationConfig",
    "ValidatorContract",
    "is_empty",
    "option_value",
    # Messages
    "MessageGroup",
    "interpolate",
    # Registry
    "BaseValidator",
    "CombinedFieldsValidator",
    "ValidatorRegistry",
    # Errors
    "FilterNotFoundError",
    "FilterServiceUnavailableError",
    "InvalidArgumentError",
    "InvalidCallbackResultError",
    "InvalidDataError",
    "InvalidEntityError",
    "InvalidMessageError",
    "InvalidOptionError",
    "InvalidRuleScopeError",
    "InvalidValidatorError",
    "NoDataToValidateError",
    "NoValidatorsError",
    "ValidationException",
]
