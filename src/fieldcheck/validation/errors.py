"""Exceptions raised by the fieldcheck validation engine.

Structural problems (bad rules, bad data, missing services) are raised as
exceptions and abort the current ``validate`` call. A validator that merely
rejects a value never raises; it appends a Message and returns False.
"""


class ValidationException(Exception):
    """Base class for every structural error raised by the engine."""
    pass


class NoValidatorsError(ValidationException):
    """validate() was called before any rule was registered."""
    pass


class InvalidRuleScopeError(ValidationException):
    """A stored rule is not a well-formed (field, validator) pair."""
    pass


class InvalidValidatorError(ValidationException):
    """A stored or supplied validator does not implement the validator contract."""
    pass


class InvalidDataError(ValidationException):
    """Data passed to validate() or bind() is neither a mapping nor an object."""
    pass


class NoDataToValidateError(ValidationException):
    """A value was requested but the bound data is neither a mapping nor an object."""
    pass


class InvalidEntityError(ValidationException):
    """The entity passed to the engine is not an object."""
    pass


class FilterServiceUnavailableError(ValidationException):
    """A filter is configured for a field but no filter service can be located."""
    pass


class FilterNotFoundError(ValidationException):
    """A filter specification names a filter the service does not know."""
    pass


class InvalidArgumentError(ValidationException):
    """Malformed call to add() or set_filters()."""
    pass


class InvalidMessageError(ValidationException):
    """Something other than a Message was stored into a MessageGroup."""
    pass


class InvalidOptionError(ValidationException):
    """A validator option has a value of the wrong shape."""
    pass


class InvalidCallbackResultError(ValidationException):
    """A Callback validator's callback returned neither a bool nor a validator."""
    pass
