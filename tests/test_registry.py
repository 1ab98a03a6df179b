"""Tests for BaseValidator option handling and the ValidatorRegistry."""

import pytest

from fieldcheck.validation import (
    BaseValidator,
    CombinedFieldsValidator,
    PerField,
    Scalar,
    Validation,
    ValidatorContract,
    ValidatorRegistry,
)
from fieldcheck.validation.validators import (
    BUILTIN_VALIDATORS,
    Between,
    PresenceOf,
    register_builtin_validators,
)


@pytest.fixture(autouse=True)
def clear_registry():
    """Clear validator registry before and after each test."""
    ValidatorRegistry.clear()
    yield
    ValidatorRegistry.clear()


# =============================================================================
# BaseValidator
# =============================================================================


class TestOptions:
    def test_has_option(self):
        validator = BaseValidator({"minimum": 0, "unset": None})

        assert validator.has_option("minimum")
        assert not validator.has_option("unset")
        assert not validator.has_option("missing")

    def test_get_option_default(self):
        validator = BaseValidator({"minimum": 0})

        assert validator.get_option("minimum") == 0
        assert validator.get_option("missing") is None
        assert validator.get_option("missing", "fallback") == "fallback"

    def test_set_option(self):
        validator = BaseValidator()
        validator.set_option("cancelOnFail", True)

        assert validator.get_option("cancelOnFail") is True

    def test_option_is_tagged(self):
        validator = BaseValidator({"minimum": 3, "maximum": {"a": 1, "b": 2}})

        assert validator.option("minimum") == Scalar(3)
        assert validator.option("maximum") == PerField({"a": 1, "b": 2})

    def test_field_option(self):
        validator = BaseValidator({"minimum": 3, "maximum": {"a": 1}})

        assert validator.field_option("minimum", "a") == 3
        assert validator.field_option("maximum", "a") == 1
        assert validator.field_option("maximum", "b") is None
        assert validator.field_option("maximum", "b", default=9) == 9

    def test_field_option_for_field_list(self):
        validator = BaseValidator({"message": "shared", "code": {"a": 1}})

        assert validator.field_option("message", ["a", "b"]) == "shared"
        assert validator.field_option("code", ["a", "b"]) is None

    def test_validate_must_be_overridden(self):
        with pytest.raises(NotImplementedError):
            BaseValidator().validate(Validation(), "a")

    def test_satisfies_contract(self):
        assert isinstance(BaseValidator(), ValidatorContract)
        assert isinstance(CombinedFieldsValidator(), ValidatorContract)


class TestMessageHelpers:
    def test_prepare_label(self):
        validation = Validation()
        validation.set_labels({"age": "Age"})

        assert BaseValidator().prepare_label(validation, "age") == "Age"
        assert BaseValidator({"label": "Years"}).prepare_label(validation, "age") == "Years"
        assert BaseValidator({"label": {"other": "X"}}).prepare_label(validation, "age") == "Age"

    def test_prepare_message(self):
        validation = Validation()

        assert (
            BaseValidator().prepare_message(validation, "age", "PresenceOf")
            == "Field :field is required"
        )
        assert (
            BaseValidator({"message": "custom"}).prepare_message(validation, "age", "PresenceOf")
            == "custom"
        )
        assert (
            BaseValidator({"messageSize": "too big"}).prepare_message(
                validation, "age", "FileSize", option="messageSize"
            )
            == "too big"
        )

    def test_prepare_code(self):
        assert BaseValidator().prepare_code("age") is None
        assert BaseValidator({"code": 5}).prepare_code("age") == 5
        assert BaseValidator({"code": {"age": 7}}).prepare_code("age") == 7

    def test_fail_appends_message(self):
        validation = Validation()
        validator = BaseValidator({"code": 4})

        assert validator.fail(validation, "age", "Between", {":min": 1, ":max": 2}) is False

        message = validation.get_messages()[0]
        assert str(message) == "Field age must be within the range of 1 to 2"
        assert message.field == "age"
        assert message.type == "Between"
        assert message.code == 4


# =============================================================================
# ValidatorRegistry
# =============================================================================


class TestValidatorRegistry:
    def test_register_and_get(self):
        ValidatorRegistry.register("Between", Between)

        assert ValidatorRegistry.is_registered("Between")
        assert ValidatorRegistry.get("Between") is Between

    def test_register_is_idempotent(self):
        ValidatorRegistry.register("Presence", PresenceOf)
        ValidatorRegistry.register("Presence", Between)

        assert ValidatorRegistry.get("Presence") is PresenceOf

    def test_get_unknown_lists_available(self):
        ValidatorRegistry.register("Between", Between)

        with pytest.raises(ValueError, match="Available types: Between"):
            ValidatorRegistry.get("Nope")

    def test_create_passes_options(self):
        ValidatorRegistry.register("Between", Between)

        validator = ValidatorRegistry.create("Between", {"minimum": 1, "maximum": 9})

        assert isinstance(validator, Between)
        assert validator.get_option("maximum") == 9

    def test_list_registered_is_sorted(self):
        ValidatorRegistry.register("Zeta", PresenceOf)
        ValidatorRegistry.register("Alpha", PresenceOf)

        assert ValidatorRegistry.list_registered() == ["Alpha", "Zeta"]

    def test_clear(self):
        ValidatorRegistry.register("Between", Between)
        ValidatorRegistry.clear()

        assert ValidatorRegistry.list_registered() == []

    def test_register_builtin_validators(self):
        register_builtin_validators()

        assert ValidatorRegistry.list_registered() == sorted(BUILTIN_VALIDATORS)
        for name, validator_class in BUILTIN_VALIDATORS.items():
            assert validator_class.type == name
