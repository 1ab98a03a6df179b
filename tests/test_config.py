"""Tests for YAML rule-file loading and linting."""

import logging
from pathlib import Path

import pytest

from fieldcheck.config import (
    ConfigError,
    RuleDefinition,
    lint_rules_file,
    load_data_file,
    load_rules_file,
)
from fieldcheck.filters import FilterService
from fieldcheck.validation import ValidationException, ValidatorRegistry
from fieldcheck.validation.validators import Between, PresenceOf, register_builtin_validators


VALID_RULES = """\
messages:
  PresenceOf: "Please fill in :field"
labels:
  age: Age
  name: Name
filters:
  name: [trim, upper]
rules:
  - field: age
    validator: Between
    options: {minimum: 18, maximum: 65, cancelOnFail: true}
  - field: [name, email]
    validator: PresenceOf
"""


@pytest.fixture(autouse=True)
def setup_registry():
    """Register the shipped validators before each test."""
    ValidatorRegistry.clear()
    register_builtin_validators()
    yield
    ValidatorRegistry.clear()


@pytest.fixture
def write_file(tmp_path):
    def _write(content: str, name: str = "rules.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


# =============================================================================
# Linting
# =============================================================================


class TestLint:
    def test_valid_file_has_no_issues(self, write_file):
        assert lint_rules_file(write_file(VALID_RULES)) == []

    def test_missing_rules(self, write_file):
        issues = lint_rules_file(write_file("labels: {age: Age}\n"))

        assert len(issues) == 1
        assert "'rules' is a required property" in issues[0].message

    def test_unknown_top_level_key(self, write_file):
        issues = lint_rules_file(
            write_file("rules:\n  - {field: a, validator: PresenceOf}\nextra: 1\n")
        )

        assert any("extra" in issue.message for issue in issues)

    def test_rule_without_validator(self, write_file):
        issues = lint_rules_file(write_file("rules:\n  - field: a\n"))

        assert len(issues) == 1
        assert issues[0].path == "rules[0]"
        assert "'validator' is a required property" in issues[0].message

    def test_empty_field_list(self, write_file):
        issues = lint_rules_file(write_file("rules:\n  - {field: [], validator: PresenceOf}\n"))

        assert [issue.path for issue in issues] == ["rules[0]/field"]

    def test_unregistered_validator(self, write_file):
        issues = lint_rules_file(write_file("rules:\n  - {field: a, validator: Nope}\n"))

        assert len(issues) == 1
        assert issues[0].severity == "error"
        assert issues[0].path == "rules[0]/validator"
        assert "'Nope' is not registered" in issues[0].message

    def test_message_for_unknown_type_is_warning(self, write_file):
        issues = lint_rules_file(
            write_file(
                "messages: {Custom: 'x'}\nrules:\n  - {field: a, validator: PresenceOf}\n"
            )
        )

        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert issues[0].path == "messages/Custom"

    def test_empty_file(self, write_file):
        issues = lint_rules_file(write_file(""))

        assert len(issues) == 1
        assert "empty" in issues[0].message

    def test_yaml_error(self, write_file):
        issues = lint_rules_file(write_file("rules: [unclosed\n"))

        assert len(issues) == 1
        assert "YAML parse error" in issues[0].message

    def test_missing_file(self, tmp_path):
        issues = lint_rules_file(tmp_path / "missing.yaml")

        assert len(issues) == 1
        assert "Cannot read file" in issues[0].message

    def test_issue_str(self, write_file):
        path = write_file("rules:\n  - {field: a, validator: Nope}\n")
        issue = lint_rules_file(path)[0]

        assert str(issue) == f"[ERROR] {path} at rules[0]/validator: Validator 'Nope' is not registered"


# =============================================================================
# Loading
# =============================================================================


class TestLoad:
    def test_load_valid_file(self, write_file):
        rule_file = load_rules_file(write_file(VALID_RULES))

        assert rule_file.config.labels == {"age": "Age", "name": "Name"}
        assert rule_file.config.default_messages == {"PresenceOf": "Please fill in :field"}
        assert rule_file.config.filters == {"name": ["trim", "upper"]}
        assert rule_file.rules == [
            RuleDefinition(
                field="age",
                validator="Between",
                options={"minimum": 18, "maximum": 65, "cancelOnFail": True},
            ),
            RuleDefinition(field=["name", "email"], validator="PresenceOf"),
        ]

    def test_load_raises_config_error(self, write_file):
        with pytest.raises(ConfigError) as exc_info:
            load_rules_file(write_file("rules:\n  - {field: a, validator: Nope}\n"))

        assert len(exc_info.value.issues) == 1
        assert isinstance(exc_info.value, ValidationException)

    def test_load_logs_warnings(self, write_file, caplog):
        path = write_file("messages: {Custom: 'x'}\nrules:\n  - {field: a, validator: PresenceOf}\n")

        with caplog.at_level(logging.WARNING, logger="fieldcheck.config"):
            load_rules_file(path)

        assert "Message template for unknown validator type 'Custom'" in caplog.text

    def test_on_off_keys_become_field_names(self, write_file):
        rule_file = load_rules_file(
            write_file("labels:\n  on: Enabled\nrules:\n  - {field: 'on', validator: PresenceOf}\n")
        )

        assert rule_file.config.labels == {"on": "Enabled"}

    def test_yes_no_keys_keep_their_spelling(self, write_file):
        rule_file = load_rules_file(
            write_file(
                "labels:\n  yes: Agreed\n  no: Declined\n"
                "filters:\n  off: trim\n"
                "rules:\n  - {field: ['yes', 'no'], validator: PresenceOf}\n"
            )
        )

        assert rule_file.config.labels == {"yes": "Agreed", "no": "Declined"}
        assert rule_file.config.filters == {"off": "trim"}

    def test_boolean_values_are_still_booleans(self, write_file):
        rule_file = load_rules_file(
            write_file("rules:\n  - {field: a, validator: PresenceOf, options: {cancelOnFail: yes}}\n")
        )

        assert rule_file.rules[0].options == {"cancelOnFail": True}


class TestBuild:
    def test_build_registers_rules(self, write_file):
        validation = load_rules_file(write_file(VALID_RULES)).build(filter_service=FilterService())

        rules = validation.get_validators()
        assert [field for field, _ in rules] == ["age", "name", "email"]
        assert isinstance(rules[0][1], Between)
        assert isinstance(rules[1][1], PresenceOf)
        assert rules[1][1] is rules[2][1]

    def test_built_engine_validates(self, write_file):
        validation = load_rules_file(write_file(VALID_RULES)).build(filter_service=FilterService())

        messages = validation.validate({"age": 30, "name": "   ", "email": "a@b.c"})

        assert [str(m) for m in messages] == ["Please fill in Name"]

    def test_cancel_on_fail_from_file(self, write_file):
        validation = load_rules_file(write_file(VALID_RULES)).build(filter_service=FilterService())

        messages = validation.validate({"age": 10})

        assert [m.field for m in messages] == ["age"]
        assert str(messages[0]) == "Field Age must be within the range of 18 to 65"


# =============================================================================
# Data files
# =============================================================================


class TestDataFile:
    def test_yaml(self, write_file):
        assert load_data_file(write_file("age: 30\nname: Ann\n", "data.yaml")) == {
            "age": 30,
            "name": "Ann",
        }

    def test_json(self, write_file):
        assert load_data_file(write_file('{"age": 30}', "data.json")) == {"age": 30}

    def test_boolean_looking_field_names(self, write_file):
        data = load_data_file(write_file("on: 1\nyes: true\n", "data.yaml"))

        assert data == {"on": 1, "yes": True}

    def test_parse_error(self, write_file):
        with pytest.raises(ConfigError, match="Cannot parse data file"):
            load_data_file(write_file("a: [1,\n", "data.yaml"))
