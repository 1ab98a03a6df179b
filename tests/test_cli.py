"""Tests for fieldcheck CLI commands."""

import json

import pytest
from click.testing import CliRunner

from fieldcheck.cli.main import cli
from fieldcheck.validation import ValidatorRegistry


RULES = """\
labels:
  age: Age
filters:
  name: trim
rules:
  - field: age
    validator: Between
    options: {minimum: 18, maximum: 65}
  - field: name
    validator: PresenceOf
  - field: [first, last]
    validator: Uniqueness
"""


@pytest.fixture(autouse=True)
def clear_registry():
    ValidatorRegistry.clear()
    yield
    ValidatorRegistry.clear()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES)
    return path


@pytest.fixture
def write_data(tmp_path):
    def _write(content: str, name: str = "data.yaml"):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


class TestLint:
    def test_valid_file(self, runner, rules_file):
        result = runner.invoke(cli, ["lint", str(rules_file)])

        assert result.exit_code == 0
        assert "Rule file is valid." in result.output

    def test_errors_exit_non_zero(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("rules:\n  - {field: a, validator: Nope}\n")

        result = runner.invoke(cli, ["lint", str(path)])

        assert result.exit_code == 1
        assert "Validator 'Nope' is not registered" in result.output
        assert "1 error(s) found" in result.output

    def test_warnings_do_not_fail(self, runner, tmp_path):
        path = tmp_path / "warn.yaml"
        path.write_text("messages: {Custom: x}\nrules:\n  - {field: a, validator: PresenceOf}\n")

        result = runner.invoke(cli, ["lint", str(path)])

        assert result.exit_code == 0
        assert "1 warning(s) found." in result.output

    def test_missing_file_is_usage_error(self, runner, tmp_path):
        result = runner.invoke(cli, ["lint", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 2


class TestCheck:
    def test_valid_data(self, runner, rules_file, write_data):
        data = write_data("age: 30\nname: Ann\n")

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 0
        assert "No validation errors." in result.output

    def test_messages_exit_non_zero(self, runner, rules_file, write_data):
        data = write_data("age: 15\nname: '  '\n")

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 1
        assert "age: Field Age must be within the range of 18 to 65 [Between]" in result.output
        assert "name: Field name is required [PresenceOf]" in result.output
        assert "2 validation error(s)" in result.output

    def test_json_output(self, runner, rules_file, write_data):
        data = write_data('{"age": 99, "name": "Ann"}', "data.json")

        result = runner.invoke(cli, ["check", str(rules_file), str(data), "--format", "json"])

        assert result.exit_code == 1
        assert json.loads(result.output) == [
            {
                "message": "Field Age must be within the range of 18 to 65",
                "field": "age",
                "type": "Between",
                "code": None,
            }
        ]

    def test_json_output_without_messages(self, runner, rules_file, write_data):
        data = write_data('{"age": 20, "name": "Ann"}', "data.json")

        result = runner.invoke(cli, ["check", str(rules_file), str(data), "--format", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_invalid_rule_file(self, runner, tmp_path, write_data):
        rules = tmp_path / "bad.yaml"
        rules.write_text("rules: []\n")
        data = write_data("age: 30\n")

        result = runner.invoke(cli, ["check", str(rules), str(data)])

        assert result.exit_code == 1
        assert "error(s) in rule file" in result.output

    def test_data_must_be_mapping(self, runner, rules_file, write_data):
        data = write_data("- age\n- name\n")

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 1
        assert "data file must contain a mapping" in result.output


class TestValidators:
    def test_lists_builtin_validators(self, runner):
        result = runner.invoke(cli, ["validators"])

        assert result.exit_code == 0
        names = result.output.split()
        assert "Between" in names
        assert "PresenceOf" in names
        assert "File" in names

    def test_verbose_flag(self, runner):
        result = runner.invoke(cli, ["--verbose", "validators"])

        assert result.exit_code == 0
