"""
YAML rule files for fieldcheck.

A rule file declares message templates, labels, filters and rules:

    messages:
      PresenceOf: "Please fill in :field"
    labels:
      age: Age
    filters:
      name: [trim, upper]
    rules:
      - field: age
        validator: Between
        options: {minimum: 18, maximum: 65, cancelOnFail: true}
      - field: [name, email]
        validator: PresenceOf

Usage:
    from fieldcheck.config import load_rules_file

    rule_file = load_rules_file(Path("rules.yaml"))
    validation = rule_file.build(filter_service=FilterService())

Files are linted against ``schemas/rules.schema.json`` before they are built.

PyYAML quirk: bare keys such as ``on:``, ``yes:`` or ``no:`` are parsed as
booleans (YAML 1.1). Field names are mapping keys in ``labels``, ``filters``
and data files, so both are read with a loader that keeps mapping keys as
written. Boolean values are unaffected.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from fieldcheck.validation.engine import Validation
from fieldcheck.validation.errors import ValidationException
from fieldcheck.validation.registry import ValidatorRegistry
from fieldcheck.validation.types import DEFAULT_MESSAGES, Sanitizer, ValidationConfig

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "rules.schema.json"

_BOOL_TAG = "tag:yaml.org,2002:bool"
_STR_TAG = "tag:yaml.org,2002:str"


# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------


@dataclass
class ConfigIssue:
    """A single problem found in a rule file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "rules[0]/field"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


class ConfigError(ValidationException):
    """A rule file could not be parsed or failed linting."""

    def __init__(self, message: str, issues: list[ConfigIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []


@dataclass
class RuleDefinition:
    """One rule from a rule file."""

    field: str | list[str]
    validator: str
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleDefinition":
        return cls(
            field=data["field"],
            validator=data["validator"],
            options=dict(data.get("options") or {}),
        )


@dataclass
class RuleFile:
    """A parsed rule file: engine configuration plus rule definitions."""

    path: Path
    config: ValidationConfig
    rules: list[RuleDefinition] = field(default_factory=list)

    def build(self, filter_service: Sanitizer | None = None) -> Validation:
        """Create a Validation engine with every rule of the file registered.

        Raises:
            ValueError: If a rule names an unregistered validator type
        """
        validation = Validation(config=self.config, filter_service=filter_service)
        for rule in self.rules:
            validation.add(rule.field, ValidatorRegistry.create(rule.validator, rule.options))
        logger.debug("Built validation from %s with %d rule(s)", self.path, len(self.rules))
        return validation


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


class FieldNameLoader(yaml.SafeLoader):
    """SafeLoader that keeps boolean-looking mapping keys as strings."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            for key_node, _ in node.value:
                if isinstance(key_node, yaml.ScalarNode) and key_node.tag == _BOOL_TAG:
                    key_node.tag = _STR_TAG
        return super().construct_mapping(node, deep=deep)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _read_document(path: Path) -> tuple[Any, list[ConfigIssue]]:
    try:
        with path.open() as fh:
            raw = yaml.load(fh, Loader=FieldNameLoader)
    except OSError as exc:
        return None, [ConfigIssue(file=path, message=f"Cannot read file: {exc}")]
    except yaml.YAMLError as exc:
        return None, [ConfigIssue(file=path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return None, [
            ConfigIssue(file=path, message="File is empty or contains only whitespace")
        ]

    return raw, []


def _lint_document(path: Path, doc: Any) -> list[ConfigIssue]:
    issues: list[ConfigIssue] = []

    validator = Draft202012Validator(_load_schema())
    for error in sorted(validator.iter_errors(doc), key=lambda e: list(e.path)):
        issues.append(ConfigIssue(file=path, message=error.message, path=_json_path(error)))

    if issues:
        return issues

    for index, rule in enumerate(doc.get("rules", [])):
        name = rule["validator"]
        if not ValidatorRegistry.is_registered(name):
            issues.append(
                ConfigIssue(
                    file=path,
                    message=f"Validator '{name}' is not registered",
                    path=f"rules[{index}]/validator",
                )
            )

    for name in doc.get("messages", {}):
        if name not in DEFAULT_MESSAGES and not ValidatorRegistry.is_registered(name):
            issues.append(
                ConfigIssue(
                    file=path,
                    message=f"Message template for unknown validator type '{name}'",
                    path=f"messages/{name}",
                    severity="warning",
                )
            )

    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def lint_rules_file(path: Path) -> list[ConfigIssue]:
    """
    Check a rule file against the rule-file schema and the validator registry.

    Args:
        path: Path to the YAML rule file.

    Returns:
        A list of :class:`ConfigIssue` objects (empty on success). Templates for
        message types that are neither built in nor registered are reported as
        warnings.
    """
    doc, issues = _read_document(path)
    if issues:
        return issues
    return _lint_document(path, doc)


def load_rules_file(path: Path) -> RuleFile:
    """
    Parse and lint a rule file.

    Raises:
        ConfigError: If the file cannot be parsed or has lint errors.
    """
    doc, issues = _read_document(path)
    if not issues:
        issues = _lint_document(path, doc)

    errors = [i for i in issues if i.severity == "error"]
    for issue in issues:
        if issue.severity == "warning":
            logger.warning("Rule file warning: %s", issue)

    if errors:
        raise ConfigError(f"{len(errors)} error(s) in rule file {path}", errors)

    return RuleFile(
        path=path,
        config=ValidationConfig.from_dict(doc),
        rules=[RuleDefinition.from_dict(rule) for rule in doc["rules"]],
    )


def load_data_file(path: Path) -> Any:
    """Load a YAML or JSON data file (JSON is valid YAML).

    Raises:
        ConfigError: If the file cannot be parsed.
    """
    try:
        with path.open() as fh:
            return yaml.load(fh, Loader=FieldNameLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse data file {path}: {exc}") from exc
