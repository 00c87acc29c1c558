"""
Machine configuration validator with detailed error reporting.

Validation happens in two stages, and every error from both stages is
collected rather than stopping at the first:

    1. Structure: the dict is checked against MACHINE_SCHEMA with
       jsonschema's Draft7Validator
    2. References: state names are unique, transitions and the initial state
       name existing states, each state is wired at most once, patterns
       compile, and end-of-stream targets are transition candidates

Usage:
    ```python
    from regexflow.config import validate_config

    result = validate_config({"states": [{"name": "A", "regex": "a"}]})
    if not result.is_valid:
        print(format_validation_errors(result.errors))
    ```
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from regexflow.config.schema import MACHINE_SCHEMA, regex_flags

logger = logging.getLogger(__name__)


@dataclass
class ConfigIssue:
    """
    A single configuration error.

    Attributes:
        path: Location in the config (e.g. ".states.1.regex")
        message: Human-readable error message
        validator: Check that failed ("type", "required", "reference", ...)
    """
    path: str
    message: str
    validator: str

    def __str__(self) -> str:
        return f"At {self.path}: {self.message}"


@dataclass
class ValidationResult:
    """
    Result of validating a machine configuration.

    Attributes:
        is_valid: Whether the config is valid
        errors: All problems found (empty if valid)
    """
    is_valid: bool
    errors: List[ConfigIssue]


def _path(parts) -> str:
    return "." + ".".join(str(p) for p in parts) if parts else "root"


def _check_structure(config: Any) -> List[ConfigIssue]:
    validator = Draft7Validator(MACHINE_SCHEMA)
    return [
        ConfigIssue(path=_path(error.path), message=error.message, validator=error.validator)
        for error in sorted(validator.iter_errors(config), key=lambda e: [str(p) for p in e.path])
    ]


def _check_references(config: Dict[str, Any]) -> List[ConfigIssue]:
    errors: List[ConfigIssue] = []
    names = set()

    for i, state in enumerate(config["states"]):
        name = state["name"]
        if name in names:
            errors.append(ConfigIssue(f".states.{i}.name", f"duplicate state name '{name}'", "unique"))
        names.add(name)
        if "regex" in state:
            try:
                re.compile(state["regex"], regex_flags(state.get("flags", [])))
            except re.error as e:
                errors.append(ConfigIssue(
                    f".states.{i}.regex", f"invalid regular expression: {e}", "regex"
                ))

    initial = config.get("initial")
    if initial is not None and initial not in names:
        errors.append(ConfigIssue(".initial", f"unknown state '{initial}'", "reference"))

    wired: Dict[str, List[str]] = {}
    for i, transition in enumerate(config.get("transitions", [])):
        source = transition["from"]
        targets = transition["to"] if isinstance(transition["to"], list) else [transition["to"]]
        if source not in names:
            errors.append(ConfigIssue(f".transitions.{i}.from", f"unknown state '{source}'", "reference"))
        if source in wired:
            errors.append(ConfigIssue(
                f".transitions.{i}.from",
                f"transitions of state '{source}' are defined more than once",
                "unique",
            ))
        for target in targets:
            if target not in names:
                errors.append(ConfigIssue(f".transitions.{i}.to", f"unknown state '{target}'", "reference"))
        wired[source] = targets

    for i, state in enumerate(config["states"]):
        target = state.get("end_of_stream")
        if target is not None and target not in wired.get(state["name"], []):
            errors.append(ConfigIssue(
                f".states.{i}.end_of_stream",
                f"'{target}' is not a transition candidate of '{state['name']}'",
                "reference",
            ))

    return errors


def validate_config(config: Any) -> ValidationResult:
    """
    Validate a machine configuration dict.

    Args:
        config: Parsed configuration (e.g. from JSON)

    Returns:
        ValidationResult: Result with every error found

    Example:
        ```python
        result = validate_config({"states": []})
        result.is_valid  # False
        result.errors[0].path  # ".states"
        ```
    """
    errors = _check_structure(config)
    # Reference checks assume the structure is sound.
    if not errors:
        errors = _check_references(config)

    if errors:
        logger.debug(f"Machine config has {len(errors)} error(s)")
    return ValidationResult(is_valid=not errors, errors=errors)


def format_validation_errors(errors: List[ConfigIssue]) -> str:
    """
    Format validation errors as a human-readable string.

    Example:
        ```
        Validation failed with 2 error(s):
          1. At .states.0: 'name' is a required property
          2. At .transitions.0.to: unknown state 'QUOTED'
        ```
    """
    if not errors:
        return "No validation errors"

    lines = [f"Validation failed with {len(errors)} error(s):"]
    for i, error in enumerate(errors, 1):
        lines.append(f"  {i}. {error}")
    return "\n".join(lines)
