"""
Declarative machine configuration.

Components:
    - schema: JSON Schema for machine definitions
    - validator: structural (jsonschema) and reference validation with
      collected, formatted errors
    - loader: build a StateMachine from a dict or JSON file

Example:
    ```python
    from regexflow.config import load_machine

    machine = load_machine("quotes.json")
    ```
"""

from regexflow.config.loader import build_machine, load_config, load_machine
from regexflow.config.schema import MACHINE_SCHEMA
from regexflow.config.validator import (
    ConfigIssue,
    ValidationResult,
    format_validation_errors,
    validate_config,
)

__all__ = [
    "MACHINE_SCHEMA",
    "build_machine",
    "load_config",
    "load_machine",
    "validate_config",
    "format_validation_errors",
    "ConfigIssue",
    "ValidationResult",
]
