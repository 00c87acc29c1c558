"""
Exception hierarchy for regexflow.

All errors raised by the state machine, the processing adapter and the
configuration layer derive from RegexFlowError. The concrete classes also
derive from ValueError so callers that already guard against ValueError keep
working.

Error Classes:
    - ConfigurationError: the machine definition is malformed (dangling state
      reference, transitions wired twice, a guard returning a state it may not
      return, an invalid configuration dict)
    - ContractViolation: a required argument was missing or None
"""

from typing import List, Optional


class RegexFlowError(Exception):
    """Base class for all regexflow errors."""


class ConfigurationError(RegexFlowError, ValueError):
    """
    Raised when a state machine definition is malformed.

    Attributes:
        errors: Individual problems (used by configuration validation, which
            collects every error instead of stopping at the first one)
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ContractViolation(RegexFlowError, ValueError):
    """Raised when a required argument is missing or None."""


def require(value, name: str):
    """
    Fail fast if a required argument is None.

    Args:
        value: The argument value
        name: Argument name used in the error message

    Returns:
        The value, unchanged

    Raises:
        ContractViolation: If value is None
    """
    if value is None:
        raise ContractViolation(f"{name} must not be None")
    return value
