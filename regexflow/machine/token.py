"""
Token - a named regular expression paired with a match action.

A token answers "what to look for" while its state is active and "how to
rewrite it" when it is found. Tokens are immutable after construction.

Token Shapes:
    - no-op token: ``Token.passthrough(name, regex)``
    - literal-replacement token: ``Token.replacing(name, regex, replacement)``
    - callback token: ``Token(name, regex, action)``

Example:
    ```python
    from regexflow.machine import Token

    token = Token.replacing("greeting", r"hello", "bye")
    token.pattern.search("say hello").start()  # 4
    ```
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from regexflow.errors import ConfigurationError, require
from regexflow.machine.actions import MatchAction, ReplacingAction, do_nothing

# Matches nothing, not even the empty string. Used by states that only
# start a machine and never recognise anything themselves.
NEVER_MATCHES = r"(?!)"


def compile_pattern(regex: Union[str, "re.Pattern[str]"], flags: int = 0) -> "re.Pattern[str]":
    """
    Compile ``regex`` unless it is already compiled.

    Raises:
        ConfigurationError: If the pattern does not compile
    """
    if isinstance(regex, re.Pattern):
        return regex
    try:
        return re.compile(regex, flags)
    except re.error as e:
        raise ConfigurationError(f"Invalid regular expression {regex!r}: {e}")


@dataclass(frozen=True)
class Token:
    """
    A named pattern and the action applied to each of its matches.

    Attributes:
        name: Unique token name (states use it as their own name)
        pattern: Compiled regular expression
        action: Buffer-editing callable invoked once per match
    """

    name: str
    pattern: "re.Pattern[str]"
    action: MatchAction = field(default=do_nothing, compare=False)

    def __post_init__(self):
        require(self.name, "name")
        require(self.pattern, "pattern")
        require(self.action, "action")
        # Accept plain strings for convenience; frozen, so set via object.
        if not isinstance(self.pattern, re.Pattern):
            object.__setattr__(self, "pattern", compile_pattern(self.pattern))
        if not callable(self.action):
            raise ConfigurationError(f"Action of token '{self.name}' is not callable")

    @classmethod
    def passthrough(cls, name: str, regex: Optional[str] = None, flags: int = 0) -> "Token":
        """Token that recognises ``regex`` without modifying the stream."""
        return cls(name, compile_pattern(regex if regex is not None else NEVER_MATCHES, flags))

    @classmethod
    def replacing(cls, name: str, regex: str, replacement: str, flags: int = 0) -> "Token":
        """Token that replaces every match with ``replacement``."""
        require(replacement, "replacement")
        return cls(name, compile_pattern(regex, flags), ReplacingAction(replacement))

    def __repr__(self) -> str:
        return f"Token(name={self.name!r}, pattern={self.pattern.pattern!r})"
