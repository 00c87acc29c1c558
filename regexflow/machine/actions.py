"""
Match actions - buffer edits applied when a token matches.

An action is any callable with the signature::

    action(buffer: TextBuffer, first_modifiable: int, match: re.Match) -> int

It may edit the buffer at the match location and returns the index of the
first character that is still modifiable afterwards (normally the end of the
edited region). The match positions refer to the buffer as it was before the
edit.

Builtin actions:
    - do_nothing: leave the buffer alone
    - ReplacingAction: replace the match with an expanded ``re`` template
    - delete: remove the match
    - upper / lower: change the case of the whole match
    - upper_group: replace the match with its first group, uppercased
"""

import re
from typing import Callable, Dict

from regexflow.buffer import TextBuffer

MatchAction = Callable[[TextBuffer, int, "re.Match[str]"], int]


def do_nothing(buffer: TextBuffer, first_modifiable: int, match: "re.Match[str]") -> int:
    """Pass the match through unchanged."""
    return match.end()


class ReplacingAction:
    """
    Replace the matched text with a replacement template.

    The template is expanded with ``match.expand``, so group references such
    as ``\\1`` or ``\\g<name>`` are substituted. A replacement without
    backslashes is inserted literally.

    Attributes:
        replacement: The replacement template
    """

    __slots__ = ("replacement",)

    def __init__(self, replacement: str):
        self.replacement = replacement

    def __call__(self, buffer: TextBuffer, first_modifiable: int, match: "re.Match[str]") -> int:
        text = match.expand(self.replacement) if "\\" in self.replacement else self.replacement
        return buffer.replace(match.start(), match.end(), text)

    def __repr__(self) -> str:
        return f"ReplacingAction({self.replacement!r})"


def transform_match(func: Callable[[str], str]) -> MatchAction:
    """
    Build an action that rewrites the whole match with ``func``.

    Example:
        ```python
        shout = transform_match(str.upper)
        ```
    """

    def action(buffer: TextBuffer, first_modifiable: int, match: "re.Match[str]") -> int:
        return buffer.replace(match.start(), match.end(), func(match.group(0)))

    action.__name__ = f"transform_match({getattr(func, '__name__', func)!s})"
    return action


def transform_group(func: Callable[[str], str], group=1) -> MatchAction:
    """
    Build an action that replaces the whole match with ``func(group)``.

    Text outside the group (delimiters, for instance) is dropped. A group
    that did not participate in the match counts as the empty string.
    """

    def action(buffer: TextBuffer, first_modifiable: int, match: "re.Match[str]") -> int:
        return buffer.replace(match.start(), match.end(), func(match.group(group) or ""))

    action.__name__ = f"transform_group({getattr(func, '__name__', func)!s}, {group!r})"
    return action


def delete(buffer: TextBuffer, first_modifiable: int, match: "re.Match[str]") -> int:
    return buffer.delete(match.start(), match.end())


upper = transform_match(str.upper)
lower = transform_match(str.lower)
upper_group = transform_group(str.upper)

BUILTIN_ACTIONS: Dict[str, MatchAction] = {
    "upper": upper,
    "lower": lower,
    "delete": delete,
    "upper_group": upper_group,
}
