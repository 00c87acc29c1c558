"""
Reference buffering engine - drives a MachineRun over a growing buffer.

The engine owns the look-ahead policy; the state machine only ever hears
"this matched" or "nothing matched". Each call to ``modify`` scans from the
first modifiable character with the active token, hands matches to the run,
swaps tokens whenever the run changes state, and finally tells the caller how
many characters at the front of the buffer are final.

Buffer Policy:
    - Before end of stream, a match followed by fewer than ``look_ahead``
      characters is tentative: more input could extend it (``ab(cd)?``) or
      invalidate it (``foo(?!bar)``). It is deferred until enough input
      arrives or the stream ends
    - Without a match, characters older than ``max_match_length`` before the
      buffer end can no longer start a match and are released
    - At end of stream everything is released

Guarantee:
    Output does not depend on how the input is chunked, as long as whether
    and how a token matches is decided by at most ``look_ahead`` characters
    past the match end, and matches are shorter than ``max_match_length``

Limitations:
    - Matches longer than ``max_match_length`` may be missed if they span
      more than one write
    - A token that matches the empty string without its action advancing
      the position makes no progress; use ``lint_machine`` to catch these

Usage:
    ```python
    modifier = StatefulModifier(machine, "START")
    buffer = TextBuffer("a <quote>b</quote> c")
    after = modifier.modify(buffer, 0, end_of_stream=True)
    str(buffer)  # "a B c"
    ```
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Set

from regexflow.buffer import TextBuffer
from regexflow.errors import ConfigurationError, require
from regexflow.machine.actions import MatchAction
from regexflow.machine.definition import StateMachine, StateRef
from regexflow.machine.state import State
from regexflow.processing.run import MachineRun

logger = logging.getLogger(__name__)

DEFAULT_MAX_MATCH_LENGTH = 4096
DEFAULT_LOOK_AHEAD = 64


@dataclass(frozen=True)
class AfterModification:
    """
    What the caller may do with the buffer after one ``modify`` call.

    Attributes:
        first_modifiable_character_in_buffer: Index where the next scan starts
            (before any characters are released)
        number_of_chars_to_release: Characters at the front of the buffer that
            are final and may be written out
        need_more_input: True if the engine stopped only for lack of input
    """

    first_modifiable_character_in_buffer: int
    number_of_chars_to_release: int
    need_more_input: bool


class StatefulModifier:
    """
    Engine running one MachineRun over a stream.

    Attributes:
        run: The run driven by this engine
        max_match_length: Longest match the engine waits for
        look_ahead: Characters that must follow a match before it is
            committed (before end of stream)
    """

    def __init__(
        self,
        machine: StateMachine,
        initial: Optional[StateRef] = None,
        max_match_length: int = DEFAULT_MAX_MATCH_LENGTH,
        look_ahead: int = DEFAULT_LOOK_AHEAD,
    ):
        require(machine, "machine")
        if max_match_length < 1:
            raise ConfigurationError(f"max_match_length must be positive, got {max_match_length}")
        if look_ahead < 1:
            raise ConfigurationError(f"look_ahead must be positive, got {look_ahead}")
        self.run: MachineRun = machine.start(initial)
        self.max_match_length = max_match_length
        self.look_ahead = look_ahead

    @property
    def active_state(self) -> State:
        return self.run.active_state

    def _retained_from(self, buffer: TextBuffer, position: int) -> int:
        # Everything before this index can no longer take part in a match.
        return min(len(buffer), max(position, len(buffer) - self.max_match_length))

    def _is_tentative(self, buffer: TextBuffer, match: "re.Match[str]") -> bool:
        # Fewer than look_ahead characters follow: more input may change it.
        return len(buffer) - match.end() < self.look_ahead

    def modify(
        self,
        buffer: TextBuffer,
        first_modifiable: int,
        end_of_stream: bool,
    ) -> AfterModification:
        """
        Process as much of the buffer as the available input allows.

        Args:
            buffer: Look-ahead window, edited in place
            first_modifiable: Index of the first character not yet processed
            end_of_stream: True when no further input will be appended

        Returns:
            AfterModification: Resume position and releasable prefix
        """
        require(buffer, "buffer")
        position = first_modifiable
        # States that already switched on "no match" during this call
        switched_without_match: Set[int] = set()

        while True:
            state = self.run.active_state
            match = buffer.search(state.token.pattern, position)

            if match is None or (not end_of_stream and self._is_tentative(buffer, match)):
                if match is None and id(state) not in switched_without_match:
                    result = self.run.on_no_match(buffer, position, end_of_stream)
                    position = result.first_modifiable_character_in_buffer
                    if result.next_state is not state:
                        switched_without_match.add(id(state))
                        continue

                if end_of_stream:
                    return AfterModification(len(buffer), len(buffer), False)

                retained = self._retained_from(buffer, position)
                if match is not None:
                    retained = min(retained, match.start())
                return AfterModification(retained, retained, True)

            result = self.run.on_match(buffer, position, match)
            position = result.first_modifiable_character_in_buffer

            if not result.continue_matching_with_same_token:
                logger.debug(
                    f"Switching token {state.name} -> {result.next_state.name} at {position}"
                )


class RegexModifier(StatefulModifier):
    """
    Stateless rewrite: one token, applied to every match in the stream.

    Internally a one-state terminal machine. Each instance owns its own run,
    so several modifiers never share progress.

    Example:
        ```python
        modifier = RegexModifier(r"abcd", replacement="1234")
        ```
    """

    def __init__(
        self,
        regex: str,
        replacement: Optional[str] = None,
        action: Optional[MatchAction] = None,
        flags: int = 0,
        max_match_length: int = DEFAULT_MAX_MATCH_LENGTH,
        look_ahead: int = DEFAULT_LOOK_AHEAD,
    ):
        machine = StateMachine(f"regex:{regex}")
        machine.add_state("REWRITE", regex, replacement=replacement, action=action, flags=flags)
        super().__init__(
            machine, "REWRITE", max_match_length=max_match_length, look_ahead=look_ahead
        )

    @property
    def pattern(self) -> "re.Pattern[str]":
        return self.run.token.pattern
