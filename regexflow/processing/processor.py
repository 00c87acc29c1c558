"""
TransitionProcessor - turns a token match into a possible state switch.

This is the glue between a buffering engine and a state machine. The engine
scans with the active state's token; for every match it calls
``process(...)``, which:

    1. Asks the state's guard for the next state
    2. Rejects a next state outside {current} ∪ candidates (ConfigurationError,
       buffer untouched)
    3. Applies the token's action to the buffer
    4. Reports whether the engine may keep scanning with the same token

The next state travels back in the returned MatchProcessorResult, so the
processor itself holds no state between calls and can be shared.

Per-cycle contract:
    input:  buffer, first_modifiable, match
    output: MatchProcessorResult(first_modifiable_character_in_buffer,
                                 continue_matching_with_same_token,
                                 next_state)
"""

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from regexflow.buffer import TextBuffer
from regexflow.errors import ConfigurationError, ContractViolation, require
from regexflow.machine.state import State

if TYPE_CHECKING:
    from regexflow.machine.guards import TransitionGuard

logger = logging.getLogger(__name__)

# Resolves the guard to use for a state (lets runs substitute forked copies).
GuardLookup = Callable[[State], Optional["TransitionGuard"]]


@dataclass(frozen=True)
class MatchProcessorResult:
    """
    Outcome of processing one match.

    Attributes:
        first_modifiable_character_in_buffer: Where scanning resumes
        continue_matching_with_same_token: False means the caller must switch
            to ``next_state.token`` before scanning on
        next_state: State active after this match
    """

    first_modifiable_character_in_buffer: int
    continue_matching_with_same_token: bool
    next_state: Optional[State] = None


@dataclass(frozen=True)
class NoMatchResult:
    """
    Outcome of a scan that found nothing.

    Attributes:
        first_modifiable_character_in_buffer: Where scanning resumes
        next_state: State active afterwards (the current one unless the
            state's no-match handler requested a switch)
    """

    first_modifiable_character_in_buffer: int
    next_state: State


def _default_guard(state: State) -> Optional["TransitionGuard"]:
    return state.transitions.guard if state.transitions is not None else None


class TransitionProcessor:
    """
    Match-processing adapter for one state machine.

    Stateless: every call carries the current state explicitly, and the
    guard lookup decides which guard instance to consult, so one processor
    may serve many runs.
    """

    def __init__(self, guard_lookup: Optional[GuardLookup] = None):
        self._guard_lookup = guard_lookup or _default_guard

    def resolve_next_state(self, current: State, match: "re.Match[str]") -> State:
        """
        Ask the guard of ``current`` for the next state and validate it.

        Raises:
            ConfigurationError: If the guard returns a state it may not return
        """
        transitions = current.transitions
        if transitions is None:
            # terminal state: self-loop forever
            return current

        guard = self._guard_lookup(current)
        next_state = guard.decide(current, match, transitions.candidates)

        if not isinstance(next_state, State) or not transitions.allows(current, next_state):
            raise ConfigurationError(
                f"Guard {guard!r} of state '{current.name}' returned {next_state!r}, "
                f"expected '{current.name}' or one of {[c.name for c in transitions.candidates]}"
            )
        return next_state

    def process(
        self,
        current: State,
        buffer: TextBuffer,
        first_modifiable: int,
        match: "re.Match[str]",
    ) -> MatchProcessorResult:
        """
        Process one match of ``current.token``.

        Args:
            current: Active state whose token produced ``match``
            buffer: Buffer the match was found in
            first_modifiable: First character the engine still allows to edit
            match: The match

        Returns:
            MatchProcessorResult: Resume position and hand-off decision

        Raises:
            ConfigurationError: If the guard returns an invalid state (the
                buffer is left unmodified)
            ContractViolation: If a required argument is None
        """
        require(current, "current")
        require(buffer, "buffer")
        require(match, "match")
        if first_modifiable is None:
            raise ContractViolation("first_modifiable must not be None")

        next_state = self.resolve_next_state(current, match)

        position = current.token.action(buffer, first_modifiable, match)
        if not isinstance(position, int):
            raise ContractViolation(
                f"Action of token '{current.name}' returned {position!r}, expected an index"
            )

        if next_state is current:
            return MatchProcessorResult(position, True, current)

        logger.debug(
            f"Transition {current.name} --{match.group(0)!r}--> {next_state.name} at {position}"
        )
        return MatchProcessorResult(position, False, next_state)

    def process_without_match(
        self,
        current: State,
        buffer: TextBuffer,
        first_modifiable: int,
        end_of_stream: bool,
    ) -> NoMatchResult:
        """
        Give the state's no-match handler a chance to edit or switch.

        The default handler changes nothing. A handler may only switch to one
        of the state's transition candidates.

        Raises:
            ConfigurationError: If the handler returns an invalid state
        """
        require(current, "current")
        require(buffer, "buffer")

        next_state = current.no_match_handler(buffer, first_modifiable, end_of_stream)
        if next_state is None or next_state is current:
            return NoMatchResult(first_modifiable, current)

        transitions = current.transitions
        if transitions is None or not transitions.allows(current, next_state):
            raise ConfigurationError(
                f"No-match handler of state '{current.name}' returned {next_state!r}, "
                f"which is not a transition candidate"
            )

        logger.debug(
            f"Transition {current.name} --(no match, end_of_stream={end_of_stream})--> "
            f"{next_state.name}"
        )
        return NoMatchResult(first_modifiable, next_state)
