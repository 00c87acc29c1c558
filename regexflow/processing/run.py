"""
MachineRun - one traversal of a state machine over one stream.

A run is the only mutable part of the model. It holds the active state and
the buffer position, counts transitions and keeps run-local copies of any
stateful guards. The definition it runs over is shared and never modified,
so several runs can process separate streams at the same time.

Run Flow:
    1. Start at a caller-supplied initial state
    2. The engine scans with ``run.token``
    3. For each match the engine calls ``run.on_match(...)``
    4. If the result says not to continue, the engine picks up the new
       ``run.token`` and resumes at the reported position
    5. Repeat until end of stream

Usage:
    ```python
    run = machine.start("START")
    buffer = TextBuffer("a <quote>b</quote> c")
    match = run.token.pattern.search(str(buffer))
    result = run.on_match(buffer, 0, match)
    run.active_state.name  # "QUOTED"
    ```
"""

import logging
import re
from typing import TYPE_CHECKING, Dict, List, Optional

from regexflow.buffer import TextBuffer
from regexflow.errors import require
from regexflow.machine.state import State
from regexflow.machine.token import Token
from regexflow.processing.processor import (
    MatchProcessorResult,
    NoMatchResult,
    TransitionProcessor,
)

if TYPE_CHECKING:
    from regexflow.machine.definition import StateMachine
    from regexflow.machine.guards import TransitionGuard

logger = logging.getLogger(__name__)


class MachineRun:
    """
    Cursor over a state machine definition.

    Attributes:
        machine: The shared definition
        initial_state: State the run started in
        active_state: State whose token is currently scanned for
        position: First unprocessed buffer index reported by the last cycle
        transition_count: Number of state changes so far
        history: Names of the states entered, starting with the initial one
    """

    def __init__(self, machine: "StateMachine", initial: State):
        self.machine = require(machine, "machine")
        self.initial_state = require(initial, "initial")
        self._guards: Dict[int, "TransitionGuard"] = {}
        self._processor = TransitionProcessor(guard_lookup=self._guard_for)
        self.reset()

        logger.debug(f"Run of '{machine.name}' started in {initial.name}")

    def reset(self) -> None:
        """Return to the initial state and drop run-local guard state."""
        self.active_state = self.initial_state
        self.position = 0
        self.transition_count = 0
        self.history: List[str] = [self.initial_state.name]
        self._guards.clear()

    @property
    def token(self) -> Token:
        """Token of the active state."""
        return self.active_state.token

    @property
    def is_terminal(self) -> bool:
        return self.active_state.is_terminal

    def _guard_for(self, state: State) -> Optional["TransitionGuard"]:
        if state.transitions is None:
            return None
        key = id(state)
        guard = self._guards.get(key)
        if guard is None:
            guard = state.transitions.guard.fork()
            self._guards[key] = guard
        return guard

    def _enter(self, next_state: State) -> None:
        if next_state is self.active_state:
            return
        self.active_state = next_state
        self.transition_count += 1
        self.history.append(next_state.name)

    def on_match(
        self,
        buffer: TextBuffer,
        first_modifiable: int,
        match: "re.Match[str]",
    ) -> MatchProcessorResult:
        """
        Process a match of the active token and switch state if required.

        Returns:
            MatchProcessorResult: ``continue_matching_with_same_token`` is
            False when the active state changed
        """
        result = self._processor.process(self.active_state, buffer, first_modifiable, match)
        self.position = result.first_modifiable_character_in_buffer
        self._enter(result.next_state)
        return result

    def on_no_match(
        self,
        buffer: TextBuffer,
        first_modifiable: int,
        end_of_stream: bool,
    ) -> NoMatchResult:
        """Let the active state handle a scan without a match."""
        result = self._processor.process_without_match(
            self.active_state, buffer, first_modifiable, end_of_stream
        )
        self.position = result.first_modifiable_character_in_buffer
        self._enter(result.next_state)
        return result

    def __repr__(self) -> str:
        return (
            f"MachineRun(machine={self.machine.name!r}, active_state={self.active_state.name!r}, "
            f"transitions={self.transition_count})"
        )
