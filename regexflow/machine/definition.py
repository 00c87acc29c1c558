"""
StateMachine - arena that builds and wires the states of a rewriting machine.

Machines are assembled in two passes so that cyclic graphs need no forward
declarations:

    1. Create every state (``add_state`` or ``add``)
    2. Wire transitions (``connect``), each state at most once

After wiring, the definition is read-only. Any number of runs may be started
from it with ``start()``; each run keeps its own active state.

Usage:
    ```python
    from regexflow.machine import StateMachine, upper_group

    machine = StateMachine("quotes")
    start = machine.add_state("START", r"<quote>", replacement="")
    quoted = machine.add_state("QUOTED", r"(?s)(.*?)</quote>", action=upper_group)

    machine.connect(start, [quoted])
    machine.connect(quoted, [start])

    run = machine.start("START")
    ```
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Union

from regexflow.errors import ConfigurationError, require
from regexflow.machine.actions import MatchAction
from regexflow.machine.guards import FirstCandidateGuard, StayGuard, TransitionGuard
from regexflow.machine.state import NoMatchHandler, State, Transitions
from regexflow.machine.token import Token, compile_pattern, NEVER_MATCHES

logger = logging.getLogger(__name__)

StateRef = Union[State, str]


class StateMachine:
    """
    Owns the states of one machine definition.

    Attributes:
        name: Machine name (used in log and error messages)
        initial: Default start state name for ``start()``
    """

    def __init__(self, name: str = "machine", initial: Optional[str] = None):
        self.name = name
        self.initial = initial
        self._states: Dict[str, State] = {}

    # -- pass 1: states ---------------------------------------------------

    def add(self, state: State) -> State:
        """
        Register a prebuilt state.

        Raises:
            ConfigurationError: If the name is taken or the state already
                belongs to another machine
        """
        require(state, "state")
        if state.name in self._states:
            raise ConfigurationError(f"Duplicate state name '{state.name}' in machine '{self.name}'")
        if state.owner is not None and state.owner is not self:
            raise ConfigurationError(
                f"State '{state.name}' already belongs to machine '{state.owner.name}'"
            )
        state.owner = self
        self._states[state.name] = state
        return state

    def add_state(
        self,
        name: str,
        regex: Optional[str] = None,
        replacement: Optional[str] = None,
        action: Optional[MatchAction] = None,
        flags: int = 0,
        no_match_handler: Optional[NoMatchHandler] = None,
    ) -> State:
        """
        Create a state and its token.

        Args:
            name: Unique state name
            regex: Pattern recognised while the state is active. Without one
                the state never matches anything
            replacement: Replacement template (literal-replacement token)
            action: Callback action (callback token)
            flags: ``re`` flags for ``regex``
            no_match_handler: Called when the token finds no match

        Returns:
            State: The new state

        Raises:
            ConfigurationError: If both ``replacement`` and ``action`` are
                given, the name is taken or the pattern is invalid
        """
        require(name, "name")
        if replacement is not None and action is not None:
            raise ConfigurationError(
                f"State '{name}' defines both a replacement and an action"
            )

        pattern = compile_pattern(regex if regex is not None else NEVER_MATCHES, flags)
        if replacement is not None:
            token = Token.replacing(name, pattern, replacement)
        elif action is not None:
            token = Token(name, pattern, action)
        else:
            token = Token.passthrough(name, pattern)

        return self.add(State(token, no_match_handler=no_match_handler))

    # -- pass 2: transitions ----------------------------------------------

    def connect(
        self,
        source: StateRef,
        targets: Union[StateRef, Sequence[StateRef]],
        guard: Optional[TransitionGuard] = None,
    ) -> Transitions:
        """
        Attach transitions from ``source`` to ``targets``.

        Args:
            source: State (or state name) the transitions leave from
            targets: One state or a sequence of candidate states
            guard: Arbitrates among the targets. Defaults to
                FirstCandidateGuard for a single target and StayGuard
                otherwise

        Returns:
            Transitions: The attached transitions

        Raises:
            ConfigurationError: If a state was never added to this machine or
                ``source`` already has transitions
        """
        source_state = self._resolve(source, role="source")
        if isinstance(targets, (State, str)):
            targets = [targets]
        candidates = [self._resolve(t, role=f"target of '{source_state.name}'") for t in targets]

        if guard is None:
            guard = FirstCandidateGuard() if len(candidates) == 1 else StayGuard()

        return source_state.set_transitions(candidates, guard)

    def _resolve(self, ref: StateRef, role: str) -> State:
        require(ref, role)
        if isinstance(ref, str):
            state = self._states.get(ref)
            if state is None:
                raise ConfigurationError(
                    f"Unknown state '{ref}' ({role}) in machine '{self.name}'"
                )
            return state
        if self._states.get(ref.name) is not ref:
            raise ConfigurationError(
                f"State '{ref.name}' ({role}) was not constructed by machine '{self.name}'"
            )
        return ref

    # -- lookup -----------------------------------------------------------

    def state(self, name: str) -> State:
        """Look up a state by name. Raises ConfigurationError if unknown."""
        return self._resolve(name, role="lookup")

    @property
    def states(self) -> List[State]:
        return list(self._states.values())

    def start(self, initial: Optional[StateRef] = None):
        """
        Begin a new run at ``initial`` (default: ``self.initial``).

        Returns:
            MachineRun: An independent cursor over this definition
        """
        from regexflow.processing.run import MachineRun

        if initial is None:
            initial = self.initial
        return MachineRun(self, self._resolve(initial, role="initial state"))

    def __contains__(self, item) -> bool:
        if isinstance(item, State):
            return self._states.get(item.name) is item
        return item in self._states

    def __iter__(self) -> Iterator[State]:
        return iter(self._states.values())

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"StateMachine({self.name!r}, states={list(self._states)})"
