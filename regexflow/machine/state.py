"""
State and Transitions - the nodes and edges of a rewriting state machine.

A State binds one Token (the recogniser used while the state is active) to an
optional Transitions set (the states that may follow). A State without
Transitions is terminal: once reached, the machine keeps matching its token
forever.

State graphs are usually cyclic (START -> QUOTED -> START), so:
    - States compare by identity, never structurally
    - ``repr`` names neighbouring states instead of recursing into them
    - Transitions are attached after all states exist, exactly once

The state a run is currently in is never stored here; see MachineRun.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

from regexflow.buffer import TextBuffer
from regexflow.errors import ConfigurationError, require
from regexflow.machine.token import Token

if TYPE_CHECKING:
    from regexflow.machine.guards import TransitionGuard

logger = logging.getLogger(__name__)

# handler(buffer, first_modifiable, end_of_stream) -> next state or None (stay)
NoMatchHandler = Callable[[TextBuffer, int, bool], Optional["State"]]


def stay_without_match(buffer: TextBuffer, first_modifiable: int, end_of_stream: bool) -> None:
    """Default no-match handler: no edit, no state change."""
    return None


def transition_on_end_of_stream(target: "State") -> NoMatchHandler:
    """
    Build a no-match handler that moves to ``target`` at end of stream.

    Without a match the machine normally stays where it is. Attach this
    handler to let a state hand over to ``target`` once the input is
    exhausted. ``target`` must be one of the state's transition candidates.

    Example:
        ```python
        trailer = machine.add_state("TRAILER")
        body = machine.add_state(
            "BODY", r"x", no_match_handler=transition_on_end_of_stream(trailer)
        )
        machine.connect(body, [trailer], guard=StayGuard())
        ```
    """
    require(target, "target")

    def handler(buffer: TextBuffer, first_modifiable: int, end_of_stream: bool) -> Optional["State"]:
        return target if end_of_stream else None

    handler.__name__ = f"transition_on_end_of_stream({target.name})"
    return handler


@dataclass(frozen=True, eq=False)
class Transitions:
    """
    Candidate next states and the guard arbitrating among them.

    Candidate order only matters to guards that choose to use it.

    Attributes:
        candidates: States reachable from the owning state
        guard: Decides the next state on each match
    """

    candidates: Tuple["State", ...]
    guard: "TransitionGuard"

    def __post_init__(self):
        require(self.candidates, "candidates")
        require(self.guard, "guard")
        object.__setattr__(self, "candidates", tuple(self.candidates))
        for candidate in self.candidates:
            if not isinstance(candidate, State):
                raise ConfigurationError(f"Transition candidate {candidate!r} is not a State")

    def allows(self, current: "State", state: "State") -> bool:
        """True if ``state`` is ``current`` or one of the candidates (by identity)."""
        return state is current or any(state is c for c in self.candidates)

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.candidates)
        return f"Transitions(candidates=[{names}], guard={self.guard!r})"


class State:
    """
    A node of the state machine.

    Attributes:
        token: Recogniser and action used while this state is active
        transitions: Possible next states, or None for a terminal state
        no_match_handler: Called when the token finds nothing
    """

    __slots__ = ("token", "_transitions", "no_match_handler", "owner")

    def __init__(
        self,
        token: Token,
        no_match_handler: Optional[NoMatchHandler] = None,
    ):
        self.token = require(token, "token")
        self._transitions: Optional[Transitions] = None
        self.no_match_handler: NoMatchHandler = no_match_handler or stay_without_match
        # Arena that registered this state (set by StateMachine.add)
        self.owner = None

    @property
    def name(self) -> str:
        return self.token.name

    @property
    def transitions(self) -> Optional[Transitions]:
        return self._transitions

    @property
    def is_terminal(self) -> bool:
        """A state without transitions never hands off."""
        return self._transitions is None

    def set_transitions(
        self,
        candidates: Sequence["State"],
        guard: "TransitionGuard",
    ) -> Transitions:
        """
        Attach the outgoing transitions. May be called only once.

        Args:
            candidates: States that may follow this one
            guard: Chooses among ``candidates`` (or stays) on each match

        Returns:
            Transitions: The attached transitions

        Raises:
            ConfigurationError: If transitions were already set
        """
        if self._transitions is not None:
            raise ConfigurationError(f"Transitions of state '{self.name}' are already set")
        self._transitions = Transitions(tuple(candidates), guard)
        logger.debug(f"Wired {self.name} -> {[c.name for c in self._transitions.candidates]}")
        return self._transitions

    # Identity semantics: graphs are cyclic, structural equality would recurse.
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def __repr__(self) -> str:
        if self._transitions is None:
            targets = "terminal"
        else:
            targets = "-> " + ", ".join(c.name for c in self._transitions.candidates)
        return f"State({self.name!r}, {targets})"
