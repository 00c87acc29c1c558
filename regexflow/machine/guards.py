"""
Transition guards - decide which state follows a match.

A guard is the only branching extension point of a machine. On every match
of the active token it receives the current state, the match and the
candidate states, and returns either the current state (stay) or one of the
candidates (transition). Returning anything else is a ConfigurationError,
raised by the processor before the buffer is touched.

Guard Types:
    StayGuard: always stay (the default policy)
    FirstCandidateGuard: always move to the first candidate
    GroupGuard: content-driven, picks a candidate by which named group matched
    NestingGuard: counter-driven, leaves only when nesting depth returns to zero
    CallableGuard: adapts a plain function

Run-local state:
    One definition may drive several runs at once. Guards that keep state
    between matches (NestingGuard) override ``fork()`` so that every run gets
    its own copy. Stateless guards return themselves.

Example:
    ```python
    guard = GroupGuard({"open": "QUOTED", "comment": "COMMENT"})
    machine.connect(start, [quoted, comment], guard=guard)
    ```
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict, Optional, Sequence

from regexflow.errors import ConfigurationError, require

if TYPE_CHECKING:
    from regexflow.machine.state import State

logger = logging.getLogger(__name__)


class TransitionGuard(ABC):
    """Abstract base class for transition guards."""

    @abstractmethod
    def decide(
        self,
        current: "State",
        match: "re.Match[str]",
        candidates: Sequence["State"],
    ) -> "State":
        """
        Choose the next state.

        Args:
            current: The active state
            match: Match of the active state's token
            candidates: States the active state may move to

        Returns:
            State: ``current`` to stay, or a member of ``candidates``
        """
        pass

    def fork(self) -> "TransitionGuard":
        """Return a copy suitable for a single run. Stateless guards return self."""
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def find_candidate(candidates: Sequence["State"], name: str) -> "State":
    """
    Look up a candidate by state name.

    Raises:
        ConfigurationError: If no candidate has that name
    """
    for candidate in candidates:
        if candidate.name == name:
            return candidate
    raise ConfigurationError(
        f"State '{name}' is not a transition candidate "
        f"(candidates: {[c.name for c in candidates]})"
    )


class StayGuard(TransitionGuard):
    """Never transitions. A match alone does not change the state."""

    def decide(self, current, match, candidates):
        return current


class FirstCandidateGuard(TransitionGuard):
    """Always moves to the first candidate (single-target transition)."""

    def decide(self, current, match, candidates):
        if not candidates:
            return current
        return candidates[0]


class GroupGuard(TransitionGuard):
    """
    Pick the next state from the named groups that took part in the match.

    Entries are checked in mapping order; the first group that matched wins.
    If none of the groups matched, the machine stays.

    Attributes:
        targets: Maps group name to candidate state name
    """

    def __init__(self, targets: Dict[str, str]):
        self.targets = dict(require(targets, "targets"))

    def decide(self, current, match, candidates):
        require(match, "match")
        for group, state_name in self.targets.items():
            try:
                matched = match.start(group) != -1
            except IndexError:
                raise ConfigurationError(
                    f"Guard of state '{current.name}' refers to unknown group '{group}' "
                    f"in pattern {match.re.pattern!r}"
                )
            if matched:
                return find_candidate(candidates, state_name)
        return current

    def __repr__(self) -> str:
        return f"GroupGuard({self.targets!r})"


class NestingGuard(TransitionGuard):
    """
    Track nesting depth and leave only when the outermost level closes.

    The active token is expected to match both opening and closing
    delimiters, distinguished by named groups. An opening match increases the
    depth. A closing match at depth zero moves to ``exit_to``; at any other
    depth it decreases the depth and stays.

    Attributes:
        open_group: Group name of opening delimiters
        close_group: Group name of closing delimiters
        exit_to: Candidate state name to move to (default: first candidate)
        depth: Current nesting depth (run-local)
    """

    def __init__(self, open_group: str = "open", close_group: str = "close", exit_to: Optional[str] = None):
        self.open_group = open_group
        self.close_group = close_group
        self.exit_to = exit_to
        self.depth = 0

    def decide(self, current, match, candidates):
        require(match, "match")
        if match.groupdict().get(self.open_group) is not None:
            self.depth += 1
            return current
        if match.groupdict().get(self.close_group) is not None:
            if self.depth == 0:
                if self.exit_to is None:
                    return candidates[0] if candidates else current
                return find_candidate(candidates, self.exit_to)
            self.depth -= 1
        return current

    def fork(self) -> "NestingGuard":
        return NestingGuard(self.open_group, self.close_group, self.exit_to)

    def __repr__(self) -> str:
        return (
            f"NestingGuard(open={self.open_group!r}, close={self.close_group!r}, "
            f"exit_to={self.exit_to!r}, depth={self.depth})"
        )


class CallableGuard(TransitionGuard):
    """Adapt ``func(current, match, candidates) -> State`` to the guard interface."""

    def __init__(self, func: Callable[["State", "re.Match[str]", Sequence["State"]], "State"]):
        if not callable(func):
            raise ConfigurationError(f"Guard function {func!r} is not callable")
        self.func = func

    def decide(self, current, match, candidates):
        return self.func(current, match, candidates)

    def __repr__(self) -> str:
        return f"CallableGuard({getattr(self.func, '__name__', self.func)})"


BUILTIN_GUARDS = {
    "stay": StayGuard,
    "first": FirstCandidateGuard,
    "group": GroupGuard,
    "nesting": NestingGuard,
}
