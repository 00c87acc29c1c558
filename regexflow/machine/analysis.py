"""
Static checks for machine definitions.

Nothing here is enforced at runtime; a machine that fails a check may still
run. The checks catch mistakes that otherwise surface as a stalled or
silently inert rewrite.

Checks:
    - empty-match: a token pattern that accepts the empty string can match
      at the same position forever. Detected by searching a few sample
      inputs for zero-width matches with ``re`` (catches anchors, word
      boundaries, lookarounds and flag-dependent syntax), then by compiling
      the pattern to a character-level FSM with interegular and checking
      whether its start state is accepting
    - unreachable: a state that no path from the initial state reaches
    - terminal: a state without transitions (informational)
    - unknown-initial: the initial state is not part of the machine

Example:
    ```python
    from regexflow.machine.analysis import lint_machine

    for issue in lint_machine(machine, initial="START"):
        print(issue)
    ```
"""

import logging
import re
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Set

from interegular import parse_pattern

from regexflow.errors import ConfigurationError
from regexflow.machine.definition import StateMachine, StateRef
from regexflow.machine.state import State
from regexflow.machine.token import NEVER_MATCHES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LintIssue:
    """
    A single finding.

    Attributes:
        level: "warning" or "info"
        state: Name of the state concerned
        code: Short identifier ("empty-match", "unreachable", "terminal",
            "unknown-initial")
        message: Human-readable description
    """

    level: str
    state: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"[{self.level}] {self.state}: {self.message}"


# Inputs searched for zero-width matches; anchors and word boundaries
# match empty somewhere in at least one of them.
EMPTY_MATCH_SAMPLES = ("", "a", "ab", "a b", "0", " ", "\n", "a\nb", "()", "<>")


def _has_zero_width_match(pattern: "re.Pattern[str]") -> bool:
    return any(
        m.start() == m.end()
        for sample in EMPTY_MATCH_SAMPLES
        for m in pattern.finditer(sample)
    )


def can_match_empty(pattern: "re.Pattern[str]") -> bool:
    """
    Check whether ``pattern`` can match the empty string.

    interegular ignores zero-width assertions (``\\b``, lookarounds) and
    ``re`` flags such as VERBOSE, so its answer is combined with a search
    for zero-width matches over a few sample inputs.

    Args:
        pattern: Compiled regular expression

    Returns:
        bool: True if an empty match is possible
    """
    if pattern.pattern == NEVER_MATCHES:
        return False
    if _has_zero_width_match(pattern):
        return True
    try:
        fsm = parse_pattern(pattern.pattern).to_fsm()
    except Exception as e:
        logger.debug(f"interegular cannot analyse {pattern.pattern!r} ({e}), relying on re")
        return False
    if pattern.flags & re.VERBOSE:
        # interegular reads whitespace and comments literally
        return False
    # "" is accepted iff the start state is already accepting
    return fsm.initial in fsm.finals


def reachable_states(machine: StateMachine, initial: StateRef) -> Set[int]:
    """Ids of all states reachable from ``initial`` (including itself)."""
    start = machine.state(initial) if isinstance(initial, str) else initial
    seen = {id(start)}
    queue = deque([start])
    while queue:
        state = queue.popleft()
        if state.transitions is None:
            continue
        for candidate in state.transitions.candidates:
            if id(candidate) not in seen:
                seen.add(id(candidate))
                queue.append(candidate)
    return seen


def lint_machine(machine: StateMachine, initial: Optional[StateRef] = None) -> List[LintIssue]:
    """
    Run all checks on ``machine``.

    Args:
        machine: Definition to check
        initial: Start state for the reachability check (default:
            ``machine.initial``; skipped if neither is set)

    Returns:
        List of issues; warnings are also logged. Never raises for a
        malformed definition: an unknown initial state is reported as an
        issue and the reachability check is skipped
    """
    issues: List[LintIssue] = []
    if initial is None:
        initial = machine.initial
    reachable = None
    if initial is not None:
        try:
            reachable = reachable_states(machine, initial)
        except ConfigurationError as e:
            name = initial if isinstance(initial, str) else initial.name
            issues.append(LintIssue("warning", name, "unknown-initial", str(e)))

    state: State
    for state in machine:
        if can_match_empty(state.token.pattern):
            issues.append(LintIssue(
                "warning", state.name, "empty-match",
                f"pattern {state.token.pattern.pattern!r} can match the empty string "
                f"and may stall the stream",
            ))
        if reachable is not None and id(state) not in reachable:
            issues.append(LintIssue(
                "warning", state.name, "unreachable",
                "state cannot be reached from the initial state",
            ))
        if state.is_terminal:
            issues.append(LintIssue(
                "info", state.name, "terminal",
                "state has no transitions and is never left once entered",
            ))

    for issue in issues:
        if issue.level == "warning":
            logger.warning(f"Machine '{machine.name}': {issue}")

    return issues
