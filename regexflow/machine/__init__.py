"""
State machine model for stateful stream rewriting.

This module defines what a machine is: tokens (what to look for and how to
rewrite it), states (which token is active), transitions and guards (which
state follows a match). It holds no run-time state; see
``regexflow.processing`` for runs.

Components:
    - token: Token, an immutable (name, pattern, action) triple
    - actions: builtin match actions (replace, delete, change case)
    - state: State and Transitions, plus no-match handlers
    - guards: TransitionGuard and its builtin implementations
    - definition: StateMachine, the arena that builds and wires states
    - analysis: static checks (empty matches, unreachable states)

Example:
    ```python
    from regexflow.machine import StateMachine, upper_group

    machine = StateMachine("quotes")
    start = machine.add_state("START", r"<quote>", replacement="")
    quoted = machine.add_state("QUOTED", r"(?s)(.*?)</quote>", action=upper_group)
    machine.connect(start, quoted)
    machine.connect(quoted, start)
    ```
"""

from regexflow.machine.actions import (
    BUILTIN_ACTIONS,
    ReplacingAction,
    delete,
    do_nothing,
    lower,
    transform_group,
    transform_match,
    upper,
    upper_group,
)
from regexflow.machine.definition import StateMachine
from regexflow.machine.guards import (
    BUILTIN_GUARDS,
    CallableGuard,
    FirstCandidateGuard,
    GroupGuard,
    NestingGuard,
    StayGuard,
    TransitionGuard,
)
from regexflow.machine.state import (
    State,
    Transitions,
    stay_without_match,
    transition_on_end_of_stream,
)
from regexflow.machine.token import Token

__all__ = [
    "Token",
    "State",
    "Transitions",
    "StateMachine",
    "TransitionGuard",
    "StayGuard",
    "FirstCandidateGuard",
    "GroupGuard",
    "NestingGuard",
    "CallableGuard",
    "BUILTIN_GUARDS",
    "BUILTIN_ACTIONS",
    "ReplacingAction",
    "do_nothing",
    "delete",
    "upper",
    "lower",
    "upper_group",
    "transform_match",
    "transform_group",
    "stay_without_match",
    "transition_on_end_of_stream",
]
