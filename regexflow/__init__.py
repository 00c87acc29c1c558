"""
regexflow: Stateful, Regex-Driven Stream Rewriting

regexflow rewrites text streams with rules that depend on a current state.
Which rule is active, and when the state changes, is decided by regular
expression matches found while scanning, so multi-phase rewrites (inside and
outside a quoted region, nested blocks, headers then body) happen in a single
pass without loading the whole document.

Key Features:
    - Cyclic state graphs built in two passes (states, then transitions)
    - Pluggable transition guards: constant, content-driven, counter-driven
    - One immutable definition, many independent concurrent runs
    - Declarative JSON configuration validated with jsonschema
    - Streaming engine and writer that release output as soon as it is final

Quick Start:
    ```python
    from regexflow import StateMachine, rewrite, upper_group

    machine = StateMachine("quotes", initial="START")
    start = machine.add_state("START", r"<quote>", replacement="")
    quoted = machine.add_state("QUOTED", r"(?s)(.*?)</quote>", action=upper_group)
    machine.connect(start, quoted)
    machine.connect(quoted, start)

    print(rewrite("a <quote>b</quote> c", machine))  # a B c
    ```

Architecture:
    1. Machine model: Token, State, Transitions, TransitionGuard, StateMachine
    2. Match processing: TransitionProcessor (match -> next state + buffer edit)
    3. Runs: MachineRun (active state cursor per stream)
    4. Engine: StatefulModifier / RegexModifier, ModifyingWriter
    5. Configuration: build_machine / load_machine
"""

__version__ = "0.1.0"

from regexflow.api import rewrite, rewrite_chunks  # noqa: F401
from regexflow.buffer import TextBuffer  # noqa: F401
from regexflow.engine import ModifyingWriter, RegexModifier, StatefulModifier  # noqa: F401
from regexflow.errors import ConfigurationError, ContractViolation, RegexFlowError  # noqa: F401
from regexflow.machine import (  # noqa: F401
    FirstCandidateGuard,
    GroupGuard,
    NestingGuard,
    State,
    StateMachine,
    StayGuard,
    Token,
    TransitionGuard,
    Transitions,
    upper_group,
)
from regexflow.processing import MachineRun, MatchProcessorResult, TransitionProcessor  # noqa: F401

__all__ = [
    "rewrite",
    "rewrite_chunks",
    "TextBuffer",
    "ModifyingWriter",
    "RegexModifier",
    "StatefulModifier",
    "RegexFlowError",
    "ConfigurationError",
    "ContractViolation",
    "StateMachine",
    "State",
    "Token",
    "Transitions",
    "TransitionGuard",
    "StayGuard",
    "FirstCandidateGuard",
    "GroupGuard",
    "NestingGuard",
    "upper_group",
    "MachineRun",
    "MatchProcessorResult",
    "TransitionProcessor",
]
