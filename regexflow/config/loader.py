"""
Build state machines from declarative configuration.

A configuration is a JSON-compatible dict (see ``regexflow.config.schema``).
Callback tokens and custom guards refer to Python objects by name; those
names are resolved against registries passed by the caller, on top of the
builtin actions (upper, lower, delete, upper_group) and guards (stay, first,
group, nesting).

Usage:
    ```python
    from regexflow.config import build_machine

    machine = build_machine({
        "name": "quotes",
        "initial": "START",
        "states": [
            {"name": "START", "regex": "<quote>", "replacement": ""},
            {"name": "QUOTED", "regex": "(.*?)</quote>", "flags": ["DOTALL"],
             "callback": "upper_group"},
        ],
        "transitions": [
            {"from": "START", "to": "QUOTED"},
            {"from": "QUOTED", "to": "START"},
        ],
    })
    ```
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from regexflow.config.schema import regex_flags
from regexflow.config.validator import ConfigIssue, format_validation_errors, validate_config
from regexflow.errors import ConfigurationError
from regexflow.machine.actions import BUILTIN_ACTIONS, MatchAction
from regexflow.machine.definition import StateMachine
from regexflow.machine.guards import (
    CallableGuard,
    FirstCandidateGuard,
    GroupGuard,
    NestingGuard,
    StayGuard,
    TransitionGuard,
)
from regexflow.machine.state import transition_on_end_of_stream

logger = logging.getLogger(__name__)

GuardEntry = Union[TransitionGuard, Any]


def _make_guard(
    spec: Union[str, Dict[str, Any]],
    guards: Dict[str, GuardEntry],
) -> TransitionGuard:
    """
    Create a guard from its config entry.

    Raises:
        KeyError: If the guard name is not registered
    """
    if isinstance(spec, str):
        spec = {"type": spec}
    kind = spec["type"]

    if kind in guards:
        entry = guards[kind]
        return entry if isinstance(entry, TransitionGuard) else CallableGuard(entry)
    if kind == "stay":
        return StayGuard()
    if kind == "first":
        return FirstCandidateGuard()
    if kind == "group":
        return GroupGuard(spec.get("groups", {}))
    if kind == "nesting":
        return NestingGuard(
            open_group=spec.get("open", "open"),
            close_group=spec.get("close", "close"),
            exit_to=spec.get("exit"),
        )
    raise KeyError(kind)


def build_machine(
    config: Dict[str, Any],
    callbacks: Optional[Dict[str, MatchAction]] = None,
    guards: Optional[Dict[str, GuardEntry]] = None,
) -> StateMachine:
    """
    Validate ``config`` and build the machine it describes.

    Args:
        config: Machine configuration dict
        callbacks: Extra match actions by name (override builtins)
        guards: Extra guards by name, as TransitionGuard instances or
            ``func(current, match, candidates)`` callables

    Returns:
        StateMachine: The wired machine, with ``initial`` taken from config

    Raises:
        ConfigurationError: With every problem found in ``errors``
    """
    result = validate_config(config)
    if not result.is_valid:
        raise ConfigurationError(format_validation_errors(result.errors), [str(e) for e in result.errors])

    actions = {**BUILTIN_ACTIONS, **(callbacks or {})}
    guards = guards or {}

    # Resolve names first so every unknown callback and guard is reported.
    issues: List[ConfigIssue] = []
    for i, state in enumerate(config["states"]):
        if "callback" in state and state["callback"] not in actions:
            issues.append(ConfigIssue(
                f".states.{i}.callback", f"unknown callback '{state['callback']}'", "reference"
            ))

    transition_guards = []
    for i, transition in enumerate(config.get("transitions", [])):
        spec = transition.get("guard")
        if spec is None:
            transition_guards.append(None)
            continue
        try:
            transition_guards.append(_make_guard(spec, guards))
        except KeyError as e:
            issues.append(ConfigIssue(f".transitions.{i}.guard", f"unknown guard {e}", "reference"))

    if issues:
        raise ConfigurationError(format_validation_errors(issues), [str(e) for e in issues])

    machine = StateMachine(config.get("name", "machine"), initial=config.get("initial"))

    # Pass 1: states
    for state in config["states"]:
        machine.add_state(
            state["name"],
            state.get("regex"),
            replacement=state.get("replacement"),
            action=actions[state["callback"]] if "callback" in state else None,
            flags=regex_flags(state.get("flags", [])),
        )

    # Pass 2: transitions (cycles are fine, every state exists by now)
    for transition, guard in zip(config.get("transitions", []), transition_guards):
        machine.connect(transition["from"], transition["to"], guard=guard)

    for state in config["states"]:
        if "end_of_stream" in state:
            machine.state(state["name"]).no_match_handler = transition_on_end_of_stream(
                machine.state(state["end_of_stream"])
            )

    logger.info(
        f"Built machine '{machine.name}': {len(machine)} states, "
        f"{len(config.get('transitions', []))} transition sets"
    )
    return machine


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load a machine configuration from a JSON file.

    Raises:
        ConfigurationError: If the file is missing or not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Machine file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in machine file {path}: {e}")


def load_machine(
    path: Path,
    callbacks: Optional[Dict[str, MatchAction]] = None,
    guards: Optional[Dict[str, GuardEntry]] = None,
) -> StateMachine:
    """Load and build a machine from a JSON file."""
    return build_machine(load_config(path), callbacks=callbacks, guards=guards)
