"""Shared fixtures for regexflow tests."""

from pathlib import Path

import pytest

from regexflow.machine import StateMachine, upper_group

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def quote_machine() -> StateMachine:
    """START --<quote>--> QUOTED --</quote>--> START, uppercasing quoted text."""
    machine = StateMachine("quotes", initial="START")
    start = machine.add_state("START", r"<quote>", replacement="")
    quoted = machine.add_state("QUOTED", r"(?s)(.*?)</quote>", action=upper_group)
    machine.connect(start, quoted)
    machine.connect(quoted, start)
    return machine


@pytest.fixture
def ping_pong_machine() -> StateMachine:
    """A --x--> B --x--> A, both transitions always taken."""
    machine = StateMachine("ping-pong", initial="A")
    a = machine.add_state("A", r"x")
    b = machine.add_state("B", r"x")
    machine.connect(a, [b])
    machine.connect(b, [a])
    return machine
