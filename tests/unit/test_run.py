"""
Unit tests for MachineRun, the per-stream cursor.
"""

import pytest

from regexflow.buffer import TextBuffer
from regexflow.errors import ConfigurationError
from regexflow.machine import NestingGuard, StateMachine
from regexflow.processing import MachineRun


def _feed(run: MachineRun, text: str) -> TextBuffer:
    """Process every match in ``text`` the way the engine does."""
    buffer = TextBuffer(text)
    position = 0
    while True:
        match = buffer.search(run.token.pattern, position)
        if match is None:
            return buffer
        position = run.on_match(buffer, position, match).first_modifiable_character_in_buffer


class TestMachineRun:
    """Test active-state tracking."""

    def test_initial_state(self, quote_machine):
        run = quote_machine.start("START")

        assert run.active_state.name == "START"
        assert run.token is quote_machine.state("START").token
        assert run.transition_count == 0
        assert run.history == ["START"]

    def test_quote_scenario(self, quote_machine):
        run = quote_machine.start("START")
        buffer = _feed(run, "a <quote>b</quote> c")

        assert str(buffer) == "a B c"
        assert run.active_state.name == "START"
        assert run.transition_count == 2
        assert run.history == ["START", "QUOTED", "START"]

    def test_self_transition_only(self):
        """A state whose only candidate is itself never counts a transition."""
        machine = StateMachine()
        loop = machine.add_state("LOOP", "x", replacement="y")
        machine.connect(loop, [loop])
        run = machine.start("LOOP")

        buffer = _feed(run, "xxx")

        assert str(buffer) == "yyy"
        assert run.active_state is loop
        assert run.transition_count == 0

    @pytest.mark.parametrize("count", [1, 2, 5, 6])
    def test_ping_pong_parity(self, ping_pong_machine, count):
        """Each match switches A <-> B, so the final state follows parity."""
        run = ping_pong_machine.start()
        _feed(run, "x" * count)

        assert run.transition_count == count
        assert run.active_state.name == ("A" if count % 2 == 0 else "B")

    def test_terminal_state(self):
        machine = StateMachine()
        start = machine.add_state("START", "go")
        end = machine.add_state("END", "x", replacement="-")
        machine.connect(start, end)
        run = machine.start("START")

        buffer = _feed(run, "x go x x")

        assert str(buffer) == "x go - -"
        assert run.is_terminal
        assert run.transition_count == 1

    def test_reset(self, quote_machine):
        run = quote_machine.start("START")
        _feed(run, "<quote>")
        assert run.active_state.name == "QUOTED"

        run.reset()

        assert run.active_state.name == "START"
        assert run.transition_count == 0
        assert run.history == ["START"]

    def test_unknown_initial_state(self, quote_machine):
        with pytest.raises(ConfigurationError):
            quote_machine.start("NOPE")

    def test_repr(self, quote_machine):
        run = quote_machine.start("START")
        assert repr(run) == "MachineRun(machine='quotes', active_state='START', transitions=0)"


class TestRunLocalGuards:
    """Stateful guards are copied per run."""

    @pytest.fixture
    def nesting_machine(self):
        machine = StateMachine("nesting", initial="START")
        start = machine.add_state("START", r"\(")
        nested = machine.add_state("NESTED", r"(?P<open>\()|(?P<close>\))")
        machine.connect(start, nested)
        machine.connect(nested, start, guard=NestingGuard())
        return machine

    def test_runs_do_not_share_depth(self, nesting_machine):
        first = nesting_machine.start()
        second = nesting_machine.start()

        _feed(first, "((")
        assert first.active_state.name == "NESTED"

        _feed(second, "()")
        assert second.active_state.name == "START"

        definition_guard = nesting_machine.state("NESTED").transitions.guard
        assert definition_guard.depth == 0

    def test_reset_drops_guard_state(self, nesting_machine):
        run = nesting_machine.start()
        _feed(run, "((")

        run.reset()
        _feed(run, "()")

        assert run.active_state.name == "START"
