"""
Unit tests for the match-processing adapter.
"""

import re

import pytest

from regexflow.buffer import TextBuffer
from regexflow.errors import ConfigurationError, ContractViolation
from regexflow.machine import (
    CallableGuard,
    StateMachine,
    StayGuard,
    transition_on_end_of_stream,
)
from regexflow.processing import MatchProcessorResult, TransitionProcessor


def _match(state, buffer, pos=0):
    return state.token.pattern.search(str(buffer), pos)


class TestTransitionProcessor:
    """Test processing of single matches."""

    def test_transition_hands_off(self, quote_machine):
        """A guard choosing another state stops scanning with the same token."""
        start = quote_machine.state("START")
        quoted = quote_machine.state("QUOTED")
        buffer = TextBuffer("a <quote>b</quote> c")

        result = TransitionProcessor().process(start, buffer, 0, _match(start, buffer))

        assert result == MatchProcessorResult(2, False, quoted)
        assert str(buffer) == "a b</quote> c"

    def test_stay_continues(self):
        machine = StateMachine()
        a = machine.add_state("A", "x", replacement="y")
        b = machine.add_state("B", "z")
        machine.connect(a, [b], guard=StayGuard())
        buffer = TextBuffer("axb")

        result = TransitionProcessor().process(a, buffer, 0, _match(a, buffer))

        assert result.continue_matching_with_same_token
        assert result.next_state is a
        assert result.first_modifiable_character_in_buffer == 2
        assert str(buffer) == "ayb"

    def test_terminal_state_always_continues(self):
        machine = StateMachine()
        end = machine.add_state("END", "x", replacement="")
        buffer = TextBuffer("xx")

        result = TransitionProcessor().process(end, buffer, 0, _match(end, buffer))

        assert result == MatchProcessorResult(0, True, end)
        assert str(buffer) == "x"

    def test_invalid_guard_result_leaves_buffer_unmodified(self):
        """A guard returning a non-candidate fails before the action runs."""
        machine = StateMachine()
        a = machine.add_state("A", "x", replacement="EDITED")
        b = machine.add_state("B", "y")
        c = machine.add_state("C", "z")
        machine.connect(a, [b], guard=CallableGuard(lambda current, match, candidates: c))
        buffer = TextBuffer("x")

        with pytest.raises(ConfigurationError, match="returned State\\('C'"):
            TransitionProcessor().process(a, buffer, 0, _match(a, buffer))

        assert str(buffer) == "x"

    def test_guard_returning_non_state(self):
        machine = StateMachine()
        a = machine.add_state("A", "x")
        b = machine.add_state("B", "y")
        machine.connect(a, [b], guard=CallableGuard(lambda current, match, candidates: "B"))
        buffer = TextBuffer("x")

        with pytest.raises(ConfigurationError):
            TransitionProcessor().process(a, buffer, 0, _match(a, buffer))

    def test_action_must_return_index(self):
        machine = StateMachine()
        a = machine.add_state("A", "x", action=lambda buffer, first, match: None)
        buffer = TextBuffer("x")

        with pytest.raises(ContractViolation, match="expected an index"):
            TransitionProcessor().process(a, buffer, 0, _match(a, buffer))

    def test_missing_arguments(self, quote_machine):
        start = quote_machine.state("START")
        buffer = TextBuffer("<quote>")
        match = _match(start, buffer)
        processor = TransitionProcessor()

        with pytest.raises(ContractViolation):
            processor.process(None, buffer, 0, match)
        with pytest.raises(ContractViolation):
            processor.process(start, None, 0, match)
        with pytest.raises(ContractViolation):
            processor.process(start, buffer, None, match)
        with pytest.raises(ContractViolation):
            processor.process(start, buffer, 0, None)

    def test_guard_lookup_is_used(self, quote_machine):
        """Runs substitute their own guard copies through the lookup."""
        start = quote_machine.state("START")
        buffer = TextBuffer("<quote>")
        processor = TransitionProcessor(guard_lookup=lambda state: StayGuard())

        result = processor.process(start, buffer, 0, _match(start, buffer))

        assert result.next_state is start


class TestProcessWithoutMatch:
    """Test the no-match path."""

    def test_default_handler_stays(self, quote_machine):
        start = quote_machine.state("START")
        buffer = TextBuffer("plain")

        result = TransitionProcessor().process_without_match(start, buffer, 3, True)

        assert result.next_state is start
        assert result.first_modifiable_character_in_buffer == 3
        assert str(buffer) == "plain"

    def test_end_of_stream_transition(self):
        machine = StateMachine()
        trailer = machine.add_state("TRAILER")
        body = machine.add_state(
            "BODY", "x", no_match_handler=transition_on_end_of_stream(trailer)
        )
        machine.connect(body, [trailer], guard=StayGuard())
        processor = TransitionProcessor()
        buffer = TextBuffer("")

        assert processor.process_without_match(body, buffer, 0, False).next_state is body
        assert processor.process_without_match(body, buffer, 0, True).next_state is trailer

    def test_handler_target_must_be_candidate(self):
        machine = StateMachine()
        other = machine.add_state("OTHER")
        body = machine.add_state(
            "BODY", "x", no_match_handler=transition_on_end_of_stream(other)
        )

        with pytest.raises(ConfigurationError, match="not a transition candidate"):
            TransitionProcessor().process_without_match(body, TextBuffer(""), 0, True)


class TestMatchBoundaries:
    """Matches found past first_modifiable are processed in place."""

    def test_position_follows_replacement_length(self):
        machine = StateMachine()
        a = machine.add_state("A", r"abcd", replacement="1234567")
        buffer = TextBuffer("__abcd__")
        match = re.compile("abcd").search(str(buffer), 1)

        result = TransitionProcessor().process(a, buffer, 1, match)

        assert str(buffer) == "__1234567__"
        assert result.first_modifiable_character_in_buffer == 9
