"""
Unit tests for transition guards.
"""

import re

import pytest

from regexflow.errors import ConfigurationError
from regexflow.machine import (
    CallableGuard,
    FirstCandidateGuard,
    GroupGuard,
    NestingGuard,
    StateMachine,
    StayGuard,
)
from regexflow.machine.guards import find_candidate


@pytest.fixture
def states():
    machine = StateMachine("guards")
    return (
        machine.add_state("START", "x"),
        machine.add_state("QUOTED", "y"),
        machine.add_state("COMMENT", "z"),
    )


class TestSimpleGuards:
    """Test stateless guards."""

    def test_stay_guard(self, states):
        start, quoted, comment = states
        match = re.search("x", "x")
        assert StayGuard().decide(start, match, [quoted, comment]) is start

    def test_first_candidate_guard(self, states):
        start, quoted, comment = states
        match = re.search("x", "x")
        assert FirstCandidateGuard().decide(start, match, [quoted, comment]) is quoted

    def test_first_candidate_guard_without_candidates(self, states):
        start, _, _ = states
        assert FirstCandidateGuard().decide(start, re.search("x", "x"), []) is start

    def test_stateless_guards_fork_to_themselves(self):
        guard = StayGuard()
        assert guard.fork() is guard

    def test_callable_guard(self, states):
        start, quoted, comment = states

        def pick_last(current, match, candidates):
            return candidates[-1]

        guard = CallableGuard(pick_last)
        assert guard.decide(start, re.search("x", "x"), [quoted, comment]) is comment
        assert repr(guard) == "CallableGuard(pick_last)"

    def test_callable_guard_requires_callable(self):
        with pytest.raises(ConfigurationError, match="not callable"):
            CallableGuard("first")

    def test_find_candidate(self, states):
        _, quoted, comment = states
        assert find_candidate([quoted, comment], "COMMENT") is comment

        with pytest.raises(ConfigurationError, match="not a transition candidate"):
            find_candidate([quoted], "START")


class TestGroupGuard:
    """Test content-driven branching on named groups."""

    PATTERN = re.compile(r"(?P<quote><q>)|(?P<comment><!--)")

    def test_picks_candidate_by_group(self, states):
        start, quoted, comment = states
        guard = GroupGuard({"quote": "QUOTED", "comment": "COMMENT"})

        assert guard.decide(start, self.PATTERN.search("a <q>"), [quoted, comment]) is quoted
        assert guard.decide(start, self.PATTERN.search("a <!--"), [quoted, comment]) is comment

    def test_stays_when_no_group_matched(self, states):
        start, quoted, comment = states
        guard = GroupGuard({"quote": "QUOTED"})

        assert guard.decide(start, self.PATTERN.search("<!--"), [quoted, comment]) is start

    def test_unknown_group(self, states):
        start, quoted, comment = states
        guard = GroupGuard({"missing": "QUOTED"})

        with pytest.raises(ConfigurationError, match="unknown group 'missing'"):
            guard.decide(start, self.PATTERN.search("<q>"), [quoted, comment])

    def test_target_not_a_candidate(self, states):
        start, quoted, comment = states
        guard = GroupGuard({"quote": "START"})

        with pytest.raises(ConfigurationError):
            guard.decide(start, self.PATTERN.search("<q>"), [quoted, comment])


class TestNestingGuard:
    """Test counter-driven branching."""

    PATTERN = re.compile(r"(?P<open>\()|(?P<close>\))|[^()]+")

    def _decide(self, guard, state, candidates, text):
        return guard.decide(state, self.PATTERN.match(text), candidates)

    def test_close_at_depth_zero_exits(self, states):
        start, quoted, _ = states
        guard = NestingGuard()

        assert self._decide(guard, quoted, [start], ")") is start

    def test_nested_close_stays(self, states):
        start, quoted, _ = states
        guard = NestingGuard()

        assert self._decide(guard, quoted, [start], "(") is quoted
        assert guard.depth == 1
        assert self._decide(guard, quoted, [start], "abc") is quoted
        assert guard.depth == 1
        assert self._decide(guard, quoted, [start], ")") is quoted
        assert guard.depth == 0
        assert self._decide(guard, quoted, [start], ")") is start

    def test_exit_to_named_candidate(self, states):
        start, quoted, comment = states
        guard = NestingGuard(exit_to="COMMENT")

        assert self._decide(guard, quoted, [start, comment], ")") is comment

    def test_fork_resets_depth(self):
        guard = NestingGuard("o", "c", exit_to="START")
        guard.depth = 3

        copy = guard.fork()

        assert copy is not guard
        assert copy.depth == 0
        assert (copy.open_group, copy.close_group, copy.exit_to) == ("o", "c", "START")
