"""
Unit tests for static machine checks.
"""

import logging
import re

import pytest

from regexflow.machine import StateMachine
from regexflow.machine.analysis import can_match_empty, lint_machine, reachable_states
from regexflow.machine.token import NEVER_MATCHES


class TestCanMatchEmpty:
    """Test empty-match detection."""

    @pytest.mark.parametrize("regex,expected", [
        (r"a*", True),
        (r"(abc)?", True),
        (r"a|", True),
        (r"a+", False),
        (r"<quote>", False),
        (r"[0-9]{2,}", False),
    ])
    def test_patterns(self, regex, expected):
        assert can_match_empty(re.compile(regex)) is expected

    def test_never_matches(self):
        assert not can_match_empty(re.compile(NEVER_MATCHES))

    def test_back_reference(self):
        assert not can_match_empty(re.compile(r"(a)\1"))

    @pytest.mark.parametrize("regex", [r"\b", r"(?=a)", r"(?<!x)", r"^", r"$", r"(?m)^"])
    def test_zero_width_assertions(self, regex):
        assert can_match_empty(re.compile(regex))

    def test_flags_are_honoured(self):
        assert can_match_empty(re.compile("a *", re.VERBOSE))
        assert not can_match_empty(re.compile("a # (", re.VERBOSE))

    def test_word_boundary_around_literal(self):
        assert not can_match_empty(re.compile(r"\bfoo\b"))


class TestLintMachine:
    """Test lint findings."""

    def test_clean_cyclic_machine(self, quote_machine):
        assert lint_machine(quote_machine) == []

    def test_reachable_states(self, quote_machine):
        reachable = reachable_states(quote_machine, "START")
        assert reachable == {id(s) for s in quote_machine}

    def test_findings(self, caplog):
        machine = StateMachine("lint", initial="A")
        a = machine.add_state("A", r"x*")
        b = machine.add_state("B", r"b")
        machine.add_state("ORPHAN", r"o")
        machine.connect(a, b)

        with caplog.at_level(logging.WARNING):
            issues = lint_machine(machine)

        found = {(i.state, i.code, i.level) for i in issues}
        assert found == {
            ("A", "empty-match", "warning"),
            ("B", "terminal", "info"),
            ("ORPHAN", "unreachable", "warning"),
            ("ORPHAN", "terminal", "info"),
        }
        assert "can match the empty string" in caplog.text
        assert "cannot be reached" in caplog.text

    def test_reachability_skipped_without_initial(self):
        machine = StateMachine()
        machine.add_state("A", r"a")
        machine.add_state("B", r"b")

        codes = {i.code for i in lint_machine(machine)}

        assert "unreachable" not in codes

    def test_unknown_initial_state_is_reported(self):
        machine = StateMachine("m", initial="NOPE")
        machine.add_state("A", r"a")

        issues = lint_machine(machine)

        assert ("NOPE", "unknown-initial", "warning") in {(i.state, i.code, i.level) for i in issues}
        assert "unreachable" not in {i.code for i in issues}

    def test_empty_machine_with_unknown_initial(self):
        (issue,) = lint_machine(StateMachine("m", initial="NOPE"))

        assert issue.code == "unknown-initial"
        assert "Unknown state 'NOPE'" in issue.message

    def test_issue_str(self):
        machine = StateMachine(initial="A")
        machine.add_state("A", r"a")

        (issue,) = lint_machine(machine)

        assert str(issue) == "[info] A: state has no transitions and is never left once entered"
