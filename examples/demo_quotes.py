#!/usr/bin/env python3
"""
Demo: Quoted regions and nested parentheses.

This demonstrates:
- A two-state cyclic machine (START <-> QUOTED) built in code
- The same rewrite fed in small chunks, as a stream would arrive
- A counter-driven NestingGuard for balanced parentheses
- Static lint of a machine with an empty-matching pattern
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from regexflow import NestingGuard, StateMachine, rewrite, rewrite_chunks, upper_group
from regexflow.machine import upper
from regexflow.machine.analysis import lint_machine


def quote_machine() -> StateMachine:
    machine = StateMachine("quotes", initial="START")
    start = machine.add_state("START", r"<quote>", replacement="")
    quoted = machine.add_state("QUOTED", r"(?s)(.*?)</quote>", action=upper_group)
    machine.connect(start, quoted)
    machine.connect(quoted, start)
    return machine


def parens_machine() -> StateMachine:
    machine = StateMachine("parens", initial="OUTSIDE")
    outside = machine.add_state("OUTSIDE", r"\(")
    inside = machine.add_state("INSIDE", r"(?P<open>\()|(?P<close>\))|[^()]+", action=upper)
    machine.connect(outside, inside)
    machine.connect(inside, outside, guard=NestingGuard())
    return machine


def main():
    print("=" * 60)
    print("regexflow Demo: Quoted Regions")
    print("=" * 60)

    machine = quote_machine()
    text = "He said <quote>hello there</quote> and left."

    print(f"\nInput:  {text}")
    print(f"Output: {rewrite(text, machine)}")

    print("\n" + "=" * 60)
    print("Streaming in 3-character chunks...")
    print("=" * 60)

    chunks = [text[i:i + 3] for i in range(0, len(text), 3)]
    for piece in rewrite_chunks(chunks, machine):
        print(f"  released: {piece!r}")

    print("\n" + "=" * 60)
    print("Nested parentheses")
    print("=" * 60)

    text = "keep (this (and this) too) but not this (x)"
    print(f"\nInput:  {text}")
    print(f"Output: {rewrite(text, parens_machine())}")

    print("\n" + "=" * 60)
    print("Lint")
    print("=" * 60)

    stalling = StateMachine("stalling", initial="A")
    stalling.add_state("A", r"x*", replacement="-")
    for issue in lint_machine(stalling):
        print(f"  {issue}")

    print("\n✓ Demo complete")


if __name__ == "__main__":
    main()
