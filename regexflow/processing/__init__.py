"""
Match processing - the adapter between a buffering engine and a state machine.

Components:
    - processor: TransitionProcessor, which resolves the next state for a
      match, applies the token action and reports whether to hand off
    - run: MachineRun, the per-stream cursor (active state, position)
"""

from regexflow.processing.processor import (
    MatchProcessorResult,
    NoMatchResult,
    TransitionProcessor,
)
from regexflow.processing.run import MachineRun

__all__ = [
    "MatchProcessorResult",
    "NoMatchResult",
    "TransitionProcessor",
    "MachineRun",
]
