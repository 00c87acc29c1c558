"""
Reference buffering engine and text drivers.

Components:
    - modifier: StatefulModifier (drives a MachineRun over a growing buffer)
      and RegexModifier (single-token rewrite)
    - writer: ModifyingWriter, a text sink that rewrites what is written to it
"""

from regexflow.engine.modifier import (
    DEFAULT_LOOK_AHEAD,
    DEFAULT_MAX_MATCH_LENGTH,
    AfterModification,
    RegexModifier,
    StatefulModifier,
)
from regexflow.engine.writer import ModifyingWriter

__all__ = [
    "DEFAULT_LOOK_AHEAD",
    "DEFAULT_MAX_MATCH_LENGTH",
    "AfterModification",
    "RegexModifier",
    "StatefulModifier",
    "ModifyingWriter",
]
