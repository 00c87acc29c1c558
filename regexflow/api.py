"""
High-level Python API for regexflow.

``rewrite`` runs a whole string through a machine; ``rewrite_chunks`` does
the same for an iterable of chunks and yields output as soon as it is final,
so large inputs never need to be held in memory at once.
"""

from typing import Iterable, Iterator, Optional

from regexflow.buffer import TextBuffer
from regexflow.engine.modifier import DEFAULT_LOOK_AHEAD, DEFAULT_MAX_MATCH_LENGTH, StatefulModifier
from regexflow.machine.definition import StateMachine, StateRef


def rewrite_chunks(
    chunks: Iterable[str],
    machine: StateMachine,
    initial: Optional[StateRef] = None,
    max_match_length: int = DEFAULT_MAX_MATCH_LENGTH,
    look_ahead: int = DEFAULT_LOOK_AHEAD,
) -> Iterator[str]:
    """
    Rewrite a stream of text chunks.

    Args:
        chunks: Input pieces, in order
        machine: Machine definition (shared, not modified)
        initial: Start state (default: ``machine.initial``)
        max_match_length: Longest match the engine waits for
        look_ahead: Characters that must follow a match before it is final

    Yields:
        str: Rewritten text, in order, as it becomes final

    Example:
        ```python
        with open("in.txt") as f:
            for piece in rewrite_chunks(iter(lambda: f.read(8192), ""), machine):
                sys.stdout.write(piece)
        ```
    """
    modifier = StatefulModifier(
        machine, initial, max_match_length=max_match_length, look_ahead=look_ahead
    )
    buffer = TextBuffer()
    first_modifiable = 0

    def step(end_of_stream: bool) -> str:
        nonlocal first_modifiable
        after = modifier.modify(buffer, first_modifiable, end_of_stream)
        released = buffer.drop_prefix(after.number_of_chars_to_release)
        first_modifiable = after.first_modifiable_character_in_buffer - after.number_of_chars_to_release
        return released

    for chunk in chunks:
        if not chunk:
            continue
        buffer.append(chunk)
        released = step(end_of_stream=False)
        if released:
            yield released

    released = step(end_of_stream=True)
    if released:
        yield released


def rewrite(
    text: str,
    machine: StateMachine,
    initial: Optional[StateRef] = None,
) -> str:
    """
    Rewrite ``text`` with ``machine`` in one go.

    Example:
        ```python
        rewrite("a <quote>b</quote> c", machine, "START")  # "a B c"
        ```
    """
    return "".join(rewrite_chunks([text], machine, initial))


__all__ = ["rewrite", "rewrite_chunks"]
