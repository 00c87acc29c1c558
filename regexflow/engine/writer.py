"""
ModifyingWriter - a text sink that rewrites everything written through it.

Text written to the writer is appended to a look-ahead buffer, run through a
modifier, and whatever the modifier marks as final is written to the wrapped
target. Closing signals end of stream and flushes the rest.

``close(close_target=False)`` finishes the rewrite without closing the
target, so several writers can take turns on one underlying stream:

    ```python
    out = io.StringIO()
    part1 = ModifyingWriter(out, RegexModifier("abcd", replacement="1234"))
    part1.write("mod ")
    part1.close(close_target=False)
    out.write("orig ")
    ```
"""

import logging
from typing import TextIO

from regexflow.buffer import TextBuffer
from regexflow.errors import require
from regexflow.engine.modifier import StatefulModifier

logger = logging.getLogger(__name__)


class ModifyingWriter:
    """
    Write-through rewriter around a text stream.

    Attributes:
        target: Stream receiving the rewritten text
        modifier: Engine deciding what to rewrite and what to release
        chars_written: Characters written to ``target`` so far
        closed: True after ``close()``
    """

    def __init__(self, target: TextIO, modifier: StatefulModifier):
        self.target = require(target, "target")
        self.modifier = require(modifier, "modifier")
        self._buffer = TextBuffer()
        self._first_modifiable = 0
        self.chars_written = 0
        self.closed = False

    def _pump(self, end_of_stream: bool) -> None:
        after = self.modifier.modify(self._buffer, self._first_modifiable, end_of_stream)
        released = self._buffer.drop_prefix(after.number_of_chars_to_release)
        self._first_modifiable = (
            after.first_modifiable_character_in_buffer - after.number_of_chars_to_release
        )
        if released:
            self.target.write(released)
            self.chars_written += len(released)

    def write(self, text: str) -> int:
        """
        Append ``text`` and write out whatever became final.

        Returns:
            int: Number of characters accepted

        Raises:
            ValueError: If the writer is closed
        """
        if self.closed:
            raise ValueError("I/O operation on closed ModifyingWriter")
        if text:
            self._buffer.append(text)
            self._pump(end_of_stream=False)
        return len(text)

    def flush(self) -> None:
        """Flush the target. Buffered look-ahead stays buffered until close."""
        self.target.flush()

    def close(self, close_target: bool = True) -> None:
        """
        Signal end of stream and write out the remaining buffer.

        Args:
            close_target: Also close the wrapped target
        """
        if self.closed:
            return
        self._pump(end_of_stream=True)
        self.closed = True
        self.target.flush()
        if close_target:
            self.target.close()
        logger.debug(f"ModifyingWriter closed (close_target={close_target})")

    def __enter__(self) -> "ModifyingWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
