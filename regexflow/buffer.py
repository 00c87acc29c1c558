"""
Mutable character buffer shared by the buffering engine and token actions.

Python strings are immutable, so the look-ahead window is wrapped in a small
object that token actions can edit in place. Every edit returns the index just
past the edited region, which is what the engines use as the new first
modifiable character.

Usage:
    ```python
    buffer = TextBuffer("a <quote>b</quote> c")
    end = buffer.replace(2, 9, "")
    # str(buffer) == "a b</quote> c", end == 2
    ```
"""

import re
from typing import Optional


class TextBuffer:
    """
    Growable, editable sequence of characters.

    Attributes:
        text: Current buffer content
    """

    __slots__ = ("text",)

    def __init__(self, text: str = ""):
        self.text = text

    def append(self, text: str) -> None:
        """Append newly read input to the end of the buffer."""
        self.text += text

    def replace(self, start: int, end: int, replacement: str) -> int:
        """
        Replace ``text[start:end]`` with ``replacement``.

        Args:
            start: First index of the region
            end: Index just past the region
            replacement: New content

        Returns:
            int: Index just past the inserted replacement

        Raises:
            IndexError: If the region lies outside the buffer
        """
        if not 0 <= start <= end <= len(self.text):
            raise IndexError(
                f"Region [{start}:{end}] outside buffer of length {len(self.text)}"
            )
        self.text = self.text[:start] + replacement + self.text[end:]
        return start + len(replacement)

    def delete(self, start: int, end: int) -> int:
        """Remove ``text[start:end]``. Returns ``start``."""
        return self.replace(start, end, "")

    def insert(self, index: int, text: str) -> int:
        """Insert ``text`` at ``index``. Returns the index just past it."""
        return self.replace(index, index, text)

    def drop_prefix(self, count: int) -> str:
        """
        Remove and return the first ``count`` characters.

        Used by the engines to release characters that can no longer change.
        """
        released, self.text = self.text[:count], self.text[count:]
        return released

    def search(self, pattern: "re.Pattern[str]", pos: int = 0) -> Optional["re.Match[str]"]:
        """Search for ``pattern`` starting at ``pos``."""
        return pattern.search(self.text, pos)

    def __len__(self) -> int:
        return len(self.text)

    def __getitem__(self, item):
        return self.text[item]

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        preview = self.text if len(self.text) <= 40 else self.text[:37] + "..."
        return f"TextBuffer({preview!r})"
