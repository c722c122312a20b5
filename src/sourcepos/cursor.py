from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from .source import Source, is_space, is_whitespace
from .spans import Position, Span


# Characters shown by context_snippet().
_CONTEXT_CHARS = 11


def _utf8_len(ch: str) -> int:
    code = ord(ch)
    if code < 0x80:
        return 1
    if code < 0x800:
        return 2
    if code < 0x10000:
        return 3
    return 4


@dataclass(slots=True, order=True)
class Cursor:
    """A scan position over a source.

    ``offset`` is in UTF-8 bytes. ``line``, ``column`` and ``indent`` are
    0-based, with columns measured after tab expansion. ``indent`` is the
    width of the leading whitespace run of the current line seen so far.

    Cursors are plain values: use :meth:`copy` to fork a position, advancing
    the copy leaves the original untouched.
    """

    src: Source
    offset: int = 0
    line: int = 0
    column: int = 0
    indent: int = 0
    was_cr: bool = False

    def __post_init__(self) -> None:
        if not self.src.is_boundary(self.offset):
            raise ValueError(f"{self.src}: invalid cursor offset {self.offset}")

    def __str__(self) -> str:
        return f"{self.src}:{self.line + 1}:{self.column + 1}"

    def copy(self) -> Cursor:
        return replace(self)

    def position(self) -> Position:
        return Position(offset=self.offset, line=self.line + 1, column=self.column + 1)

    def at_end(self) -> bool:
        return self.offset >= self.src.size

    def is_line_start(self) -> bool:
        return self.column == 0

    def is_line_empty(self) -> bool:
        """True while only indentation has been read on the current line."""
        return self.column == self.indent

    def remaining(self) -> int:
        """Number of bytes left to consume."""
        return self.src.size - self.offset

    def remaining_text(self) -> str:
        return self.src.slice(self.offset, self.src.size)

    def span_of_length(self, length: int) -> Span:
        return Span(self.src, self.offset, self.offset + length, self.indent)

    def span_to(self, other: Cursor) -> Span:
        """Span between two cursors, from whichever comes first."""
        if other.src != self.src:
            raise ValueError(f"cannot span cursors over {self.src!s} and {other.src!s}")
        first, last = (self, other) if self.offset <= other.offset else (other, self)
        return Span(first.src, first.offset, last.offset, first.indent)

    def peek(self) -> str | None:
        return self.src.char_at(self.offset)

    def read(self) -> str | None:
        ch = self.peek()
        if ch is not None:
            self._advance(ch)
        return ch

    def skip(self, length: int) -> None:
        """Consume exactly ``length`` bytes."""
        if length < 0 or length > self.remaining():
            raise ValueError(f"cannot skip {length} bytes with {self.remaining()} remaining")
        end = self.offset + length
        if not self.src.is_boundary(end):
            raise ValueError(f"{self.src}: skip to {end} splits a character")
        for ch in self.src.slice(self.offset, end):
            self._advance(ch)

    def read_char(self, *chars: str) -> bool:
        ch = self.peek()
        if ch is not None and ch in chars:
            self._advance(ch)
            return True
        return False

    def read_if(self, prefix: str) -> bool:
        return self.read_any(prefix) != ""

    def read_any(self, *prefixes: str) -> str:
        """Consume the first of ``prefixes`` the remaining text starts with."""
        for prefix in prefixes:
            if prefix and self.src.data.startswith(prefix.encode("utf-8"), self.offset):
                for ch in prefix:
                    self._advance(ch)
                return prefix
        return ""

    def read_while(self, pred: Callable[[str], bool]) -> str:
        start = self.offset
        while True:
            ch = self.peek()
            if ch is None or not pred(ch):
                break
            self._advance(ch)
        return self.src.slice(start, self.offset)

    def skip_while(self, pred: Callable[[str], bool]) -> bool:
        return self.read_while(pred) != ""

    def skip_spaces(self) -> bool:
        return self.skip_while(is_space)

    def context_snippet(self) -> str:
        """A short run of text at the cursor for error messages.

        Stops at the first whitespace or line break and never returns more
        than a handful of characters.
        """
        chars: list[str] = []
        offset = self.offset
        while len(chars) < _CONTEXT_CHARS:
            ch = self.src.char_at(offset)
            if ch is None or is_whitespace(ch):
                break
            chars.append(ch)
            offset += _utf8_len(ch)
        return "".join(chars)

    def _advance(self, ch: str) -> None:
        # Must be computed before the column moves.
        is_indent = self.column == self.indent and is_space(ch)
        if ch == "\t":
            tab = self.src.tab_size
            self.column += tab - self.column % tab
        elif ch == "\r":
            self.line += 1
            self.column = 0
            self.indent = 0
        elif ch == "\n":
            # CRLF counts as a single line break.
            if not self.was_cr:
                self.line += 1
                self.column = 0
                self.indent = 0
        else:
            self.column += 1
        self.offset += _utf8_len(ch)
        self.was_cr = ch == "\r"
        if is_indent:
            self.indent = self.column
