from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Protocol, Union

from .errors import SourceError
from .source import EMPTY_SOURCE, Source, trim_end, trim_start

if TYPE_CHECKING:
    from .cursor import Cursor


_LINE_BREAK_RE = re.compile(r"[\r\n]")

# Longest text shown by Span.display_text(), in characters.
_DISPLAY_CHARS = 30
_ELLIPSIS = "…"


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    Offsets are 0-based bytes; line/column are 1-based for user-facing messages.
    """

    offset: int
    line: int
    column: int


class HasSpan(Protocol):
    @property
    def span(self) -> Span: ...


Spanned = Union["Span", HasSpan]


def _span_of(v: object) -> Span:
    if isinstance(v, Span):
        return v
    # Tokens and AST nodes both carry .span.
    sp = getattr(v, "span", None)
    if not isinstance(sp, Span):
        raise TypeError(f"value has no span: {type(v)!r}")
    return sp


@dataclass(frozen=True, slots=True, repr=False)
class Span:
    """Half-open byte range [start, end) in a single source.

    ``indent`` is the indentation of the line at ``start``, as captured by the
    cursor that produced the span.
    """

    src: Source
    start: int
    end: int
    indent: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= self.src.size:
            raise ValueError(
                f"invalid span [{self.start}, {self.end}) over {self.src!s} ({self.src.size} bytes)"
            )
        if not self.src.is_boundary(self.start) or not self.src.is_boundary(self.end):
            raise ValueError(f"span [{self.start}, {self.end}) over {self.src!s} splits a character")

    @classmethod
    def empty(cls) -> Span:
        return _EMPTY_SPAN

    @staticmethod
    def merge(a: Span, b: Span) -> Span:
        """Smallest span covering both ``a`` and ``b``.

        The empty span is absorbed. The result keeps the indent of whichever
        span starts first, ``a`` on a tie.
        """
        if a.is_empty():
            return b
        if b.is_empty():
            return a
        if a.src != b.src:
            raise ValueError(f"cannot merge spans from {a.src!s} and {b.src!s}")
        if b.start < a.start:
            a, b = b, a
        return Span(a.src, a.start, max(a.end, b.end), a.indent)

    @classmethod
    def range_over(cls, items: Iterable[Spanned]) -> Span:
        """Span from the first to the last item; interior items are not inspected."""
        it = iter(items)
        first = next(it, None)
        if first is None:
            return cls.empty()
        last = None
        for last in it:
            pass
        if last is None:
            return _span_of(first)
        return cls.merge(_span_of(first), _span_of(last))

    def merged_with(self, other: Span) -> Span:
        return Span.merge(self, other)

    def is_empty(self) -> bool:
        return self.start == 0 and self.end == 0 and self.indent == 0 and self.src == EMPTY_SOURCE

    def length(self) -> int:
        return self.end - self.start

    def text(self) -> str:
        return self.src.slice(self.start, self.end)

    def up_to(self, other: Span) -> Span:
        """Span from this start up to the start of ``other``."""
        if other.src != self.src:
            raise ValueError(f"cannot span from {self.src!s} to {other.src!s}")
        if other.start < self.start:
            raise ValueError(f"span at {other.start} starts before {self.start}")
        return Span(self.src, self.start, other.start, self.indent)

    def to_end(self) -> Span:
        return Span(self.src, self.end, self.end, self.indent)

    def truncated(self, length: int) -> Span:
        if not 0 <= length <= self.length():
            raise ValueError(f"cannot truncate span of {self.length()} bytes to {length}")
        return Span(self.src, self.start, self.start + length, self.indent)

    def sub_range(self, start: int, end: int) -> Span:
        """Sub-span with ``start`` and ``end`` relative to this span."""
        if not 0 <= start <= end <= self.length():
            raise ValueError(f"invalid sub-range [{start}, {end}) of span with {self.length()} bytes")
        return Span(self.src, self.start + start, self.start + end, self.indent)

    def from_offset(self, offset: int) -> Span:
        if not 0 <= offset <= self.length():
            raise ValueError(f"invalid offset {offset} into span with {self.length()} bytes")
        return self.sub_range(offset, self.length())

    def contains(self, other: Span) -> bool:
        if self.is_empty() or other.is_empty() or other.src != self.src:
            return False
        return self.start <= other.start < self.end and other.end <= self.end

    def location(self) -> Cursor:
        """A cursor positioned at the span start, replayed from the source start."""
        from .cursor import Cursor

        cursor = Cursor(self.src)
        cursor.skip(self.start)
        return cursor

    def positions(self) -> tuple[Position, Position]:
        cursor = self.location()
        start = cursor.position()
        cursor.skip(self.length())
        return start, cursor.position()

    def display_text(self) -> str | None:
        """First line of the span text, trimmed and shortened for diagnostics.

        Returns None when nothing printable remains. An ellipsis marks each
        side where text was dropped.
        """
        full = self.text()
        m = _LINE_BREAK_RE.search(full)
        text = full[: m.start()] if m else full
        text = trim_end(text)
        suffix = _ELLIPSIS if len(text) < len(full) else ""

        trimmed = trim_start(text)
        prefix = _ELLIPSIS if len(trimmed) < len(text) else ""

        if len(trimmed) > _DISPLAY_CHARS:
            trimmed = trimmed[:_DISPLAY_CHARS]
            suffix = _ELLIPSIS

        if not trimmed:
            return None
        return f"{prefix}{trimmed}{suffix}"

    def error(self, message: str, hint: str | None = None) -> SourceError:
        return SourceError(span=self, message=message, hint=hint)

    def format(self) -> str:
        n = self.length()
        loc = str(self.location())
        if n > 0:
            return f"{loc}+{n}"
        return loc

    def format_offset(self) -> str:
        n = self.length()
        if n > 0:
            return f"{self.src}:{self.start}+{n}"
        return f"{self.src}:{self.start}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Span({self.format_offset()})"

    def _key(self) -> tuple[Source, int, int]:
        return (self.src, self.start, self.end)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return self._key() >= other._key()


_EMPTY_SPAN = Span(EMPTY_SOURCE, 0, 0, 0)
