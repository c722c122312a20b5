from __future__ import annotations

from .cursor import Cursor
from .errors import ErrorList, SourceError
from .source import (
    DEFAULT_TAB_SIZE,
    EMPTY_SOURCE,
    Source,
    SourceMap,
    is_space,
    is_whitespace,
    trim_end,
    trim_start,
)
from .spans import HasSpan, Position, Span

__all__ = [
    "Cursor",
    "DEFAULT_TAB_SIZE",
    "EMPTY_SOURCE",
    "ErrorList",
    "HasSpan",
    "Position",
    "Source",
    "SourceError",
    "SourceMap",
    "Span",
    "is_space",
    "is_whitespace",
    "trim_end",
    "trim_start",
]
