from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cursor import Cursor
    from .spans import Span


logger = logging.getLogger(__name__)

DEFAULT_TAB_SIZE = 4


# str.isspace() also accepts the ASCII information separators, which are not
# Unicode White_Space.
_NOT_WHITESPACE = frozenset("\x1c\x1d\x1e\x1f")

# Indexes for new sources. EMPTY_SOURCE owns index 0.
_next_index = itertools.count(1).__next__


def is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in _NOT_WHITESPACE


def is_space(ch: str) -> bool:
    """Whitespace that does not break a line."""
    return ch != "\n" and ch != "\r" and is_whitespace(ch)


def trim_start(text: str) -> str:
    i = 0
    while i < len(text) and is_whitespace(text[i]):
        i += 1
    return text[i:]


def trim_end(text: str) -> str:
    i = len(text)
    while i > 0 and is_whitespace(text[i - 1]):
        i -= 1
    return text[:i]


def _char_width(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


@dataclass(frozen=True, slots=True, order=True)
class Source:
    """An immutable source text handle.

    Offsets into a source are UTF-8 byte offsets. Every source gets a unique
    ``index``, so two sources are equal only when they are the same handle.
    Distinct sources order by ``(name, size, index)``.
    """

    name: str
    text: str = field(compare=False, repr=False)
    tab_size: int = field(default=DEFAULT_TAB_SIZE, compare=False)
    size: int = field(init=False)
    index: int = field(default_factory=_next_index)
    data: bytes = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.tab_size < 1:
            raise ValueError(f"invalid tab size: {self.tab_size}")
        data = self.text.encode("utf-8")
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "size", len(data))

    def __str__(self) -> str:
        return self.name

    def is_ascii(self) -> bool:
        return self.size == len(self.text)

    def is_boundary(self, offset: int) -> bool:
        if offset < 0 or offset > self.size:
            return False
        if offset == self.size:
            return True
        # UTF-8 continuation bytes are 0b10xxxxxx.
        return self.data[offset] & 0xC0 != 0x80

    def char_at(self, offset: int) -> str | None:
        """Return the character starting at byte ``offset``, or None at the end."""
        if offset >= self.size:
            return None
        if not self.is_boundary(offset):
            raise ValueError(f"{self.name}: offset {offset} is not a character boundary")
        if self.is_ascii():
            return self.text[offset]
        width = _char_width(self.data[offset])
        return self.data[offset : offset + width].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        if self.is_ascii():
            return self.text[start:end]
        return self.data[start:end].decode("utf-8")

    def cursor(self) -> Cursor:
        from .cursor import Cursor

        return Cursor(self)

    def span(self) -> Span:
        from .spans import Span

        return Span(self, 0, self.size)

    def range(self, start: int, end: int) -> Span:
        from .spans import Span

        return Span(self, start, end)


EMPTY_SOURCE = Source("", "", index=0)


class SourceMap:
    """Creates sources with unique indexes and caches loaded files."""

    def __init__(self, *, tab_size: int = DEFAULT_TAB_SIZE) -> None:
        if tab_size < 1:
            raise ValueError(f"invalid tab size: {tab_size}")
        self.tab_size = tab_size
        self._lock = threading.Lock()
        self._files: dict[str, Source | Exception] = {}

    def new_source(self, name: str, text: str, *, tab_size: int | None = None) -> Source:
        src = Source(
            name,
            text,
            tab_size=self.tab_size if tab_size is None else tab_size,
        )
        logger.debug(f"new source {name!r} ({src.size} bytes, index {src.index})")
        return src

    def load_file(self, path: str | Path, *, encoding: str = "utf-8") -> Source:
        """Load a file as a source.

        Files are cached by resolved path, so loading the same file twice
        returns the same handle. Read failures are cached as well and raised
        again on every later load of that path.
        """
        key = str(Path(path).expanduser().resolve())
        with self._lock:
            cached = self._files.get(key)
            if isinstance(cached, Source):
                logger.debug(f"source cache hit for {key}")
                return cached
            if cached is not None:
                # Raise without the frames of earlier failed loads.
                raise cached.with_traceback(None)

            try:
                # No newline translation, offsets must match the file bytes.
                text = Path(key).read_bytes().decode(encoding)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(f"failed to load {key}: {exc}")
                self._files[key] = exc
                raise

            src = self.new_source(str(path), text)
            self._files[key] = src
            return src

    def __contains__(self, path: str | Path) -> bool:
        key = str(Path(path).expanduser().resolve())
        with self._lock:
            return isinstance(self._files.get(key), Source)
