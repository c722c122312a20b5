from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cursor import Cursor
    from .spans import Span


@dataclass(slots=True)
class SourceError(Exception):
    """An error located at a span of source text.

    The message is prefixed with the span location and followed by the
    first line of the offending text, when there is any.
    """

    span: Span
    message: str
    hint: str | None = None

    @classmethod
    def at(cls, cursor: Cursor, message: str, hint: str | None = None) -> SourceError:
        """Error at the cursor, covering the text shown by its context snippet."""
        snippet = cursor.context_snippet()
        return cls(span=cursor.span_of_length(len(snippet.encode("utf-8"))), message=message, hint=hint)

    def near(self) -> str | None:
        return self.span.display_text()

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        near = self.near()
        if near:
            base = f"{base} (near `{near}`)"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base


def _indent(text: str, prefix: str = "\t") -> str:
    lines = [line.rstrip() for line in text.splitlines()]
    return "\n".join(prefix + line if line else line for line in lines)


@dataclass(slots=True)
class ErrorList:
    """Errors collected while processing one or more sources."""

    _errors: list[Exception] = field(default_factory=list, init=False)

    def add(self, err: Exception | None) -> None:
        if err is not None:
            self._errors.append(err)

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def errors(self) -> list[Exception]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def error_text(self) -> str:
        # Each entry is numbered, continuation lines are indented under it.
        out: list[str] = []
        for n, err in enumerate(self._errors, start=1):
            out.append(_indent(f"[{n}] {err}").lstrip())
        return "\n\n".join(out)
