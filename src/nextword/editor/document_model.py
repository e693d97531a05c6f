"""Document, selection and snapshot value types shared by the editor and the actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..core.ranges import WordRange


@dataclass(slots=True)
class DocumentMetadata:
    """Where the document came from and how it was encoded on disk."""

    path: Optional[Path] = None
    encoding: str = "utf-8"
    newline: str = "\n"


@dataclass(slots=True)
class SelectionRange:
    """Selected span as reported by the editor; ``start == end`` is a bare caret."""

    start: int = 0
    end: int = 0

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        """Return the selection as a tuple for serialization."""

        return (self.start, self.end)

    def to_word_range(self) -> WordRange:
        return WordRange(min(self.start, self.end), max(self.start, self.end))

    @classmethod
    def from_value(cls, value: Any) -> SelectionRange:
        if isinstance(value, SelectionRange):
            return cls(value.start, value.end)
        span = WordRange.from_value(value)
        return cls(span.start, span.end)


@dataclass(slots=True, frozen=True)
class EditorSnapshot:
    """Immutable view of the editor taken at the start of a navigation request."""

    text: str
    caret: int
    selection: SelectionRange | None
    version_id: int

    @property
    def has_selection(self) -> bool:
        return self.selection is not None and not self.selection.is_empty


@dataclass(slots=True)
class DocumentState:
    """Editor buffer with its caret, selection and a counter bumped on every edit."""

    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    selection: SelectionRange = field(default_factory=SelectionRange)
    caret: int = 0
    version_id: int = 1

    def update_text(self, new_text: str) -> None:
        self.text = new_text
        self.version_id += 1
