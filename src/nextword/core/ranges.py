"""Half-open word spans measured in absolute character offsets."""

from __future__ import annotations

import operator
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True)
class WordRange(Sequence[int]):
    """``[start, end)`` span of a word; unpacks like a ``(start, end)`` pair."""

    start: int
    end: int

    def __post_init__(self) -> None:
        start = _offset(self.start, "start")
        end = _offset(self.end, "end")
        if end < start:
            raise ValueError(f"WordRange end ({end}) precedes start ({start})")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: Any) -> Any:
        return self.to_tuple()[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_tuple())

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_caret(self) -> bool:
        """``True`` for an empty range, i.e. a bare caret position."""

        return self.start == self.end

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def fits(self, length: int) -> bool:
        """Whether the range lies inside a buffer of ``length`` characters."""

        return self.end <= length

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}

    def clamp(self, *, lower: int = 0, upper: int | None = None) -> WordRange:
        """Pull both ends into ``[lower, upper]``."""

        ceiling = self.end if upper is None else upper

        def pin(offset: int) -> int:
            return min(max(offset, lower), max(ceiling, lower))

        return WordRange(pin(self.start), pin(self.end))

    @classmethod
    def at(cls, offset: int, length: int) -> WordRange:
        return cls(offset, offset + length)

    @classmethod
    def from_value(cls, value: Any, *, fallback: tuple[int, int] | None = None) -> WordRange:
        """Build a range from a pair, a ``start``/``end`` mapping or object, or ``None``.

        Missing ends are taken from ``fallback``; without one they raise
        :class:`ValueError`. Values of any other shape raise :class:`TypeError`.
        """

        if isinstance(value, WordRange):
            return value
        start, end = _unpack(value)
        if start is None or end is None:
            if fallback is None:
                raise ValueError("WordRange needs both a start and an end")
            start = fallback[0] if start is None else start
            end = fallback[1] if end is None else end
        return cls(start, end)


def _offset(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"WordRange {label} must be an integer")
    try:
        number = operator.index(value)
    except TypeError as exc:
        raise ValueError(f"WordRange {label} must be an integer, got {value!r}") from exc
    if number < 0:
        raise ValueError(f"WordRange {label} must be non-negative (got {number})")
    return number


def _unpack(value: Any) -> tuple[Any, Any]:
    if value is None:
        return (None, None)
    if isinstance(value, Mapping):
        return (value.get("start"), value.get("end"))
    if isinstance(value, (str, bytes)):
        raise TypeError(f"Unsupported WordRange input: {value!r}")
    if isinstance(value, Sequence):
        if len(value) != 2:
            raise ValueError("WordRange sequences must have exactly two entries")
        return (value[0], value[1])
    if hasattr(value, "start") and hasattr(value, "end"):
        return (value.start, value.end)
    raise TypeError(f"Unsupported WordRange input: {value!r}")


__all__ = ["WordRange"]
