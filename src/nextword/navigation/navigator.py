"""Orchestrate a single whole-word navigation request over a text snapshot."""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.ranges import WordRange
from .errors import InvalidDirectionError, InvalidRangeError
from .occurrences import find_all_occurrences, select_next, select_previous

LOGGER = logging.getLogger(__name__)

__all__ = ["Direction", "NavigationOutcome", "NavigationResult", "navigate"]

_DIRECTION_ALIASES = {
    "forward": "forward",
    "next": "forward",
    "backward": "backward",
    "previous": "backward",
    "prev": "backward",
}


class Direction(Enum):
    """Direction in which the navigator walks through occurrences."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @classmethod
    def from_value(cls, value: Any) -> Direction:
        """Coerce ``value`` (a member or a name such as ``"next"``) into a direction."""

        if isinstance(value, Direction):
            return value
        key = str(value or "").strip().lower()
        normalized = _DIRECTION_ALIASES.get(key)
        if normalized is None:
            raise InvalidDirectionError(f"Unknown navigation direction: {value!r}")
        return cls(normalized)


class NavigationOutcome(Enum):
    """How a navigation request concluded."""

    FOUND = "found"
    NO_TARGET = "no_target"
    NOT_FOUND = "not_found"
    NO_OTHER_OCCURRENCE = "no_other_occurrence"


@dataclass(slots=True, frozen=True)
class NavigationResult:
    """Selected occurrence plus its 1-based position among all occurrences."""

    found_offset: int | None
    ordinal: int
    total: int
    outcome: NavigationOutcome

    @property
    def found(self) -> bool:
        return self.found_offset is not None

    @property
    def hint_text(self) -> str:
        """Return the ``ordinal/total`` indicator shown next to the selection."""

        return f"{self.ordinal}/{self.total}"

    def target_range(self, word: str) -> WordRange | None:
        """Return the span to select for ``word``, or ``None`` when nothing was found."""

        if self.found_offset is None:
            return None
        return WordRange.at(self.found_offset, len(word))

    def to_dict(self) -> dict[str, Any]:
        return {
            "found_offset": self.found_offset,
            "ordinal": self.ordinal,
            "total": self.total,
            "outcome": self.outcome.value,
        }

    @classmethod
    def empty(cls, outcome: NavigationOutcome, *, total: int = 0) -> NavigationResult:
        return cls(found_offset=None, ordinal=0, total=total, outcome=outcome)


def navigate(
    text: str,
    word: str,
    current: Any,
    direction: Direction | str = Direction.FORWARD,
    *,
    extra_chars: str = "",
    wrap: bool = True,
) -> NavigationResult:
    """Find the occurrence of ``word`` adjacent to ``current`` in ``direction``.

    ``current`` is the range of the word the caret sits on; it may be a
    :class:`WordRange` or anything :meth:`WordRange.from_value` accepts. A range
    reaching past the end of ``text`` raises :class:`InvalidRangeError`.
    """

    resolved_direction = Direction.from_value(direction)
    if not word:
        return NavigationResult.empty(NavigationOutcome.NO_TARGET)

    span = WordRange.from_value(current)
    if not span.fits(len(text)):
        raise InvalidRangeError(span.start, span.end, len(text))

    occurrences = find_all_occurrences(text, word, extra_chars=extra_chars)
    if not occurrences:
        LOGGER.debug("No whole-word occurrence of %r in %d chars", word, len(text))
        return NavigationResult.empty(NavigationOutcome.NOT_FOUND)

    if resolved_direction is Direction.FORWARD:
        found = select_next(occurrences, span, wrap=wrap)
    else:
        found = select_previous(occurrences, span, wrap=wrap)

    total = len(occurrences)
    if found is None:
        return NavigationResult.empty(NavigationOutcome.NO_OTHER_OCCURRENCE, total=total)

    ordinal = bisect_left(occurrences, found) + 1
    LOGGER.debug(
        "Navigated %s from %s to offset %d (%d/%d)",
        resolved_direction.value,
        span.to_tuple(),
        found,
        ordinal,
        total,
    )
    return NavigationResult(
        found_offset=found,
        ordinal=ordinal,
        total=total,
        outcome=NavigationOutcome.FOUND,
    )
