"""Enumerate whole-word occurrences and pick the next one in either direction."""

from __future__ import annotations

from bisect import bisect_left
from typing import Sequence

from ..core.ranges import WordRange
from .word_boundary import is_whole_word

__all__ = ["find_all_occurrences", "select_next", "select_previous"]


def find_all_occurrences(text: str, word: str, *, extra_chars: str = "") -> tuple[int, ...]:
    """Return the ascending start offsets of every whole-word ``word`` in ``text``.

    Matching is literal and case-sensitive. Scanning resumes one character past
    each raw match so overlapping candidates are still considered; only the
    whole-word filter discards them.
    """

    if not word:
        return ()

    length = len(word)
    occurrences: list[int] = []
    position = text.find(word)
    while position != -1:
        if is_whole_word(text, position, length, extra_chars=extra_chars):
            occurrences.append(position)
        position = text.find(word, position + 1)
    return tuple(occurrences)


def select_next(
    occurrences: Sequence[int],
    current: WordRange,
    *,
    wrap: bool = True,
) -> int | None:
    """Return the first occurrence at or after ``current.end``, wrapping to the top.

    When wrapping, only occurrences strictly before ``current.start`` qualify,
    so a lone occurrence never selects itself.
    """

    if not occurrences:
        return None
    index = bisect_left(occurrences, current.end)
    if index < len(occurrences):
        return occurrences[index]
    if wrap and occurrences[0] < current.start:
        return occurrences[0]
    return None


def select_previous(
    occurrences: Sequence[int],
    current: WordRange,
    *,
    wrap: bool = True,
) -> int | None:
    """Return the last occurrence before ``current.start``, wrapping to the bottom."""

    if not occurrences:
        return None
    index = bisect_left(occurrences, current.start) - 1
    if index >= 0:
        return occurrences[index]
    if wrap and occurrences[-1] > current.start:
        return occurrences[-1]
    return None
