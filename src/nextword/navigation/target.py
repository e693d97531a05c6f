"""Resolve the word a navigation request starts from."""

from __future__ import annotations

from typing import Any

from ..core.ranges import WordRange
from .word_boundary import is_word_char

__all__ = ["resolve_target_range"]


def resolve_target_range(
    text: str,
    caret: int,
    selection: Any | None = None,
    *,
    extra_chars: str = "",
) -> WordRange | None:
    """Return the range of the word under ``caret`` or the active ``selection``.

    A non-empty selection wins and is used verbatim. Otherwise the word touching
    the caret is expanded through word characters; a caret resting just after a
    word (on punctuation, whitespace or the end of the buffer) picks that word.
    """

    length = len(text)
    if selection is not None:
        span = WordRange.from_value(selection).clamp(upper=length)
        if not span.is_caret:
            return span

    if not text:
        return None

    start = max(0, min(int(caret), length))
    if start > 0 and (start == length or not is_word_char(text[start], extra_chars=extra_chars)):
        if is_word_char(text[start - 1], extra_chars=extra_chars):
            start -= 1

    while start > 0 and is_word_char(text[start - 1], extra_chars=extra_chars):
        start -= 1

    end = start
    while end < length and is_word_char(text[end], extra_chars=extra_chars):
        end += 1

    if start < end:
        return WordRange(start, end)
    return None
