"""Classify identifier characters and whole-word match boundaries."""

from __future__ import annotations

__all__ = ["is_word_char", "is_whole_word"]


def is_word_char(char: str, *, extra_chars: str = "") -> bool:
    """Return ``True`` when ``char`` can appear inside an identifier.

    Membership follows Python's identifier continuation rules (letters, digits,
    underscore, connecting punctuation, combining marks) without the
    first-character restriction, so ``"7"`` is a word character. Characters in
    ``extra_chars`` are accepted as well.
    """

    if len(char) != 1:
        return False
    if char in extra_chars:
        return True
    return ("_" + char).isidentifier()


def is_whole_word(text: str, offset: int, length: int, *, extra_chars: str = "") -> bool:
    """Return ``True`` when ``text[offset:offset + length]`` is bounded as a whole word.

    Only edges made of word characters need a boundary: a match starting with
    punctuation places no constraint on the character before it.
    """

    if offset < 0 or length <= 0 or offset + length > len(text):
        return False

    end = offset + length
    if is_word_char(text[offset], extra_chars=extra_chars):
        if offset > 0 and is_word_char(text[offset - 1], extra_chars=extra_chars):
            return False

    if is_word_char(text[end - 1], extra_chars=extra_chars):
        if end < len(text) and is_word_char(text[end], extra_chars=extra_chars):
            return False

    return True
