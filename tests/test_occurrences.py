"""Tests for occurrence enumeration and directional selection."""

from __future__ import annotations

import random

import pytest

from nextword.core.ranges import WordRange
from nextword.navigation.occurrences import find_all_occurrences, select_next, select_previous

SAMPLE = "cat dog cat bird cat"


def test_find_all_occurrences_returns_ascending_offsets() -> None:
    assert find_all_occurrences(SAMPLE, "cat") == (0, 8, 17)
    assert find_all_occurrences(SAMPLE, "bird") == (12,)


def test_find_all_occurrences_skips_embedded_matches() -> None:
    text = "cat concatenate cats _cat cat_ cat2 (cat)"
    assert find_all_occurrences(text, "cat") == (0, 37)


def test_find_all_occurrences_is_case_sensitive() -> None:
    assert find_all_occurrences("Cat cat CAT", "cat") == (4,)


def test_empty_word_has_no_occurrences() -> None:
    assert find_all_occurrences(SAMPLE, "") == ()


def test_missing_word_has_no_occurrences() -> None:
    assert find_all_occurrences(SAMPLE, "fish") == ()
    assert find_all_occurrences("", "fish") == ()


def test_scan_resumes_one_past_each_match() -> None:
    # Overlapping literal matches are each considered before filtering.
    assert find_all_occurrences("a.a.a", "a.a") == (0, 2)
    assert find_all_occurrences("+++", "++") == (0, 1)
    assert find_all_occurrences("aaa", "aa") == ()


def test_adjacent_occurrences_separated_by_punctuation() -> None:
    assert find_all_occurrences("x,x;x", "x") == (0, 2, 4)


def test_select_next_picks_first_occurrence_after_current_word() -> None:
    occurrences = (0, 8, 17)
    assert select_next(occurrences, WordRange(0, 3)) == 8
    assert select_next(occurrences, WordRange(8, 11)) == 17


def test_select_next_wraps_to_first_occurrence() -> None:
    assert select_next((0, 8, 17), WordRange(17, 20)) == 0


def test_select_next_from_range_between_occurrences() -> None:
    assert select_next((0, 8, 17), WordRange(4, 7)) == 8
    assert select_next((0, 8, 17), WordRange(18, 20)) == 0


def test_select_previous_picks_last_occurrence_before_current_word() -> None:
    occurrences = (0, 8, 17)
    assert select_previous(occurrences, WordRange(17, 20)) == 8
    assert select_previous(occurrences, WordRange(8, 11)) == 0


def test_select_previous_wraps_to_last_occurrence() -> None:
    assert select_previous((0, 8, 17), WordRange(0, 3)) == 17


def test_single_occurrence_never_selects_itself() -> None:
    assert select_next((5,), WordRange(5, 9)) is None
    assert select_previous((5,), WordRange(5, 9)) is None


def test_empty_occurrence_set_selects_nothing() -> None:
    assert select_next((), WordRange(0, 3)) is None
    assert select_previous((), WordRange(0, 3)) is None


def test_wrap_can_be_disabled() -> None:
    assert select_next((0, 8, 17), WordRange(17, 20), wrap=False) is None
    assert select_previous((0, 8, 17), WordRange(0, 3), wrap=False) is None
    assert select_next((0, 8, 17), WordRange(0, 3), wrap=False) == 8


_VOCABULARY = ("cat", "dog", "catalog", "_cat", "cat2", "bird", "do", "g", "x")
_SEPARATORS = (" ", "  ", "\n", ", ", ".", "(", ")", " + ")


def _generate_text(seed: int) -> str:
    rng = random.Random(seed)
    parts: list[str] = []
    for _ in range(rng.randint(1, 40)):
        parts.append(rng.choice(_VOCABULARY))
        parts.append(rng.choice(_SEPARATORS))
    return "".join(parts).strip()


@pytest.mark.parametrize("seed", range(25))
@pytest.mark.parametrize("word", ["cat", "dog", "x"])
def test_forward_and_backward_cycle_through_every_occurrence(seed: int, word: str) -> None:
    text = _generate_text(seed)
    occurrences = find_all_occurrences(text, word)
    count = len(occurrences)
    if count == 0:
        pytest.skip("word absent from generated text")

    for index, offset in enumerate(occurrences):
        current = WordRange.at(offset, len(word))
        forward = select_next(occurrences, current)
        backward = select_previous(occurrences, current)
        if count == 1:
            assert forward is None and backward is None
            continue
        assert forward == occurrences[(index + 1) % count]
        assert backward == occurrences[(index - 1) % count]

    if count > 1:
        visited = []
        current = WordRange.at(occurrences[0], len(word))
        for _ in range(count):
            found = select_next(occurrences, current)
            assert found is not None
            visited.append(found)
            current = WordRange.at(found, len(word))
        assert sorted(visited) == list(occurrences)
        assert visited[-1] == occurrences[0]
