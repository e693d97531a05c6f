"""Whole-word occurrence search and cyclic navigation."""

from .errors import InvalidDirectionError, InvalidRangeError, NavigationError
from .navigator import Direction, NavigationOutcome, NavigationResult, navigate
from .occurrences import find_all_occurrences, select_next, select_previous
from .target import resolve_target_range
from .word_boundary import is_whole_word, is_word_char

__all__ = [
    "Direction",
    "InvalidDirectionError",
    "InvalidRangeError",
    "NavigationError",
    "NavigationOutcome",
    "NavigationResult",
    "find_all_occurrences",
    "is_whole_word",
    "is_word_char",
    "navigate",
    "resolve_target_range",
    "select_next",
    "select_previous",
]
