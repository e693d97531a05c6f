"""Editor actions jumping to the next/previous occurrence of the word at the caret."""

from __future__ import annotations

import logging
from abc import ABC
from typing import ClassVar

from ..navigation.navigator import Direction, NavigationResult, navigate
from ..navigation.target import resolve_target_range
from ..services.settings import Settings
from ..services.telemetry import NavigationEvent, emit
from .editor_widget import EditorWidget
from .occurrence_hint import OccurrenceHintPresenter

LOGGER = logging.getLogger(__name__)

NAVIGATION_EVENT = "word_navigation"


class WordNavigationAction(ABC):
    """Shared flow for the next/previous word actions.

    The action reads one snapshot of the editor, resolves the target word from
    the selection or the caret, asks the navigator for the adjacent occurrence
    and then selects it, scrolls to it and shows the occurrence hint.
    """

    action_id: ClassVar[str]
    title: ClassVar[str]
    direction: ClassVar[Direction]

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        hint_presenter: OccurrenceHintPresenter | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._hint_presenter = hint_presenter

    @property
    def settings(self) -> Settings:
        return self._settings

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings
        if self._hint_presenter is not None:
            self._hint_presenter.update_settings(settings)

    def is_enabled(self, editor: EditorWidget | None) -> bool:
        return editor is not None

    def perform(self, editor: EditorWidget | None) -> NavigationResult | None:
        """Run the action against ``editor``; returns ``None`` when there is no word to search."""

        if editor is None:
            return None

        snapshot = editor.snapshot()
        extra_chars = self._settings.extra_word_chars
        target = resolve_target_range(
            snapshot.text,
            snapshot.caret,
            snapshot.selection,
            extra_chars=extra_chars,
        )
        if target is None:
            LOGGER.debug("%s: no word at caret %d", self.action_id, snapshot.caret)
            return None
        word = target.slice(snapshot.text)
        if not word:
            return None

        result = navigate(
            snapshot.text,
            word,
            target,
            self.direction,
            extra_chars=extra_chars,
            wrap=self._settings.wrap_around,
        )

        found_range = result.target_range(word)
        if found_range is not None:
            editor.set_selection(found_range, caret=found_range.end)
            editor.scroll_to_caret()
            if self._hint_presenter is not None:
                self._hint_presenter.show(result.ordinal, result.total, found_range.start)

        self._record(result, word, from_selection=snapshot.has_selection)
        return result

    def _record(self, result: NavigationResult, word: str, *, from_selection: bool) -> None:
        LOGGER.debug(
            "%s: %r -> %s (%s)",
            self.action_id,
            word,
            result.found_offset,
            result.outcome.value,
        )
        if not self._settings.telemetry_enabled:
            return
        event = NavigationEvent(
            direction=self.direction.value,
            outcome=result.outcome.value,
            word_length=len(word),
            found_offset=result.found_offset,
            ordinal=result.ordinal,
            total=result.total,
            from_selection=from_selection,
        )
        emit(NAVIGATION_EVENT, event.to_payload())


class NextWordAction(WordNavigationAction):
    """Select the next whole-word occurrence, wrapping to the top of the buffer."""

    action_id = "nextword.next"
    title = "Next Word Occurrence"
    direction = Direction.FORWARD


class PreviousWordAction(WordNavigationAction):
    """Select the previous whole-word occurrence, wrapping to the bottom of the buffer."""

    action_id = "nextword.previous"
    title = "Previous Word Occurrence"
    direction = Direction.BACKWARD


def build_actions(
    *,
    settings: Settings | None = None,
    hint_presenter: OccurrenceHintPresenter | None = None,
) -> tuple[NextWordAction, PreviousWordAction]:
    """Create both navigation actions sharing one settings object and hint presenter."""

    return (
        NextWordAction(settings=settings, hint_presenter=hint_presenter),
        PreviousWordAction(settings=settings, hint_presenter=hint_presenter),
    )


__all__ = [
    "NAVIGATION_EVENT",
    "NextWordAction",
    "PreviousWordAction",
    "WordNavigationAction",
    "build_actions",
]
