"""Tests for the next/previous word editor actions."""

from __future__ import annotations

import pytest

from nextword.editor.actions import (
    NAVIGATION_EVENT,
    NextWordAction,
    PreviousWordAction,
    build_actions,
)
from nextword.editor.editor_widget import EditorWidget
from nextword.editor.occurrence_hint import OccurrenceHintPresenter
from nextword.navigation import NavigationOutcome
from nextword.services.settings import Settings
from nextword.services.telemetry import (
    InMemoryTelemetrySink,
    register_event_listener,
    unregister_event_listener,
)

SAMPLE = "cat dog cat bird cat"


@pytest.fixture
def editor() -> EditorWidget:
    widget = EditorWidget()
    widget.set_text(SAMPLE)
    widget.set_caret(1)
    return widget


@pytest.fixture
def telemetry_sink():
    sink = InMemoryTelemetrySink()
    register_event_listener(NAVIGATION_EVENT, sink)
    yield sink
    unregister_event_listener(NAVIGATION_EVENT, sink)


def _actions(editor: EditorWidget, scheduler, settings: Settings | None = None):
    settings = settings or Settings()
    presenter = OccurrenceHintPresenter(editor, scheduler=scheduler, settings=settings)
    return build_actions(settings=settings, hint_presenter=presenter)


def test_next_cycles_through_every_occurrence(editor, manual_scheduler) -> None:
    next_action, _ = _actions(editor, manual_scheduler)

    visited = []
    for _ in range(3):
        result = next_action.perform(editor)
        assert result is not None and result.found
        visited.append((editor.selection_range().as_tuple(), result.hint_text))

    assert visited == [((8, 11), "2/3"), ((17, 20), "3/3"), ((0, 3), "1/3")]
    assert editor.caret_offset() == 3


def test_previous_wraps_to_last_occurrence(editor, manual_scheduler) -> None:
    _, previous_action = _actions(editor, manual_scheduler)

    result = previous_action.perform(editor)

    assert result is not None
    assert result.found_offset == 17
    assert (result.ordinal, result.total) == (3, 3)
    assert editor.selection_range().as_tuple() == (17, 20)
    assert editor.caret_offset() == 20


def test_found_occurrence_is_scrolled_to_and_hinted(editor, manual_scheduler) -> None:
    next_action, _ = _actions(editor, manual_scheduler)

    next_action.perform(editor)

    assert editor.scroll_target == 11
    assert editor.hint_text == " 2/3 "
    assert editor.hint_anchor == 8

    manual_scheduler.timers[-1].fire()
    assert editor.hint_text is None


def test_each_navigation_replaces_the_hint(editor, manual_scheduler) -> None:
    next_action, previous_action = _actions(editor, manual_scheduler)

    next_action.perform(editor)
    previous_action.perform(editor)

    assert editor.hint_text == " 1/3 "
    assert editor.hint_anchor == 0
    assert manual_scheduler.timers[0].cancelled
    assert not manual_scheduler.timers[1].cancelled


def test_selection_is_used_as_the_target_word(manual_scheduler) -> None:
    widget = EditorWidget()
    widget.set_text("a.b x a.b")
    widget.set_selection((0, 3))
    next_action, _ = _actions(widget, manual_scheduler)

    result = next_action.perform(widget)

    assert result is not None
    assert widget.selection_range().as_tuple() == (6, 9)


def test_single_occurrence_leaves_selection_alone(manual_scheduler) -> None:
    widget = EditorWidget()
    widget.set_text("only one word")
    widget.set_caret(2)
    next_action, _ = _actions(widget, manual_scheduler)

    result = next_action.perform(widget)

    assert result is not None
    assert result.outcome is NavigationOutcome.NO_OTHER_OCCURRENCE
    assert (result.ordinal, result.total) == (0, 1)
    assert widget.caret_offset() == 2
    assert not widget.has_selection()
    assert widget.hint_text is None
    assert manual_scheduler.timers == []


def test_no_word_at_caret_returns_none(manual_scheduler) -> None:
    widget = EditorWidget()
    widget.set_text("cat   dog")
    widget.set_caret(5)
    next_action, _ = _actions(widget, manual_scheduler)

    assert next_action.perform(widget) is None
    assert next_action.perform(None) is None


def test_is_enabled_requires_an_editor(editor) -> None:
    action = NextWordAction()

    assert action.is_enabled(editor)
    assert not action.is_enabled(None)


def test_actions_work_without_hint_presenter(editor) -> None:
    result = PreviousWordAction().perform(editor)

    assert result is not None and result.found_offset == 17
    assert editor.hint_text is None


def test_wrap_around_can_be_disabled(editor, manual_scheduler) -> None:
    next_action, _ = _actions(editor, manual_scheduler, Settings(wrap_around=False))
    editor.set_caret(18)

    result = next_action.perform(editor)

    assert result is not None
    assert result.outcome is NavigationOutcome.NO_OTHER_OCCURRENCE
    assert result.total == 3


def test_extra_word_chars_setting(manual_scheduler) -> None:
    widget = EditorWidget()
    widget.set_text("$cat cat $cat")
    widget.set_caret(2)
    next_action, _ = _actions(widget, manual_scheduler, Settings(extra_word_chars="$"))

    result = next_action.perform(widget)

    assert result is not None
    assert widget.selection_range().as_tuple() == (9, 13)
    assert result.hint_text == "2/2"


def test_update_settings_reaches_presenter(editor, manual_scheduler) -> None:
    next_action, _ = _actions(editor, manual_scheduler)

    next_action.update_settings(Settings(hint_enabled=False))
    next_action.perform(editor)

    assert next_action.settings.hint_enabled is False
    assert editor.hint_text is None


def test_navigation_emits_telemetry(editor, manual_scheduler, telemetry_sink) -> None:
    next_action, _ = _actions(editor, manual_scheduler)

    next_action.perform(editor)

    events = telemetry_sink.tail()
    assert events == [
        {
            "event": NAVIGATION_EVENT,
            "direction": "forward",
            "outcome": "found",
            "word_length": 3,
            "found_offset": 8,
            "ordinal": 2,
            "total": 3,
            "from_selection": False,
        }
    ]

    next_action.perform(editor)
    assert telemetry_sink.tail(1)[0]["from_selection"] is True


def test_telemetry_can_be_disabled(editor, manual_scheduler, telemetry_sink) -> None:
    next_action, _ = _actions(editor, manual_scheduler, Settings(telemetry_enabled=False))

    next_action.perform(editor)

    assert len(telemetry_sink) == 0


def test_action_metadata() -> None:
    next_action, previous_action = build_actions()

    assert next_action.action_id == "nextword.next"
    assert previous_action.action_id == "nextword.previous"
    assert next_action.direction.value == "forward"
    assert previous_action.direction.value == "backward"


def test_broken_hint_format_falls_back_and_still_reports(editor, manual_scheduler, telemetry_sink) -> None:
    next_action, _ = _actions(editor, manual_scheduler, Settings(hint_format="{ordinal.nope}"))

    result = next_action.perform(editor)

    assert result is not None and result.found_offset == 8
    assert editor.hint_text == " 2/3 "
    assert telemetry_sink.tail(1)[0]["ordinal"] == 2
