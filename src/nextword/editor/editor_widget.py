"""Editor widget implementation with Qt + headless modes.

Document text, caret and selection live in plain Python state so navigation
can be exercised without a display. When PySide6 is importable and a
``QApplication`` has been instantiated, the widget also builds a
``QPlainTextEdit`` and mirrors every change into it.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, Sequence

from ..core.ranges import WordRange
from .document_model import DocumentState, EditorSnapshot, SelectionRange

LOGGER = logging.getLogger(__name__)

QApplication: Any = None
QLabel: Any = None
QPlainTextEdit: Any = None
QTextCursor: Any = None
QFont: Any = None

try:  # pragma: no cover - depends on the desktop stack
    from PySide6.QtGui import QFont as _QtFont, QTextCursor as _QtTextCursor
    from PySide6.QtWidgets import (
        QApplication as _QtApplication,
        QLabel as _QtLabel,
        QPlainTextEdit as _QtPlainTextEdit,
    )

    QApplication = _QtApplication
    QLabel = _QtLabel
    QPlainTextEdit = _QtPlainTextEdit
    QTextCursor = _QtTextCursor
    QFont = _QtFont
except ImportError:  # pragma: no cover - headless runtime
    LOGGER.debug("PySide6 unavailable; editor widget runs headless.")


def _utf16_offset(text: str, offset: int) -> int:
    """Convert a code-point offset into the UTF-16 position used by ``QTextCursor``."""

    if text.isascii():
        return offset
    return offset + sum(1 for char in text[:offset] if ord(char) > 0xFFFF)


def _code_point_offset(text: str, position: int) -> int:
    """Inverse of :func:`_utf16_offset`; a position inside a surrogate pair rounds up."""

    if text.isascii():
        return min(position, len(text))
    offset = units = 0
    for char in text:
        if units >= position:
            break
        units += 2 if ord(char) > 0xFFFF else 1
        offset += 1
    return offset


class TextChangeListener(Protocol):
    """Callback signature invoked when the editor text changes."""

    def __call__(self, text: str, state: DocumentState) -> None:
        ...


class SelectionListener(Protocol):
    """Callback invoked when the active selection or caret moves."""

    def __call__(self, selection: SelectionRange, line: int, column: int) -> None:
        ...


class EditorWidget:
    """High-level editor component exposing caret, selection and hint rendering."""

    HINT_MARGIN_PX = 8

    def __init__(self, parent: Any | None = None, *, font_family: str | None = None, font_size: int | None = None) -> None:
        self._state = DocumentState()
        self._text_buffer: str = ""
        self._selection = SelectionRange()
        self._caret = 0
        self._hint_text: str | None = None
        self._hint_anchor: int | None = None
        self._scroll_target: int | None = None
        self._text_listeners: list[TextChangeListener] = []
        self._selection_listeners: list[SelectionListener] = []
        self._qt_editor: Any = None
        self._hint_label: Any = None
        self._syncing = False
        self._build_ui(parent, font_family=font_family, font_size=font_size)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self, parent: Any | None, *, font_family: str | None, font_size: int | None) -> None:
        """Instantiate Qt widgets when a QApplication is available."""

        if QApplication is None or QPlainTextEdit is None:
            return
        if QApplication.instance() is None:
            # Headless mode keeps the logical bits working.
            return

        self._qt_editor = QPlainTextEdit(parent)
        if font_family and QFont is not None:
            font = QFont(font_family)
            if font_size:
                font.setPointSize(int(font_size))
            self._qt_editor.setFont(font)
        self._qt_editor.textChanged.connect(self._handle_qt_text_changed)  # type: ignore[attr-defined]
        self._qt_editor.cursorPositionChanged.connect(  # type: ignore[attr-defined]
            self._handle_qt_selection_changed
        )
        self._qt_editor.selectionChanged.connect(  # type: ignore[attr-defined]
            self._handle_qt_selection_changed
        )

        self._hint_label = QLabel(self._qt_editor.viewport())
        self._hint_label.setObjectName("occurrenceHint")
        self._hint_label.setStyleSheet("color: gray;")
        self._hint_label.hide()

    @property
    def qt_widget(self) -> Any | None:
        """Return the backing ``QPlainTextEdit`` when running with Qt."""

        return self._qt_editor

    # ------------------------------------------------------------------
    # Document accessors
    # ------------------------------------------------------------------
    def load_document(self, document: DocumentState) -> None:
        """Load a new document state into the widget."""

        self._state = document
        self._text_buffer = document.text
        self._sync_qt_text()
        caret = max(0, min(document.caret, len(self._text_buffer)))
        self._apply_selection(SelectionRange(caret, caret), caret)
        self._emit_text_changed()

    def to_document(self) -> DocumentState:
        """Return the current document representation."""

        self._state.text = self._text_buffer
        self._state.selection = self.selection_range()
        self._state.caret = self._caret
        return self._state

    def text(self) -> str:
        return self._text_buffer

    def set_text(self, text: str) -> None:
        """Replace the entire document content with ``text``."""

        if text == self._text_buffer:
            return
        self._text_buffer = text
        self._state.update_text(text)
        self._sync_qt_text()
        caret = min(self._caret, len(text))
        self._apply_selection(SelectionRange(caret, caret), caret)
        self._emit_text_changed()

    def snapshot(self) -> EditorSnapshot:
        """Capture text, caret and selection for one navigation request."""

        selection = self.selection_range()
        return EditorSnapshot(
            text=self._text_buffer,
            caret=self._caret,
            selection=None if selection.is_empty else selection,
            version_id=self._state.version_id,
        )

    def add_text_listener(self, listener: TextChangeListener) -> None:
        """Register a callback fired whenever the text buffer mutates."""

        self._text_listeners.append(listener)

    def add_selection_listener(self, listener: SelectionListener) -> None:
        """Register a callback fired when the selection/caret changes."""

        self._selection_listeners.append(listener)

    # ------------------------------------------------------------------
    # Caret & selection
    # ------------------------------------------------------------------
    def caret_offset(self) -> int:
        return self._caret

    def set_caret(self, offset: int) -> None:
        """Move the caret to ``offset``, collapsing any selection."""

        caret = self._clamp_offset(offset)
        self._apply_selection(SelectionRange(caret, caret), caret)

    def selection_range(self) -> SelectionRange:
        """Return a copy of the current selection."""

        return SelectionRange(self._selection.start, self._selection.end)

    def has_selection(self) -> bool:
        return not self._selection.is_empty

    def set_selection(
        self,
        selection: SelectionRange | WordRange | Mapping[str, Any] | Sequence[int],
        *,
        caret: int | None = None,
    ) -> None:
        """Select ``selection``; the caret lands on ``caret`` or the selection end."""

        normalized = SelectionRange.from_value(selection)
        start = self._clamp_offset(normalized.start)
        end = self._clamp_offset(normalized.end)
        resolved_caret = end if caret is None else self._clamp_offset(caret)
        self._apply_selection(SelectionRange(start, end), resolved_caret)

    def scroll_to_caret(self) -> None:
        """Make the caret visible."""

        self._scroll_target = self._caret
        if self._qt_editor is not None:
            self._qt_editor.ensureCursorVisible()

    @property
    def scroll_target(self) -> int | None:
        """Offset most recently scrolled into view."""

        return self._scroll_target

    # ------------------------------------------------------------------
    # Occurrence hint rendering
    # ------------------------------------------------------------------
    def show_hint(self, text: str, anchor: int) -> None:
        """Display ``text`` after the end of the line containing ``anchor``."""

        self._hint_text = text
        self._hint_anchor = self._clamp_offset(anchor)
        if self._hint_label is None or QTextCursor is None:
            return
        cursor = QTextCursor(self._qt_editor.document())
        cursor.setPosition(_utf16_offset(self._text_buffer, self._hint_anchor))
        cursor.movePosition(QTextCursor.MoveOperation.EndOfBlock)
        rect = self._qt_editor.cursorRect(cursor)
        self._hint_label.setText(text)
        self._hint_label.adjustSize()
        self._hint_label.move(rect.right() + self.HINT_MARGIN_PX, rect.top())
        self._hint_label.show()

    def clear_hint(self) -> None:
        self._hint_text = None
        self._hint_anchor = None
        if self._hint_label is not None:
            self._hint_label.hide()

    @property
    def hint_text(self) -> str | None:
        return self._hint_text

    @property
    def hint_anchor(self) -> int | None:
        return self._hint_anchor

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clamp_offset(self, offset: int) -> int:
        return max(0, min(int(offset), len(self._text_buffer)))

    def _apply_selection(self, selection: SelectionRange, caret: int) -> None:
        self._selection = selection
        self._caret = caret
        self._state.selection = SelectionRange(selection.start, selection.end)
        self._state.caret = caret
        if self._qt_editor is not None and QTextCursor is not None:
            anchor = selection.start if caret != selection.start else selection.end
            text = self._text_buffer
            cursor = self._qt_editor.textCursor()
            cursor.setPosition(_utf16_offset(text, anchor))
            cursor.setPosition(_utf16_offset(text, caret), QTextCursor.MoveMode.KeepAnchor)
            self._syncing = True
            try:
                self._qt_editor.setTextCursor(cursor)
            finally:
                self._syncing = False
        self._emit_selection_changed()

    def _sync_qt_text(self) -> None:
        if self._qt_editor is None:
            return
        self._qt_editor.blockSignals(True)
        try:
            self._qt_editor.setPlainText(self._text_buffer)
        finally:
            self._qt_editor.blockSignals(False)

    def _emit_text_changed(self) -> None:
        for listener in list(self._text_listeners):
            listener(self._text_buffer, self._state)

    def _emit_selection_changed(self) -> None:
        if not self._selection_listeners:
            return
        selection = self.selection_range()
        line, column = self._cursor_line_column(self._caret)
        for listener in list(self._selection_listeners):
            listener(selection, line, column)

    def _cursor_line_column(self, caret: int) -> tuple[int, int]:
        text = self._text_buffer
        if not text:
            return (1, 1)
        caret = self._clamp_offset(caret)
        line = text.count("\n", 0, caret) + 1
        last_newline = text.rfind("\n", 0, caret)
        column = caret + 1 if last_newline == -1 else caret - last_newline
        return (line, max(1, column))

    # Qt callbacks -----------------------------------------------------
    def _handle_qt_text_changed(self) -> None:
        if self._qt_editor is None:
            return
        self._text_buffer = self._qt_editor.toPlainText()
        self._state.update_text(self._text_buffer)
        self._emit_text_changed()

    def _handle_qt_selection_changed(self) -> None:
        if self._qt_editor is None or self._syncing:
            return
        cursor = self._qt_editor.textCursor()
        text = self._text_buffer
        self._selection = SelectionRange(
            start=_code_point_offset(text, cursor.selectionStart()),
            end=_code_point_offset(text, cursor.selectionEnd()),
        )
        self._caret = _code_point_offset(text, cursor.position())
        self._emit_selection_changed()


__all__ = ["EditorWidget", "SelectionListener", "TextChangeListener"]
