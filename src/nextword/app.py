"""Command line entry point and Qt bootstrap for NextWord."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from functools import partial
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, TextIO, cast

from .core.ranges import WordRange
from .editor.actions import WordNavigationAction, build_actions
from .editor.document_model import DocumentMetadata, DocumentState
from .editor.editor_widget import EditorWidget
from .editor.occurrence_hint import OccurrenceHintPresenter, QtTimerScheduler
from .navigation.navigator import Direction, NavigationResult
from .navigation.occurrences import find_all_occurrences
from .services.settings import Settings, SettingsStore, parse_overrides
from .utils import file_io
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_TARGET = 1
EXIT_USAGE = 2


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Send logs to the rotating file, and to stderr as well in debug mode."""

    level = logging.DEBUG if debug else logging.INFO
    logging_utils.setup_logging(level, console=debug, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))
    _install_qt_message_handler()


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load effective settings; an unreadable settings file yields the defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def create_qapp(settings: Settings) -> Any:
    """Create (or reuse) the QApplication instance."""

    try:  # Local import to avoid mandatory PySide6 dependency at import time.
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to launch the NextWord editor.") from exc

    app = cast(Any, QApplication.instance() or QApplication(sys.argv))
    app.setApplicationName("NextWord")
    app.setApplicationDisplayName("NextWord")
    _LOGGER.debug("Qt application ready (font=%s %spt)", settings.font_family, settings.font_size)
    return app


def run_navigation(
    text: str,
    *,
    direction: Direction | str = Direction.FORWARD,
    caret: int = 0,
    selection: WordRange | None = None,
    repeat: int = 1,
    settings: Settings | None = None,
) -> list[NavigationResult]:
    """Drive the navigation actions headlessly over ``text``.

    Each step starts from the selection left behind by the previous one, so
    ``repeat`` walks the occurrences cyclically the way repeated key presses do.
    """

    active_settings = settings or Settings()
    editor = EditorWidget()
    editor.load_document(DocumentState(text=text))
    if selection is not None:
        editor.set_selection(selection)
    else:
        editor.set_caret(caret)

    next_action, previous_action = build_actions(settings=active_settings)
    action: WordNavigationAction = (
        next_action if Direction.from_value(direction) is Direction.FORWARD else previous_action
    )
    results: list[NavigationResult] = []
    for _ in range(max(1, repeat)):
        result = action.perform(editor)
        if result is None:
            break
        results.append(result)
        if not result.found:
            break
    return results


_NEWLINE_NAMES = {"\n": "LF", "\r\n": "CRLF", "\r": "CR"}


def window_title(metadata: DocumentMetadata) -> str:
    """Title for the editor window, e.g. ``NextWord - notes.txt (utf-8, CRLF)``."""

    if metadata.path is None:
        return "NextWord"
    newline = _NEWLINE_NAMES.get(metadata.newline, repr(metadata.newline))
    return f"NextWord - {metadata.path.name} ({metadata.encoding}, {newline})"


def launch_gui(path: Path | None, settings: Settings) -> int:
    """Open a minimal editor window bound to the navigation shortcuts."""

    app = create_qapp(settings)
    from PySide6.QtGui import QKeySequence, QShortcut

    editor = EditorWidget(font_family=settings.font_family, font_size=settings.font_size)
    widget = editor.qt_widget
    if widget is None:  # pragma: no cover - QApplication was just created
        raise RuntimeError("Editor widget failed to initialise Qt")
    if path is not None:
        loaded = file_io.load_text_file(path)
        metadata = DocumentMetadata(path=path, encoding=loaded.encoding, newline=loaded.newline)
        editor.load_document(DocumentState(text=loaded.text, metadata=metadata))
        _LOGGER.debug("Opened %s (%s, %r line endings)", path, loaded.encoding, loaded.newline)

    presenter = OccurrenceHintPresenter(
        editor, scheduler=QtTimerScheduler(widget), settings=settings
    )
    actions = build_actions(settings=settings, hint_presenter=presenter)
    sequences = (settings.next_word_shortcut, settings.previous_word_shortcut)
    shortcuts = []
    for action, sequence in zip(actions, sequences):
        shortcut = QShortcut(QKeySequence(sequence), widget)
        shortcut.activated.connect(partial(action.perform, editor))  # type: ignore[attr-defined]
        shortcuts.append(shortcut)
        _LOGGER.debug("Bound %s to %s", action.action_id, sequence)

    widget.setWindowTitle(window_title(editor.to_document().metadata))
    widget.resize(900, 700)
    widget.show()
    return int(app.exec())


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `nextword` console script."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    debug = _env_flag("NEXTWORD_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("NEXTWORD_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = parse_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return EXIT_USAGE

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return EXIT_OK

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    path = Path(args.file).expanduser() if args.file else None
    if args.gui:
        return launch_gui(path, settings)

    if path is None:
        parser.print_usage(sys.stderr)
        print("nextword: a FILE is required unless --gui or --dump-settings is given", file=sys.stderr)
        return EXIT_USAGE

    try:
        text = file_io.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Unable to read {path}: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        selection = _initial_selection(text, args, settings)
    except ValueError as exc:
        print(f"Invalid starting position: {exc}", file=sys.stderr)
        return EXIT_USAGE

    results = run_navigation(
        text,
        direction=args.direction,
        caret=args.caret or 0,
        selection=selection,
        repeat=args.repeat,
        settings=settings,
    )
    if not results:
        print("No word at the starting position.", file=sys.stderr)
        return EXIT_NO_TARGET

    _print_results(results, as_json=args.json)
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextword",
        description="Jump between whole-word occurrences of the word at a position in a text file.",
    )
    parser.add_argument("file", nargs="?", help="Text file to search.")
    start = parser.add_mutually_exclusive_group()
    start.add_argument("--caret", type=int, metavar="OFFSET", help="Caret offset inside the word to start from.")
    start.add_argument(
        "--selection",
        metavar="START:END",
        help="Selected range used verbatim as the target word.",
    )
    start.add_argument("--word", metavar="WORD", help="Start from the first whole-word occurrence of WORD.")
    parser.add_argument(
        "--direction",
        choices=("next", "previous", "forward", "backward"),
        default="next",
        help="Navigation direction (default: next).",
    )
    parser.add_argument("--repeat", type=int, default=1, metavar="N", help="Number of jumps to perform.")
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("--gui", action="store_true", help="Open the file in a minimal editor window.")
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.nextword/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this run (repeatable).",
    )
    return parser


def _initial_selection(text: str, args: argparse.Namespace, settings: Settings) -> WordRange | None:
    if args.selection:
        start_raw, sep, end_raw = args.selection.partition(":")
        if not sep:
            raise ValueError("--selection must use START:END")
        span = WordRange(int(start_raw), int(end_raw))
        if not span.fits(len(text)):
            raise ValueError(f"selection {span.to_tuple()} exceeds text length {len(text)}")
        return span
    if args.word:
        occurrences = find_all_occurrences(text, args.word, extra_chars=settings.extra_word_chars)
        if not occurrences:
            raise ValueError(f"{args.word!r} does not occur as a whole word")
        return WordRange.at(occurrences[0], len(args.word))
    if args.caret is not None and not 0 <= args.caret <= len(text):
        raise ValueError(f"caret {args.caret} is outside [0, {len(text)}]")
    return None


def _print_results(results: Sequence[NavigationResult], *, as_json: bool, stream: TextIO | None = None) -> None:
    destination = stream or sys.stdout
    if as_json:
        json.dump([result.to_dict() for result in results], destination, indent=2)
        destination.write("\n")
        return
    for result in results:
        if result.found:
            destination.write(f"{result.found_offset} {result.hint_text}\n")
        else:
            destination.write(f"- {result.hint_text} ({result.outcome.value})\n")


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "debug"}


def _install_qt_message_handler() -> None:
    """Forward Qt's own diagnostics to the ``PySide6`` logger."""

    try:
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except ImportError:  # pragma: no cover - headless runtime
        return

    qt_logger = logging.getLogger("PySide6")
    levels = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def forward(message_type, _context, message):  # type: ignore[no-untyped-def]
        qt_logger.log(levels.get(message_type, logging.INFO), message)

    qInstallMessageHandler(forward)


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    report = {
        "settings": asdict(settings),
        "meta": {
            "path": str(store.path),
            "cli_overrides": sorted(overrides),
            "environment_variables": sorted(name for name in os.environ if name.startswith("NEXTWORD_")),
        },
    }
    destination = stream or sys.stdout
    destination.write(json.dumps(report, indent=2) + "\n")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
