"""Transient "ordinal/total" indicator shown next to the selected occurrence.

Each editor window owns one :class:`OccurrenceHintPresenter`. Showing a new
hint disposes the previous one first, and every hint schedules its own
dismissal timer which is cancelled if the hint is superseded.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from ..services.settings import Settings, clamp_hint_duration

LOGGER = logging.getLogger(__name__)

__all__ = [
    "HintRenderer",
    "HintScheduler",
    "HintHandle",
    "OccurrenceHintPresenter",
    "QtTimerScheduler",
    "ThreadingTimerScheduler",
    "default_scheduler",
]


class HintRenderer(Protocol):
    """Surface able to draw and remove the occurrence indicator."""

    def show_hint(self, text: str, anchor: int) -> None:
        ...

    def clear_hint(self) -> None:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class HintScheduler(Protocol):
    """Schedules a one-shot callback after ``delay_ms`` milliseconds."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        ...


class ThreadingTimerScheduler:
    """Scheduler backed by :class:`threading.Timer` for headless hosts."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(max(0, delay_ms) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer


class _QtTimerHandle:
    def __init__(self, timer: Any) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class QtTimerScheduler:
    """Scheduler firing on the Qt event loop via a single-shot ``QTimer``."""

    def __init__(self, parent: Any | None = None) -> None:
        from PySide6.QtCore import QTimer

        self._timer_type = QTimer
        self._parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = self._timer_type(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)  # type: ignore[attr-defined]
        timer.start(max(0, int(delay_ms)))
        return _QtTimerHandle(timer)


def default_scheduler() -> HintScheduler:
    """Return a Qt scheduler when a Qt application is running, else a threading one."""

    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:  # pragma: no cover - headless runtime
        return ThreadingTimerScheduler()
    if QCoreApplication.instance() is None:
        return ThreadingTimerScheduler()
    return QtTimerScheduler()


class HintHandle:
    """A live hint; :meth:`dispose` removes it and may be called any number of times."""

    __slots__ = ("_presenter", "text", "anchor", "_timer", "_disposed")

    def __init__(self, presenter: OccurrenceHintPresenter, text: str, anchor: int) -> None:
        self._presenter = presenter
        self.text = text
        self.anchor = anchor
        self._timer: TimerHandle | None = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        self._presenter._dispose(self)


class OccurrenceHintPresenter:
    """Owns at most one live hint for a single editor."""

    def __init__(
        self,
        renderer: HintRenderer,
        *,
        scheduler: HintScheduler | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._renderer = renderer
        self._scheduler = scheduler or default_scheduler()
        self._settings = settings or Settings()
        self._current: HintHandle | None = None
        self._lock = threading.RLock()

    @property
    def current(self) -> HintHandle | None:
        return self._current

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    def show(self, ordinal: int, total: int, anchor: int) -> HintHandle | None:
        """Replace any visible hint with ``ordinal/total`` anchored at ``anchor``."""

        with self._lock:
            if self._current is not None:
                self._dispose(self._current)
            if not self._settings.hint_enabled:
                return None
            text = self._settings.format_hint(ordinal, total)
            handle = HintHandle(self, text, anchor)
            self._renderer.show_hint(text, anchor)
            self._current = handle
            delay = clamp_hint_duration(self._settings.hint_duration_ms)
            # A zero duration keeps the hint until the next navigation replaces it.
            if delay > 0:
                handle._timer = self._scheduler.schedule(delay, handle.dispose)
            LOGGER.debug("Showing occurrence hint %r at %d for %d ms", text.strip(), anchor, delay)
            return handle

    def dispose_current(self) -> None:
        with self._lock:
            if self._current is not None:
                self._dispose(self._current)

    def _dispose(self, handle: HintHandle) -> None:
        with self._lock:
            if handle._disposed:
                return
            handle._disposed = True
            timer, handle._timer = handle._timer, None
            if timer is not None:
                timer.cancel()
            if self._current is handle:
                self._current = None
                self._renderer.clear_hint()
