"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def _isolate_user_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep settings and log files out of the real home directory."""

    monkeypatch.setenv("NEXTWORD_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("NEXTWORD_LOG_DIR", str(tmp_path / "logs"))
    for name in list(os.environ):
        if name.startswith("NEXTWORD_") and name not in {"NEXTWORD_SETTINGS_PATH", "NEXTWORD_LOG_DIR"}:
            monkeypatch.delenv(name, raising=False)


class ManualScheduler:
    """Hint scheduler that only fires when a test asks it to."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> "ManualTimer":
        timer = ManualTimer(delay_ms, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            timer.fire()


class ManualTimer:
    def __init__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        # Mirrors a timer whose callback was already queued when it got cancelled.
        self.callback()


class RecordingRenderer:
    """Hint renderer remembering what is on screen."""

    def __init__(self) -> None:
        self.visible: tuple[str, int] | None = None
        self.shown: list[tuple[str, int]] = []
        self.clears = 0

    def show_hint(self, text: str, anchor: int) -> None:
        self.visible = (text, anchor)
        self.shown.append((text, anchor))

    def clear_hint(self) -> None:
        self.visible = None
        self.clears += 1


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()
