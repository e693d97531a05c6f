"""Service layer: persisted settings and telemetry."""

from .settings import Settings, SettingsStore
from .telemetry import emit, register_event_listener

__all__ = ["Settings", "SettingsStore", "emit", "register_event_listener"]
