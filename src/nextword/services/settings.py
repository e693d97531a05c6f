"""User settings and their JSON persistence.

Effective settings are layered: defaults, then the JSON file, then ``--set``
overrides from the command line, then ``NEXTWORD_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, get_args, get_type_hints

__all__ = [
    "Settings",
    "SettingsStore",
    "DEFAULT_HINT_FORMAT",
    "clamp_hint_duration",
    "default_settings_path",
    "parse_overrides",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_HINT_FORMAT = " {ordinal}/{total} "
SETTINGS_VERSION = 1
_DEFAULT_HINT_DURATION_MS = 2_000
_MAX_HINT_DURATION_MS = 60_000
_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "debug"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", "disabled"})


def _as_flag(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{raw!r} is not a boolean")


def _as_int(raw: str) -> int:
    return int(raw.strip(), 10)


# Environment variable -> (settings field, parser).
_ENVIRONMENT: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "NEXTWORD_HINT_ENABLED": ("hint_enabled", _as_flag),
    "NEXTWORD_HINT_DURATION_MS": ("hint_duration_ms", _as_int),
    "NEXTWORD_HINT_FORMAT": ("hint_format", str),
    "NEXTWORD_EXTRA_WORD_CHARS": ("extra_word_chars", str),
    "NEXTWORD_WRAP_AROUND": ("wrap_around", _as_flag),
    "NEXTWORD_DEBUG_LOGGING": ("debug_logging", _as_flag),
    "NEXTWORD_TELEMETRY_ENABLED": ("telemetry_enabled", _as_flag),
}


@dataclass(slots=True)
class Settings:
    """Navigation, hint and editor preferences."""

    hint_enabled: bool = True
    hint_duration_ms: int = _DEFAULT_HINT_DURATION_MS
    hint_format: str = DEFAULT_HINT_FORMAT
    extra_word_chars: str = ""
    wrap_around: bool = True
    next_word_shortcut: str = "Alt+Right"
    previous_word_shortcut: str = "Alt+Left"
    font_family: str = "JetBrains Mono"
    font_size: int = 13
    last_open_file: str | None = None
    debug_logging: bool = False
    telemetry_enabled: bool = True

    def format_hint(self, ordinal: int, total: int) -> str:
        """Render the occurrence indicator, falling back to the default template."""

        try:
            return self.hint_format.format(ordinal=ordinal, total=total)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Invalid hint_format %r: %s", self.hint_format, exc)
            return DEFAULT_HINT_FORMAT.format(ordinal=ordinal, total=total)

    @property
    def hint_duration_seconds(self) -> float:
        return clamp_hint_duration(self.hint_duration_ms) / 1000.0

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(field.name for field in fields(cls))


def clamp_hint_duration(value: Any) -> int:
    """Clamp the hint duration into ``[0, 60000]`` ms; unusable values mean the default."""

    try:
        duration = int(value)
    except (TypeError, ValueError):
        duration = _DEFAULT_HINT_DURATION_MS
    return max(0, min(duration, _MAX_HINT_DURATION_MS))


def parse_overrides(entries: Iterable[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` strings into values typed after the matching field.

    Raises :class:`ValueError` for malformed entries, unknown keys and values
    that cannot be converted.
    """

    hints = get_type_hints(Settings)
    parsed: Dict[str, Any] = {}
    for entry in entries:
        key, separator, raw = entry.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ValueError(f"Override {entry!r} must look like KEY=VALUE")
        if key not in hints:
            raise ValueError(f"Unknown setting {key!r}")
        parsed[key] = _convert(hints[key], raw)
    return parsed


def _convert(annotation: Any, raw: str) -> Any:
    members = [arg for arg in get_args(annotation) if arg is not type(None)]
    target = members[0] if members else annotation
    if members and raw.strip().lower() in {"", "none", "null"}:
        return None
    if target is bool:
        return _as_flag(raw)
    if target is int:
        return _as_int(raw)
    return raw


def _coerce_stored(annotation: Any, value: Any) -> Any:
    """Check a JSON value against its field type; strings go through the override parser."""

    members = [arg for arg in get_args(annotation) if arg is not type(None)]
    target = members[0] if members else annotation
    if value is None and members:
        return None
    if isinstance(value, str) and target is not str:
        return _convert(annotation, value)
    if target is int and isinstance(value, bool):
        raise ValueError(f"expected int, got {value!r}")
    if not isinstance(value, target):
        raise ValueError(f"expected {target.__name__}, got {value!r}")
    return value


def default_settings_path() -> Path:
    """Return ``$NEXTWORD_SETTINGS_PATH`` or ``~/.nextword/settings.json``."""

    override = os.environ.get("NEXTWORD_SETTINGS_PATH")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".nextword" / "settings.json"


class SettingsStore:
    """Reads and writes :class:`Settings` as a versioned JSON document."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Return the effective settings; see the module docstring for layering."""

        document = self._read_document()
        settings = self._decode(document)
        if document and document.get("version") != SETTINGS_VERSION:
            # Rewrite older or unversioned files in the current layout.
            try:
                self.save(settings)
            except OSError as exc:  # pragma: no cover - depends on filesystem
                LOGGER.warning("Could not upgrade settings file %s: %s", self._path, exc)
        if overrides:
            settings = self._merge(settings, overrides, source="command line")
        environment = self._environment_overrides()
        if environment:
            settings = self._merge(settings, environment, source="environment")
        return settings

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` through a temporary file so readers never see a partial file."""

        document = asdict(settings)
        document["version"] = SETTINGS_VERSION
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_name(self._path.name + ".tmp")
        staging.write_text(json.dumps(document, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(staging, self._path)
        LOGGER.debug("Saved settings to %s", self._path)
        return self._path

    def _read_document(self) -> Dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Ignoring settings file %s: invalid JSON (%s)", self._path, exc)
            return {}
        if not isinstance(document, dict):
            LOGGER.warning("Ignoring settings file %s: expected a JSON object", self._path)
            return {}
        return document

    def _decode(self, document: Mapping[str, Any]) -> Settings:
        if not document:
            return Settings()
        known = Settings.field_names()
        unknown = sorted(key for key in document if key not in known and key != "version")
        if unknown:
            LOGGER.warning("Ignoring unknown settings keys in %s: %s", self._path, unknown)
        hints = get_type_hints(Settings)
        values: Dict[str, Any] = {}
        for key, value in document.items():
            if key not in known:
                continue
            try:
                values[key] = _coerce_stored(hints[key], value)
            except ValueError as exc:
                LOGGER.warning("Ignoring setting %s in %s: %s", key, self._path, exc)
        LOGGER.debug("Loaded %d settings from %s", len(values), self._path)
        return replace(Settings(), **values)

    def _merge(self, settings: Settings, overrides: Mapping[str, Any], *, source: str) -> Settings:
        known = Settings.field_names()
        values = {key: value for key, value in overrides.items() if key in known and value is not None}
        if not values:
            return settings
        if "hint_duration_ms" in values:
            values["hint_duration_ms"] = clamp_hint_duration(values["hint_duration_ms"])
        LOGGER.debug("Applying %s overrides: %s", source, sorted(values))
        return replace(settings, **values)

    def _environment_overrides(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for variable, (name, parse) in _ENVIRONMENT.items():
            raw = os.environ.get(variable)
            if raw is None:
                continue
            try:
                values[name] = parse(raw)
            except ValueError:
                LOGGER.warning("Ignoring %s=%r: not a valid %s value", variable, raw, name)
        return values
