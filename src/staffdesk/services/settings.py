"""Persisted StaffDesk preferences.

Settings live in ``~/.staffdesk/settings.json``. Three layers are merged on
load, later layers winning:

1. The JSON file written by :meth:`SettingsStore.save`
2. ``--set KEY=VALUE`` assignments from the command line
3. ``STAFFDESK_*`` environment variables

Every field has a text parser in ``_FIELD_PARSERS``; command-line and
environment values both go through it.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

__all__ = [
    "ENVIRONMENT_FIELDS",
    "SELECTION_MODES",
    "Settings",
    "SettingsStore",
    "environment_overrides",
    "parse_assignments",
    "parse_flag",
    "parse_setting",
]

LOGGER = logging.getLogger(__name__)

SETTINGS_PATH = Path.home() / ".staffdesk" / "settings.json"
SCHEMA_VERSION = 1
SELECTION_MODES: tuple[str, ...] = ("multi", "single")

ENVIRONMENT_FIELDS: Mapping[str, str] = {
    "STAFFDESK_THEME": "theme",
    "STAFFDESK_SELECTION_MODE": "selection_mode",
    "STAFFDESK_DEBUG_LOGGING": "debug_logging",
    "STAFFDESK_CONFIRM_REMOVALS": "confirm_removals",
}

_YES = frozenset({"1", "true", "yes", "on"})
_NO = frozenset({"0", "false", "no", "off"})


@dataclass(slots=True)
class Settings:
    """User preferences for the role management window."""

    theme: str = "default"
    selection_mode: str = SELECTION_MODES[0]
    confirm_removals: bool = True
    debug_logging: bool = False
    master_width: int = 560
    detail_min_width: int = 460
    nested_min_width: int = 300
    window_geometry: str | None = None


def parse_flag(text: str) -> bool:
    """Read ``yes``/``no`` style text as a boolean."""
    word = text.strip().lower()
    if word in _YES:
        return True
    if word in _NO:
        return False
    raise ValueError(f"expected yes/no, got {text!r}")


def _parse_width(text: str) -> int:
    width = int(text.strip(), 10)
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")
    return width


def _parse_text(text: str) -> str:
    return text.strip()


_FIELD_PARSERS: Mapping[str, Callable[[str], Any]] = {
    "theme": _parse_text,
    "selection_mode": _parse_text,
    "confirm_removals": parse_flag,
    "debug_logging": parse_flag,
    "master_width": _parse_width,
    "detail_min_width": _parse_width,
    "nested_min_width": _parse_width,
    "window_geometry": _parse_text,
}


def parse_setting(name: str, text: str) -> Any:
    """Convert ``text`` to the type of the ``name`` field.

    Raises:
        ValueError: If ``name`` is not a setting or ``text`` does not parse.
    """
    parser = _FIELD_PARSERS.get(name)
    if parser is None:
        raise ValueError(f"unknown setting {name!r}")
    return parser(text)


def parse_assignments(items: Iterable[str]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into typed settings overrides.

    Raises:
        ValueError: On a malformed assignment, an unknown key or a bad value.
    """
    overrides: dict[str, Any] = {}
    for item in items:
        name, sep, text = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"{item!r} is not a KEY=VALUE assignment")
        overrides[name] = parse_setting(name, text)
    return overrides


def environment_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect typed overrides from ``STAFFDESK_*`` variables.

    Values that do not parse are logged and skipped.
    """
    env = os.environ if environ is None else environ
    found: dict[str, Any] = {}
    for variable, name in ENVIRONMENT_FIELDS.items():
        text = env.get(variable)
        if text is None:
            continue
        try:
            found[name] = parse_setting(name, text)
        except ValueError as exc:
            LOGGER.warning("Ignoring %s: %s", variable, exc)
    return found


class SettingsStore:
    """Reads and writes :class:`Settings` as JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Merge the file, ``overrides`` and the environment into one Settings.

        A missing or unreadable file yields the defaults. Override entries
        that name no setting or hold ``None`` are ignored.
        """
        values = self._read_file()
        if overrides:
            values.update(
                (name, value)
                for name, value in overrides.items()
                if name in _FIELD_PARSERS and value is not None
            )
        values.update(environment_overrides())
        settings = Settings(**values)
        LOGGER.debug("Settings loaded from %s: %s", self._path, sorted(values))
        return _with_known_mode(settings)

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` through a temporary file so a crash never truncates it."""
        body = json.dumps({"version": SCHEMA_VERSION, **asdict(settings)}, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_suffix(".tmp")
        staging.write_text(body, encoding="utf-8")
        staging.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_file(self) -> dict[str, Any]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not hold a JSON object", self._path)
            return {}
        return {name: value for name, value in payload.items() if name in _FIELD_PARSERS}


def _with_known_mode(settings: Settings) -> Settings:
    mode = str(settings.selection_mode or "").strip().lower()
    if mode not in SELECTION_MODES:
        LOGGER.warning("Unknown selection mode %r; using %s", settings.selection_mode, SELECTION_MODES[0])
        mode = SELECTION_MODES[0]
    settings.selection_mode = mode
    return settings
