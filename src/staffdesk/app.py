"""Command-line entry point for StaffDesk.

``staffdesk`` opens the role management window. ``staffdesk
--dump-settings`` prints the merged configuration as JSON instead, which is
handy for checking what ``--set`` and the ``STAFFDESK_*`` variables did.
Arguments argparse does not recognise are handed to Qt (``-style``,
``-platform`` and so on).
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .services.roles import RoleService
from .services.settings import Settings, SettingsStore, parse_assignments, parse_flag
from .ui.bootstrap import create_application
from .ui.models.window_state import WindowContext
from .utils.logging import setup_logging

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from PySide6.QtWidgets import QApplication, QWidget

LOGGER = logging.getLogger(__name__)

APP_NAME = "StaffDesk"
_DEFAULT_WINDOW_HEIGHT = 720


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staffdesk",
        description="Manage an employee's role assignments.",
    )
    parser.add_argument(
        "--settings-path",
        type=_user_path,
        metavar="PATH",
        help="Settings file to use instead of ~/.staffdesk/settings.json.",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one setting for this run; repeatable.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the merged settings as JSON and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    return parser


def load_settings(store: SettingsStore, *, overrides: Mapping[str, Any] | None = None) -> Settings:
    """Load settings from ``store``; an unreadable file means defaults."""
    try:
        return store.load(overrides=overrides)
    except OSError as exc:
        LOGGER.warning("Failed to read settings from %s: %s", store.path, exc)
        return Settings()


def settings_report(settings: Settings, store: SettingsStore, overrides: Mapping[str, Any]) -> dict[str, Any]:
    """The payload printed by ``--dump-settings``."""
    return {
        "settings": asdict(settings),
        "meta": {
            "path": str(store.path),
            "cli_overrides": sorted(overrides),
            "environment_variables": sorted(name for name in os.environ if name.startswith("STAFFDESK_")),
        },
    }


def create_qapp(settings: Settings, qt_args: Sequence[str] = ()) -> QApplication:
    """Return the running QApplication, creating it with ``qt_args`` if needed."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        program = sys.argv[0] if sys.argv else "staffdesk"
        app = QApplication([program, *qt_args])
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_NAME)
    if settings.theme.strip().lower() == "dark":
        app.setStyle("Fusion")
    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``staffdesk`` console script."""
    parser = build_parser()
    args, qt_args = parser.parse_known_args(argv)

    debug = args.debug or _debug_from_environment()
    log_path = setup_logging(debug=debug)
    LOGGER.debug("Logging to %s", log_path)

    store = SettingsStore(args.settings_path or _settings_path_from_environment())
    try:
        overrides = parse_assignments(args.assignments)
    except ValueError as exc:
        parser.error(f"invalid --set override: {exc}")
    settings = load_settings(store, overrides=overrides)

    if args.dump_settings:
        json.dump(settings_report(settings, store, overrides), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    if settings.debug_logging and not debug:
        setup_logging(debug=True)

    app = create_qapp(settings, qt_args)
    context = WindowContext(settings=settings, settings_store=store, role_service=RoleService())
    _event_bus, coordinator, view = create_application(context)
    _place_window(view, settings)
    view.show()

    def _remember_session() -> None:
        settings.selection_mode = coordinator.selection_mode.value
        settings.window_geometry = bytes(view.saveGeometry().toBase64().data()).decode("ascii")
        try:
            store.save(settings)
        except OSError as exc:
            LOGGER.warning("Unable to save settings to %s: %s", store.path, exc)

    app.aboutToQuit.connect(_remember_session)
    try:
        return int(app.exec())
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        LOGGER.info("Interrupted; shutting down")
        return 0


def _user_path(text: str) -> Path:
    return Path(text).expanduser()


def _debug_from_environment() -> bool:
    text = os.environ.get("STAFFDESK_DEBUG")
    if not text:
        return False
    try:
        return parse_flag(text)
    except ValueError:
        LOGGER.warning("Ignoring STAFFDESK_DEBUG=%r", text)
        return False


def _settings_path_from_environment() -> Path | None:
    text = os.environ.get("STAFFDESK_SETTINGS_PATH")
    return _user_path(text) if text else None


def _place_window(view: QWidget, settings: Settings) -> None:
    if not settings.window_geometry:
        width = settings.master_width + settings.detail_min_width + settings.nested_min_width
        view.resize(width, _DEFAULT_WINDOW_HEIGHT)
        return

    from PySide6.QtCore import QByteArray

    if not view.restoreGeometry(QByteArray.fromBase64(settings.window_geometry.encode("ascii"))):
        LOGGER.debug("Saved window geometry could not be restored")
