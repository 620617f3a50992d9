"""Logging setup for StaffDesk.

Records go to ``staffdesk.log`` in the log directory (``~/.staffdesk/logs``
unless ``STAFFDESK_LOG_DIR`` points elsewhere), rotated at about a megabyte,
and optionally to stderr. Qt's own diagnostics are forwarded to the
``staffdesk.qt`` logger so they end up in the same file.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["LOG_FILE_NAME", "QT_LOGGER_NAME", "log_directory", "route_qt_messages", "setup_logging"]

LOG_FILE_NAME = "staffdesk.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
QT_LOGGER_NAME = "staffdesk.qt"

_FILE_HANDLER = "staffdesk-file"
_CONSOLE_HANDLER = "staffdesk-console"
_ROTATE_BYTES = 1_000_000
_ROTATE_KEEP = 3


def log_directory(override: Path | str | None = None) -> Path:
    chosen = override or os.environ.get("STAFFDESK_LOG_DIR") or Path.home() / ".staffdesk" / "logs"
    return Path(chosen).expanduser()


def setup_logging(
    *,
    debug: bool = False,
    log_dir: Path | str | None = None,
    console: bool = True,
    qt: bool = True,
) -> Path:
    """Attach the StaffDesk handlers to the root logger.

    Calling this again replaces the handlers a previous call installed; the
    app relies on that to switch to DEBUG once the settings are loaded.
    Handlers added by anyone else are left alone.

    Args:
        debug: Log at DEBUG instead of INFO, Qt chatter included.
        log_dir: Directory for the log file.
        console: Also log to stderr.
        qt: Forward Qt messages, see :func:`route_qt_messages`.

    Returns:
        Path of the log file.
    """
    level = logging.DEBUG if debug else logging.INFO
    directory = log_directory(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() in (_FILE_HANDLER, _CONSOLE_HANDLER):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    installed: list[tuple[str, logging.Handler]] = [
        (
            _FILE_HANDLER,
            logging.handlers.RotatingFileHandler(
                log_path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_KEEP, encoding="utf-8"
            ),
        )
    ]
    if console:
        installed.append((_CONSOLE_HANDLER, logging.StreamHandler()))
    for name, handler in installed:
        handler.set_name(name)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(level)
    logging.captureWarnings(True)
    # Qt reports every style and font lookup at debug level
    logging.getLogger(QT_LOGGER_NAME).setLevel(level if debug else logging.WARNING)
    if qt:
        route_qt_messages()
    return log_path


def route_qt_messages() -> None:
    """Install a Qt message handler that logs to ``staffdesk.qt``."""
    from PySide6.QtCore import QtMsgType, qInstallMessageHandler

    levels = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }
    qt_logger = logging.getLogger(QT_LOGGER_NAME)

    def _forward(msg_type, _context, message):  # type: ignore[no-untyped-def]
        qt_logger.log(levels.get(msg_type, logging.INFO), message)

    qInstallMessageHandler(_forward)
