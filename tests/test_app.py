"""Tests covering the command-line entry point."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

from staffdesk import app
from staffdesk.services.settings import Settings, SettingsStore


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, restore_root_logging) -> None:
    for name in list(os.environ):
        if name.startswith("STAFFDESK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STAFFDESK_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(sys, "argv", list(sys.argv))


def test_parser_collects_assignments(tmp_path: Path) -> None:
    args = app.build_parser().parse_args(
        ["--set", "theme=dark", "--set", "master_width=720", "--settings-path", str(tmp_path / "s.json")]
    )

    assert args.assignments == ["theme=dark", "master_width=720"]
    assert args.settings_path == tmp_path / "s.json"
    assert args.dump_settings is False
    assert args.debug is False


def test_load_settings_applies_overrides(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    store.save(Settings(theme="light"))

    settings = app.load_settings(store, overrides={"selection_mode": "single"})

    assert settings.theme == "light"
    assert settings.selection_mode == "single"


def test_settings_report_lists_sources(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    monkeypatch.setenv("STAFFDESK_THEME", "dark")

    report = app.settings_report(Settings(theme="dark"), store, {"theme": "dark"})

    assert report["settings"]["theme"] == "dark"
    assert report["meta"]["path"] == str(store.path)
    assert report["meta"]["cli_overrides"] == ["theme"]
    assert "STAFFDESK_THEME" in report["meta"]["environment_variables"]


@pytest.mark.parametrize(("value", "expected"), [("yes", True), ("0", False), ("maybe", False)])
def test_debug_flag_from_environment(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("STAFFDESK_DEBUG", value)

    assert app._debug_from_environment() is expected


def test_main_dump_settings_exits_before_ui(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _fail_qapp(*args, **kwargs) -> None:
        raise AssertionError("UI must not start when dumping settings")

    monkeypatch.setattr(app, "create_qapp", _fail_qapp)
    settings_path = tmp_path / "settings.json"

    exit_code = app.main(
        [
            "--dump-settings",
            "--settings-path",
            str(settings_path),
            "--set",
            "selection_mode=single",
            "--set",
            "confirm_removals=no",
        ]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["settings"]["selection_mode"] == "single"
    assert payload["settings"]["confirm_removals"] is False
    assert payload["meta"]["path"] == str(settings_path)
    assert payload["meta"]["cli_overrides"] == ["confirm_removals", "selection_mode"]
    assert (tmp_path / "logs" / "staffdesk.log").exists()


def test_main_uses_settings_path_from_environment(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    settings_path = tmp_path / "env-settings.json"
    SettingsStore(settings_path).save(Settings(theme="dark"))
    monkeypatch.setenv("STAFFDESK_SETTINGS_PATH", str(settings_path))

    assert app.main(["--dump-settings"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["theme"] == "dark"
    assert payload["meta"]["path"] == str(settings_path)


@pytest.mark.parametrize("assignment", ["bogus=1", "theme", "debug_logging=maybe", "master_width=-5"])
def test_main_rejects_invalid_override(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    assignment: str,
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        app.main(["--settings-path", str(tmp_path / "s.json"), "--set", assignment])

    assert excinfo.value.code == 2
    assert "invalid --set override" in capsys.readouterr().err
