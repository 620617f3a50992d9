"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from staffdesk.services.settings import (
    Settings,
    SettingsStore,
    environment_overrides,
    parse_assignments,
    parse_flag,
    parse_setting,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("STAFFDESK_"):
            monkeypatch.delenv(name, raising=False)


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings == Settings()
    assert settings.selection_mode == "multi"
    assert settings.confirm_removals is True


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    original = Settings(
        theme="dark",
        selection_mode="single",
        confirm_removals=False,
        master_width=640,
        window_geometry="AdnQywADAAA=",
    )

    written = SettingsStore(path).save(original)
    reloaded = SettingsStore(path).load()

    assert written == path
    assert reloaded == original
    assert not path.with_suffix(".tmp").exists()


def test_saved_payload_is_versioned(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings())

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["version"] == 1
    assert payload["selection_mode"] == "multi"


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"theme": "dark", "api_key": "legacy", "version": 1}), encoding="utf-8")

    loaded = SettingsStore(path).load()

    assert loaded.theme == "dark"
    assert not hasattr(loaded, "api_key")


@pytest.mark.parametrize("body", ["{not json", "[1, 2, 3]", "\"text\""])
def test_invalid_payload_falls_back_to_defaults(tmp_path: Path, body: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(body, encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_invalid_selection_mode_normalized(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"selection_mode": "Triple"}), encoding="utf-8")

    assert SettingsStore(path).load().selection_mode == "multi"


def test_selection_mode_case_insensitive(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"selection_mode": " SINGLE "}), encoding="utf-8")

    assert SettingsStore(path).load().selection_mode == "single"


def test_cli_overrides_apply(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(theme="light"))

    loaded = SettingsStore(path).load(overrides={"theme": "dark", "unknown": 1, "master_width": None})

    assert loaded.theme == "dark"
    assert loaded.master_width == Settings().master_width


def test_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(selection_mode="multi"))
    monkeypatch.setenv("STAFFDESK_SELECTION_MODE", "single")
    monkeypatch.setenv("STAFFDESK_THEME", "dark")

    overridden = SettingsStore(path).load(overrides={"theme": "light"})

    assert overridden.selection_mode == "single"
    assert overridden.theme == "dark"


def test_bool_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings())
    monkeypatch.setenv("STAFFDESK_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("STAFFDESK_CONFIRM_REMOVALS", "off")

    overridden = SettingsStore(path).load()

    assert overridden.debug_logging is True
    assert overridden.confirm_removals is False


def test_unparseable_env_value_is_skipped(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STAFFDESK_CONFIRM_REMOVALS", "sometimes")

    assert SettingsStore(tmp_path / "settings.json").load().confirm_removals is True


class TestParsing:
    """Tests for turning text into typed setting values."""

    @pytest.mark.parametrize(("text", "expected"), [("yes", True), (" ON ", True), ("0", False), ("No", False)])
    def test_parse_flag(self, text: str, expected: bool) -> None:
        assert parse_flag(text) is expected

    def test_parse_flag_rejects_other_words(self) -> None:
        with pytest.raises(ValueError):
            parse_flag("maybe")

    def test_parse_setting_uses_field_type(self) -> None:
        assert parse_setting("master_width", " 720 ") == 720
        assert parse_setting("debug_logging", "true") is True
        assert parse_setting("theme", " dark ") == "dark"

    @pytest.mark.parametrize(("name", "text"), [("master_width", "wide"), ("nested_min_width", "0"), ("api_key", "x")])
    def test_parse_setting_rejects(self, name: str, text: str) -> None:
        with pytest.raises(ValueError):
            parse_setting(name, text)

    def test_parse_assignments(self) -> None:
        overrides = parse_assignments(["theme=dark", "confirm_removals=no", "window_geometry=AdnQ=="])

        assert overrides == {"theme": "dark", "confirm_removals": False, "window_geometry": "AdnQ=="}

    @pytest.mark.parametrize("item", ["theme", "=dark", "unknown=1"])
    def test_parse_assignments_rejects(self, item: str) -> None:
        with pytest.raises(ValueError):
            parse_assignments([item])

    def test_environment_overrides_from_mapping(self) -> None:
        found = environment_overrides({"STAFFDESK_THEME": "dark", "STAFFDESK_DEBUG_LOGGING": "1", "OTHER": "x"})

        assert found == {"theme": "dark", "debug_logging": True}
