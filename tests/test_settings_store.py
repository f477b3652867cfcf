from __future__ import annotations

import json
from pathlib import Path

import pytest

from gui.settings_store import (
    SETTINGS_FILE_NAME,
    GuiSettings,
    SettingsThemeStore,
    load_gui_settings,
    save_gui_settings,
)
from helper_engine.clock import FixedClock
from helper_engine.error_log import ErrorLog
from helper_engine.errors import HelperError, SettingsError
from helper_engine.theme import Theme, ThemeManager


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_gui_settings(data_root=tmp_path) == GuiSettings.defaults()


def test_save_then_load(tmp_path: Path) -> None:
    settings = GuiSettings(theme=Theme.LIGHT, last_install_path="/opt/app", last_bundle_path="/b")
    save_gui_settings(data_root=tmp_path / "nested", settings=settings)

    assert load_gui_settings(data_root=tmp_path / "nested") == settings
    payload = json.loads((tmp_path / "nested" / SETTINGS_FILE_NAME).read_text(encoding="utf-8"))
    assert payload["theme"] == "light"


def test_corrupt_json_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / SETTINGS_FILE_NAME).write_text("{not json", encoding="utf-8")
    assert load_gui_settings(data_root=tmp_path) == GuiSettings.defaults()


def test_non_object_payload_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / SETTINGS_FILE_NAME).write_text("[1, 2]", encoding="utf-8")
    assert load_gui_settings(data_root=tmp_path) == GuiSettings.defaults()


def test_invalid_fields_are_replaced(tmp_path: Path) -> None:
    (tmp_path / SETTINGS_FILE_NAME).write_text(
        json.dumps({"theme": "sepia", "last_install_path": 5, "last_bundle_path": " /b "}),
        encoding="utf-8",
    )
    loaded = load_gui_settings(data_root=tmp_path)
    assert loaded.theme is Theme.DARK
    assert loaded.last_install_path == ""
    assert loaded.last_bundle_path == "/b"


def test_theme_store_round_trip_keeps_other_fields(tmp_path: Path) -> None:
    save_gui_settings(
        data_root=tmp_path,
        settings=GuiSettings(theme=Theme.DARK, last_install_path="/opt/app", last_bundle_path=""),
    )
    store = SettingsThemeStore(data_root=tmp_path)

    ThemeManager(store=store).set_theme(Theme.LIGHT)

    loaded = load_gui_settings(data_root=tmp_path)
    assert loaded.theme is Theme.LIGHT
    assert loaded.last_install_path == "/opt/app"


def test_theme_store_reports_nothing_saved(tmp_path: Path) -> None:
    assert SettingsThemeStore(data_root=tmp_path).load_theme() is None


@pytest.fixture
def no_settings_location(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise() -> Path:
        raise SettingsError("No settings location")

    monkeypatch.setattr("gui.settings_store.default_data_root", _raise)


def test_unresolvable_location_loads_defaults(no_settings_location: None) -> None:
    assert load_gui_settings(data_root=None) == GuiSettings.defaults()


def test_unresolvable_location_loads_no_theme(no_settings_location: None) -> None:
    store = SettingsThemeStore(data_root=None)

    assert store.load_theme() is None
    assert ThemeManager(store=store).init_theme() is Theme.DARK


def test_unresolvable_location_fails_save_but_keeps_theme(no_settings_location: None) -> None:
    applied: list[Theme] = []
    manager = ThemeManager(store=SettingsThemeStore(data_root=None), apply=applied.append)

    with pytest.raises(SettingsError, match="No settings location"):
        manager.toggle()

    assert manager.current_theme is Theme.LIGHT
    assert applied == [Theme.LIGHT]


def test_unresolvable_location_toggle_is_recorded(no_settings_location: None) -> None:
    log = ErrorLog(clock=FixedClock(fixed_ms=1), debug=False)
    manager = ThemeManager(store=SettingsThemeStore(data_root=None))

    with log.absorb("theme", OSError, HelperError):
        manager.toggle()

    latest = log.latest()
    assert latest is not None
    assert latest.context == "theme"
    assert latest.message == "No settings location"
    assert manager.current_theme is Theme.LIGHT
