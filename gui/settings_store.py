from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path

from helper_engine.errors import SettingsError
from helper_engine.paths import default_data_root
from helper_engine.theme import DEFAULT_THEME, Theme, parse_theme

SETTINGS_FILE_NAME = "gui_settings.json"


@dataclass(frozen=True, slots=True)
class GuiSettings:
    """
    Persisted GUI settings.

    Notes
    -----
    These settings only remember UI state between sessions. The host service
    never reads them.
    """

    theme: Theme
    last_install_path: str
    last_bundle_path: str

    @staticmethod
    def defaults() -> "GuiSettings":
        return GuiSettings(
            theme=DEFAULT_THEME,
            last_install_path="",
            last_bundle_path="",
        )


def _settings_path(data_root: Path | None) -> Path:
    root = default_data_root() if data_root is None else data_root
    return root / SETTINGS_FILE_NAME


def load_gui_settings(*, data_root: Path | None) -> GuiSettings:
    """
    Load GUI settings from disk.

    Parameters
    ----------
    data_root:
        Settings directory. If None, the default data root is used.

    Returns
    -------
    GuiSettings
        Loaded settings, or defaults if missing/unreadable or if no settings
        location can be resolved.
    """
    try:
        path = _settings_path(data_root)
        raw = path.read_text(encoding="utf-8")
        payload = json.loads(raw)
    except (OSError, ValueError, SettingsError):
        return GuiSettings.defaults()

    if not isinstance(payload, dict):
        return GuiSettings.defaults()

    def _s(v: object) -> str:
        return v.strip() if isinstance(v, str) else ""

    return GuiSettings(
        theme=parse_theme(payload.get("theme")) or DEFAULT_THEME,
        last_install_path=_s(payload.get("last_install_path")),
        last_bundle_path=_s(payload.get("last_bundle_path")),
    )


def save_gui_settings(*, data_root: Path | None, settings: GuiSettings) -> None:
    """
    Save GUI settings to disk.

    Parameters
    ----------
    data_root:
        Settings directory. If None, the default data root is used.
    settings:
        Settings to persist.
    """
    path = _settings_path(data_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "theme": settings.theme.value,
        "last_install_path": settings.last_install_path,
        "last_bundle_path": settings.last_bundle_path,
    }
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


class SettingsThemeStore:
    """Theme persistence backed by the GUI settings file."""

    def __init__(self, *, data_root: Path | None) -> None:
        self._data_root = data_root

    def load_theme(self) -> str | None:
        try:
            path = _settings_path(self._data_root)
        except SettingsError:
            return None
        if not path.exists():
            return None
        return load_gui_settings(data_root=self._data_root).theme.value

    def save_theme(self, theme: Theme) -> None:
        current = load_gui_settings(data_root=self._data_root)
        save_gui_settings(data_root=self._data_root, settings=replace(current, theme=theme))
