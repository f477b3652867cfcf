"""
Path resolution for the configuration helper.

This module decides where the helper keeps its own small settings file and how
user-entered paths are cleaned before they are handed to the host service.
"""

from __future__ import annotations

import os
from pathlib import Path

from helper_engine.errors import SettingsError

APP_DIR_NAME = "confhelper"
DATA_ROOT_ENV_VAR = "CONFHELPER_DATA_ROOT"


def default_data_root() -> Path:
    """
    Resolve the default data root.

    Preference order:
    1) %CONFHELPER_DATA_ROOT% if set
    2) %LOCALAPPDATA%\\confhelper
    3) %APPDATA%\\confhelper (Roaming)
    4) $XDG_CONFIG_HOME/confhelper, else ~/.config/confhelper

    Raises
    ------
    SettingsError
        If no candidate location can be determined.
    """
    override = os.environ.get(DATA_ROOT_ENV_VAR)
    if override:
        return Path(override)

    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / APP_DIR_NAME

    roaming = os.environ.get("APPDATA")
    if roaming:
        return Path(roaming) / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME

    try:
        home = Path.home()
    except RuntimeError as exc:
        raise SettingsError("No settings location: home directory cannot be determined.") from exc
    return home / ".config" / APP_DIR_NAME


def sanitize_path(text: str) -> str:
    """
    Trim a user-entered path and normalize its separators.

    Returns
    -------
    str
        The cleaned path, or an empty string for blank input.
    """
    trimmed = text.strip()
    if not trimmed:
        return ""
    return os.path.normpath(trimmed)
