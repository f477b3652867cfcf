"""
Display theme state.

The theme manager owns the current light/dark selection. Persistence and
rendering are delegated: a ThemeStore reads and writes the saved value, and an
``apply`` callback pushes the theme to whatever renders it (the GUI installs a
Qt palette). Without a store or callback the manager is purely in-memory.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Protocol


class Theme(str, Enum):
    """Supported display themes."""

    LIGHT = "light"
    DARK = "dark"


DEFAULT_THEME = Theme.DARK


class ThemeStore(Protocol):
    """Persistence for the selected theme."""

    def load_theme(self) -> str | None:
        """Return the saved theme value, or None if nothing was saved."""
        ...

    def save_theme(self, theme: Theme) -> None:
        """Persist the selected theme."""
        ...


def parse_theme(value: object) -> Theme | None:
    """Return the Theme named by ``value``, or None if it is not a known theme."""
    if isinstance(value, Theme):
        return value
    if isinstance(value, str):
        try:
            return Theme(value.strip().lower())
        except ValueError:
            return None
    return None


class ThemeManager:
    """
    Holds the current theme and applies changes.

    Parameters
    ----------
    store:
        Optional persistence for the selection.
    apply:
        Optional callback invoked with the theme every time it is applied.
    """

    def __init__(
        self,
        store: ThemeStore | None = None,
        apply: Callable[[Theme], None] | None = None,
    ) -> None:
        self._store = store
        self._apply = apply
        self._current = DEFAULT_THEME

    @classmethod
    def initialized(cls) -> "ThemeManager":
        manager = cls()
        manager.init_theme()
        return manager

    @property
    def current_theme(self) -> Theme:
        return self._current

    @property
    def is_dark(self) -> bool:
        return self._current is Theme.DARK

    def set_apply_callback(self, apply: Callable[[Theme], None] | None) -> None:
        """Replace the apply callback and re-apply the current theme through it."""
        self._apply = apply
        self._render()

    def set_theme(self, theme: Theme | str) -> Theme:
        """
        Select, apply, and persist a theme.

        The theme is applied before it is saved, so a failing store leaves the
        new theme active for this session and the error propagates.

        Raises
        ------
        ValueError
            If ``theme`` does not name a supported theme.
        """
        parsed = parse_theme(theme)
        if parsed is None:
            raise ValueError(f"Unsupported theme: {theme!r}")
        self._current = parsed
        self._render()
        if self._store is not None:
            self._store.save_theme(parsed)
        return parsed

    def toggle(self) -> Theme:
        """Switch between light and dark."""
        return self.set_theme(Theme.LIGHT if self.is_dark else Theme.DARK)

    def init_theme(self) -> Theme:
        """
        Load the saved theme and apply it.

        A missing or unrecognized saved value selects the dark theme.
        """
        saved = self._store.load_theme() if self._store is not None else None
        self._current = parse_theme(saved) or DEFAULT_THEME
        self._render()
        return self._current

    def _render(self) -> None:
        if self._apply is not None:
            self._apply(self._current)
