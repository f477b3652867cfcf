"""
Process-wide shared instances.

A SharedInstance wraps a factory behind an explicit ``setup()`` / ``get()``
pair. The error log accessor is strict: reading it before setup raises
InitializationOrderError so startup-order defects surface immediately. The
theme accessor initializes on first read.

Tests call the ``reset_*`` helpers to reconstruct instances between cases.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from helper_engine.error_log import ErrorLog
from helper_engine.errors import InitializationOrderError
from helper_engine.theme import ThemeManager

T = TypeVar("T")


class SharedInstance(Generic[T]):
    """
    Lazily constructed, explicitly initialized single instance.

    Parameters
    ----------
    factory:
        Zero-argument callable that builds the instance.
    name:
        Human-readable name used in error messages.
    create_on_get:
        When True, ``get()`` performs ``setup()`` instead of raising.
    """

    def __init__(self, factory: Callable[[], T], *, name: str, create_on_get: bool = False) -> None:
        self._factory = factory
        self._name = name
        self._create_on_get = create_on_get
        self._instance: T | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_initialized(self) -> bool:
        return self._instance is not None

    def setup(self, factory: Callable[[], T] | None = None) -> T:
        """
        Construct the instance if needed and return it.

        Parameters
        ----------
        factory:
            Optional one-off factory used instead of the default one. Ignored
            when an instance already exists.

        Returns
        -------
        T
            The shared instance. Repeated calls return the same object.
        """
        with self._lock:
            if self._instance is None:
                self._instance = (factory or self._factory)()
            return self._instance

    def get(self) -> T:
        """
        Return the shared instance.

        Raises
        ------
        InitializationOrderError
            If ``setup()`` has never been called and auto-creation is off.
        """
        instance = self._instance
        if instance is not None:
            return instance
        if self._create_on_get:
            return self.setup()
        raise InitializationOrderError(
            f"{self._name} not initialized. Call setup() before get()."
        )

    def reset(self) -> None:
        """Drop the current instance so the next setup() builds a fresh one."""
        with self._lock:
            self._instance = None


_error_log: SharedInstance[ErrorLog] = SharedInstance(ErrorLog, name="Global error log")
_theme: SharedInstance[ThemeManager] = SharedInstance(
    ThemeManager.initialized,
    name="Global theme manager",
    create_on_get=True,
)


def setup_error_log(factory: Callable[[], ErrorLog] | None = None) -> ErrorLog:
    return _error_log.setup(factory)


def get_error_log() -> ErrorLog:
    return _error_log.get()


def reset_error_log() -> None:
    _error_log.reset()


def setup_theme(factory: Callable[[], ThemeManager] | None = None) -> ThemeManager:
    return _theme.setup(factory)


def get_theme() -> ThemeManager:
    return _theme.get()


def reset_theme() -> None:
    _theme.reset()
