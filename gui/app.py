"""
Configuration helper GUI.

Single window backed by the shared error log, the shared theme manager, and a
ConfigController that talks to the host service.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import cast

from PySide6.QtCore import QObject, Qt, QThread, QUrl, Signal, Slot
from PySide6.QtGui import QColor, QDesktopServices, QPalette
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from gui.messages import translate
from gui.settings_store import SettingsThemeStore, load_gui_settings, save_gui_settings
from helper_engine.data_models import FailureRecord, millis_to_iso_utc
from helper_engine.error_log import ErrorLog
from helper_engine.errors import HelperError
from helper_engine.host_service import ActionResult, ConfigController, HostService
from helper_engine.shared import get_error_log, get_theme, setup_error_log, setup_theme
from helper_engine.theme import Theme, ThemeManager
from helper_engine.updates import UpdateCheckResult, UpdateController, UpdateService


def apply_qt_theme(theme: Theme) -> None:
    """
    Install a palette for ``theme`` on the running QApplication.

    Does nothing when no QApplication exists yet.
    """
    app = QApplication.instance()
    if not isinstance(app, QApplication):
        return

    palette = QPalette()
    if theme is Theme.DARK:
        palette.setColor(QPalette.ColorRole.Window, QColor(27, 38, 54))
        palette.setColor(QPalette.ColorRole.WindowText, QColor(230, 230, 230))
        palette.setColor(QPalette.ColorRole.Base, QColor(20, 28, 40))
        palette.setColor(QPalette.ColorRole.AlternateBase, QColor(34, 46, 64))
        palette.setColor(QPalette.ColorRole.Text, QColor(230, 230, 230))
        palette.setColor(QPalette.ColorRole.Button, QColor(40, 54, 74))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor(230, 230, 230))
        palette.setColor(QPalette.ColorRole.Highlight, QColor(64, 128, 200))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))
    app.setPalette(palette)
    app.setProperty("theme", theme.value)


class ConfigWorker(QObject):
    """
    Background worker that runs host service calls off the UI thread.

    The controller never raises; failures come back as an ActionResult with
    ``ok`` False and are already recorded in the error log.
    """

    finished = Signal(object)  # ActionResult

    def __init__(self, controller: ConfigController) -> None:
        super().__init__()
        self._controller = controller

    @Slot(str, str)
    def submit(self, install_path: str, bundle_path: str) -> None:
        self.finished.emit(self._controller.submit(install_path, bundle_path))

    @Slot(str)
    def clear(self, install_path: str) -> None:
        self.finished.emit(self._controller.clear(install_path))


class UpdateWorker(QObject):
    """Runs release checks off the UI thread."""

    checked = Signal(object)  # UpdateCheckResult

    def __init__(self, controller: UpdateController) -> None:
        super().__init__()
        self._controller = controller

    @Slot()
    def check(self) -> None:
        self.checked.emit(self._controller.check())


class ErrorLogBridge(QObject):
    """Re-emits error log changes as a Qt signal so widgets update on the UI thread."""

    changed = Signal(object)  # tuple[FailureRecord, ...]

    def __init__(self, error_log: ErrorLog) -> None:
        super().__init__()
        self._unsubscribe = error_log.subscribe(self.changed.emit)

    def detach(self) -> None:
        self._unsubscribe()


class MainWindow(QWidget):
    """
    Main window for the configuration helper.

    Responsibilities
    ----------------
    - Collect the installation directory and configuration bundle paths
    - Dispatch apply/clear requests through a background worker
    - Show the recent failure history and the active theme
    - Offer About and update checks when an update service is available
    """

    request_submit = Signal(str, str)
    request_clear = Signal(str)
    request_update_check = Signal()

    def __init__(
        self,
        service: HostService,
        *,
        updates: UpdateService | None = None,
        data_root: Path | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Configuration Helper")
        self.resize(760, 560)

        self._data_root = data_root
        self._settings = load_gui_settings(data_root=data_root)
        self._error_log = get_error_log()
        self._theme: ThemeManager = get_theme()

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)

        paths_box = QGroupBox("Paths")
        paths_layout = QVBoxLayout(paths_box)

        self.install_edit = QLineEdit(self._settings.last_install_path)
        self.install_edit.setPlaceholderText("Installation directory")
        btn_install = QPushButton("Browse…")
        btn_install.clicked.connect(lambda: self._browse_into(self.install_edit, "Select installation directory"))

        row = QHBoxLayout()
        row.addWidget(QLabel("Installation:"))
        row.addWidget(self.install_edit, 1)
        row.addWidget(btn_install)
        paths_layout.addLayout(row)

        self.bundle_edit = QLineEdit(self._settings.last_bundle_path)
        self.bundle_edit.setPlaceholderText("Configuration bundle directory")
        btn_bundle = QPushButton("Browse…")
        btn_bundle.clicked.connect(lambda: self._browse_into(self.bundle_edit, "Select configuration bundle"))

        row2 = QHBoxLayout()
        row2.addWidget(QLabel("Bundle:"))
        row2.addWidget(self.bundle_edit, 1)
        row2.addWidget(btn_bundle)
        paths_layout.addLayout(row2)

        actions = QHBoxLayout()
        self.btn_apply = QPushButton("Apply Config")
        self.btn_apply.clicked.connect(self._apply)
        self.btn_clear = QPushButton("Clear Config")
        self.btn_clear.clicked.connect(self._clear)
        self.btn_theme = QPushButton()
        self.btn_theme.clicked.connect(self._toggle_theme)
        actions.addWidget(self.btn_apply)
        actions.addWidget(self.btn_clear)
        self.btn_about = QPushButton("About")
        self.btn_about.clicked.connect(self._show_about)
        self.btn_updates = QPushButton("Check for Updates")
        self.btn_updates.clicked.connect(self._check_updates)
        actions.addStretch(1)
        actions.addWidget(self.btn_about)
        actions.addWidget(self.btn_updates)
        actions.addWidget(self.btn_theme)
        paths_layout.addLayout(actions)

        self.status_label = QLabel("Ready.")
        paths_layout.addWidget(self.status_label)

        root.addWidget(paths_box)

        history_box = QGroupBox("Recent errors")
        history_layout = QVBoxLayout(history_box)
        self.history_list = QListWidget()
        history_layout.addWidget(self.history_list, 1)

        history_actions = QHBoxLayout()
        btn_remove = QPushButton("Remove Selected")
        btn_remove.clicked.connect(self._remove_selected)
        btn_clear_history = QPushButton("Clear History")
        btn_clear_history.clicked.connect(lambda: self._error_log.clear_all())
        history_actions.addStretch(1)
        history_actions.addWidget(btn_remove)
        history_actions.addWidget(btn_clear_history)
        history_layout.addLayout(history_actions)

        root.addWidget(history_box, 1)

        self._bridge = ErrorLogBridge(self._error_log)
        self._bridge.changed.connect(self._render_history)
        self._render_history(self._error_log.records)
        self._render_theme_button()

        self._thread = QThread(self)
        self._worker = ConfigWorker(ConfigController(service, error_log=self._error_log))
        self._worker.moveToThread(self._thread)
        self.request_submit.connect(self._worker.submit)
        self.request_clear.connect(self._worker.clear)
        self._worker.finished.connect(self._on_finished)

        self._updates: UpdateController | None = None
        if updates is not None:
            self._updates = UpdateController(updates, error_log=self._error_log)
            self._update_worker = UpdateWorker(self._updates)
            self._update_worker.moveToThread(self._thread)
            self.request_update_check.connect(self._update_worker.check)
            self._update_worker.checked.connect(self._on_update_checked)
        self.btn_about.setEnabled(self._updates is not None)
        self.btn_updates.setEnabled(self._updates is not None)

        self._thread.start()

    def _browse_into(self, edit: QLineEdit, title: str) -> None:
        start_dir = edit.text().strip() or str(Path.home())
        directory = QFileDialog.getExistingDirectory(self, title, start_dir)
        if directory:
            edit.setText(directory)

    def _set_busy(self, busy: bool, text: str) -> None:
        self.btn_apply.setEnabled(not busy)
        self.btn_clear.setEnabled(not busy)
        self.status_label.setText(text)

    def _apply(self) -> None:
        self._remember_paths()
        self._set_busy(True, "Submitting…")
        self.request_submit.emit(self.install_edit.text(), self.bundle_edit.text())

    def _clear(self) -> None:
        self._remember_paths()
        self._set_busy(True, "Clearing…")
        self.request_clear.emit(self.install_edit.text())

    def _on_finished(self, result_obj: object) -> None:
        result = cast(ActionResult, result_obj)
        prefix = "Success" if result.ok else "Error"
        self._set_busy(False, f"{prefix}: {result.message}")

    def _remember_paths(self) -> None:
        self._settings = replace(
            load_gui_settings(data_root=self._data_root),
            last_install_path=self.install_edit.text().strip(),
            last_bundle_path=self.bundle_edit.text().strip(),
        )
        with self._error_log.absorb("settings", OSError, HelperError):
            save_gui_settings(data_root=self._data_root, settings=self._settings)

    def _render_history(self, records_obj: object) -> None:
        records = cast(tuple[FailureRecord, ...], records_obj)
        self.history_list.clear()
        for record in records:
            when = millis_to_iso_utc(record.timestamp)
            label = f"[{record.context}] " if record.context else ""
            item = QListWidgetItem(f"{when}  {label}{record.message}")
            item.setData(Qt.ItemDataRole.UserRole, record.sequence)
            if record.stack_trace:
                item.setToolTip(record.stack_trace)
            self.history_list.addItem(item)

    def _remove_selected(self) -> None:
        item = self.history_list.currentItem()
        if item is None:
            return
        self._error_log.discard(int(item.data(Qt.ItemDataRole.UserRole)))

    def _toggle_theme(self) -> None:
        with self._error_log.absorb("theme", OSError, HelperError):
            self._theme.toggle()
        self._render_theme_button()

    def _render_theme_button(self) -> None:
        self.btn_theme.setText("Light Theme" if self._theme.is_dark else "Dark Theme")

    def _show_about(self) -> None:
        if self._updates is None:
            return
        info = self._updates.about()
        if info is None:
            self.status_label.setText("Error: about information unavailable")
            return
        lines = [
            f"{info.app_name} {info.version}",
            f"Python {info.python_version}",
            info.repo_url,
        ]
        lines.extend(f"{d.name} ({d.url})" for d in info.developers)
        QMessageBox.information(self, "About", "\n".join(lines))

    def _check_updates(self) -> None:
        self.btn_updates.setEnabled(False)
        self.status_label.setText("Checking for updates…")
        self.request_update_check.emit()

    def _on_update_checked(self, result_obj: object) -> None:
        result = cast(UpdateCheckResult, result_obj)
        self.btn_updates.setEnabled(True)
        if not result.has_update or result.release is None or self._updates is None:
            self.status_label.setText("No update available.")
            return

        release = result.release
        self.status_label.setText(f"Version {release.version} is available.")
        answer = QMessageBox.question(
            self,
            "Update available",
            f"Version {release.version} was published {release.published_at}.\n\nOpen the release page?",
        )
        if answer == QMessageBox.StandardButton.Yes:
            QDesktopServices.openUrl(QUrl(self._updates.accessible_url(release.html_url)))

    def shutdown(self) -> None:
        """
        Stop the background worker and detach from the error log.

        Notes
        -----
        This method is safe to call multiple times.
        """
        self._bridge.detach()
        self._thread.quit()
        self._thread.wait(2000)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        try:
            self.shutdown()
        finally:
            super().closeEvent(event)


def run_gui(
    service: HostService,
    *,
    updates: UpdateService | None = None,
    data_root: Path | None = None,
    debug: bool | None = None,
) -> int:
    """
    Run the configuration helper GUI.

    The About and update buttons stay disabled when ``updates`` is None.

    Returns
    -------
    int
        Qt application exit code.
    """
    app = QApplication.instance() or QApplication(sys.argv)

    setup_error_log(lambda: ErrorLog(translate=translate, debug=debug))
    theme = setup_theme(lambda: ThemeManager(store=SettingsThemeStore(data_root=data_root)))
    theme.set_apply_callback(apply_qt_theme)
    theme.init_theme()

    w = MainWindow(service, updates=updates, data_root=data_root)
    w.show()
    return app.exec()
