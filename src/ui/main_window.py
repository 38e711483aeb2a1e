from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QHBoxLayout, QToolButton, QStyle
)
from PySide6.QtGui import QShortcut, QKeySequence

from core.scheduler import QtScheduler
from core.track_source import count_playable
from player.preview import PreviewController
from ui.widgets.track_list_widget import TrackListWidget
from ui.widgets.toast import ToastManager
from ui.workers.track_loader import TrackLoader


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Preview Deck")
        self.resize(820, 560)
        self.app_state = app_state
        self.loader = None

        cfg = self.app_state.config

        # --- Preview controller ---
        self.scheduler = QtScheduler(self)
        self.preview = None
        if self.app_state.audio is not None:
            self.preview = PreviewController(self.app_state, self.app_state.audio, self.scheduler, cfg)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)

        # --- Top bar ---
        top_bar = QHBoxLayout()

        self.title_label = QLabel("Top tracks")
        self.title_label.setObjectName("TitleLabel")
        top_bar.addWidget(self.title_label)
        top_bar.addStretch(1)

        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
        self.btn_refresh.setToolTip("Reload tracks")
        self.btn_refresh.clicked.connect(self.reload_tracks)
        top_bar.addWidget(self.btn_refresh)

        self.layout.addLayout(top_bar)

        # --- Track list ---
        owns_session = self.preview.has_session if self.preview else None
        progress_of = self._progress_of if self.preview else None
        self.track_list = TrackListWidget(self.app_state, owns_session=owns_session, progress_of=progress_of)
        self.layout.addWidget(self.track_list, 1)

        if self.preview:
            self.track_list.previewRequested.connect(self.preview.start)
            self.track_list.previewEnded.connect(self.preview.stop)

        QShortcut(QKeySequence("F5"), self, activated=self.reload_tracks)
        QShortcut(QKeySequence("Escape"), self, activated=self._stop_preview)

        self.app_state.status_changed.connect(lambda s: self.statusBar().showMessage(s, 4000))

        self.setStyleSheet(self.styleSheet() + """
            QLabel#TitleLabel {
                color: #e5e7eb;
                font-size: 15px;
                font-weight: 600;
                padding: 4px 2px;
            }
            QToolButton {
                border: 1px solid transparent;
                background: transparent;
                padding: 6px;
                border-radius: 10px;
            }

            QToolButton:hover {
                background: #0b1222;
                border-color: #1f2937;
            }

            QToolButton:pressed {
                background: #0f172a;
            }
            """)

        self.show_queued_notifications()
        self.reload_tracks()

    def _progress_of(self, track_id: str) -> float:
        total = self.app_state.config.progress_duration_ms
        return min(1.0, self.preview.elapsed_ms(track_id) / total)

    def _stop_preview(self):
        if self.preview:
            self.preview.stop()

    # ------------------ loading ------------------
    def reload_tracks(self):
        if self.loader is not None and self.loader.isRunning():
            return

        self.btn_refresh.setEnabled(False)
        self.app_state.set_status("Loading tracks…")

        self.loader = TrackLoader(self.app_state.config, parent=self)
        self.loader.loaded_signal.connect(self._on_tracks_loaded)
        self.loader.finished_signal.connect(self._on_load_finished)
        self.loader.start()

    def _on_tracks_loaded(self, tracks):
        self.track_list.set_tracks(tracks)
        playable = count_playable(tracks)
        if tracks and not playable:
            self.app_state.notify("None of these tracks has a preview.", "warning")

    def _on_load_finished(self, ok: bool, msg: str):
        self.btn_refresh.setEnabled(True)
        self.app_state.set_status(msg)
        if not ok:
            self.app_state.notify(msg, "error")

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        # n is core.state.Notify
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        kind = getattr(n, "notify_type", "info") or "info"
        self.toasts.show_toast(msg, notify_type=kind, timeout_ms=self.app_state.config.toast_timeout_ms)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    def closeEvent(self, event):
        if self.preview:
            self.preview.shutdown()
        if self.loader is not None and self.loader.isRunning():
            self.loader.wait(2000)
        super().closeEvent(event)
