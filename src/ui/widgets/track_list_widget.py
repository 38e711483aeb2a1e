# ui/track_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt, QEvent, QTimer, QModelIndex
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableView, QAbstractItemView

from ui.models.track_table_model import TrackTableModel
from ui.delegates.preview_delegate import PreviewDelegate
from core.models import TrackDescriptor


class TrackListWidget(QWidget):
    """
    Track rows. Pointer enter / keyboard focus on a row begins a preview,
    pointer leave / blur ends it. Painting follows app_state's active-track marker.
    """
    previewRequested = Signal(str, str)   # track_id, preview_url
    previewEnded = Signal()

    REPAINT_MS = 50

    def __init__(self, app_state, owns_session=None, progress_of=None):
        super().__init__()
        self.app_state = app_state
        self._engaged_id: str | None = None

        self.table = QTableView()
        self.model = TrackTableModel([], owns_session=owns_session, progress_of=progress_of)
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.setMouseTracking(True)

        self.table.setColumnWidth(0, 320)
        self.table.setColumnWidth(1, 240)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setObjectName("TrackTable")
        self.table.verticalHeader().setDefaultSectionSize(32)

        self._apply_styles()

        self.delegate = PreviewDelegate(self.table)
        self.table.setItemDelegate(self.delegate)

        # Hover -> preview
        self.table.entered.connect(self._on_row_entered)
        self.table.viewport().installEventFilter(self)
        self.table.installEventFilter(self)

        # Keyboard focus -> preview
        self.table.selectionModel().currentRowChanged.connect(self._on_current_row_changed)

        # Progress bar animation
        self._repaint_timer = QTimer(self)
        self._repaint_timer.setInterval(self.REPAINT_MS)
        self._repaint_timer.timeout.connect(self.model.refresh_visuals)

        self.app_state.active_track_changed.connect(self._on_active_track_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    # -------------------------
    # External API
    # -------------------------
    def set_tracks(self, tracks: list[TrackDescriptor]):
        self._end_preview()
        self.model.set_rows(tracks)

    # -------------------------
    # UI Events
    # -------------------------
    def eventFilter(self, obj, event):
        if obj is self.table.viewport() and event.type() == QEvent.Type.Leave:
            self._end_preview()
        elif obj is self.table and event.type() == QEvent.Type.FocusOut:
            self._end_preview()
        elif obj is self.table and event.type() == QEvent.Type.FocusIn:
            idx = self.table.currentIndex()
            if idx.isValid() and event.reason() != Qt.FocusReason.MouseFocusReason:
                self._begin_preview(idx.row())
        return super().eventFilter(obj, event)

    def _on_row_entered(self, index: QModelIndex):
        if index.isValid():
            self._begin_preview(index.row())

    def _on_current_row_changed(self, current: QModelIndex, _previous: QModelIndex):
        if current.isValid() and self.table.hasFocus():
            self._begin_preview(current.row())

    def _begin_preview(self, row: int):
        track = self.model.track_at(row)
        if track is None:
            return
        if track.track_id == self._engaged_id:
            return
        if self._engaged_id is not None:
            self._end_preview()
        if not track.has_preview:
            return
        self._engaged_id = track.track_id
        self.previewRequested.emit(track.track_id, track.preview_url)

    def _end_preview(self):
        if self._engaged_id is None:
            return
        self._engaged_id = None
        self.previewEnded.emit()

    def _on_active_track_changed(self, track_id: str):
        self.model.set_active_track(track_id or None)
        if track_id:
            self._repaint_timer.start()
        else:
            self._repaint_timer.stop()

    def _apply_styles(self):
        self.setStyleSheet("""
        QTableView#TrackTable {
            background-color: #020617;
            alternate-background-color: #030712;
            border: none;
            color: #e5e7eb;
            gridline-color: #020617;
            selection-background-color: rgba(56, 189, 248, 0.2);
            selection-color: #e5e7eb;
        }

        QHeaderView::section {
            background-color: #020617;
            color: #9ca3af;
            padding: 4px 6px;
            border: none;
            border-bottom: 1px solid #111827;
            font-size: 11px;
            text-transform: uppercase;
            letter-spacing: 0.08em;
        }

        QTableView::item {
            padding: 4px 6px;
        }
        """)
