# ui/track_table_model.py
from __future__ import annotations
from typing import Callable, Optional

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from core.models import RowVisual, TrackDescriptor, row_visual_state

VisualRole = int(Qt.ItemDataRole.UserRole) + 1
ProgressRole = int(Qt.ItemDataRole.UserRole) + 2

class TrackTableModel(QAbstractTableModel):
    """
    Rows are TrackDescriptors. Visual state is derived on read from the
    active-track marker and the preview controller, never stored.
    """
    def __init__(self, rows=(), owns_session: Optional[Callable[[str], bool]] = None,
                 progress_of: Optional[Callable[[str], float]] = None):
        super().__init__()
        self._rows: list[TrackDescriptor] = list(rows)
        self._active_track_id: Optional[str] = None
        self._owns_session = owns_session or (lambda _tid: False)
        self._progress_of = progress_of or (lambda _tid: 0.0)

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def set_active_track(self, track_id: Optional[str]):
        self._active_track_id = track_id or None
        self.refresh_visuals()

    def refresh_visuals(self):
        if not self._rows:
            return
        self.dataChanged.emit(
            self.index(0, 0),
            self.index(len(self._rows) - 1, self.columnCount() - 1),
            [VisualRole, ProgressRole],
        )

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 3

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return ["Track", "Artists", "Preview"][section]

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == 0:
                return row.name
            if col == 1:
                return row.artist_line
            if col == 2:
                return "" if row.has_preview else "no preview"
        if role == Qt.ToolTipRole and not row.has_preview:
            return "No preview available for this track"
        if role == Qt.UserRole:
            return row
        if role == VisualRole:
            return self.visual_at(index.row())
        if role == ProgressRole:
            if self.visual_at(index.row()) is RowVisual.PROGRESS:
                return self._progress_of(row.track_id)
            return 0.0
        return None

    def visual_at(self, row: int) -> RowVisual:
        r = self._rows[row]
        return row_visual_state(r.track_id, self._active_track_id, self._owns_session(r.track_id))

    def track_at(self, row: int) -> TrackDescriptor | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def row_for_track_id(self, track_id: str) -> int:
        for i, r in enumerate(self._rows):
            if r.track_id == track_id:
                return i
        return -1

    def all_track_ids(self) -> list[str]:
        return [r.track_id for r in self._rows]
