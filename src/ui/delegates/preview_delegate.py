# ui/preview_delegate.py
from __future__ import annotations
from PySide6.QtCore import QRect
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QStyledItemDelegate

from core.models import RowVisual
from ui.models.track_table_model import ProgressRole, VisualRole

DIM_OVERLAY = QColor(2, 6, 23, 150)
BAR_TRACK = QColor("#1f2937")
BAR_FILL = QColor("#38bdf8")
BAR_H = 3

class PreviewDelegate(QStyledItemDelegate):
    """Dims rows while another track is previewing and draws the preview progress bar."""

    def paint(self, painter: QPainter, option, index):
        super().paint(painter, option, index)

        visual = index.data(VisualRole)
        rect = option.rect

        if visual == RowVisual.DIMMED:
            painter.save()
            painter.fillRect(rect, DIM_OVERLAY)
            painter.restore()
            return

        if visual == RowVisual.PROGRESS:
            progress = float(index.data(ProgressRole) or 0.0)
            progress = max(0.0, min(1.0, progress))
            bar = QRect(rect.left(), rect.bottom() - BAR_H + 1, rect.width(), BAR_H)

            # one bar across the whole row: each cell paints its own slice
            view = option.widget
            row_w = view.viewport().width() if view is not None and hasattr(view, "viewport") else rect.width()
            filled = max(0, min(rect.width(), int(row_w * progress) - rect.left()))

            painter.save()
            painter.fillRect(bar, BAR_TRACK)
            if filled:
                painter.fillRect(QRect(bar.left(), bar.top(), filled, BAR_H), BAR_FILL)
            painter.restore()
