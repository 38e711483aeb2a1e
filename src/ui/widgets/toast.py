from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import Qt, QTimer, QEasingCurve, QPoint, QPropertyAnimation
from PySide6.QtWidgets import (
    QWidget,
    QFrame,
    QLabel,
    QHBoxLayout,
    QToolButton,
    QGraphicsOpacityEffect,
)


@dataclass(frozen=True)
class ToastData:
    message: str
    notify_type: str = "info"  # "info" | "success" | "warning" | "error"
    timeout_ms: int = 3000


def normalize_kind(kind: str | None) -> str:
    kind = (kind or "info").lower()
    if kind == "warn":
        return "warning"
    if kind not in ("info", "success", "warning", "error"):
        return "info"
    return kind


def _colors(kind: str) -> tuple[str, str, str]:
    """
    Returns (bg, border, text).
    """
    kind = normalize_kind(kind)
    if kind == "success":
        return "#052e1a", "#16a34a", "#e5e7eb"
    if kind == "warning":
        return "#2a1a05", "#f59e0b", "#e5e7eb"
    if kind == "error":
        return "#2a0a0a", "#ef4444", "#e5e7eb"
    return "#0b1222", "#38bdf8", "#e5e7eb"


class ToastWidget(QFrame):
    def __init__(self, data: ToastData, manager: "ToastManager"):
        super().__init__(manager)
        self.data = data
        self._manager = manager

        bg, border, text = _colors(data.notify_type)

        self.setObjectName("Toast")
        self.setStyleSheet(f"""
        QFrame#Toast {{
            background: {bg};
            border: 1px solid {border};
            border-radius: 14px;
        }}
        QLabel {{
            color: {text};
            font-size: 12px;
        }}
        QToolButton {{
            border: none;
            background: transparent;
            color: {text};
            padding: 2px 6px;
        }}
        QToolButton:hover {{
            background: rgba(255,255,255,0.06);
            border-radius: 8px;
        }}
        """)

        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 10, 10, 10)
        root.setSpacing(10)

        self.lbl = QLabel(data.message)
        self.lbl.setWordWrap(True)

        self.btn_close = QToolButton()
        self.btn_close.setText("✕")
        self.btn_close.setCursor(Qt.CursorShape.PointingHandCursor)
        self.btn_close.clicked.connect(lambda: self._manager.dismiss(self))

        root.addWidget(self.lbl, 1)
        root.addWidget(self.btn_close, 0, Qt.AlignmentFlag.AlignTop)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(0.0)
        self.setGraphicsEffect(self._opacity)

        self._anims: list[QPropertyAnimation] = []

    def _animate(self, target, prop: bytes, start, end, curve: QEasingCurve.Type, ms: int = 180) -> QPropertyAnimation:
        anim = QPropertyAnimation(target, prop, self)
        anim.setDuration(ms)
        anim.setStartValue(start)
        anim.setEndValue(end)
        anim.setEasingCurve(curve)
        self._anims.append(anim)
        anim.finished.connect(lambda: self._anims.remove(anim) if anim in self._anims else None)
        anim.start()
        return anim

    def play_in(self, start_pos: QPoint, end_pos: QPoint):
        self.move(start_pos)
        self.show()
        self._animate(self, b"pos", start_pos, end_pos, QEasingCurve.Type.OutCubic)
        self._animate(self._opacity, b"opacity", 0.0, 1.0, QEasingCurve.Type.OutCubic)

    def play_out(self, on_done):
        # Slide slightly up while fading out
        self._animate(self, b"pos", self.pos(), self.pos() + QPoint(0, -6), QEasingCurve.Type.InCubic)
        fade = self._animate(self._opacity, b"opacity", self._opacity.opacity(), 0.0, QEasingCurve.Type.InCubic)
        fade.finished.connect(on_done)


class ToastManager(QWidget):
    """
    Overlay widget that stacks toasts top -> bottom in the host's top-right corner.
    A message identical to one still on screen is dropped.
    """
    def __init__(self, host: QWidget, max_visible: int = 4):
        super().__init__(host)
        self.host = host
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, False)

        self._toasts: list[ToastWidget] = []
        self._closing: set[ToastWidget] = set()
        self._margin = 14
        self._spacing = 10
        self._max_visible = max_visible

        self._reposition_timer = QTimer(self)
        self._reposition_timer.setSingleShot(True)
        self._reposition_timer.timeout.connect(self._layout_toasts)

        self.raise_()
        self.show()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._schedule_layout()

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 3000) -> Optional[ToastWidget]:
        kind = normalize_kind(notify_type)
        if any(t.data.message == message and t.data.notify_type == kind for t in self._toasts):
            return None

        self.setGeometry(self.host.rect())
        self.raise_()

        toast = ToastWidget(ToastData(message=message, notify_type=kind, timeout_ms=timeout_ms), manager=self)
        toast.setFixedWidth(min(420, max(260, self.width() // 2)))

        self._toasts.insert(0, toast)

        while len(self._toasts) > self._max_visible:
            old = self._toasts.pop()
            old.hide()
            old.deleteLater()

        self._layout_toasts(animate_new=toast)

        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self.dismiss(toast))
        return toast

    def dismiss(self, toast: ToastWidget):
        if toast not in self._toasts or toast in self._closing:
            return
        self._closing.add(toast)

        def remove():
            self._closing.discard(toast)
            if toast in self._toasts:
                self._toasts.remove(toast)
            toast.hide()
            toast.deleteLater()
            self._layout_toasts()

        toast.play_out(remove)

    def _schedule_layout(self):
        # Coalesce rapid resize / multiple toasts
        self._reposition_timer.start(0)

    def _layout_toasts(self, animate_new: ToastWidget | None = None):
        self.setGeometry(self.host.rect())

        x_right = self.width() - self._margin
        y = self._margin

        for t in self._toasts:
            t.adjustSize()
            h = t.sizeHint().height()
            t.setFixedHeight(h)

            end_pos = QPoint(x_right - t.width(), y)
            y += h + self._spacing

            if t is animate_new:
                t.play_in(start_pos=end_pos + QPoint(0, -12), end_pos=end_pos)
            elif t.isVisible():
                t._animate(t, b"pos", t.pos(), end_pos, QEasingCurve.Type.OutCubic, ms=160)
            else:
                t.move(end_pos)
                t.show()

        self.raise_()
