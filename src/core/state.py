from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from core.config import PreviewConfig

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error

class AppState(QObject):
    """
    Shared context for the window, the track rows and the preview controller.
    The controller is the only writer of the active-track marker.
    """
    notification = Signal(object)         # emits Notify
    status_changed = Signal(str)          # generic status text
    active_track_changed = Signal(str)    # track id, "" when nothing is engaged

    def __init__(self, config: Optional[PreviewConfig] = None):
        super().__init__()
        self.config = config or PreviewConfig()
        self.audio = None
        self.queued_notifications: list[Notify] = []

        self._active_track_id: Optional[str] = None
        # "interaction required" toast was shown and no play() succeeded since
        self.advisory_shown = False

    @property
    def active_track_id(self) -> Optional[str]:
        return self._active_track_id

    def set_active_track(self, track_id: Optional[str]) -> None:
        track_id = track_id or None
        if track_id == self._active_track_id:
            return
        self._active_track_id = track_id
        self.active_track_changed.emit(track_id or "")

    def set_status(self, text: str) -> None:
        self.status_changed.emit(text)

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))
