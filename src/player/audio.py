# src/player/audio.py
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Optional

from PySide6.QtCore import QEvent, QObject, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from core.errors import InteractionRequired, InterruptedByStop, PlaybackFailure

logger = logging.getLogger(__name__)

_GESTURE_EVENTS = (
    QEvent.Type.MouseButtonPress,
    QEvent.Type.KeyPress,
    QEvent.Type.TouchBegin,
)


def to_qurl(url: str) -> QUrl:
    if "://" in url:
        return QUrl(url)
    return QUrl.fromLocalFile(url)


class InteractionGate(QObject):
    """
    Application-wide event filter. Until the first click / key press,
    previews are refused the way a browser refuses autoplay.
    """

    def __init__(self, parent: Optional[QObject] = None, engaged: bool = False):
        super().__init__(parent)
        self.engaged = engaged

    def eventFilter(self, obj, event):
        if not self.engaged and event.type() in _GESTURE_EVENTS:
            logger.debug("User gesture received; previews unlocked")
            self.engaged = True
        return False


class QtPreviewResource(QObject):
    """
    One transient QMediaPlayer for one preview URL.
    play() returns a Future that resolves once Qt reports PlayingState.
    """

    def __init__(
        self,
        url: str,
        gate: Optional[InteractionGate] = None,
        parent: Optional[QObject] = None,
        player: Optional[QMediaPlayer] = None,
        output: Optional[QAudioOutput] = None,
    ):
        super().__init__(parent)
        self.url = url
        self._gate = gate
        self._pending: Optional[Future] = None
        self._released = False

        self.audio = output if output is not None else QAudioOutput(self)
        self.audio.setVolume(0.0)
        self.media = player if player is not None else QMediaPlayer(self)
        self.media.setAudioOutput(self.audio)

        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.errorOccurred.connect(self._on_qt_error)

        self.media.setSource(to_qurl(url))

    # ----------------------------
    # Qt handlers
    # ----------------------------

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState and self._pending is not None:
            fut, self._pending = self._pending, None
            if not fut.done():
                fut.set_result(None)

    def _on_qt_error(self, error: QMediaPlayer.Error, message: str = "") -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        text = message or self.media.errorString() or f"QMediaPlayer error {error}"
        logger.warning("Preview %s failed: %s", self.url, text)
        self._settle_pending(PlaybackFailure(text))

    def _settle_pending(self, exc: Exception) -> None:
        fut, self._pending = self._pending, None
        if fut is not None and not fut.done():
            fut.set_exception(exc)

    # ----------------------------
    # Public API
    # ----------------------------

    def set_volume(self, volume_0_to_1: float) -> None:
        if self._released:
            return
        self.audio.setVolume(min(1.0, max(0.0, float(volume_0_to_1))))

    def play(self) -> Future:
        fut: Future = Future()
        if self._released:
            fut.set_exception(PlaybackFailure("preview resource already released"))
            return fut
        if self._gate is not None and not self._gate.engaged:
            fut.set_exception(InteractionRequired(
                "play() failed because the user didn't interact with the application first"
            ))
            return fut

        self._settle_pending(InterruptedByStop("The play() request was interrupted by a new play() request"))
        self._pending = fut
        self.media.play()
        if self.media.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self._on_qt_state_changed(QMediaPlayer.PlaybackState.PlayingState)
        return fut

    def pause(self) -> None:
        if self._released:
            return
        self._settle_pending(InterruptedByStop("The play() request was interrupted by a call to pause()"))
        self.media.pause()

    def release(self) -> None:
        if self._released:
            return
        self._settle_pending(InterruptedByStop("The play() request was interrupted because the media was removed"))
        self._released = True
        self.media.stop()
        self.media.setSource(QUrl())
        self.deleteLater()


class QtAudioBackend(QObject):
    def __init__(self, gate: Optional[InteractionGate] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.gate = gate

    def create(self, url: str) -> QtPreviewResource:
        return QtPreviewResource(url, gate=self.gate, parent=self)
