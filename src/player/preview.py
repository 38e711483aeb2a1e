# src/player/preview.py
"""
Hover-to-play preview controller.

start() fades a track's preview in, stop() fades it out and releases it.
One session is current at a time; sessions that are fading out keep their
own timers and finish on their own, so a new preview never waits for the
previous one to go quiet.

    IDLE -> FADING_IN -> PLAYING
        start()       volume == 1.0
    FADING_IN | PLAYING -> FADING_OUT -> IDLE
        stop()                    volume == 0.0, resource paused + released
"""
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Optional

from core.config import PreviewConfig
from core.errors import (
    InteractionRequired,
    InterruptedByStop,
    classify_rejection,
)
from core.models import PreviewPhase
from core.scheduler import Scheduler, TimerHandle
from core.state import AppState

logger = logging.getLogger(__name__)

ADVISORY_MESSAGE = "Click anywhere in the window to enable track previews."
ACK_MESSAGE = "You're set! Hover a track to hear a preview."


class PreviewSession:
    __slots__ = (
        "track_id", "resource", "volume", "phase", "started_ms",
        "fade_timer", "safety_timer", "released", "_safety_mark",
    )

    def __init__(self, track_id: str, resource, started_ms: int):
        self.track_id = track_id
        self.resource = resource
        self.volume = 0.0
        self.phase = PreviewPhase.FADING_IN
        self.started_ms = started_ms
        self.fade_timer: Optional[TimerHandle] = None
        self.safety_timer: Optional[TimerHandle] = None
        self.released = False
        self._safety_mark = 0.0

    def __repr__(self) -> str:
        return f"PreviewSession({self.track_id!r}, {self.phase.name}, volume={self.volume:.2f})"


class PreviewController:
    def __init__(self, state: AppState, audio, scheduler: Scheduler, config: Optional[PreviewConfig] = None):
        self.state = state
        self.audio = audio
        self.scheduler = scheduler
        self.config = config or state.config

        self._session: Optional[PreviewSession] = None
        self._retiring: list[PreviewSession] = []

    # ----------------------------
    # Introspection
    # ----------------------------

    @property
    def current_track_id(self) -> Optional[str]:
        return self._session.track_id if self._session else None

    @property
    def phase(self) -> PreviewPhase:
        return self._session.phase if self._session else PreviewPhase.IDLE

    @property
    def volume(self) -> float:
        return self._session.volume if self._session else 0.0

    @property
    def retiring_count(self) -> int:
        return len(self._retiring)

    def has_session(self, track_id: str) -> bool:
        return self._session is not None and self._session.track_id == track_id

    def elapsed_ms(self, track_id: str) -> int:
        if not self.has_session(track_id):
            return 0
        return max(0, self.scheduler.now_ms() - self._session.started_ms)

    # ----------------------------
    # Public API
    # ----------------------------

    def start(self, track_id: str, preview_url: Optional[str] = None) -> None:
        if not track_id or not preview_url:
            return
        if self.has_session(track_id):
            return

        previous = self._session
        if previous is not None:
            # no stop() in between (e.g. focus moved by keyboard)
            self._session = None
            self._begin_fade_out(previous)

        resource = None
        try:
            resource = self.audio.create(preview_url)
            resource.set_volume(0.0)
        except Exception as e:
            logger.warning("Could not open preview for %s: %s", track_id, e)
            if resource is not None:
                try:
                    resource.release()
                except Exception as release_error:
                    logger.warning("Error releasing preview %s: %s", track_id, release_error)
            self.state.set_active_track(None)
            self.state.notify(f"Preview failed: {e}", "error")
            return

        session = PreviewSession(track_id, resource, self.scheduler.now_ms())
        self._session = session
        self.state.set_active_track(track_id)
        self._arm(session, self.scheduler.call_every(self.config.tick_ms, lambda: self._fade_in_tick(session)))
        logger.info("Preview started: %s", track_id)

        try:
            request = resource.play()
        except Exception as e:
            request = Future()
            request.set_exception(e)
        request.add_done_callback(lambda fut: self._on_play_settled(session, fut))

    def stop(self) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        self.state.set_active_track(None)
        self._begin_fade_out(session)

    def shutdown(self) -> None:
        """Silence and release everything now, without fading."""
        session, self._session = self._session, None
        if session is not None:
            self._release(session)
        for s in list(self._retiring):
            self._release(s)
        self.state.set_active_track(None)

    # ----------------------------
    # Fades
    # ----------------------------

    def _arm(self, session: PreviewSession, handle: TimerHandle) -> None:
        if session.fade_timer is not None:
            session.fade_timer.cancel()
        session.fade_timer = handle

    def _fade_in_tick(self, session: PreviewSession) -> None:
        if session.phase is not PreviewPhase.FADING_IN:
            return
        session.volume = min(1.0, round(session.volume + self.config.fade_step, 6))
        session.resource.set_volume(session.volume)
        if session.volume >= 1.0:
            session.volume = 1.0
            session.fade_timer.cancel()
            session.phase = PreviewPhase.PLAYING
            logger.debug("Preview %s at full volume", session.track_id)

    def _begin_fade_out(self, session: PreviewSession) -> None:
        session.phase = PreviewPhase.FADING_OUT
        self._retiring.append(session)
        self._arm(session, self.scheduler.call_every(self.config.tick_ms, lambda: self._fade_out_tick(session)))
        self._arm_safety(session)
        logger.debug("Preview %s fading out from %.2f", session.track_id, session.volume)

    def _fade_out_tick(self, session: PreviewSession) -> None:
        if session.released:
            return
        session.volume = max(0.0, round(session.volume - self.config.fade_step, 6))
        session.resource.set_volume(session.volume)
        if session.volume <= 0.0:
            session.volume = 0.0
            self._release(session)

    def _remaining_fade_ms(self, volume: float) -> int:
        return int(round(volume / self.config.fade_step * self.config.tick_ms))

    def _arm_safety(self, session: PreviewSession) -> None:
        if session.safety_timer is not None:
            session.safety_timer.cancel()
        session._safety_mark = session.volume
        delay = self._remaining_fade_ms(session.volume) + self.config.tick_ms
        session.safety_timer = self.scheduler.call_later(delay, lambda: self._safety_check(session))

    def _safety_check(self, session: PreviewSession) -> None:
        if session.released:
            return
        if session.volume > 0.0 and session.volume < session._safety_mark:
            # decrement timer is still making progress; give it the time its volume needs
            self._arm_safety(session)
            return
        logger.debug("Preview %s released by safety timer at %.2f", session.track_id, session.volume)
        session.volume = 0.0
        self._release(session)

    def _release(self, session: PreviewSession) -> None:
        if session.released:
            return
        session.released = True
        session.phase = PreviewPhase.IDLE
        for handle in (session.fade_timer, session.safety_timer):
            if handle is not None:
                handle.cancel()
        if session in self._retiring:
            self._retiring.remove(session)
        try:
            session.resource.pause()
        except Exception as e:
            logger.warning("Error pausing preview %s: %s", session.track_id, e)
        try:
            session.resource.release()
        except Exception as e:
            logger.warning("Error releasing preview %s: %s", session.track_id, e)
        logger.info("Preview released: %s", session.track_id)

    # ----------------------------
    # play() outcome
    # ----------------------------

    def _on_play_settled(self, session: PreviewSession, fut: Future) -> None:
        if fut.cancelled():
            return
        if session is not self._session:
            logger.debug("Ignoring stale play() outcome for %s", session.track_id)
            return

        exc = fut.exception()
        if exc is None:
            if self.state.advisory_shown:
                self.state.advisory_shown = False
                self.state.notify(ACK_MESSAGE, "success")
            return

        err = classify_rejection(exc)
        if isinstance(err, InterruptedByStop):
            logger.debug("Preview %s interrupted: %s", session.track_id, err)
        elif isinstance(err, InteractionRequired):
            if not self.state.advisory_shown:
                self.state.advisory_shown = True
                self.state.notify(ADVISORY_MESSAGE, "info")
        else:
            logger.warning("Preview %s failed: %s", session.track_id, err)
            self.state.notify(f"Preview failed: {err}", "error")
            self.stop()

