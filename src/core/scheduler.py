# core/scheduler.py
"""
Timers behind a small interface so fades can run on the Qt event loop in the
app and on virtual time in tests.

    handle = scheduler.call_every(100, tick)
    ...
    handle.cancel()
"""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer

Callback = Callable[[], None]


class TimerHandle:
    """Cancellation token for one scheduled callback. cancel() is idempotent."""
    __slots__ = ("_active", "_on_cancel")

    def __init__(self, on_cancel: Optional[Callback] = None):
        self._active = True
        self._on_cancel = on_cancel

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()


class Scheduler:
    def now_ms(self) -> int:
        raise NotImplementedError

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError


class QtScheduler(QObject, Scheduler):
    """One QTimer per handle, parented to this object."""

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._clock = QElapsedTimer()
        self._clock.start()

    def now_ms(self) -> int:
        return int(self._clock.elapsed())

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        return self._start(max(0, int(delay_ms)), callback, single_shot=True)

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        return self._start(max(1, int(period_ms)), callback, single_shot=False)

    def _start(self, interval: int, callback: Callback, single_shot: bool) -> TimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(single_shot)
        timer.setInterval(interval)

        def dispose():
            timer.stop()
            timer.deleteLater()

        handle = TimerHandle(dispose)

        def fire():
            if not handle.active:
                return
            if single_shot:
                handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start()
        return handle


@dataclass(order=True)
class _Entry:
    due: int
    seq: int
    callback: Callback = field(compare=False)
    period: Optional[int] = field(compare=False, default=None)
    handle: TimerHandle = field(compare=False, default_factory=TimerHandle)


class VirtualScheduler(Scheduler):
    """
    Manual clock. Nothing runs until advance() is called; callbacks then fire
    in due order, ties in registration order.
    """

    def __init__(self):
        self._now = 0
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        return self._push(self._now + max(0, int(delay_ms)), callback, None).handle

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        period = max(1, int(period_ms))
        return self._push(self._now + period, callback, period).handle

    def _push(self, due: int, callback: Callback, period: Optional[int],
              handle: Optional[TimerHandle] = None) -> _Entry:
        entry = _Entry(due=due, seq=next(self._seq), callback=callback, period=period)
        if handle is not None:
            entry.handle = handle
        heapq.heappush(self._queue, entry)
        return entry

    def advance(self, ms: int) -> None:
        target = self._now + max(0, int(ms))
        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            if not entry.handle.active:
                continue
            self._now = entry.due
            if entry.period is None:
                entry.handle.cancel()
            else:
                self._push(entry.due + entry.period, entry.callback, entry.period, entry.handle)
            entry.callback()
        self._now = target

    @property
    def pending(self) -> int:
        return sum(1 for e in self._queue if e.handle.active)
