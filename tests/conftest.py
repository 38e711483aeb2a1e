"""
Pytest configuration and fixtures for Preview Deck tests.
"""
import os
from concurrent.futures import Future

import pytest
from PySide6.QtCore import QCoreApplication

from core.config import PreviewConfig
from core.scheduler import VirtualScheduler
from core.state import AppState
from player.preview import PreviewController

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeResource:
    """Records what the controller does to it; play futures are settled by the test."""

    def __init__(self, url, clock):
        self.url = url
        self._clock = clock
        self.volumes = []
        self.requests = []
        self.paused = False
        self.released = False
        self.released_at = None
        self.play_error = None
        self.volume_error = None
        self.pause_error = None

    def set_volume(self, volume):
        if self.volume_error is not None:
            raise self.volume_error
        self.volumes.append(volume)

    def play(self):
        if self.play_error is not None:
            raise self.play_error
        fut = Future()
        self.requests.append(fut)
        return fut

    def pause(self):
        if self.pause_error is not None:
            raise self.pause_error
        self.paused = True

    def release(self):
        self.released = True
        self.released_at = self._clock.now_ms()


class FakeAudio:
    def __init__(self, clock):
        self._clock = clock
        self.created = []
        self.create_error = None
        self.play_error = None
        self.volume_error = None
        self.pause_error = None

    def create(self, url):
        if self.create_error is not None:
            raise self.create_error
        res = FakeResource(url, self._clock)
        res.play_error = self.play_error
        res.volume_error = self.volume_error
        res.pause_error = self.pause_error
        self.created.append(res)
        return res

    def last(self):
        return self.created[-1]


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """A QApplication on the offscreen platform when QtWidgets loads, else a QCoreApplication."""
    app = QCoreApplication.instance()
    if app is None:
        try:
            from PySide6.QtWidgets import QApplication
        except ImportError:
            app = QCoreApplication([])
        else:
            app = QApplication([])
    yield app


@pytest.fixture
def config() -> PreviewConfig:
    return PreviewConfig(tick_ms=100, fade_step=0.05)


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def app_state(config) -> AppState:
    return AppState(config)


@pytest.fixture
def notifications(app_state) -> list:
    received = []
    app_state.notification.connect(received.append)
    return received


@pytest.fixture
def audio(scheduler) -> FakeAudio:
    return FakeAudio(scheduler)


@pytest.fixture
def controller(app_state, audio, scheduler, config) -> PreviewController:
    return PreviewController(app_state, audio, scheduler, config)


@pytest.fixture
def make_controller(app_state, config):
    """Builds a controller on a caller-supplied scheduler."""
    def make(sched):
        fake = FakeAudio(sched)
        return PreviewController(app_state, fake, sched, config), fake
    return make
