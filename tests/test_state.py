"""
Tests for AppState.
"""
from core.state import AppState, Notify


class TestAppState:
    def test_initial_state(self, app_state):
        assert app_state.active_track_id is None
        assert app_state.advisory_shown is False
        assert app_state.queued_notifications == []

    def test_default_config(self):
        assert AppState().config.tick_ms == 100

    def test_set_active_track_emits_on_change_only(self, app_state):
        seen = []
        app_state.active_track_changed.connect(seen.append)

        app_state.set_active_track("a")
        app_state.set_active_track("a")
        app_state.set_active_track("b")
        app_state.set_active_track(None)
        app_state.set_active_track("")

        assert seen == ["a", "b", ""]
        assert app_state.active_track_id is None

    def test_notify_emits_notify(self, app_state, notifications):
        app_state.notify("hello", "success")

        assert notifications == [Notify(message="hello", notify_type="success")]

    def test_set_status_emits_status_changed(self, app_state):
        seen = []
        app_state.status_changed.connect(seen.append)

        app_state.set_status("Loading tracks…")

        assert seen == ["Loading tracks…"]
