"""
Tests for row visual state and the track table model.
"""
import pytest
from PySide6.QtCore import Qt

from core.models import RowVisual, TrackDescriptor, row_visual_state
from ui.models.track_table_model import ProgressRole, TrackTableModel, VisualRole


@pytest.fixture
def tracks():
    return [
        TrackDescriptor("a", "Alpha", ("Ann",), preview_url="http://x/a.mp3"),
        TrackDescriptor("b", "Beta", ("Bob", "Bea"), preview_url="http://x/b.mp3"),
        TrackDescriptor("c", "Gamma", ()),
    ]


class TestRowVisualState:
    def test_idle_when_nothing_active(self):
        assert row_visual_state("a", None, False) is RowVisual.IDLE

    def test_dimmed_when_other_track_active(self):
        assert row_visual_state("a", "b", False) is RowVisual.DIMMED
        assert row_visual_state("a", "b", True) is RowVisual.DIMMED

    def test_progress_when_active_and_owning_session(self):
        assert row_visual_state("a", "a", True) is RowVisual.PROGRESS

    def test_active_without_session_is_idle(self):
        assert row_visual_state("a", "a", False) is RowVisual.IDLE


class TestTrackTableModel:
    def test_display_columns(self, tracks):
        model = TrackTableModel(tracks)

        assert model.rowCount() == 3
        assert model.data(model.index(0, 0)) == "Alpha"
        assert model.data(model.index(1, 1)) == "Bob, Bea"
        assert model.data(model.index(2, 2)) == "no preview"
        assert model.data(model.index(0, 2)) == ""
        assert model.headerData(0, Qt.Horizontal) == "Track"

    def test_visual_roles_follow_marker(self, tracks):
        owned = {"a"}
        model = TrackTableModel(
            tracks,
            owns_session=lambda tid: tid in owned,
            progress_of=lambda tid: 0.4,
        )
        changed = []
        model.dataChanged.connect(lambda *args: changed.append(args))

        model.set_active_track("a")

        assert model.data(model.index(0, 0), VisualRole) is RowVisual.PROGRESS
        assert model.data(model.index(0, 0), ProgressRole) == 0.4
        assert model.data(model.index(1, 0), VisualRole) is RowVisual.DIMMED
        assert model.data(model.index(1, 0), ProgressRole) == 0.0
        assert changed

        model.set_active_track(None)
        assert all(model.visual_at(r) is RowVisual.IDLE for r in range(3))

    def test_lookup_helpers(self, tracks):
        model = TrackTableModel(tracks)

        assert model.track_at(1).track_id == "b"
        assert model.track_at(5) is None
        assert model.row_for_track_id("c") == 2
        assert model.row_for_track_id("zzz") == -1
        assert model.all_track_ids() == ["a", "b", "c"]
