# core/models.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

@dataclass(frozen=True)
class TrackDescriptor:
    track_id: str
    name: str
    artists: tuple[str, ...] = ()
    album_art_url: Optional[str] = None
    preview_url: Optional[str] = None

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)

    @property
    def artist_line(self) -> str:
        return ", ".join(self.artists)

class PreviewPhase(Enum):
    IDLE = auto()
    FADING_IN = auto()
    PLAYING = auto()      # steady, volume == 1.0
    FADING_OUT = auto()

class RowVisual(Enum):
    IDLE = auto()
    DIMMED = auto()       # another track is engaged
    PROGRESS = auto()     # this track is engaged and owns a session

def row_visual_state(track_id: str, active_track_id: Optional[str], owns_session: bool) -> RowVisual:
    if active_track_id and active_track_id != track_id:
        return RowVisual.DIMMED
    if active_track_id == track_id and owns_session:
        return RowVisual.PROGRESS
    return RowVisual.IDLE
