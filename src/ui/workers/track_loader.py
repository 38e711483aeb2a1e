# ui/workers/track_loader.py
from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Signal

from core.config import PreviewConfig
from core.track_source import SpotifyClient, load_tracks_file

logger = logging.getLogger(__name__)


class TrackLoader(QThread):
    loaded_signal = Signal(list)           # list[TrackDescriptor]
    finished_signal = Signal(bool, str)    # ok, message

    def __init__(self, config: PreviewConfig, parent=None):
        super().__init__(parent)
        self.config = config

    def run(self):
        cfg = self.config
        try:
            if cfg.tracks_file:
                tracks = load_tracks_file(cfg.tracks_file)
                source = cfg.tracks_file
            elif cfg.spotify_token:
                client = SpotifyClient(cfg.spotify_token, base_url=cfg.api_base_url)
                tracks = client.top_tracks(limit=cfg.track_limit, time_range=cfg.spotify_time_range)
                source = "Spotify"
            else:
                self.finished_signal.emit(False, "No track source configured (set PREVIEW_TRACKS_FILE or SPOTIFY_ACCESS_TOKEN).")
                return

            self.loaded_signal.emit(tracks)
            self.finished_signal.emit(True, f"Loaded {len(tracks)} tracks from {source}.")
        except Exception as e:
            logger.exception("Track loading failed")
            self.finished_signal.emit(False, f"Loading tracks failed: {e}")
