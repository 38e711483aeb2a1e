from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import requests

from core.models import TrackDescriptor

logger = logging.getLogger(__name__)


def descriptor_from_json(item: dict[str, Any]) -> Optional[TrackDescriptor]:
    """
    Accepts a Spotify track object or a flat dict:
      {"id", "name", "artists": [{"name"}] | ["name"], "album": {"images": [{"url"}]}, "preview_url"}
      {"id", "name", "artists", "album_art_url", "previewUrl"}
    Returns None for entries without an id.
    """
    if not isinstance(item, dict):
        return None
    track_id = str(item.get("id") or "").strip()
    if not track_id:
        return None

    artists: list[str] = []
    for a in item.get("artists") or []:
        name = a.get("name") if isinstance(a, dict) else a
        if name:
            artists.append(str(name))

    art = item.get("album_art_url") or item.get("albumArtUrl")
    if not art:
        images = (item.get("album") or {}).get("images") or []
        if images:
            art = images[0].get("url")

    preview = item.get("preview_url") or item.get("previewUrl")

    return TrackDescriptor(
        track_id=track_id,
        name=(item.get("name") or "").strip() or track_id,
        artists=tuple(artists),
        album_art_url=art or None,
        preview_url=(preview or "").strip() or None,
    )


def parse_tracks(payload: Any) -> list[TrackDescriptor]:
    # Spotify wraps lists: /me/top/tracks -> "items", /artists/{id}/top-tracks -> "tracks"
    if isinstance(payload, dict):
        payload = payload.get("items", payload.get("tracks", []))
    if not isinstance(payload, list):
        raise ValueError("expected a list of tracks")

    out: list[TrackDescriptor] = []
    seen: set[str] = set()
    for item in payload:
        d = descriptor_from_json(item)
        if d is None:
            logger.debug("Skipping track entry without id: %r", item)
            continue
        if d.track_id in seen:
            continue
        seen.add(d.track_id)
        out.append(d)
    return out


def load_tracks_file(path: str | Path) -> list[TrackDescriptor]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    tracks = parse_tracks(payload)
    logger.info("Loaded %d tracks from %s", len(tracks), p)
    return tracks


class SpotifyClient:
    def __init__(self, access_token: str, base_url: str = "https://api.spotify.com", user_agent: str = "preview-deck/0.1"):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Authorization": f"Bearer {access_token}",
        })

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        r = self.session.get(f"{self.base_url}{path}", params=params, timeout=15)
        r.raise_for_status()
        return r.json()

    def top_tracks(self, limit: int = 20, time_range: str = "short_term") -> list[TrackDescriptor]:
        # GET /v1/me/top/tracks?limit=&time_range=
        data = self._get("/v1/me/top/tracks", {"limit": int(limit), "time_range": time_range})
        return parse_tracks(data)

    def artist_top_tracks(self, artist_id: str, market: str = "US") -> list[TrackDescriptor]:
        # GET /v1/artists/{id}/top-tracks?market=
        data = self._get(f"/v1/artists/{artist_id}/top-tracks", {"market": market})
        return parse_tracks(data)


def count_playable(tracks: Iterable[TrackDescriptor]) -> int:
    return sum(1 for t in tracks if t.has_preview)
