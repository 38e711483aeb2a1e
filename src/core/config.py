# core/config.py
"""
Settings for Preview Deck.
Defaults live on the dataclass; environment variables override them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class PreviewConfig:
    # Fade ramp
    tick_ms: int = 100
    fade_step: float = 0.05

    # Row progress bar length (Spotify previews are 30s)
    progress_duration_ms: int = 30000

    toast_timeout_ms: int = 3000

    # Reject play() until the user clicked / typed somewhere in the app
    require_gesture: bool = True

    # Track source
    tracks_file: Optional[str] = None
    spotify_token: Optional[str] = None
    spotify_time_range: str = "short_term"  # short_term | medium_term | long_term
    track_limit: int = 20
    api_base_url: str = "https://api.spotify.com"

    def __post_init__(self):
        if self.tick_ms <= 0:
            raise ValueError(f"tick_ms must be positive, got {self.tick_ms}")
        if not 0.0 < self.fade_step <= 1.0:
            raise ValueError(f"fade_step must be in (0, 1], got {self.fade_step}")
        if self.progress_duration_ms <= 0:
            raise ValueError(f"progress_duration_ms must be positive, got {self.progress_duration_ms}")
        if not 1 <= self.track_limit <= 50:
            raise ValueError(f"track_limit must be between 1 and 50, got {self.track_limit}")

    @property
    def fade_duration_ms(self) -> int:
        """Wall-clock time of a full 0 -> 1 ramp."""
        return int(round(self.tick_ms / self.fade_step))

    @classmethod
    def from_env(cls, environ=None) -> "PreviewConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        overrides = {}

        if "PREVIEW_TICK_MS" in env:
            overrides["tick_ms"] = _int(env, "PREVIEW_TICK_MS")
        if "PREVIEW_FADE_STEP" in env:
            overrides["fade_step"] = _float(env, "PREVIEW_FADE_STEP")
        if "PREVIEW_PROGRESS_MS" in env:
            overrides["progress_duration_ms"] = _int(env, "PREVIEW_PROGRESS_MS")
        if "PREVIEW_REQUIRE_GESTURE" in env:
            overrides["require_gesture"] = _bool(env, "PREVIEW_REQUIRE_GESTURE")
        if "PREVIEW_TRACK_LIMIT" in env:
            overrides["track_limit"] = _int(env, "PREVIEW_TRACK_LIMIT")

        tracks_file = (env.get("PREVIEW_TRACKS_FILE") or "").strip()
        if tracks_file:
            overrides["tracks_file"] = tracks_file

        token = (env.get("SPOTIFY_ACCESS_TOKEN") or "").strip()
        if token:
            overrides["spotify_token"] = token

        time_range = (env.get("SPOTIFY_TIME_RANGE") or "").strip()
        if time_range:
            if time_range not in ("short_term", "medium_term", "long_term"):
                raise ValueError(f"SPOTIFY_TIME_RANGE: unknown time range {time_range!r}")
            overrides["spotify_time_range"] = time_range

        base = (env.get("SPOTIFY_API_BASE") or "").strip()
        if base:
            overrides["api_base_url"] = base.rstrip("/")

        return replace(cfg, **overrides) if overrides else cfg


def _int(env, key: str) -> int:
    raw = env.get(key, "")
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key}: expected an integer, got {raw!r}") from None


def _float(env, key: str) -> float:
    raw = env.get(key, "")
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key}: expected a number, got {raw!r}") from None


def _bool(env, key: str) -> bool:
    raw = (env.get(key) or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{key}: expected a boolean, got {raw!r}")
