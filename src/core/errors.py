# core/errors.py
"""
Why a preview's play() request was rejected.

Audio backends reject play futures with these types where they can tell the
cause apart; anything else goes through classify_rejection().
"""
from __future__ import annotations

_INTERACTION_MARKERS = ("interact", "gesture")
_INTERRUPT_MARKERS = ("interrupted", "pause()")


class PreviewError(Exception):
    """Base class for preview playback rejections."""


class InteractionRequired(PreviewError):
    """Playback needs a user gesture first. Shown once, clears on next success."""


class InterruptedByStop(PreviewError):
    """play() lost a race with pause(). Expected during fast hover in/out."""


class PlaybackFailure(PreviewError):
    """Anything else. Shown to the user; the session is abandoned."""


def classify_rejection(exc: BaseException) -> PreviewError:
    if isinstance(exc, PreviewError):
        return exc

    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()

    if any(m in lowered for m in _INTERACTION_MARKERS):
        err: PreviewError = InteractionRequired(message)
    elif any(m in lowered for m in _INTERRUPT_MARKERS):
        err = InterruptedByStop(message)
    else:
        err = PlaybackFailure(message)
    err.__cause__ = exc
    return err
