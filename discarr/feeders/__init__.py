"""
Video feeders for Discarr.

A feeder owns the local process that produces the video signal.  The
factory ``create_feeder_for_target`` returns a fresh instance of the first
feeder that can write to the backend's target.

Supported feeders:
  - ``MPVDisplayFeeder``  – mpv fullscreen on an X display (``DisplayTarget``)
  - ``FFmpegV4L2Feeder``  – ffmpeg into v4l2loopback (``LoopbackTarget``)

``HardwareTarget`` has no feeder: a capture card is fed by external gear.
"""

import logging

from ..errors import NoFeederForTarget
from ..target import Target
from .base import PlaybackState, VideoFeeder
from .ffmpeg_v4l2 import FFmpegV4L2Feeder
from .mpv_display import MPVDisplayFeeder
from .process import ProcessFeeder

logger = logging.getLogger(__name__)

__all__ = [
    "PlaybackState",
    "VideoFeeder",
    "ProcessFeeder",
    "MPVDisplayFeeder",
    "FFmpegV4L2Feeder",
    "FEEDERS",
    "create_feeder_for_target",
]

FEEDERS = (MPVDisplayFeeder, FFmpegV4L2Feeder)


def create_feeder_for_target(target: Target, feeders=FEEDERS) -> VideoFeeder:
    """Return a new feeder that supports *target*, or raise NoFeederForTarget."""
    for feeder_cls in feeders:
        feeder = feeder_cls()
        if feeder.supports_target(target):
            logger.debug("Feeder for %s target: %s", getattr(target, "type", "?"), feeder.name)
            return feeder
    raise NoFeederForTarget(
        f"No feeder supports target type: {getattr(target, 'type', type(target).__name__)}")
