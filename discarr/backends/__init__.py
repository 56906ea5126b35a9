"""
Pluggable output backends for Discarr.

Each backend owns the remote Discord session for one presentation mode.
The factory function ``create_backend`` reads config.json and returns the
backend registered for ``output.mode``.

Supported modes:
  - ``screen_share``      – Firefox + Discord web client sharing an X display (default)
  - ``virtual_webcam``    – v4l2loopback camera (STUB — not yet implemented)
  - ``hardware_capture``  – real capture device (STUB — not yet implemented)
"""

import logging
import os

from ..lib.config import cfg
from .base import OutputBackend
from .hardware_capture import HardwareCaptureBackend
from .screen_share import ScreenShareBackend
from .virtual_webcam import VirtualWebcamBackend

logger = logging.getLogger(__name__)

__all__ = [
    "OutputBackend",
    "ScreenShareBackend",
    "VirtualWebcamBackend",
    "HardwareCaptureBackend",
    "BACKENDS",
    "create_backend",
]


def _screen_share() -> ScreenShareBackend:
    server_id = cfg("discord", "server_id")
    channel_id = cfg("discord", "voice_channel_id")
    logger.info("Output backend: screen share → server %s, channel %s", server_id, channel_id)
    return ScreenShareBackend(
        server_id, channel_id,
        cfg("discord", "profile_path", default="./discord-profile"),
        load_timeout=float(cfg("discord", "load_timeout", default=45)),
        action_timeout=float(cfg("discord", "action_timeout", default=20)),
        email=os.getenv("DISCORD_EMAIL") or None,
        password=os.getenv("DISCORD_PASSWORD") or None,
    )


def _virtual_webcam() -> VirtualWebcamBackend:
    logger.info("Output backend: virtual webcam (not implemented)")
    return VirtualWebcamBackend()


def _hardware_capture() -> HardwareCaptureBackend:
    logger.info("Output backend: hardware capture (not implemented)")
    return HardwareCaptureBackend()


BACKENDS = {
    "screen_share": _screen_share,
    "virtual_webcam": _virtual_webcam,
    "hardware_capture": _hardware_capture,
}


def create_backend(mode: str | None = None) -> OutputBackend:
    """Create the backend for *mode* (default: config ``output.mode``)."""
    if mode is None:
        mode = cfg("output", "mode", default="screen_share")
    mode = str(mode).lower()
    factory = BACKENDS.get(mode)
    if factory is None:
        raise ValueError(f"Unknown output mode: {mode}")
    return factory()
