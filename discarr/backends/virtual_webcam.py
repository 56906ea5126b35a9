# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
VirtualWebcamBackend — feeds video to a v4l2loopback device that Discord
uses as a camera.

Not implemented yet: the host must load v4l2loopback + snd-aloop and pass
/dev/video* through, and the Discord camera toggle still needs automating.
The feeder side (FFmpegV4L2Feeder) is ready for a ``LoopbackTarget``.
"""

from ..errors import BackendNotImplemented
from ..target import Target
from .base import OutputBackend

NOT_IMPLEMENTED = ("Virtual webcam backend is not yet implemented. "
                   "Use output.mode=screen_share for now.")


class VirtualWebcamBackend(OutputBackend):
    name = "virtual_webcam"

    async def prepare(self) -> None:
        raise BackendNotImplemented(NOT_IMPLEMENTED)

    def get_target(self) -> Target:
        raise BackendNotImplemented(NOT_IMPLEMENTED)

    async def start_stream(self) -> None:
        raise BackendNotImplemented(NOT_IMPLEMENTED)

    async def stop_stream(self) -> None:
        raise BackendNotImplemented(NOT_IMPLEMENTED)

    async def shutdown(self) -> None:
        pass  # nothing to tear down
