# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
HardwareCaptureBackend — presents a real capture device (/dev/videoX) to
Discord as a camera.

Not implemented yet: needs the capture device passed into the container
and, optionally, an ffmpeg passthrough for format conversion.
"""

from ..errors import BackendNotImplemented
from ..target import Target
from .base import OutputBackend

NOT_IMPLEMENTED = ("Hardware capture backend is not yet implemented. "
                   "Use output.mode=screen_share for now.")


class HardwareCaptureBackend(OutputBackend):
    name = "hardware_capture"

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
