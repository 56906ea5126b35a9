# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Abstract base class for Discarr video feeders.

A feeder owns the local process that produces the video signal and writes
it to the delivery target handed out by the active output backend.  Each
feeder declares which target shapes it can write to.

    stopped --feed--> playing --pause--> paused --resume--> playing
       ^                 |                  |
       +------stop-------+-------stop-------+

pause/resume from a non-matching state is a no-op, not an error.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ..target import Target


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class VideoFeeder(ABC):
    """Interface every video feeder must implement."""

    name: str = ""

    @abstractmethod
    def supports_target(self, target: Target) -> bool: ...

    @abstractmethod
    async def feed(self, source: str, target: Target) -> None:
        """Play *source* (path or URL) into *target*, replacing any current playback."""

    @abstractmethod
    async def stop(self) -> None: ...

    @abstractmethod
    async def pause(self) -> None: ...

    @abstractmethod
    async def resume(self) -> None: ...

    @abstractmethod
    def get_state(self) -> PlaybackState: ...
