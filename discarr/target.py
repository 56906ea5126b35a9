# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Delivery targets — where a feeder must write its video signal.

An output backend describes its delivery surface with exactly one of these
values; a feeder declares which of them it can write to.  A target never
says *how* the video is produced.

    DisplayTarget(":99")                       — X display (screen share)
    LoopbackTarget("/dev/video10", "hw:Loopback,0")  — v4l2loopback (+ ALSA)
    HardwareTarget("/dev/video0")              — real capture device
"""

from dataclasses import asdict, dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class DisplayTarget:
    display: str
    type: ClassVar[str] = "display"

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self)}


@dataclass(frozen=True)
class LoopbackTarget:
    device: str
    audio_device: str | None = None
    type: ClassVar[str] = "v4l2"

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self)}


@dataclass(frozen=True)
class HardwareTarget:
    device: str
    type: ClassVar[str] = "hardware"

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self)}


Target = Union[DisplayTarget, LoopbackTarget, HardwareTarget]
