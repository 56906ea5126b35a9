# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
FFmpegV4L2Feeder — decodes the video with ffmpeg into a v4l2loopback device.

Discord then picks the loopback device up as a camera.  When the target
carries an audio device (snd-aloop), the first audio stream is written to
it as well.  ``-re`` keeps ffmpeg at native frame rate so the loopback
camera plays in real time instead of racing through the file.
"""

from ..target import LoopbackTarget
from .process import ProcessFeeder

PIXEL_FORMAT = "yuv420p"
AUDIO_RATE = 48000


class FFmpegV4L2Feeder(ProcessFeeder):
    name = "ffmpeg-v4l2"
    target_types = (LoopbackTarget,)

    def build_command(self, source: str, target: LoopbackTarget) -> list[str]:
        cmd = [
            "ffmpeg", "-hide_banner", "-loglevel", "error", "-nostdin",
            "-re", "-i", source,
            "-map", "0:v:0",
            "-pix_fmt", PIXEL_FORMAT,
            "-f", "v4l2", target.device,
        ]
        if target.audio_device:
            cmd += [
                "-map", "0:a:0?",
                "-ac", "2", "-ar", str(AUDIO_RATE),
                "-f", "alsa", target.audio_device,
            ]
        return cmd
