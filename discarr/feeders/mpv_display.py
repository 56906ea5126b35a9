# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
MPVDisplayFeeder — plays the video fullscreen with mpv on an X display.

Used by the screen-share backend: mpv renders onto the (usually Xvfb)
display that Discord is sharing.
"""

import os

from ..target import DisplayTarget
from .process import ProcessFeeder


class MPVDisplayFeeder(ProcessFeeder):
    name = "mpv-display"
    target_types = (DisplayTarget,)

    def build_command(self, source: str, target: DisplayTarget) -> list[str]:
        return [
            "mpv",
            "--no-osc",                     # no on-screen controller
            "--no-input-default-bindings",  # no keyboard shortcuts
            "--fs",                         # fullscreen on the display
            "--no-audio-display",           # no cover art / visualiser window
            "--no-terminal",
            source,
        ]

    def build_env(self, target: DisplayTarget) -> dict:
        env = os.environ.copy()
        env["DISPLAY"] = target.display
        env.setdefault("XDG_RUNTIME_DIR", f"/run/user/{os.getuid()}")
        return env
