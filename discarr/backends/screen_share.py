# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
ScreenShareBackend — shares a virtual X display (Xvfb) into Discord.

mpv plays the video fullscreen on the display; the Discord web client,
running in Firefox on the same display, screen-shares it into the voice
channel.

Every browser action blocks, so it runs in the default executor under
``asyncio.wait_for``.  An expired wait raises SessionTimeout.
"""

import asyncio
import logging
import os

from ..errors import SessionError, SessionTimeout
from ..target import DisplayTarget
from .base import OutputBackend
from .discord_controller import DiscordController

log = logging.getLogger(__name__)

DEFAULT_DISPLAY = ":99"


class ScreenShareBackend(OutputBackend):
    name = "screen_share"

    def __init__(self, server_id: str | None, voice_channel_id: str | None,
                 profile_path: str = "./discord-profile", *,
                 display: str | None = None,
                 load_timeout: float = 45, action_timeout: float = 20,
                 email: str | None = None, password: str | None = None,
                 controller_factory=DiscordController):
        self._server_id = server_id
        self._voice_channel_id = voice_channel_id
        self._profile_path = profile_path
        self._display = display
        self._load_timeout = load_timeout
        self._action_timeout = action_timeout
        # Controller waits use load_timeout; the outer wait has to outlast them
        self._page_timeout = load_timeout + action_timeout
        self._email = email
        self._password = password
        self._controller_factory = controller_factory
        self._controller = None
        self._prepared = False
        self._streaming = False
        self._closed = False

    @property
    def prepared(self) -> bool:
        return self._prepared

    @property
    def streaming(self) -> bool:
        return self._streaming

    # ── Helpers ──

    def _make_controller(self):
        return self._controller_factory(
            self._server_id, self._voice_channel_id, self._profile_path,
            wait_timeout=self._load_timeout)

    def _check_open(self):
        if self._closed:
            raise SessionError("Screen share backend has been shut down")

    async def _call(self, fn, *args, timeout: float):
        """Run a blocking controller method in the executor with a timeout."""
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, fn, *args), timeout)
        except asyncio.TimeoutError:
            raise SessionTimeout(
                f"Discord {fn.__name__} did not finish within {timeout:g}s") from None

    async def _discard_controller(self):
        """Best-effort teardown of the current controller."""
        controller, self._controller = self._controller, None
        if controller is None:
            return
        try:
            await self._call(controller.shutdown, timeout=self._action_timeout)
        except Exception as e:
            log.warning("Discord controller shutdown failed (ignored): %s", e)

    # ── OutputBackend ──

    async def prepare(self) -> None:
        self._check_open()
        if self._prepared:
            return

        # A login-only (headless) browser cannot share a display
        if self._controller is not None and self._controller.is_headless_only():
            log.info("Replacing login browser with display browser")
            await self._discard_controller()

        if self._controller is None:
            self._controller = self._make_controller()
            try:
                await self._call(self._controller.init, timeout=self._page_timeout)
            except Exception:
                await self._discard_controller()
                raise
        else:
            # Session already up, go back to the channel
            await self._call(self._controller.navigate_to_channel, timeout=self._page_timeout)

        await self._call(self._controller.join_voice_channel, timeout=self._action_timeout)
        self._prepared = True
        log.info("Screen share prepared")

    def get_target(self) -> DisplayTarget:
        return DisplayTarget(self._display or os.environ.get("DISPLAY") or DEFAULT_DISPLAY)

    async def start_stream(self) -> None:
        self._check_open()
        if not self._prepared:
            await self.prepare()
        if self._streaming:
            return
        await self._call(self._controller.start_screen_share, timeout=self._action_timeout)
        self._streaming = True

    async def stop_stream(self) -> None:
        if self._controller is None or not self._streaming:
            return
        await self._call(self._controller.stop_screen_share, timeout=self._action_timeout)
        self._streaming = False

    async def shutdown(self) -> None:
        self._closed = True
        self._prepared = False
        self._streaming = False
        await self._discard_controller()
        log.info("Screen share backend shut down")

    async def get_login(self) -> tuple[str, object]:
        self._check_open()
        if self._streaming:
            raise SessionError("Cannot open the Discord login while streaming")
        if self._controller is None:
            self._controller = self._make_controller()
        result = await self._call(self._controller.init_for_login, self._email, self._password,
                                  timeout=self._page_timeout)
        # The browser left the channel page; the next prepare navigates back
        self._prepared = False
        return result
