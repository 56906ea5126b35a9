"""Fakes shared by the Discarr tests."""

import asyncio
import sys
import time

from discarr.backends.base import OutputBackend
from discarr.errors import FeederError, SessionError
from discarr.feeders import PlaybackState, ProcessFeeder, VideoFeeder
from discarr.target import DisplayTarget


# ---------------------------------------------------------------------------
# Feeders
# ---------------------------------------------------------------------------
class SleepFeeder(ProcessFeeder):
    """Real child process standing in for mpv: a Python interpreter that sleeps."""

    name = "sleep"
    target_types = (DisplayTarget,)
    script = "import time; time.sleep(30)"

    def build_command(self, source, target):
        return [sys.executable, "-c", self.script]


class ExitFeeder(SleepFeeder):
    """Child process that ends on its own right away (end of media / crash)."""

    name = "exit"
    script = "pass"


class MissingBinaryFeeder(SleepFeeder):
    name = "missing"

    def build_command(self, source, target):
        return ["__discarr_no_such_binary__", source]


class FakeFeeder(VideoFeeder):
    """In-memory feeder recording what it was asked to do."""

    name = "fake"

    def __init__(self, fail=False):
        self.fail = fail
        self.fed = []
        self.stop_calls = 0
        self._state = PlaybackState.STOPPED

    def supports_target(self, target):
        return True

    async def feed(self, source, target):
        if self.fail:
            raise FeederError("fake feeder failed")
        self.fed.append((source, target))
        self._state = PlaybackState.PLAYING

    async def stop(self):
        self.stop_calls += 1
        self._state = PlaybackState.STOPPED

    async def pause(self):
        if self._state is PlaybackState.PLAYING:
            self._state = PlaybackState.PAUSED

    async def resume(self):
        if self._state is PlaybackState.PAUSED:
            self._state = PlaybackState.PLAYING

    def get_state(self):
        return self._state


async def wait_for_state(feeder, state, timeout=5.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while feeder.get_state() is not state:
        if loop.time() > deadline:
            raise AssertionError(f"{feeder.name} still {feeder.get_state()} after {timeout}s")
        await asyncio.sleep(0.05)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------
class FakeBackend(OutputBackend):
    """Backend recording calls; ``fail_on`` names methods that raise."""

    name = "fake"

    def __init__(self, target=DisplayTarget(":5"), fail_on=(), delay=0.0):
        self.target = target
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0
        self.login_result = ("png", b"\x89PNG fake")

    async def _record(self, name):
        self.calls.append(name)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if name in self.fail_on:
                raise SessionError(f"fake {name} failed")
        finally:
            self.active -= 1

    async def prepare(self):
        await self._record("prepare")

    def get_target(self):
        self.calls.append("get_target")
        return self.target

    async def start_stream(self):
        await self._record("start_stream")

    async def stop_stream(self):
        await self._record("stop_stream")

    async def shutdown(self):
        self.calls.append("shutdown")

    async def get_login(self):
        await self._record("get_login")
        return self.login_result


# ---------------------------------------------------------------------------
# Discord controller
# ---------------------------------------------------------------------------
class FakeController:
    """Stands in for DiscordController (no browser)."""

    def __init__(self, server_id, voice_channel_id, profile_path, wait_timeout=30):
        self.server_id = server_id
        self.voice_channel_id = voice_channel_id
        self.profile_path = profile_path
        self.wait_timeout = wait_timeout
        self.calls = []
        self.fail_on = set()
        self.slow = {}  # method name → seconds to block
        self.headless = False

    def _record(self, name):
        self.calls.append(name)
        if name in self.slow:
            time.sleep(self.slow[name])
        if name in self.fail_on:
            raise SessionError(f"fake {name} failed")

    def is_headless_only(self):
        return self.headless

    def init(self):
        self._record("init")

    def navigate_to_channel(self):
        self._record("navigate_to_channel")

    def join_voice_channel(self):
        self._record("join_voice_channel")

    def start_screen_share(self):
        self._record("start_screen_share")

    def stop_screen_share(self):
        self._record("stop_screen_share")

    def shutdown(self):
        self._record("shutdown")

    def init_for_login(self, email=None, password=None):
        if not self.calls:
            self.headless = True
        self._record("init_for_login")
        if email and password:
            return "json", {"status": "submitted", "email": email}
        return "png", b"\x89PNG qr"


class ControllerFactory:
    """Controller factory that keeps every controller it built."""

    def __init__(self, configure=None):
        self.created = []
        self._configure = configure

    def __call__(self, *args, **kwargs):
        controller = FakeController(*args, **kwargs)
        if self._configure:
            self._configure(controller)
        self.created.append(controller)
        return controller
