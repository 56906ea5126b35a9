# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
ProcessFeeder — shared plumbing for feeders backed by one child process.

Subclass contract:

    class MyFeeder(ProcessFeeder):
        name = "my-feeder"
        target_types = (DisplayTarget,)

        def build_command(self, source, target) -> list[str]: ...
        def build_env(self, target) -> dict: ...   # optional

Pause and resume suspend / continue the process with SIGSTOP / SIGCONT,
so the process identity survives a pause.  An exit watcher task is started
with every process; when the process dies on its own (crash, end of media)
the watcher drops the handle and the state falls back to stopped.  All
state changes happen on the event loop.
"""

import asyncio
import logging
import os
import signal

from ..errors import FeederError, UnsupportedTarget
from ..target import Target
from .base import PlaybackState, VideoFeeder

log = logging.getLogger(__name__)


class ProcessFeeder(VideoFeeder):
    # ── Subclass must set these ──
    name: str = ""
    target_types: tuple = ()

    STOP_TIMEOUT = 2  # seconds between SIGTERM and SIGKILL

    def __init__(self):
        self._process: asyncio.subprocess.Process | None = None
        self._watcher: asyncio.Task | None = None
        self._state = PlaybackState.STOPPED

    # ── Subclass hooks ──

    def build_command(self, source: str, target: Target) -> list[str]:
        raise NotImplementedError

    def build_env(self, target: Target) -> dict:
        return os.environ.copy()

    # ── VideoFeeder ──

    def supports_target(self, target: Target) -> bool:
        return isinstance(target, self.target_types)

    def get_state(self) -> PlaybackState:
        return self._state

    @property
    def pid(self) -> int | None:
        """PID of the owned process, or None."""
        return self._process.pid if self._process else None

    async def feed(self, source: str, target: Target) -> None:
        if not self.supports_target(target):
            raise UnsupportedTarget(
                f"{self.name} does not support {getattr(target, 'type', target)} target")

        await self.stop()

        cmd = self.build_command(source, target)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                env=self.build_env(target),
            )
        except OSError as e:
            raise FeederError(f"{self.name} failed to start {cmd[0]}: {e}") from e

        self._process = process
        self._state = PlaybackState.PLAYING
        self._watcher = asyncio.create_task(self._watch_process(process))
        log.info("%s playing %s (pid %d)", self.name, source, process.pid)

    async def _watch_process(self, process: asyncio.subprocess.Process):
        """Wait for *process* to exit; if it is still ours, fall back to stopped."""
        returncode = await process.wait()
        if self._process is process:
            self._process = None
            self._watcher = None
            self._state = PlaybackState.STOPPED
            log.info("%s process %d exited on its own (code %s)",
                     self.name, process.pid, returncode)

    async def stop(self) -> None:
        process, self._process = self._process, None
        watcher, self._watcher = self._watcher, None
        was_paused = self._state is PlaybackState.PAUSED
        self._state = PlaybackState.STOPPED

        if watcher:
            watcher.cancel()
        if process is None or process.returncode is not None:
            return

        try:
            process.terminate()
            if was_paused:
                # SIGTERM stays pending on a stopped process until it continues
                process.send_signal(signal.SIGCONT)
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), self.STOP_TIMEOUT)
        except asyncio.TimeoutError:
            log.warning("%s process %d ignored SIGTERM — killing", self.name, process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        log.info("%s stopped (pid %d)", self.name, process.pid)

    async def pause(self) -> None:
        if self._state is not PlaybackState.PLAYING or self._process is None:
            return
        try:
            self._process.send_signal(signal.SIGSTOP)
        except ProcessLookupError:
            # Exited before the watcher caught up
            await self.stop()
            return
        self._state = PlaybackState.PAUSED
        log.info("%s paused", self.name)

    async def resume(self) -> None:
        if self._state is not PlaybackState.PAUSED or self._process is None:
            return
        try:
            self._process.send_signal(signal.SIGCONT)
        except ProcessLookupError:
            await self.stop()
            return
        self._state = PlaybackState.PLAYING
        log.info("%s resumed", self.name)
