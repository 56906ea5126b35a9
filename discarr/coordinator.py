# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
SessionCoordinator — binds the output backend to a video feeder.

    play(request)
      → resolve_source(request)             path / URL / Jellyfin stream
      → backend.prepare()                   Discord session + voice channel
      → backend.start_stream()              start presenting
      → create_feeder_for_target(target)    fresh feeder for the backend target
      → previous_feeder.stop()              never two feeder processes at once
      → feeder.feed(uri, target)            start the local process
      → commit the new feeder

At most one feeder is active at a time.  play/stop/pause/resume/login
run one at a time behind an asyncio.Lock because they mutate the feeder
slot and the backend's flags.  status() only reads and skips the lock.

Errors are never retried or swallowed here; they reach the caller
unchanged.  A play that fails before a feeder is selected leaves the
current feeder playing.  A failed feed stops the new feeder again and
the slot keeps the previous feeder, which is stopped by then.
"""

import asyncio
import logging

from .backends.base import OutputBackend
from .errors import NothingPlaying
from .feeders import PlaybackState, VideoFeeder, create_feeder_for_target
from .sources.resolver import PlayRequest, resolve_source

log = logging.getLogger(__name__)


class SessionCoordinator:
    def __init__(self, backend: OutputBackend, videos_path: str, jellyfin=None,
                 feeder_factory=create_feeder_for_target):
        self.backend = backend
        self.videos_path = videos_path
        self.jellyfin = jellyfin
        self._feeder_factory = feeder_factory
        self._feeder: VideoFeeder | None = None
        self._lock = asyncio.Lock()

    @property
    def feeder(self) -> VideoFeeder | None:
        return self._feeder

    def _jellyfin_resolve(self):
        if self.jellyfin is not None and self.jellyfin.is_configured():
            return self.jellyfin.resolve_to_stream_url
        return None

    async def play(self, request: PlayRequest) -> str:
        """Play *request*; returns the resolved URI."""
        async with self._lock:
            uri = await resolve_source(request, self.videos_path, self._jellyfin_resolve())

            await self.backend.prepare()
            await self.backend.start_stream()

            target = self.backend.get_target()
            feeder = self._feeder_factory(target)

            if self._feeder is not None:
                await self._feeder.stop()
            try:
                await feeder.feed(uri, target)
            except Exception:
                await feeder.stop()
                raise

            self._feeder = feeder
            log.info("Playing %s via %s → %s", uri, feeder.name, target)
            return uri

    async def stop(self) -> None:
        async with self._lock:
            feeder, self._feeder = self._feeder, None
            if feeder is not None:
                await feeder.stop()
            await self.backend.stop_stream()
            log.info("Stopped")

    async def pause(self) -> PlaybackState:
        async with self._lock:
            if self._feeder is None:
                raise NothingPlaying()
            await self._feeder.pause()
            return self._feeder.get_state()

    async def resume(self) -> PlaybackState:
        async with self._lock:
            if self._feeder is None:
                raise NothingPlaying()
            await self._feeder.resume()
            return self._feeder.get_state()

    def status(self) -> PlaybackState:
        if self._feeder is None:
            return PlaybackState.STOPPED
        return self._feeder.get_state()

    async def login(self) -> tuple[str, object]:
        """Open the backend's interactive login (screen share only)."""
        async with self._lock:
            return await self.backend.get_login()

    async def shutdown(self) -> None:
        """Stop playback and tear the backend down.  Never raises."""
        async with self._lock:
            feeder, self._feeder = self._feeder, None
            if feeder is not None:
                try:
                    await feeder.stop()
                except Exception as e:
                    log.warning("Feeder stop during shutdown failed (ignored): %s", e)
            await self.backend.shutdown()
            log.info("Coordinator shut down")
