# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Jellyfin API client — resolves web UI item URLs to direct stream URLs.

Config (config.json):
    "jellyfin": { "server_url": "https://jellyfin.example.com", "user_id": "..." }

Secret (environment):
    JELLYFIN_API_KEY

Without ``user_id`` the stream URL is built directly from the item id.
With it, the item is looked up first so a dead or non-video link fails
before Discord is touched.
"""

import asyncio
import logging
import os

import aiohttp

from ..errors import IntegrationNotConfigured, UnresolvableReference
from ..lib.config import cfg
from .resolver import parse_item_id

log = logging.getLogger(__name__)

LOOKUP_TIMEOUT = 10


class JellyfinClient:
    def __init__(self, server_url: str | None = None, api_key: str | None = None,
                 user_id: str | None = None, session: aiohttp.ClientSession | None = None):
        self.server_url = server_url.rstrip("/") if server_url else None
        self.api_key = api_key or None
        self.user_id = user_id or None
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls) -> "JellyfinClient":
        return cls(
            cfg("jellyfin", "server_url"),
            os.getenv("JELLYFIN_API_KEY"),
            cfg("jellyfin", "user_id"),
        )

    def is_configured(self) -> bool:
        return bool(self.server_url and self.api_key)

    def _headers(self) -> dict:
        return {"X-Emby-Token": self.api_key, "Content-Type": "application/json"}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    async def resolve_to_stream_url(self, jellyfin_url: str) -> str:
        """Resolve a Jellyfin item URL to a direct stream URL."""
        if not self.is_configured():
            raise IntegrationNotConfigured(
                "Jellyfin not configured. Set jellyfin.server_url and JELLYFIN_API_KEY.")

        item_id = parse_item_id(jellyfin_url)
        if not item_id:
            raise UnresolvableReference(f"Could not parse item ID from URL: {jellyfin_url}")

        if self.user_id:
            await self._check_item(item_id)

        # Stream endpoint supports direct play for most formats
        return f"{self.server_url}/Videos/{item_id}/stream?api_key={self.api_key}"

    async def _check_item(self, item_id: str):
        session = await self._get_session()
        url = f"{self.server_url}/Users/{self.user_id}/Items/{item_id}"
        try:
            async with session.get(
                url, headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=LOOKUP_TIMEOUT),
            ) as resp:
                if resp.status == 404:
                    raise UnresolvableReference(f"Jellyfin item {item_id} not found")
                resp.raise_for_status()
                item = await resp.json()
        except aiohttp.ClientError as e:
            raise UnresolvableReference(f"Jellyfin lookup for {item_id} failed: {e}") from e
        except asyncio.TimeoutError:
            raise UnresolvableReference(
                f"Jellyfin lookup for {item_id} timed out after {LOOKUP_TIMEOUT}s") from None

        media_type = item.get("MediaType")
        if media_type and media_type != "Video":
            raise UnresolvableReference(f"Jellyfin item {item_id} is not a video ({media_type})")
        log.info("Jellyfin item %s: %s", item_id, item.get("Name", "?"))
