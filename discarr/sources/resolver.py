# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Play requests and their resolution to a single playable path or URL.

    {"source": "local",    "path": "movie.mp4"}           → /videos/movie.mp4
    {"source": "url",      "url": "http://x/a.mp4"}       → unchanged
    {"source": "jellyfin", "jellyfinUrl": "https://h/web#!/itemdetails.html?id=abc"}
                                                          → Jellyfin stream URL
"""

import logging
import os
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from ..errors import IntegrationNotConfigured, InvalidRequest, UnresolvableReference

log = logging.getLogger(__name__)

SOURCES = ("local", "url", "jellyfin")

_FRAGMENT_ID = re.compile(r"[?&]id=([^&]+)")


@dataclass(frozen=True)
class PlayRequest:
    source: str
    path: str | None = None
    url: str | None = None
    jellyfin_url: str | None = None

    @classmethod
    def from_json(cls, data) -> "PlayRequest":
        """Validate a /play body.  Raises InvalidRequest."""
        if not isinstance(data, dict):
            raise InvalidRequest("Request body must be a JSON object")
        source = data.get("source")
        if source not in SOURCES:
            raise InvalidRequest(f"source must be one of {', '.join(SOURCES)}")

        path, url, jellyfin_url = data.get("path"), data.get("url"), data.get("jellyfinUrl")
        for field, value in (("path", path), ("url", url), ("jellyfinUrl", jellyfin_url)):
            if value is not None and not isinstance(value, str):
                raise InvalidRequest(f"{field} must be a string")

        if source == "local" and not path:
            raise InvalidRequest("path is required when source is local")
        if source == "url" and not _is_http_url(url):
            raise InvalidRequest("url is required when source is url")
        if source == "jellyfin" and not _is_http_url(jellyfin_url):
            raise InvalidRequest("jellyfinUrl is required when source is jellyfin")

        return cls(source=source, path=path or None, url=url or None,
                   jellyfin_url=jellyfin_url or None)


def _is_http_url(value: str | None) -> bool:
    if not value or not value.startswith("http"):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def parse_item_id(catalog_url: str) -> str | None:
    """Extract the item id from a Jellyfin web URL.

    Looks at the ``id`` query parameter first, then at the same parameter
    inside the fragment, e.g.
    ``https://jellyfin.example.com/web/index.html#!/itemdetails.html?id=abc123``.
    """
    try:
        parts = urlsplit(catalog_url)
    except ValueError:
        return None
    ids = parse_qs(parts.query).get("id")
    if ids and ids[0]:
        return ids[0]
    match = _FRAGMENT_ID.search(parts.fragment)
    return match.group(1) if match else None


async def resolve_source(request: PlayRequest, videos_path: str, resolve=None) -> str:
    """Map *request* to a playable path or URL.

    *resolve* is the Jellyfin resolver (``async (url) -> stream_url``), or
    None when the integration is not configured.
    """
    if request.source == "url" and request.url:
        return request.url

    if request.source == "local" and request.path:
        if os.path.isabs(request.path):
            return request.path
        return os.path.join(videos_path, request.path)

    if request.source == "jellyfin" and request.jellyfin_url:
        if resolve is None:
            raise IntegrationNotConfigured("Jellyfin integration not configured")
        if not parse_item_id(request.jellyfin_url):
            raise UnresolvableReference(
                f"Could not parse item ID from URL: {request.jellyfin_url}")
        stream_url = await resolve(request.jellyfin_url)
        log.info("Resolved Jellyfin item → %s", stream_url.split("?")[0])
        return stream_url

    raise InvalidRequest("Invalid source: provide path, url, or jellyfinUrl depending on source type")
