"""
Sources — where the video to play comes from.

  resolver.py  — play request validation and resolution to a path / URL
  jellyfin.py  — Jellyfin client resolving item URLs to stream URLs
"""

from .jellyfin import JellyfinClient
from .resolver import PlayRequest, parse_item_id, resolve_source

__all__ = ["JellyfinClient", "PlayRequest", "parse_item_id", "resolve_source"]
