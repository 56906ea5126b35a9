"""
Discarr — play videos into a Discord voice channel.

A play request is resolved to a URI (local file, URL or Jellyfin item),
the configured output backend prepares the Discord session and starts
presenting, and a video feeder (mpv, ffmpeg) writes the video to the
backend's delivery target.
"""

__version__ = "0.1.0"
