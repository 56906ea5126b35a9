"""
Shared configuration loader for Discarr.

Loads a single JSON config file.  Search order:
  1. $DISCARR_CONFIG               (explicit override)
  2. /etc/discarr/config.json      (deployed config)
  3. config.json                   (CWD — handy for local dev)

Secrets (JELLYFIN_API_KEY, DISCORD_EMAIL, DISCORD_PASSWORD) stay in
environment variables, e.g. loaded by systemd EnvironmentFile.

Usage:
    from discarr.lib.config import cfg

    mode        = cfg("output", "mode", default="screen_share")
    server_id   = cfg("discord", "server_id")
    videos_path = cfg("videos", "path", default="/videos")
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

OUTPUT_MODES = ("screen_share", "virtual_webcam", "hardware_capture")
PLATFORMS = ("linux", "windows")

_config: dict | None = None


def _search_paths() -> list[str]:
    paths = ["/etc/discarr/config.json", "config.json"]
    override = os.environ.get("DISCARR_CONFIG")
    if override:
        paths.insert(0, override)
    return paths


def _validate(config: dict, path: str) -> None:
    """Warn about missing or suspicious config values."""
    output = config.get("output") or {}
    mode = output.get("mode", "screen_share")
    if mode not in OUTPUT_MODES:
        logger.warning("Config %s: unknown output.mode '%s'", path, mode)
    platform = config.get("platform", "linux")
    if platform not in PLATFORMS:
        logger.warning("Config %s: unknown platform '%s'", path, platform)
    if mode == "screen_share":
        discord = config.get("discord") or {}
        if not discord.get("server_id") or not discord.get("voice_channel_id"):
            logger.warning("Config %s: discord.server_id / discord.voice_channel_id missing — "
                           "screen share will refuse to start", path)
    jellyfin = config.get("jellyfin") or {}
    if jellyfin.get("server_url") and not os.environ.get("JELLYFIN_API_KEY"):
        logger.warning("Config %s: jellyfin.server_url set but JELLYFIN_API_KEY missing — "
                       "Jellyfin integration disabled", path)


def load_config() -> dict:
    """Load config from the first JSON file found. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        try:
            with open(path) as f:
                _config = json.load(f)
                logger.info("Config loaded from %s", path)
                _validate(_config, path)
                return _config
        except FileNotFoundError:
            continue
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            continue

    logger.warning("No config.json found — using defaults")
    _config = {}
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value.

    cfg("platform")                     → config["platform"]
    cfg("discord", "server_id")         → config["discord"]["server_id"]
    cfg("server", "port", default=3000) → config["server"]["port"] or 3000
    """
    config = load_config()
    val = config.get(section)
    if key is None:
        return val if val is not None else default
    if isinstance(val, dict):
        val = val.get(key)
        return val if val not in (None, "") else default
    return default


def reload_config():
    """Force re-read from disk (for testing or hot-reload)."""
    global _config
    _config = None
    return load_config()
