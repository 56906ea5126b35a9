import asyncio
import logging
import os
import socket

import pytest

from discarr.lib.config import cfg, load_config, reload_config
from discarr.lib.watchdog import sd_notify, watchdog_loop


def test_missing_file_gives_defaults():
    assert load_config() == {}
    assert cfg("output", "mode", default="screen_share") == "screen_share"
    assert cfg("platform", default="linux") == "linux"
    assert cfg("discord", "server_id") is None


def test_reads_sections_and_keys(config_file):
    config_file({
        "platform": "windows",
        "server": {"port": 8080},
        "discord": {"server_id": "123", "voice_channel_id": ""},
    })
    assert cfg("platform") == "windows"
    assert cfg("server", "port", default=3000) == 8080
    assert cfg("server", "host", default="0.0.0.0") == "0.0.0.0"
    assert cfg("discord", "server_id") == "123"
    assert cfg("discord", "voice_channel_id", default="none") == "none"  # empty string → default


def test_non_dict_section_returns_default(config_file):
    config_file({"videos": "/data"})
    assert cfg("videos", "path", default="/videos") == "/videos"


def test_config_is_cached_until_reload(config_file):
    path = config_file({"videos": {"path": "/a"}})
    path.write_text('{"videos": {"path": "/b"}}')
    assert cfg("videos", "path") == "/a"
    reload_config()
    assert cfg("videos", "path") == "/b"


def test_cwd_config_is_found(tmp_path, monkeypatch):
    monkeypatch.delenv("DISCARR_CONFIG")
    if os.path.exists("/etc/discarr/config.json"):
        pytest.skip("host has a deployed config")
    (tmp_path / "config.json").write_text('{"output": {"mode": "virtual_webcam"}}')
    assert cfg("output", "mode") == "virtual_webcam"


def test_invalid_json_falls_through(tmp_path, monkeypatch, caplog):
    bad = tmp_path / "bad.json"
    bad.write_text("{nope")
    monkeypatch.setenv("DISCARR_CONFIG", str(bad))
    with caplog.at_level(logging.ERROR, logger="discarr.lib.config"):
        config_data = reload_config()
    assert "Invalid JSON" in caplog.text
    assert isinstance(config_data, dict)


def test_validation_warnings(config_file, caplog):
    with caplog.at_level(logging.WARNING, logger="discarr.lib.config"):
        config_file({
            "output": {"mode": "telepathy"},
            "platform": "beos",
            "jellyfin": {"server_url": "https://jf.example.com"},
        })
    assert "unknown output.mode 'telepathy'" in caplog.text
    assert "unknown platform 'beos'" in caplog.text
    assert "JELLYFIN_API_KEY missing" in caplog.text


def test_missing_discord_ids_warn_for_screen_share(config_file, caplog):
    with caplog.at_level(logging.WARNING, logger="discarr.lib.config"):
        config_file({"output": {"mode": "screen_share"}})
    assert "voice_channel_id missing" in caplog.text


# ---------------------------------------------------------------------------
# systemd notify
# ---------------------------------------------------------------------------
def test_sd_notify_without_socket():
    assert sd_notify("READY=1") is False


def test_watchdog_loop_returns_outside_systemd():
    asyncio.run(asyncio.wait_for(watchdog_loop(interval=0), 1))


def test_sd_notify_sends_datagram(tmp_path, monkeypatch):
    path = str(tmp_path / "notify.sock")
    with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as server:
        server.bind(path)
        monkeypatch.setenv("NOTIFY_SOCKET", path)
        assert sd_notify("READY=1") is True
        assert server.recv(64) == b"READY=1"
