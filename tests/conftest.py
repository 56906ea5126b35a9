import json
import os
import sys

import pytest

# Ensure the project root is importable without an install
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
if TESTS_DIR not in sys.path:
    sys.path.append(TESTS_DIR)

from discarr.lib import config  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch):
    """Keep host config, systemd and display settings out of every test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DISCARR_CONFIG", str(tmp_path / "missing-config.json"))
    monkeypatch.delenv("NOTIFY_SOCKET", raising=False)
    monkeypatch.delenv("JELLYFIN_API_KEY", raising=False)
    config._config = None
    yield
    config._config = None


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a config.json and point the loader at it."""
    def write(data):
        path = tmp_path / "discarr-config.json"
        path.write_text(json.dumps(data))
        monkeypatch.setenv("DISCARR_CONFIG", str(path))
        config.reload_config()
        return path
    return write
